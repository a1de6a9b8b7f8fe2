"""CLI interface for folderspace."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from folderspace.core.controller import RunController
from folderspace.core.prober import probe
from folderspace.models.scan_result import ScanReport, ScanTarget
from folderspace.settings import Settings
from folderspace.utils import bytes_to_human, format_elapsed, parse_setting_value, percent_of


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
def main(verbose: int) -> None:
    """folderspace: rank the subfolders of a directory by disk usage."""
    _setup_logging(verbose)


# ── scan ─────────────────────────────────────────────────────────────────

@main.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option(
    "--include-hidden/--skip-hidden",
    default=None,
    help="Measure dot-folders directly under PATH (default from settings)",
)
@click.option("--top", "-n", type=int, default=None, help="Show only the N largest folders")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def scan(path: Path, include_hidden: bool | None, top: int | None, as_json: bool) -> None:
    """Measure every folder directly under PATH and rank them by size."""
    settings = Settings.instance()
    if include_hidden is None:
        include_hidden = bool(settings.get("scan.include_hidden"))
    if top is None:
        top = int(settings.get("cli.top") or 0)

    if not probe(path, follow_symlinks=True).is_directory:
        click.echo(f"Not a directory: {path}", err=True)
        sys.exit(1)

    target = ScanTarget(path)
    controller = RunController(include_hidden=include_hidden)
    if not as_json:
        click.echo(f"\n{click.style('🔍', bold=True)} Analyzing {target}...\n")

    controller.start(target)
    try:
        controller.wait()
    except KeyboardInterrupt:
        controller.cancel()
        controller.wait()

    report = controller.report

    if as_json:
        click.echo(json.dumps(report.as_dict(), indent=2))
        return

    _print_report(report, top)


def _print_report(report: ScanReport, top: int) -> None:
    if report.error:
        click.echo(f"  {click.style('✗', fg='red')} Scan aborted: {report.error}", err=True)

    if report.is_empty:
        click.echo("No folders analyzed.")
    total = report.total_bytes
    shown = report.successes[:top] if top > 0 else report.successes

    for rank, folder in enumerate(shown, 1):
        size_str = bytes_to_human(folder.size_bytes)
        share = percent_of(folder.size_bytes, total)
        click.echo(
            f"  {rank:>3}. {folder.target.name:35s} "
            f"{click.style(f'{size_str:>10s}', fg='green', bold=True)}  "
            f"{share:5.1f}%  ({folder.file_count:,} files)"
        )

    remaining = len(report.successes) - len(shown)
    if remaining > 0:
        click.echo(f"  {click.style(f'… {remaining} more', fg='bright_black')}")

    if report.failures:
        click.echo(f"\n  {click.style('Not analyzed:', fg='yellow', bold=True)}")
        for target in sorted(report.failures, key=lambda t: t.name):
            click.echo(f"  {click.style('✗', fg='yellow')} {target.name}")

    if report.cancelled:
        click.echo(f"\n{click.style('Interrupted', fg='yellow')}: partial results only.")

    click.echo(
        f"\nTotal: {click.style(bytes_to_human(total), fg='green', bold=True)} "
        f"in {len(report.successes)} folders ({format_elapsed(report.elapsed_sec)})\n"
    )


# ── config ───────────────────────────────────────────────────────────────

@main.group()
def config() -> None:
    """Read and change persistent settings."""


@config.command("get")
@click.argument("key")
def config_get(key: str) -> None:
    """Print the value of a setting (dot-notation KEY)."""
    click.echo(json.dumps(Settings.instance().get(key)))


@config.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Store VALUE under a setting KEY."""
    Settings.instance().set(key, parse_setting_value(value))


# ── service ──────────────────────────────────────────────────────────────

@main.group()
def service() -> None:
    """D-Bus service management."""


@service.command("start")
def service_start() -> None:
    """Start the D-Bus service in foreground."""
    from folderspace.dbus_service import start_service

    click.echo("Starting folderspace D-Bus service...")
    start_service()
