"""Scan orchestration over the immediate children of a root directory."""

from __future__ import annotations

import logging
import time

from folderspace.core.accumulator import measure
from folderspace.core.cancel import CancellationToken
from folderspace.core.filesystem import FileSystem, LocalFileSystem
from folderspace.core.prober import probe
from folderspace.models.scan_result import Failed, FolderSize, Measured, ScanReport, ScanTarget

log = logging.getLogger(__name__)


def scan(
    root: ScanTarget,
    cancel: CancellationToken | None = None,
    fs: FileSystem | None = None,
    *,
    include_hidden: bool = True,
) -> ScanReport:
    """Measure every child directory of *root*.

    Args:
        root: Directory whose children are ranked.
        cancel: Optional cancellation token, checked before each child.
        fs: Filesystem primitive, defaults to the local filesystem.
        include_hidden: Measure children whose name starts with a dot. When
            false they are skipped, like a file browser hiding dot-folders.

    Returns:
        A report with measured children ranked largest first and the
        children that could not be measured. When *root* itself cannot be
        listed the report is empty. When cancelled, only children handled
        before cancellation appear and ``cancelled`` is set.
    """
    fs = fs or LocalFileSystem()
    start = time.monotonic()
    log.info("Scanning %s", root)

    if not probe(root.path, fs, follow_symlinks=True).is_listable:
        log.info("Root %s is not accessible", root)
        return ScanReport.empty(root, elapsed_sec=time.monotonic() - start)

    try:
        children = fs.list_dir(root.path)
    except OSError as e:
        log.info("Cannot list root %s: %s", root, e)
        return ScanReport.empty(root, elapsed_sec=time.monotonic() - start)

    successes: list[FolderSize] = []
    failures: set[ScanTarget] = set()
    cancelled = False

    for child in children:
        if cancel and cancel.is_cancelled:
            cancelled = True
            break
        if not child.is_dir:
            continue
        if not include_hidden and child.name.startswith("."):
            continue

        target = ScanTarget(child.path)
        if not probe(target.path, fs).is_listable:
            log.debug("Not analyzed: %s (cannot open)", target)
            failures.add(target)
            continue

        result = measure(target, cancel, fs)
        match result:
            case Measured(size_bytes=size, file_count=files):
                successes.append(FolderSize(target=target, size_bytes=size, file_count=files))
            case Failed(reason=reason):
                log.debug("Not analyzed: %s (%s)", target, reason)
                failures.add(target)

    if not cancelled and cancel and cancel.is_cancelled:
        # Cancellation arrived while the last child was being measured.
        cancelled = True

    # sorted() is stable with reverse=True, ties keep listing order
    successes = sorted(successes, key=lambda f: f.size_bytes, reverse=True)
    elapsed = time.monotonic() - start
    log.info(
        "Scanned %s: %d measured, %d not analyzed%s in %.2fs",
        root,
        len(successes),
        len(failures),
        " (cancelled)" if cancelled else "",
        elapsed,
    )
    return ScanReport(
        root=root,
        successes=tuple(successes),
        failures=frozenset(failures),
        cancelled=cancelled,
        elapsed_sec=elapsed,
    )
