"""Run lifecycle: start, cancel, supersede and publish scans."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from folderspace.core.cancel import CancellationToken
from folderspace.core.filesystem import FileSystem, LocalFileSystem
from folderspace.core.scanner import scan
from folderspace.models.run_state import RunSnapshot, RunStatus
from folderspace.models.scan_result import ScanReport, ScanTarget

log = logging.getLogger(__name__)

SnapshotCallback = Callable[[RunSnapshot], None]


@dataclass(slots=True)
class _Run:
    run_id: int
    root: ScanTarget
    token: CancellationToken = field(default_factory=CancellationToken)


class RunController:
    """Owns the single active scan and the published result.

    Each ``start()`` bumps a generation counter and tags the run with it.
    A worker publishes only if its run is still the active one, so a
    superseded run that finishes late is dropped instead of overwriting
    the newer run's state.
    """

    def __init__(self, fs: FileSystem | None = None, *, include_hidden: bool = True) -> None:
        self._fs = fs or LocalFileSystem()
        self.include_hidden = include_hidden
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._generation = 0
        self._active: _Run | None = None
        self._snapshot = RunSnapshot()
        self._listeners: list[SnapshotCallback] = []
        self._seq = 0
        self._delivered_seq = 0
        self._notify_lock = threading.RLock()

    # ── observation ──────────────────────────────────────────────────

    @property
    def snapshot(self) -> RunSnapshot:
        with self._lock:
            return self._snapshot

    @property
    def is_loading(self) -> bool:
        return self.snapshot.is_loading

    @property
    def report(self) -> ScanReport:
        return self.snapshot.report

    def subscribe(self, callback: SnapshotCallback) -> Callable[[], None]:
        """Register *callback* for every new snapshot. Returns an unsubscribe function.

        Callbacks run on whichever thread caused the change (the caller of
        ``start()`` or the scan worker). GUI code must hop to its main loop.
        """
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    # ── lifecycle ────────────────────────────────────────────────────

    def start(self, root: Path | str | ScanTarget) -> int:
        """Start scanning *root*, cancelling any run in flight.

        Returns:
            The id of the new run.
        """
        target = root if isinstance(root, ScanTarget) else ScanTarget(Path(root))

        with self._lock:
            previous = self._active
            if previous is not None:
                previous.token.cancel()
                log.info("Superseding run %d (%s)", previous.run_id, previous.root)
            self._generation += 1
            run = _Run(run_id=self._generation, root=target)
            self._active = run
            self._snapshot = RunSnapshot(
                run_id=run.run_id,
                status=RunStatus.RUNNING,
                root=target,
                report=ScanReport.empty(target),
            )
            snapshot = self._snapshot
            self._seq += 1
            seq = self._seq

        log.info("Starting run %d for %s", run.run_id, target)
        self._notify(snapshot, seq)

        thread = threading.Thread(
            target=self._execute,
            args=(run,),
            name=f"folderspace-scan-{run.run_id}",
            daemon=True,
        )
        thread.start()
        return run.run_id

    def cancel(self) -> None:
        """Ask the active run to stop. Does not wait for it."""
        with self._lock:
            run = self._active
        if run is None:
            return
        log.info("Cancelling run %d", run.run_id)
        run.token.cancel()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until no run is active. Returns False on timeout."""
        with self._idle:
            return self._idle.wait_for(lambda: self._active is None, timeout=timeout)

    # ── worker side ──────────────────────────────────────────────────

    def _execute(self, run: _Run) -> None:
        try:
            report = scan(run.root, run.token, self._fs, include_hidden=self.include_hidden)
        except Exception as e:
            log.exception("Run %d failed while scanning %s", run.run_id, run.root)
            report = ScanReport.empty(run.root, error=str(e) or type(e).__name__)
        self._publish(run, report)

    def _publish(self, run: _Run, report: ScanReport) -> None:
        with self._lock:
            if self._active is not run:
                log.debug("Dropping result of superseded run %d", run.run_id)
                return
            self._active = None
            self._snapshot = RunSnapshot(
                run_id=run.run_id,
                status=RunStatus.IDLE,
                root=run.root,
                report=report,
            )
            snapshot = self._snapshot
            self._seq += 1
            seq = self._seq
            self._idle.notify_all()

        self._notify(snapshot, seq)

    def _notify(self, snapshot: RunSnapshot, seq: int) -> None:
        # Deliveries from the caller and worker threads may race; never hand
        # observers a snapshot older than one they already saw.
        with self._notify_lock:
            if seq <= self._delivered_seq:
                return
            self._delivered_seq = seq
            with self._lock:
                listeners = list(self._listeners)
            for callback in listeners:
                try:
                    callback(snapshot)
                except Exception:
                    log.exception("Snapshot listener %r failed", callback)
