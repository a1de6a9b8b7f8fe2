"""Run lifecycle state as seen by observers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from folderspace.models.scan_result import ScanReport, ScanTarget


class RunStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True, slots=True)
class RunSnapshot:
    """Atomic view of the controller: loading flag plus the last published report.

    ``run_id`` identifies the run that is in flight (when running) or the run
    that produced ``report`` (when idle). Zero means no run has started yet.
    """

    run_id: int = 0
    status: RunStatus = RunStatus.IDLE
    root: ScanTarget | None = None
    report: ScanReport = field(default_factory=ScanReport)

    @property
    def is_loading(self) -> bool:
        return self.status is RunStatus.RUNNING

    def as_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "is_loading": self.is_loading,
            "root": str(self.root) if self.root else None,
            "report": self.report.as_dict(),
        }
