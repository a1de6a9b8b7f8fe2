"""folderspace data models."""

from folderspace.models.run_state import RunSnapshot, RunStatus
from folderspace.models.scan_result import (
    Failed,
    FolderSize,
    Measured,
    ScanReport,
    ScanTarget,
    SubtreeResult,
)

__all__ = [
    "Failed",
    "FolderSize",
    "Measured",
    "RunSnapshot",
    "RunStatus",
    "ScanReport",
    "ScanTarget",
    "SubtreeResult",
]
