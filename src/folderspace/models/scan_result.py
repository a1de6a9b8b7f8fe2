"""Scan result dataclasses."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union


@dataclass(frozen=True, slots=True)
class ScanTarget:
    """Absolute path of a directory to be measured."""

    path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(os.path.abspath(self.path)))

    @property
    def name(self) -> str:
        return self.path.name or str(self.path)

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True, slots=True)
class Measured:
    """Complete, error-free byte total of a subtree."""

    size_bytes: int
    file_count: int = 0


@dataclass(frozen=True, slots=True)
class Failed:
    """Subtree with no trustworthy total.

    ``reason`` is for diagnostics only. Presentation treats every failure
    the same way ("not analyzed").
    """

    reason: str = ""


SubtreeResult = Union[Measured, Failed]


@dataclass(frozen=True, slots=True)
class FolderSize:
    """One successfully measured child of the scan root."""

    target: ScanTarget
    size_bytes: int
    file_count: int = 0


@dataclass(frozen=True, slots=True)
class ScanReport:
    """Result of one full run over the immediate children of ``root``.

    ``successes`` are ranked by size, largest first, with ties kept in
    directory-listing order. ``failures`` holds children that could not be
    measured.
    """

    root: ScanTarget | None = None
    successes: tuple[FolderSize, ...] = ()
    failures: frozenset[ScanTarget] = field(default_factory=frozenset)
    cancelled: bool = False
    elapsed_sec: float = 0.0
    error: str = ""

    @classmethod
    def empty(cls, root: ScanTarget | None = None, **kwargs: Any) -> ScanReport:
        return cls(root=root, **kwargs)

    @property
    def total_bytes(self) -> int:
        return sum(f.size_bytes for f in self.successes)

    @property
    def is_empty(self) -> bool:
        return not self.successes and not self.failures

    def as_dict(self) -> dict[str, Any]:
        """Serializable form used by the CLI and D-Bus surfaces."""
        return {
            "root": str(self.root) if self.root else None,
            "total_bytes": self.total_bytes,
            "successes": [
                {
                    "path": str(f.target),
                    "name": f.target.name,
                    "size_bytes": f.size_bytes,
                    "file_count": f.file_count,
                }
                for f in self.successes
            ],
            "failures": sorted(str(t) for t in self.failures),
            "cancelled": self.cancelled,
            "elapsed_sec": self.elapsed_sec,
            "error": self.error,
        }
