"""Directory-listing and size-stat primitives used by the scanner."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DirEntry:
    """Single entry returned by ``FileSystem.list_dir``.

    ``is_dir`` is true only for real directories; a symlink pointing at a
    directory reports ``is_dir=False, is_symlink=True``.
    """

    name: str
    path: Path
    is_dir: bool
    is_symlink: bool = False


class FileSystem(Protocol):
    """Read-only view of a filesystem. Every method may raise ``OSError``."""

    def is_dir(self, path: Path, follow_symlinks: bool = False) -> bool:
        """Whether *path* is a directory. Symlinks are followed only on request."""

    def can_list(self, path: Path) -> bool:
        """Whether *path* can be opened for listing."""

    def list_dir(self, path: Path) -> list[DirEntry]:
        """Return the entries of *path* in directory order."""

    def stat_size(self, path: Path) -> int:
        """Size in bytes of the entry itself."""


class LocalFileSystem:
    """``FileSystem`` backed by ``os.scandir``, ``os.stat`` and ``os.lstat``."""

    def is_dir(self, path: Path, follow_symlinks: bool = False) -> bool:
        return stat.S_ISDIR(os.stat(path, follow_symlinks=follow_symlinks).st_mode)

    def can_list(self, path: Path) -> bool:
        # Opening the directory is what fails on EACCES/ENOENT/ENOTDIR.
        with os.scandir(path):
            return True

    def list_dir(self, path: Path) -> list[DirEntry]:
        entries: list[DirEntry] = []
        with os.scandir(path) as it:
            for entry in it:
                try:
                    is_symlink = entry.is_symlink()
                    is_dir = not is_symlink and entry.is_dir(follow_symlinks=False)
                except OSError:
                    log.debug("Cannot determine type of %s", entry.path)
                    is_symlink = is_dir = False
                entries.append(
                    DirEntry(
                        name=entry.name,
                        path=Path(entry.path),
                        is_dir=is_dir,
                        is_symlink=is_symlink,
                    )
                )
        return entries

    def stat_size(self, path: Path) -> int:
        return os.lstat(path).st_size

