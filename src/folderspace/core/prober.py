"""Single-entry directory probe."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from folderspace.core.filesystem import FileSystem, LocalFileSystem

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Probe:
    is_directory: bool
    is_listable: bool


def probe(path: Path, fs: FileSystem | None = None, *, follow_symlinks: bool = False) -> Probe:
    """Check whether *path* is a directory that can be listed.

    Never raises: permission errors, vanished paths and non-directories all
    come back as ``is_listable=False``. A symlink counts as a directory only
    with *follow_symlinks*, which is meant for the root the user picked.
    """
    fs = fs or LocalFileSystem()
    try:
        is_directory = fs.is_dir(path, follow_symlinks=follow_symlinks)
    except OSError as e:
        log.debug("Cannot stat %s: %s", path, e)
        return Probe(is_directory=False, is_listable=False)

    if not is_directory:
        return Probe(is_directory=False, is_listable=False)

    try:
        listable = fs.can_list(path)
    except OSError as e:
        log.debug("Cannot open %s: %s", path, e)
        listable = False
    return Probe(is_directory=True, is_listable=listable)
