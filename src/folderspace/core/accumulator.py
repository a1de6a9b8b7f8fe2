"""Recursive size accumulation for one subtree."""

from __future__ import annotations

import logging
from pathlib import Path

from folderspace.core.cancel import CancellationToken
from folderspace.core.filesystem import FileSystem, LocalFileSystem
from folderspace.models.scan_result import Failed, Measured, ScanTarget, SubtreeResult

log = logging.getLogger(__name__)


def measure(
    target: ScanTarget,
    cancel: CancellationToken | None = None,
    fs: FileSystem | None = None,
) -> SubtreeResult:
    """Sum the sizes of every non-directory entry under *target*.

    Walks depth-first with an explicit stack, so nesting depth is bounded
    by memory rather than by the interpreter's recursion limit.

    A directory that cannot be listed anywhere in the subtree fails the
    whole subtree and the partial sum is discarded. A single entry whose
    size cannot be read counts as 0 bytes. Cancellation is checked before
    every listing and before descending into each child directory; an
    interrupted walk is reported as ``Failed``.

    Symlinks are never followed. They count with their own size.
    """
    fs = fs or LocalFileSystem()
    total = 0
    count = 0
    stack: list[Path] = [target.path]

    while stack:
        if cancel and cancel.is_cancelled:
            return Failed("cancelled")

        current = stack.pop()
        try:
            entries = fs.list_dir(current)
        except OSError as e:
            log.debug("Cannot list %s (under %s): %s", current, target, e)
            return Failed(f"cannot list {current}: {e.strerror or e}")

        for entry in entries:
            if entry.is_dir:
                if cancel and cancel.is_cancelled:
                    return Failed("cancelled")
                stack.append(entry.path)
                continue
            try:
                total += fs.stat_size(entry.path)
            except OSError as e:
                log.debug("Cannot stat %s, counting as 0 bytes: %s", entry.path, e)
            count += 1

    return Measured(size_bytes=total, file_count=count)
