"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from folderspace.settings import Settings


@pytest.fixture
def isolate_settings(tmp_path, monkeypatch):
    """Redirect the settings singleton to a temp file."""
    settings_file = tmp_path / "config" / "settings.json"
    monkeypatch.setattr(Settings, "_instance", Settings(settings_file))
    return settings_file


@pytest.fixture
def make_tree(tmp_path):
    """Build a real directory tree from a nested dict (dicts are dirs, ints file sizes)."""

    def _make(tree: dict, base: Path | None = None) -> Path:
        base = base or tmp_path / "root"
        base.mkdir(parents=True, exist_ok=True)
        for name, node in tree.items():
            path = base / name
            if isinstance(node, dict):
                _make(node, path)
            else:
                path.write_bytes(b"x" * node)
        return base

    return _make
