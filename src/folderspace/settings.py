"""Persistent user preferences for scans and CLI output."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from folderspace.utils import xdg_config_home

log = logging.getLogger(__name__)

DEFAULTS: dict[str, Any] = {
    "scan.include_hidden": True,
    "cli.top": 0,
}


def default_settings_path() -> Path:
    return xdg_config_home() / "folderspace" / "settings.json"


class Settings:
    """Preferences stored as nested JSON, addressed with dotted keys.

    ``get("scan.include_hidden")`` reads ``{"scan": {"include_hidden": ...}}``
    and falls back to ``DEFAULTS`` when the key was never set. ``set()``
    writes through to disk immediately.
    """

    _instance: Settings | None = None

    def __init__(self, path: Path | None = None) -> None:
        self._file = path or default_settings_path()
        self._tree: dict[str, Any] = self._read()

    @classmethod
    def instance(cls) -> Settings:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def get(self, key: str, default: Any = None) -> Any:
        node: Any = self._tree
        for part in key.split("."):
            node = node.get(part) if isinstance(node, dict) else None
            if node is None:
                return DEFAULTS.get(key) if default is None else default
        return node

    def set(self, key: str, value: Any) -> None:
        *parents, leaf = key.split(".")
        node = self._tree
        for part in parents:
            child = node.get(part)
            if not isinstance(child, dict):
                child = node[part] = {}
            node = child
        node[leaf] = value
        self._write()

    def _read(self) -> dict[str, Any]:
        try:
            data = json.loads(self._file.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self._file, e)
            return {}
        if not isinstance(data, dict):
            log.warning("Ignoring settings in %s: top level is not an object", self._file)
            return {}
        return data

    def _write(self) -> None:
        text = json.dumps(self._tree, indent=2, ensure_ascii=False) + "\n"
        try:
            self._file.parent.mkdir(parents=True, exist_ok=True)
            self._file.write_text(text, encoding="utf-8")
        except OSError as e:
            log.warning("Could not save settings to %s: %s", self._file, e)
