"""JSON-backed settings store with fugo defaults."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from fugo.utils import fugo_data_dir, xdg_config_home

log = logging.getLogger(__name__)

_SETTINGS_DIR = "fugo"
_SETTINGS_FILE = "settings.json"

DEFAULTS: dict[str, Any] = {
    "paths": {
        "log_dir": None,
        "backup_dir": None,
    },
    "dry_run_default": True,
    "discovery": {
        "extra_paths": [],
    },
}


class Settings:
    """Persistent settings backed by a JSON file.

    Uses dot-notation keys for nested access:
        settings.get("paths.backup_dir")  # reads data["paths"]["backup_dir"]
        settings.set("dry_run_default", False)  # writes + saves

    Keys missing from the file fall back to ``DEFAULTS``.
    """

    _instance: Settings | None = None

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or (xdg_config_home() / _SETTINGS_DIR / _SETTINGS_FILE)
        self._data: dict[str, Any] = {}
        self._load()

    @classmethod
    def instance(cls) -> Settings:
        """Return the singleton settings instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, falling back to DEFAULTS."""
        found, value = _lookup(self._data, key)
        if found:
            return value
        found, value = _lookup(DEFAULTS, key)
        return value if found else default

    def set(self, key: str, value: Any) -> None:
        """Set a value by dot-notation key and persist to disk."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            if part not in node or not isinstance(node[part], dict):
                node[part] = {}
            node = node[part]
        node[parts[-1]] = value
        self._save()

    def as_dict(self) -> dict[str, Any]:
        """Effective settings: defaults overlaid with stored values."""
        return _merge(DEFAULTS, self._data)

    # ── resolved values ──────────────────────────────────────────────────

    def log_dir(self) -> Path:
        configured = self.get("paths.log_dir")
        return Path(configured).expanduser() if configured else fugo_data_dir() / "logs"

    def backup_dir(self) -> Path:
        configured = self.get("paths.backup_dir")
        return Path(configured).expanduser() if configured else fugo_data_dir() / "backups"

    def dry_run_default(self) -> bool:
        return bool(self.get("dry_run_default", True))

    def extra_paths(self) -> list[Path]:
        raw = self.get("discovery.extra_paths") or []
        if not isinstance(raw, list):
            log.warning("Ignoring discovery.extra_paths: expected a list, got %r", raw)
            return []
        return [Path(p).expanduser() for p in raw if isinstance(p, str) and p]

    def _load(self) -> None:
        """Load settings from disk, gracefully handling errors."""
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self._path, e)
            return
        if isinstance(data, dict):
            self._data = data
        else:
            log.warning("Ignoring settings file %s: top level is not an object", self._path)

    def _save(self) -> None:
        """Persist settings to disk."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(self._data, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            log.warning("Could not save settings to %s: %s", self._path, e)


def _lookup(data: dict[str, Any], key: str) -> tuple[bool, Any]:
    node: Any = data
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return False, None
        node = node[part]
    return True, node


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged
