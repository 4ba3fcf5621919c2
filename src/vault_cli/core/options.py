# src/vault_cli/core/options.py

"""
User-facing options (the plugin settings tab).

Stored as a JSON mapping with camelCase keys, e.g.:

    {"autoSyncOnClose": true, "tasksExcludeFiles": "CLAUDE.md, Templates/*"}

Missing keys are filled from defaults, unknown keys are ignored and values of
the wrong type fall back to the default. Consumers read options at call time
through OptionsStore.current(); nothing caches them.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VaultOptions:
    auto_sync_on_close: bool = True
    show_status_bar: bool = True
    show_tasks: bool = True
    show_tasks_ribbon: bool = True
    tasks_exclude_files: str = "CLAUDE.md"


# JSON key -> dataclass field
OPTION_KEYS: dict[str, str] = {
    "autoSyncOnClose": "auto_sync_on_close",
    "showStatusBar": "show_status_bar",
    "showTasks": "show_tasks",
    "showTasksRibbon": "show_tasks_ribbon",
    "tasksExcludeFiles": "tasks_exclude_files",
}

_DEFAULTS = VaultOptions()
_FIELD_TYPES: dict[str, type] = {f.name: type(getattr(_DEFAULTS, f.name)) for f in fields(VaultOptions)}


def options_from_mapping(data: Any) -> VaultOptions:
    """Build options from a loaded JSON value, default-filling anything missing or invalid."""
    if not isinstance(data, dict):
        return VaultOptions()

    values: dict[str, Any] = {}
    for key, field_name in OPTION_KEYS.items():
        if key not in data:
            continue
        raw = data[key]
        expected = _FIELD_TYPES[field_name]
        if isinstance(raw, expected):
            values[field_name] = raw
        else:
            logger.warning("Ignoring option %s=%r (expected %s).", key, raw, expected.__name__)
    return VaultOptions(**values)


def options_to_mapping(options: VaultOptions) -> dict[str, Any]:
    raw = asdict(options)
    return {key: raw[field_name] for key, field_name in OPTION_KEYS.items()}


def coerce_option_value(key: str, text: str) -> Any:
    """Parse a user-typed value for option `key` (camelCase). Raises KeyError/ValueError."""
    field_name = OPTION_KEYS[key]
    expected = _FIELD_TYPES[field_name]
    if expected is bool:
        lowered = text.strip().lower()
        if lowered in ("on", "1", "true", "yes"):
            return True
        if lowered in ("off", "0", "false", "no"):
            return False
        raise ValueError(f"{key} expects on/off, got {text!r}")
    return text


class OptionsStore:
    """JSON-file backed options with atomic saves."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._options = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def current(self) -> VaultOptions:
        return self._options

    def _load(self) -> VaultOptions:
        if not self._path.exists():
            return VaultOptions()
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except Exception:
            logger.exception("Failed to load options from %s; using defaults.", self._path)
            return VaultOptions()
        options = options_from_mapping(data)
        logger.info("Loaded options from %s", self._path)
        return options

    def update(self, key: str, value: Any) -> VaultOptions:
        """Set one option (camelCase key) and persist. Raises KeyError for unknown keys."""
        field_name = OPTION_KEYS[key]
        self._options = replace(self._options, **{field_name: value})
        self.save()
        return self._options

    def save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(options_to_mapping(self._options), indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(Exception):
            os.chmod(self._path, 0o600)
        logger.debug("Saved options to %s", self._path)
