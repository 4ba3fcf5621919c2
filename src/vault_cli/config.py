# src/vault_cli/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Process-level knobs only (paths, CLI command, timeouts); user-facing options
  (exclusions, auto-sync, ...) live in core/options.py and are read at call time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "VAULT"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Vault ----
    vault_path: Path
    task_source: str
    task_extension: str

    # ---- External vault CLI ----
    cli_command: str
    cli_timeout_seconds: float
    debounce_seconds: float

    # ---- Connector flags ----
    console_enabled: bool
    watch_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    options_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "vault-cli").strip() or "vault-cli"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        vault_path = _env_path(_k("PATH"), Path("."))
        task_source = _env(_k("TASK_SOURCE"), "walk").strip().lower() or "walk"
        task_extension = _env(_k("TASK_EXTENSION"), ".md").strip() or ".md"
        if not task_extension.startswith("."):
            task_extension = "." + task_extension

        cli_command = _env(_k("CLI_COMMAND"), "./cli.sh").strip() or "./cli.sh"
        # A zero timeout would fail every call.
        cli_timeout_seconds = max(0.1, _env_float(_k("CLI_TIMEOUT"), 30.0))
        debounce_seconds = max(0.0, _env_int(_k("DEBOUNCE_MS"), 1000) / 1000.0)

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        watch_enabled = _env_bool(_k("WATCH_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/vault-cli"))
        options_path = _env_path(_k("OPTIONS_PATH"), data_dir / "options.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            vault_path=vault_path,
            task_source=task_source,
            task_extension=task_extension,
            cli_command=cli_command,
            cli_timeout_seconds=cli_timeout_seconds,
            debounce_seconds=debounce_seconds,
            console_enabled=console_enabled,
            watch_enabled=watch_enabled,
            data_dir=data_dir,
            options_path=options_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
