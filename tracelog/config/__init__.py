"""Configuration accessors for tracelog.

Centralizes environment variable parsing & defaults. Everything else reads
configuration through these functions so tests can monkeypatch the
environment instead of reaching into module state.
"""
from __future__ import annotations

import os

DEFAULT_LOG_LEVEL = "INFO"
_TRUE = {"1", "true", "yes", "on"}


def _raw_env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None else default


def env_bool(name: str, default: bool = False) -> bool:
    raw = _raw_env(name, str(default).lower())
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE


def log_level_name() -> str:
    return _raw_env("TRACELOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()  # type: ignore[union-attr]


def log_file_path() -> str | None:
    """Path the process-wide logger opens on creation (TRACELOG_FILE).

    Unset or blank means the logger starts console-only and waits for an
    explicit ``initialize`` call.
    """
    value = os.getenv("TRACELOG_FILE")
    if value is None:
        return None
    value = value.strip()
    return value or None


def indent_by_depth() -> bool:
    return env_bool("TRACELOG_INDENT", default=False)


def summarize_runtime_config() -> dict:
    return {
        "log_level": log_level_name(),
        "log_file": log_file_path(),
        "indent": indent_by_depth(),
    }


__all__ = [
    "DEFAULT_LOG_LEVEL",
    "env_bool",
    "log_level_name",
    "log_file_path",
    "indent_by_depth",
    "summarize_runtime_config",
]
