# infra/config.py
from __future__ import annotations

import os

from infra.path import default_db_path

DEFAULT_CACHE_TTL_SECONDS = 5.0
DEFAULT_RECALC_INTERVAL_SECONDS = 1.0


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} cannot be negative, got {raw!r}")
    return value


def database_url() -> str:
    env_override = (os.getenv("TODO_PLANNER_DB_URL") or "").strip()
    if env_override:
        return env_override
    return f"sqlite:///{default_db_path().as_posix()}"


def pexels_api_key() -> str | None:
    return (os.getenv("PEXELS_API_KEY") or "").strip() or None


def critical_path_cache_ttl() -> float:
    return _env_float("TODO_PLANNER_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS)


def recalculation_interval() -> float:
    return _env_float("TODO_PLANNER_RECALC_INTERVAL_SECONDS", DEFAULT_RECALC_INTERVAL_SECONDS)


__all__ = [
    "database_url",
    "pexels_api_key",
    "critical_path_cache_ttl",
    "recalculation_interval",
]
