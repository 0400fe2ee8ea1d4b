from __future__ import annotations

from datetime import datetime, timezone

from core.exceptions import ValidationError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_task_id(value: object) -> int:
    """Coerce a task id coming from outside the process (query string, form) to int."""
    if isinstance(value, bool):
        raise ValidationError(f"Invalid task id: {value!r}", code="TASK_ID_INVALID")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ValidationError(f"Invalid task id: {value!r}", code="TASK_ID_INVALID")


__all__ = ["utc_now", "parse_task_id"]
