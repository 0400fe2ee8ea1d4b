from __future__ import annotations

from datetime import date, datetime

from core.exceptions import ValidationError

MIN_ESTIMATED_DAYS = 1
MAX_ESTIMATED_DAYS = 365


class TaskValidationMixin:
    def _validate_title(self, title: str) -> str:
        cleaned = (title or "").strip()
        if not cleaned:
            raise ValidationError("Task title cannot be empty.", code="TASK_TITLE_EMPTY")
        return cleaned

    def _validate_estimated_days(self, estimated_days) -> int:
        if isinstance(estimated_days, bool) or not isinstance(estimated_days, int):
            raise ValidationError(
                "Estimated days must be a whole number.", code="TASK_ESTIMATE_RANGE"
            )
        if not MIN_ESTIMATED_DAYS <= estimated_days <= MAX_ESTIMATED_DAYS:
            raise ValidationError(
                f"Estimated days must be between {MIN_ESTIMATED_DAYS} and {MAX_ESTIMATED_DAYS}.",
                code="TASK_ESTIMATE_RANGE",
            )
        return estimated_days

    def _parse_due_date(self, value) -> date | None:
        """Accepts a date, a datetime or an ISO-8601 string; None clears the due date."""
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str) and value.strip():
            text = value.strip()
            try:
                return date.fromisoformat(text)
            except ValueError:
                pass
            try:
                return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            except ValueError:
                pass
        raise ValidationError(f"Invalid due date format: {value!r}", code="TASK_DUE_DATE_INVALID")
