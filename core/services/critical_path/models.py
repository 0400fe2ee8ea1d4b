from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from core.services.scheduling.models import ScheduleEntry, TaskId


@dataclass(frozen=True)
class CriticalPathSummary:
    critical_path: List[TaskId]
    schedule: Dict[TaskId, ScheduleEntry]
    is_valid: bool
    error: Optional[str]
    total_tasks: int
    critical_task_count: int
    project_end_date: Optional[datetime]
    cycle: Optional[List[TaskId]] = None


@dataclass(frozen=True)
class RecalculationOutcome:
    message: str
    critical_path: List[TaskId] = field(default_factory=list)
    updated_tasks: int = 0
    schedule: Dict[TaskId, ScheduleEntry] = field(default_factory=dict)
