from __future__ import annotations

from typing import Dict, List, Mapping

from core.services.scheduling.models import (
    CircularDependency,
    CriticalPathResult,
    ScheduleEntry,
    TaskId,
    format_cycle_message,
)


def extract_critical_path(schedule: Mapping[TaskId, ScheduleEntry]) -> List[TaskId]:
    """Critical task ids ordered by earliest start; ties keep the schedule's order."""
    critical = [task_id for task_id, entry in schedule.items() if entry.is_on_critical_path]
    return sorted(critical, key=lambda task_id: schedule[task_id].earliest_start)


def build_schedule_result(schedule: Dict[TaskId, ScheduleEntry]) -> CriticalPathResult:
    return CriticalPathResult(
        is_valid=True,
        critical_path=extract_critical_path(schedule),
        schedule=schedule,
    )


def build_cycle_result(cycle: List[TaskId]) -> CriticalPathResult:
    # all-or-nothing: no partial schedule accompanies an invalid graph
    return CriticalPathResult(
        is_valid=False,
        circular_dependency=CircularDependency(cycle=list(cycle), message=format_cycle_message(cycle)),
    )
