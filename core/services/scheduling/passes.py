from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, List, Mapping, Sequence

from core.services.scheduling.graph import successors_by_task
from core.services.scheduling.models import (
    TOLERANCE,
    BackwardRegime,
    PartialSchedule,
    ScheduleEntry,
    SchedulingTask,
    TaskId,
)


def run_forward_pass(
    tasks_by_id: Mapping[TaskId, SchedulingTask],
    topo_order: List[TaskId],
    epoch: datetime,
) -> Dict[TaskId, PartialSchedule]:
    partial: Dict[TaskId, PartialSchedule] = {
        task_id: PartialSchedule(earliest_start=epoch, earliest_finish=epoch)
        for task_id in tasks_by_id
    }

    for task_id in topo_order:
        task = tasks_by_id[task_id]
        start = epoch
        for dep_id in task.depends_on:
            dep = partial.get(dep_id)
            if dep is not None and dep.earliest_finish > start:
                start = dep.earliest_finish
        partial[task_id] = PartialSchedule(
            earliest_start=start,
            earliest_finish=start + task.duration,
        )

    return partial


def classify_backward_regimes(tasks: Sequence[SchedulingTask]) -> Dict[TaskId, BackwardRegime]:
    """
    Decide once per task how the backward pass treats it.

    DISCONNECTED: nothing in the graph has a dependency, so criticality is decided by
    duration alone. INDEPENDENT: the task has neither prerequisites nor dependents while
    other tasks are linked. CONNECTED: everything else.
    """
    if not any(task.depends_on for task in tasks):
        return {task.id: BackwardRegime.DISCONNECTED for task in tasks}

    has_dependents = {dep_id for task in tasks for dep_id in task.depends_on}
    regimes: Dict[TaskId, BackwardRegime] = {}
    for task in tasks:
        if not task.depends_on and task.id not in has_dependents:
            regimes[task.id] = BackwardRegime.INDEPENDENT
        else:
            regimes[task.id] = BackwardRegime.CONNECTED
    return regimes


def _backward_connected(
    tasks_by_id: Mapping[TaskId, SchedulingTask],
    partial: Mapping[TaskId, PartialSchedule],
    topo_order: List[TaskId],
    regimes: Mapping[TaskId, BackwardRegime],
    project_end: datetime,
) -> Dict[TaskId, ScheduleEntry]:
    successors = successors_by_task(list(tasks_by_id.values()))

    entries: Dict[TaskId, ScheduleEntry] = {}
    for task_id in reversed(topo_order):
        if regimes[task_id] is not BackwardRegime.CONNECTED:
            continue
        task = tasks_by_id[task_id]
        succ_ids = successors[task_id]
        if succ_ids:
            latest_finish = min(entries[succ_id].latest_start for succ_id in succ_ids)
        else:
            latest_finish = project_end
        latest_start = latest_finish - task.duration
        slack = latest_start - partial[task_id].earliest_start
        entries[task_id] = ScheduleEntry(
            earliest_start=partial[task_id].earliest_start,
            earliest_finish=partial[task_id].earliest_finish,
            latest_start=latest_start,
            latest_finish=latest_finish,
            slack=slack,
            is_on_critical_path=abs(slack) < TOLERANCE,
        )
    return entries


def _backward_independent(
    task: SchedulingTask,
    forward: PartialSchedule,
    project_end: datetime,
) -> ScheduleEntry:
    # critical when its own duration alone reaches the project end
    is_critical = forward.earliest_finish >= project_end - TOLERANCE
    slack = timedelta(0) if is_critical else project_end - forward.earliest_finish
    return ScheduleEntry(
        earliest_start=forward.earliest_start,
        earliest_finish=forward.earliest_finish,
        latest_start=project_end - task.duration,
        latest_finish=project_end,
        slack=slack,
        is_on_critical_path=is_critical,
    )


def _backward_disconnected(
    task: SchedulingTask,
    forward: PartialSchedule,
    max_duration: float,
) -> ScheduleEntry:
    is_critical = task.duration_days == max_duration
    slack = timedelta(0) if is_critical else (max_duration - task.duration_days) * timedelta(days=1)
    return ScheduleEntry(
        earliest_start=forward.earliest_start,
        earliest_finish=forward.earliest_finish,
        latest_start=forward.earliest_start + slack,
        latest_finish=forward.earliest_finish + slack,
        slack=slack,
        is_on_critical_path=is_critical,
    )


def run_backward_pass(
    tasks_by_id: Mapping[TaskId, SchedulingTask],
    partial: Mapping[TaskId, PartialSchedule],
    topo_order: List[TaskId],
    regimes: Mapping[TaskId, BackwardRegime],
) -> Dict[TaskId, ScheduleEntry]:
    """Latest times, slack and critical flag per task, returned in input task order."""
    if not tasks_by_id:
        return {}

    project_end = max(p.earliest_finish for p in partial.values())
    connected = _backward_connected(tasks_by_id, partial, topo_order, regimes, project_end)
    max_duration = max(task.duration_days for task in tasks_by_id.values())

    entries: Dict[TaskId, ScheduleEntry] = {}
    for task_id, task in tasks_by_id.items():
        regime = regimes[task_id]
        if regime is BackwardRegime.CONNECTED:
            entries[task_id] = connected[task_id]
        elif regime is BackwardRegime.INDEPENDENT:
            entries[task_id] = _backward_independent(task, partial[task_id], project_end)
        else:
            entries[task_id] = _backward_disconnected(task, partial[task_id], max_duration)
    return entries
