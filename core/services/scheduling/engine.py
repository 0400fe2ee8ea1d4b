# core/services/scheduling/engine.py
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from core.models import Task
from core.services.scheduling.graph import (
    build_adjacency,
    find_cycle,
    known_dependencies,
    topological_sort,
    would_create_cycle,
)
from core.services.scheduling.models import (
    SCHEDULE_EPOCH,
    CriticalPathResult,
    DependencyValidation,
    SchedulingTask,
    TaskId,
)
from core.services.scheduling.passes import (
    classify_backward_regimes,
    run_backward_pass,
    run_forward_pass,
)
from core.services.scheduling.results import build_cycle_result, build_schedule_result

logger = logging.getLogger(__name__)


def scheduling_tasks_from(tasks: Iterable[Task]) -> List[SchedulingTask]:
    """Snapshot persisted tasks into engine input; an unset estimate counts as one day."""
    return [
        SchedulingTask(
            id=task.id,
            duration_days=task.estimated_days or 1,
            completed=task.completed,
            depends_on=tuple(task.depends_on_ids),
        )
        for task in tasks
    ]


def calculate_critical_path(
    tasks: Sequence[SchedulingTask],
    epoch: Optional[datetime] = None,
) -> CriticalPathResult:
    """
    CPM over one snapshot of tasks:
    - cycle check (DFS), then Kahn topological order
    - forward pass: earliest start / finish
    - backward pass: latest start / finish, slack, critical flag
    - critical path: zero-slack tasks by earliest start

    Pure: no I/O, no shared state. A cycle yields an invalid result, never an exception.
    """
    if not tasks:
        return CriticalPathResult(is_valid=True)

    deps = known_dependencies(tasks)
    snapshot = [replace(task, depends_on=tuple(deps[task.id])) for task in tasks]

    cycle = find_cycle(build_adjacency(snapshot))
    if cycle is not None:
        logger.info("Critical path not computed: cycle %s", cycle)
        return build_cycle_result(cycle)

    topo_order = topological_sort(snapshot)
    if topo_order is None:
        # unreachable once the DFS found no cycle; kept as the structural guard
        return CriticalPathResult(is_valid=False)

    tasks_by_id = {task.id: task for task in snapshot}
    partial = run_forward_pass(tasks_by_id, topo_order, epoch or SCHEDULE_EPOCH)
    regimes = classify_backward_regimes(snapshot)
    schedule = run_backward_pass(tasks_by_id, partial, topo_order, regimes)

    result = build_schedule_result(schedule)
    logger.debug(
        "Critical path computed for %d tasks: %s",
        len(snapshot),
        result.critical_path,
    )
    return result


def validate_new_dependency(
    tasks: Sequence[SchedulingTask],
    task_id: TaskId,
    depends_on_id: TaskId,
) -> DependencyValidation:
    """Check the prospective edge ``task_id depends on depends_on_id`` before it is committed."""
    cycle = would_create_cycle(build_adjacency(tasks), task_id, depends_on_id)
    if cycle is not None:
        return DependencyValidation(ok=False, cycle=cycle)
    return DependencyValidation(ok=True)


__all__ = [
    "scheduling_tasks_from",
    "calculate_critical_path",
    "validate_new_dependency",
]
