from __future__ import annotations

import logging
from collections import deque
from typing import Dict, Iterator, List, Optional, Sequence

from core.services.scheduling.models import AdjacencyMap, SchedulingTask, TaskId

logger = logging.getLogger(__name__)


def known_dependencies(tasks: Sequence[SchedulingTask]) -> Dict[TaskId, List[TaskId]]:
    """
    Prerequisites per task, restricted to ids present in the same snapshot.

    References to absent tasks are dropped (and logged) so every later pass sees the
    same graph. Repeated references to one prerequisite collapse into a single edge.
    """
    task_ids: set[TaskId] = set()
    for task in tasks:
        if task.id in task_ids:
            raise ValueError(f"Duplicate task id in scheduling input: {task.id}")
        task_ids.add(task.id)

    deps: Dict[TaskId, List[TaskId]] = {}
    for task in tasks:
        kept: List[TaskId] = []
        for dep_id in task.depends_on:
            if dep_id not in task_ids:
                logger.warning(
                    "Ignoring dangling dependency: task %s depends on unknown task %s",
                    task.id,
                    dep_id,
                )
                continue
            if dep_id not in kept:
                kept.append(dep_id)
        deps[task.id] = kept
    return deps


def build_adjacency(tasks: Sequence[SchedulingTask]) -> AdjacencyMap:
    """Task id -> ids it depends on; every task appears, possibly with an empty list."""
    return {task_id: list(dep_ids) for task_id, dep_ids in known_dependencies(tasks).items()}


def _neighbors(adjacency: AdjacencyMap, node: TaskId) -> Iterator[TaskId]:
    return iter(adjacency.get(node, ()))


def find_cycle(adjacency: AdjacencyMap) -> Optional[List[TaskId]]:
    """
    Depth-first search from every unvisited node, in adjacency order.

    Returns the first cycle found as the path suffix starting and ending at the repeated
    node (e.g. ``[1, 2, 3, 1]``), or None when the graph is acyclic.
    """
    visited: set[TaskId] = set()
    on_stack: set[TaskId] = set()
    path: List[TaskId] = []

    for root in adjacency:
        if root in visited:
            continue

        visited.add(root)
        on_stack.add(root)
        path.append(root)
        frames = [(root, _neighbors(adjacency, root))]

        while frames:
            node, neighbors = frames[-1]
            descended = False
            for neighbor in neighbors:
                if neighbor not in visited:
                    visited.add(neighbor)
                    on_stack.add(neighbor)
                    path.append(neighbor)
                    frames.append((neighbor, _neighbors(adjacency, neighbor)))
                    descended = True
                    break
                if neighbor in on_stack:
                    start = path.index(neighbor)
                    return path[start:] + [neighbor]
            if not descended:
                frames.pop()
                on_stack.discard(node)
                path.pop()

    return None


def would_create_cycle(
    adjacency: AdjacencyMap,
    from_id: TaskId,
    to_id: TaskId,
) -> Optional[List[TaskId]]:
    """Cycle that the prospective edge ``from_id depends on to_id`` would close, if any."""
    if from_id == to_id:
        return [from_id]

    proposed: AdjacencyMap = {node: list(targets) for node, targets in adjacency.items()}
    proposed.setdefault(from_id, []).append(to_id)
    return find_cycle(proposed)


def topological_sort(tasks: Sequence[SchedulingTask]) -> Optional[List[TaskId]]:
    """
    Kahn's algorithm. Dependencies come before dependents; tasks that become ready at
    the same time keep their queue insertion order. Returns None if a cycle prevents a
    total order.
    """
    deps = known_dependencies(tasks)

    indegree: Dict[TaskId, int] = {task_id: len(dep_ids) for task_id, dep_ids in deps.items()}
    successors: Dict[TaskId, List[TaskId]] = {}
    for task_id, dep_ids in deps.items():
        for dep_id in dep_ids:
            successors.setdefault(dep_id, []).append(task_id)

    queue: deque[TaskId] = deque(task_id for task_id, degree in indegree.items() if degree == 0)
    order: List[TaskId] = []

    while queue:
        current = queue.popleft()
        order.append(current)
        for succ_id in successors.get(current, []):
            indegree[succ_id] -= 1
            if indegree[succ_id] == 0:
                queue.append(succ_id)

    if len(order) < len(deps):
        return None
    return order


def successors_by_task(tasks: Sequence[SchedulingTask]) -> Dict[TaskId, List[TaskId]]:
    """Task id -> ids of the tasks that depend on it (empty list when none)."""
    deps = known_dependencies(tasks)
    successors: Dict[TaskId, List[TaskId]] = {task_id: [] for task_id in deps}
    for task_id, dep_ids in deps.items():
        for dep_id in dep_ids:
            successors[dep_id].append(task_id)
    return successors
