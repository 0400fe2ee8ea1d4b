from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from core.models import Task, TaskDependency
from infra.db.models import TaskDependencyORM, TaskORM


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; every stored value is UTC
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def task_to_orm(task: Task) -> TaskORM:
    return TaskORM(
        id=task.id,
        title=task.title,
        completed=task.completed,
        due_date=task.due_date,
        estimated_days=task.estimated_days,
        created_at=task.created_at,
        updated_at=task.updated_at,
        image_url=task.image_url,
        image_alt=task.image_alt,
        image_loading=task.image_loading,
        last_image_search=task.last_image_search,
        actual_start_date=task.actual_start_date,
        actual_end_date=task.actual_end_date,
        earliest_start_date=task.earliest_start_date,
        is_on_critical_path=task.is_on_critical_path,
    )


def task_from_orm(obj: TaskORM, *, with_relations: bool = False) -> Task:
    task = Task(
        id=obj.id,
        title=obj.title,
        completed=obj.completed,
        due_date=obj.due_date,
        estimated_days=obj.estimated_days,
        created_at=_as_utc(obj.created_at),
        updated_at=_as_utc(obj.updated_at),
        image_url=obj.image_url,
        image_alt=obj.image_alt,
        image_loading=obj.image_loading,
        last_image_search=obj.last_image_search,
        actual_start_date=_as_utc(obj.actual_start_date),
        actual_end_date=_as_utc(obj.actual_end_date),
        earliest_start_date=_as_utc(obj.earliest_start_date),
        is_on_critical_path=obj.is_on_critical_path,
    )
    if with_relations:
        task.depends_on_ids = [dep.depends_on_id for dep in obj.dependencies]
        task.dependent_ids = [dep.task_id for dep in obj.dependents]
    return task


def dependency_to_orm(dependency: TaskDependency) -> TaskDependencyORM:
    return TaskDependencyORM(
        id=dependency.id,
        task_id=dependency.task_id,
        depends_on_id=dependency.depends_on_id,
        created_at=dependency.created_at,
    )


def dependency_from_orm(obj: TaskDependencyORM) -> TaskDependency:
    return TaskDependency(
        id=obj.id,
        task_id=obj.task_id,
        depends_on_id=obj.depends_on_id,
        created_at=_as_utc(obj.created_at),
    )
