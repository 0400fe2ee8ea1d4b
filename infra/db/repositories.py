from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session, selectinload

from core.interfaces import DependencyRepository, TaskRepository
from core.models import Task, TaskDependency, TaskImage, TaskScheduleUpdate, utc_now
from infra.db.mappers import (
    dependency_from_orm,
    dependency_to_orm,
    task_from_orm,
    task_to_orm,
)
from infra.db.models import TaskDependencyORM, TaskORM


class SqlAlchemyTaskRepository(TaskRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, task: Task) -> Task:
        obj = task_to_orm(task)
        self.session.add(obj)
        self.session.flush()
        task.id = obj.id
        return task

    def update(self, task: Task, *, mark_image_loading: bool = False) -> None:
        # schedule and image columns belong to the background writers
        task.updated_at = utc_now()
        values: dict = {
            "title": task.title,
            "completed": task.completed,
            "due_date": task.due_date,
            "estimated_days": task.estimated_days,
            "updated_at": task.updated_at,
        }
        if mark_image_loading:
            values["image_loading"] = True
        self.session.execute(update(TaskORM).where(TaskORM.id == task.id).values(**values))

    def delete(self, task_id: int) -> None:
        self.session.query(TaskORM).filter_by(id=task_id).delete()

    def get(self, task_id: int) -> Optional[Task]:
        stmt = select(TaskORM).where(TaskORM.id == task_id).options(
            selectinload(TaskORM.dependencies),
            selectinload(TaskORM.dependents),
        ).execution_options(populate_existing=True)
        obj = self.session.execute(stmt).scalars().first()
        return task_from_orm(obj, with_relations=True) if obj else None

    def list_all(self) -> List[Task]:
        stmt = (
            select(TaskORM)
            .options(selectinload(TaskORM.dependencies), selectinload(TaskORM.dependents))
            .order_by(TaskORM.created_at.desc(), TaskORM.id.desc())
            # rows may have been rewritten by a background session
            .execution_options(populate_existing=True)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [task_from_orm(row, with_relations=True) for row in rows]

    def list_for_scheduling(self) -> List[Task]:
        stmt = (
            select(TaskORM)
            .options(selectinload(TaskORM.dependencies), selectinload(TaskORM.dependents))
            .order_by(TaskORM.id)
            .execution_options(populate_existing=True)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [task_from_orm(row, with_relations=True) for row in rows]

    def update_schedule_many(self, updates: Iterable[TaskScheduleUpdate]) -> int:
        count = 0
        for item in updates:
            self.session.execute(
                update(TaskORM)
                .where(TaskORM.id == item.task_id)
                .values(
                    earliest_start_date=item.earliest_start_date,
                    is_on_critical_path=item.is_on_critical_path,
                )
            )
            count += 1
        return count

    def update_image(
        self,
        task_id: int,
        image: Optional[TaskImage],
        *,
        search_text: Optional[str],
    ) -> None:
        values: dict = {"image_loading": False}
        if image is not None:
            values["image_url"] = image.url
            values["image_alt"] = image.alt
        if search_text is not None:
            values["last_image_search"] = search_text
        self.session.execute(update(TaskORM).where(TaskORM.id == task_id).values(**values))


class SqlAlchemyDependencyRepository(DependencyRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, dependency: TaskDependency) -> TaskDependency:
        obj = dependency_to_orm(dependency)
        self.session.add(obj)
        self.session.flush()
        dependency.id = obj.id
        return dependency

    def get(self, task_id: int, depends_on_id: int) -> Optional[TaskDependency]:
        stmt = select(TaskDependencyORM).where(
            TaskDependencyORM.task_id == task_id,
            TaskDependencyORM.depends_on_id == depends_on_id,
        )
        obj = self.session.execute(stmt).scalars().first()
        return dependency_from_orm(obj) if obj else None

    def delete(self, task_id: int, depends_on_id: int) -> int:
        return (
            self.session.query(TaskDependencyORM)
            .filter_by(task_id=task_id, depends_on_id=depends_on_id)
            .delete(synchronize_session=False)
        )

    def list_by_task(self, task_id: int) -> List[TaskDependency]:
        stmt = (
            select(TaskDependencyORM)
            .where(TaskDependencyORM.task_id == task_id)
            .order_by(TaskDependencyORM.id)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [dependency_from_orm(row) for row in rows]

    def delete_for_task(self, task_id: int) -> None:
        self.session.query(TaskDependencyORM).filter(
            or_(
                TaskDependencyORM.task_id == task_id,
                TaskDependencyORM.depends_on_id == task_id,
            )
        ).delete(synchronize_session=False)


__all__ = [
    "SqlAlchemyTaskRepository",
    "SqlAlchemyDependencyRepository",
]
