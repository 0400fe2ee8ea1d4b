# infra/db/models.py
from __future__ import annotations
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.models import utc_now
from infra.db.base import Base


class TaskORM(Base):
    __tablename__ = "todos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    estimated_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now
    )

    image_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    image_alt: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    image_loading: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_image_search: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    actual_start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    actual_end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    earliest_start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    is_on_critical_path: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    dependencies: Mapped[List["TaskDependencyORM"]] = relationship(
        foreign_keys="TaskDependencyORM.task_id",
        back_populates="task",
        passive_deletes=True,
        order_by="TaskDependencyORM.id",
    )
    dependents: Mapped[List["TaskDependencyORM"]] = relationship(
        foreign_keys="TaskDependencyORM.depends_on_id",
        back_populates="depends_on",
        passive_deletes=True,
        order_by="TaskDependencyORM.id",
    )


class TaskDependencyORM(Base):
    __tablename__ = "todo_dependencies"
    __table_args__ = (
        UniqueConstraint("task_id", "depends_on_id", name="uq_todo_dependency_pair"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    task_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("todos.id", ondelete="CASCADE"), nullable=False
    )
    depends_on_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("todos.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    task: Mapped[TaskORM] = relationship(foreign_keys=[task_id], back_populates="dependencies")
    depends_on: Mapped[TaskORM] = relationship(foreign_keys=[depends_on_id], back_populates="dependents")

Index("idx_dep_task", TaskDependencyORM.task_id)
Index("idx_dep_depends_on", TaskDependencyORM.depends_on_id)
