"""create todos and todo_dependencies

Revision ID: 3b8e51c0d2a7
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3b8e51c0d2a7"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "todos",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("estimated_days", sa.Integer(), nullable=True, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("image_alt", sa.String(), nullable=True),
        sa.Column("image_loading", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("last_image_search", sa.String(), nullable=True),
        sa.Column("actual_start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("actual_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("earliest_start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_on_critical_path", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "todo_dependencies",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("task_id", sa.Integer(), nullable=False),
        sa.Column("depends_on_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["task_id"], ["todos.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["depends_on_id"], ["todos.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("task_id", "depends_on_id", name="uq_todo_dependency_pair"),
    )
    op.create_index("idx_dep_task", "todo_dependencies", ["task_id"])
    op.create_index("idx_dep_depends_on", "todo_dependencies", ["depends_on_id"])


def downgrade() -> None:
    op.drop_index("idx_dep_depends_on", table_name="todo_dependencies")
    op.drop_index("idx_dep_task", table_name="todo_dependencies")
    op.drop_table("todo_dependencies")
    op.drop_table("todos")
