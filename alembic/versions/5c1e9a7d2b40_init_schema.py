"""init_schema

Revision ID: 5c1e9a7d2b40
Revises: 
Create Date: 2026-10-19 10:02:11.418263

"""
from alembic import op
import sqlalchemy as sa



revision = '5c1e9a7d2b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=254), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("avatar", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reset_password_token", sa.String(), nullable=True),
        sa.Column("reset_password_expires", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)
    op.create_index("ix_user_reset_password_token", "user", ["reset_password_token"], unique=False)

    op.create_table(
        "task",
        sa.Column("task_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("priority", sa.String(length=16), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("is_important", sa.Boolean(), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["user.user_id"]),
        sa.PrimaryKeyConstraint("task_id"),
    )
    op.create_index("ix_task_user_id", "task", ["user_id"], unique=False)
    op.create_index("ix_task_user_status", "task", ["user_id", "status"], unique=False)
    op.create_index("ix_task_user_priority", "task", ["user_id", "priority"], unique=False)
    op.create_index("ix_task_user_due_date", "task", ["user_id", "due_date"], unique=False)
    op.create_index("ix_task_user_created_at", "task", ["user_id", "created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_task_user_created_at", table_name="task")
    op.drop_index("ix_task_user_due_date", table_name="task")
    op.drop_index("ix_task_user_priority", table_name="task")
    op.drop_index("ix_task_user_status", table_name="task")
    op.drop_index("ix_task_user_id", table_name="task")
    op.drop_table("task")
    op.drop_index("ix_user_reset_password_token", table_name="user")
    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")
