# taskmanager/models/task.py
from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, Index
from sqlmodel import Field, SQLModel

from taskmanager.core import clock


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# sort ranks; string order of the values is meaningless
PRIORITY_RANK = {TaskPriority.LOW.value: 1, TaskPriority.MEDIUM.value: 2, TaskPriority.HIGH.value: 3}
STATUS_RANK = {TaskStatus.PENDING.value: 1, TaskStatus.IN_PROGRESS.value: 2, TaskStatus.COMPLETED.value: 3}


class Task(SQLModel, table=True):
    __tablename__ = "task"

    __table_args__ = (
        Index("ix_task_user_status", "user_id", "status"),
        Index("ix_task_user_priority", "user_id", "priority"),
        Index("ix_task_user_due_date", "user_id", "due_date"),
        Index("ix_task_user_created_at", "user_id", "created_at"),
    )

    task_id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.user_id", index=True)

    title: str = Field(max_length=100)
    description: str = Field(default="", max_length=500)
    due_date: Optional[date] = None
    # plain strings in the table; TaskPriority / TaskStatus hold the allowed values
    priority: str = Field(default=TaskPriority.MEDIUM.value, max_length=16)
    status: str = Field(default=TaskStatus.PENDING.value, max_length=16)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    is_important: bool = False
    completed_at: Optional[datetime] = None

    created_at: datetime = Field(default_factory=clock.utcnow)
    updated_at: datetime = Field(default_factory=clock.utcnow)


# ---- derived fields (computed at read time, never stored) ----
DUE_SOON_DAYS = 3


def is_overdue(status: str, due_date: Optional[date], today: date) -> bool:
    if due_date is None or status == TaskStatus.COMPLETED.value:
        return False
    return due_date < today


def is_due_soon(status: str, due_date: Optional[date], today: date, days: int = DUE_SOON_DAYS) -> bool:
    if due_date is None or status == TaskStatus.COMPLETED.value:
        return False
    return 0 <= (due_date - today).days <= days
