# taskmanager/services/task_query.py
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import List
from uuid import UUID

from sqlalchemy import and_, asc, case, desc, func, or_
from sqlmodel import Session, col, select

from taskmanager.core import clock
from taskmanager.models.task import PRIORITY_RANK, STATUS_RANK, Task, TaskPriority, TaskStatus
from taskmanager.schemas.task import TaskListQuery, TaskStats

COMPLETED = TaskStatus.COMPLETED.value

# public sort names -> sortable expressions
SORT_COLUMNS = {
    "title": col(Task.title),
    "dueDate": col(Task.due_date),
    "priority": case(PRIORITY_RANK, value=col(Task.priority), else_=0),
    "status": case(STATUS_RANK, value=col(Task.status), else_=0),
    "createdAt": col(Task.created_at),
    "updatedAt": col(Task.updated_at),
}


@dataclass
class TaskPage:
    tasks: List[Task]
    page: int
    limit: int
    total: int
    stats: TaskStats

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_filters(owner_id: UUID, query: TaskListQuery) -> list:
    """Owner scope always comes first and cannot be replaced by caller input."""
    clauses = [col(Task.user_id) == owner_id]
    if query.status:
        clauses.append(col(Task.status) == query.status)
    if query.priority:
        clauses.append(col(Task.priority) == query.priority)
    if query.is_important is not None:
        clauses.append(col(Task.is_important) == query.is_important)
    if query.search:
        pattern = f"%{_escape_like(query.search)}%"
        clauses.append(
            or_(
                col(Task.title).ilike(pattern, escape="\\"),
                col(Task.description).ilike(pattern, escape="\\"),
            )
        )
    return clauses


def _overdue_clause(today):
    return and_(
        col(Task.status) != COMPLETED,
        col(Task.due_date).is_not(None),
        col(Task.due_date) < today,
    )


def _count_if(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def task_stats(db: Session, owner_id: UUID) -> TaskStats:
    """Aggregate over every task the owner has, independent of list filters and paging."""
    stmt = select(
        func.count(),
        _count_if(col(Task.status) == COMPLETED),
        _count_if(col(Task.status) == TaskStatus.PENDING.value),
        _count_if(col(Task.status) == TaskStatus.IN_PROGRESS.value),
        _count_if(col(Task.priority) == TaskPriority.HIGH.value),
        _count_if(_overdue_clause(clock.today())),
    ).select_from(Task).where(col(Task.user_id) == owner_id)

    total, completed, pending, in_progress, high, overdue = db.exec(stmt).one()
    return TaskStats(
        total=total or 0,
        completed=completed,
        pending=pending,
        in_progress=in_progress,
        high_priority=high,
        overdue=overdue,
    )


def list_tasks(db: Session, owner_id: UUID, query: TaskListQuery) -> TaskPage:
    clauses = build_filters(owner_id, query)

    total = db.exec(select(func.count()).select_from(Task).where(*clauses)).one()

    direction = desc if query.order == "desc" else asc
    stmt = (
        select(Task)
        .where(*clauses)
        .order_by(
            # tasks without a due date go last in either direction
            direction(SORT_COLUMNS[query.sort]).nulls_last(),
            direction(col(Task.created_at)),
            direction(col(Task.task_id)),
        )
        .offset((query.page - 1) * query.limit)
        .limit(query.limit)
    )
    tasks = list(db.exec(stmt).all())

    return TaskPage(
        tasks=tasks,
        page=query.page,
        limit=query.limit,
        total=total,
        stats=task_stats(db, owner_id),
    )


def get_overdue(db: Session, owner_id: UUID) -> List[Task]:
    stmt = (
        select(Task)
        .where(col(Task.user_id) == owner_id, _overdue_clause(clock.today()))
        .order_by(col(Task.due_date).asc())
    )
    return list(db.exec(stmt).all())


def get_due_soon(db: Session, owner_id: UUID, days: int = 3) -> List[Task]:
    today = clock.today()
    stmt = (
        select(Task)
        .where(
            col(Task.user_id) == owner_id,
            col(Task.status) != COMPLETED,
            col(Task.due_date).is_not(None),
            col(Task.due_date) >= today,
            col(Task.due_date) <= today + timedelta(days=days),
        )
        .order_by(col(Task.due_date).asc())
    )
    return list(db.exec(stmt).all())
