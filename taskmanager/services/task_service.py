# taskmanager/services/task_service.py
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from sqlmodel import Session

from taskmanager.core import clock
from taskmanager.core.errors import ValidationError
from taskmanager.models.task import Task, TaskPriority, TaskStatus
from taskmanager.schemas.task import TaskCreate, TaskUpdate
from taskmanager.services import task_store

log = logging.getLogger(__name__)

DUE_DATE_PAST = "Due date must be today or in the future"
COMPLETED = TaskStatus.COMPLETED.value


def _check_due_date(due_date: Optional[date]) -> None:
    # compared by calendar date, so "today" is always accepted
    if due_date is not None and due_date < clock.today():
        raise ValidationError(DUE_DATE_PAST, field="due_date")


def _apply_status(task: Task, status: str, now: datetime, *, restamp: bool = False) -> None:
    """
    Set ``status`` keeping completed_at in step: set when entering completed,
    cleared when leaving it. ``restamp`` overwrites an existing completion time.
    """
    if status == COMPLETED:
        if restamp or task.status != COMPLETED or task.completed_at is None:
            task.completed_at = now
    else:
        task.completed_at = None
    task.status = status


def create_task(db: Session, owner_id: UUID, payload: TaskCreate) -> Task:
    _check_due_date(payload.due_date)

    now = clock.utcnow()
    task = Task(
        user_id=owner_id,
        title=payload.title,
        description=payload.description or "",
        due_date=payload.due_date,
        priority=payload.priority or TaskPriority.MEDIUM.value,
        tags=list(payload.tags or []),
        is_important=bool(payload.is_important),
        created_at=now,
        updated_at=now,
    )
    _apply_status(task, payload.status or TaskStatus.PENDING.value, now)
    task = task_store.add(db, task)
    log.info("Task created task_id=%s user_id=%s", task.task_id, owner_id)
    return task


def get_task(db: Session, task_id: UUID, owner_id: UUID) -> Task:
    return task_store.get_owned_task(db, task_id, owner_id)


def update_task(db: Session, task_id: UUID, owner_id: UUID, payload: TaskUpdate) -> Task:
    task = task_store.get_owned_task(db, task_id, owner_id, action="update")

    changes = payload.model_dump(exclude_unset=True)
    status = changes.pop("status", None)

    # a task may be closed out with a due date that has already passed
    if "due_date" in changes and status != COMPLETED:
        _check_due_date(changes["due_date"])

    for field, value in changes.items():
        setattr(task, field, value)
    if status is not None:
        _apply_status(task, status, clock.utcnow())

    return task_store.save(db, task)


def delete_task(db: Session, task_id: UUID, owner_id: UUID) -> None:
    task = task_store.get_owned_task(db, task_id, owner_id, action="delete")
    task_store.delete(db, task)
    log.info("Task deleted task_id=%s user_id=%s", task_id, owner_id)


def toggle_importance(db: Session, task_id: UUID, owner_id: UUID) -> Task:
    task = task_store.get_owned_task(db, task_id, owner_id, action="modify")
    task.is_important = not task.is_important
    return task_store.save(db, task)


def mark_completed(db: Session, task_id: UUID, owner_id: UUID) -> Task:
    """Always restamps completed_at, also for a task that is already completed."""
    task = task_store.get_owned_task(db, task_id, owner_id, action="modify")
    _apply_status(task, COMPLETED, clock.utcnow(), restamp=True)
    return task_store.save(db, task)


def mark_in_progress(db: Session, task_id: UUID, owner_id: UUID) -> Task:
    task = task_store.get_owned_task(db, task_id, owner_id, action="modify")
    _apply_status(task, TaskStatus.IN_PROGRESS.value, clock.utcnow())
    return task_store.save(db, task)


def mark_pending(db: Session, task_id: UUID, owner_id: UUID) -> Task:
    task = task_store.get_owned_task(db, task_id, owner_id, action="modify")
    _apply_status(task, TaskStatus.PENDING.value, clock.utcnow())
    return task_store.save(db, task)
