from uuid import UUID

from sqlmodel import Session

from taskmanager.core import clock
from taskmanager.core.errors import AuthorizationError, NotFoundError
from taskmanager.models.task import Task


def get_owned_task(db: Session, task_id: UUID, owner_id: UUID, action: str = "access") -> Task:
    """
    Existence first, then ownership: a missing task is 404, someone else's is 403.
    """
    task = db.get(Task, task_id)
    if task is None:
        raise NotFoundError("Task not found")
    if task.user_id != owner_id:
        raise AuthorizationError(f"Not authorized to {action} this task")
    return task


def add(db: Session, task: Task) -> Task:
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def save(db: Session, task: Task) -> Task:
    task.updated_at = clock.utcnow()
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def delete(db: Session, task: Task) -> None:
    db.delete(task)
    db.commit()
