# taskmanager/routers/task.py
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from taskmanager.db.session import get_session
from taskmanager.dependencies.auth import get_current_user
from taskmanager.dependencies.validation import validated_body, validated_query
from taskmanager.models.task import Task
from taskmanager.models.user import User
from taskmanager.schemas.common import Envelope
from taskmanager.schemas.task import (
    DueSoonQuery,
    Pagination,
    TaskCollection,
    TaskCreate,
    TaskData,
    TaskListData,
    TaskListQuery,
    TaskRead,
    TaskUpdate,
)
from taskmanager.services import task_query, task_service

router = APIRouter(prefix="/tasks", tags=["Tasks"])


def _task_data(task: Task) -> TaskData:
    return TaskData(task=TaskRead.model_validate(task))


def _collection(tasks: list[Task]) -> TaskCollection:
    return TaskCollection(tasks=[TaskRead.model_validate(t) for t in tasks])


@router.get("", response_model=Envelope[TaskListData])
def list_tasks(
    user: User = Depends(get_current_user),
    query: TaskListQuery = Depends(validated_query(TaskListQuery)),
    db: Session = Depends(get_session),
):
    page = task_query.list_tasks(db, user.user_id, query)
    return Envelope(
        data=TaskListData(
            tasks=[TaskRead.model_validate(t) for t in page.tasks],
            pagination=Pagination(page=page.page, limit=page.limit, total=page.total, pages=page.pages),
            stats=page.stats,
        )
    )


# fixed paths must be registered before /{task_id}
@router.get("/overdue", response_model=Envelope[TaskCollection])
def get_overdue_tasks(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    return Envelope(data=_collection(task_query.get_overdue(db, user.user_id)))


@router.get("/due-soon", response_model=Envelope[TaskCollection])
def get_tasks_due_soon(
    user: User = Depends(get_current_user),
    query: DueSoonQuery = Depends(validated_query(DueSoonQuery)),
    db: Session = Depends(get_session),
):
    return Envelope(data=_collection(task_query.get_due_soon(db, user.user_id, query.days)))


@router.post("", response_model=Envelope[TaskData], status_code=status.HTTP_201_CREATED)
def create_task(
    user: User = Depends(get_current_user),
    payload: TaskCreate = Depends(validated_body(TaskCreate)),
    db: Session = Depends(get_session),
):
    task = task_service.create_task(db, user.user_id, payload)
    return Envelope(message="Task created successfully", data=_task_data(task))


@router.get("/{task_id}", response_model=Envelope[TaskData])
def get_task(
    task_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    return Envelope(data=_task_data(task_service.get_task(db, task_id, user.user_id)))


@router.put("/{task_id}", response_model=Envelope[TaskData])
def update_task(
    task_id: UUID,
    user: User = Depends(get_current_user),
    payload: TaskUpdate = Depends(validated_body(TaskUpdate)),
    db: Session = Depends(get_session),
):
    task = task_service.update_task(db, task_id, user.user_id, payload)
    return Envelope(message="Task updated successfully", data=_task_data(task))


@router.delete("/{task_id}", response_model=Envelope[None])
def delete_task(
    task_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    task_service.delete_task(db, task_id, user.user_id)
    return Envelope(message="Task deleted successfully")


@router.patch("/{task_id}/toggle-importance", response_model=Envelope[TaskData])
def toggle_importance(
    task_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    task = task_service.toggle_importance(db, task_id, user.user_id)
    label = "important" if task.is_important else "not important"
    return Envelope(message=f"Task marked as {label}", data=_task_data(task))


@router.patch("/{task_id}/complete", response_model=Envelope[TaskData])
def complete_task(
    task_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    task = task_service.mark_completed(db, task_id, user.user_id)
    return Envelope(message="Task marked as completed", data=_task_data(task))


@router.patch("/{task_id}/in-progress", response_model=Envelope[TaskData])
def start_task(
    task_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    task = task_service.mark_in_progress(db, task_id, user.user_id)
    return Envelope(message="Task marked as in progress", data=_task_data(task))


@router.patch("/{task_id}/pending", response_model=Envelope[TaskData])
def reopen_task(
    task_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
):
    task = task_service.mark_pending(db, task_id, user.user_id)
    return Envelope(message="Task marked as pending", data=_task_data(task))
