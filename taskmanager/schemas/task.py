# taskmanager/schemas/task.py
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, computed_field, field_validator

from taskmanager.core import clock
from taskmanager.models import task as task_model
from taskmanager.models.task import TaskPriority, TaskStatus

SORT_FIELDS = ("title", "dueDate", "priority", "status", "createdAt", "updatedAt")
MAX_PAGE_SIZE = 100
# keeps (page - 1) * limit inside a signed 64-bit OFFSET
MAX_PAGE = (2**63 - 1) // MAX_PAGE_SIZE

TITLE_MSG = "Title must be between 1 and 100 characters"
DESCRIPTION_MSG = "Description cannot exceed 500 characters"
DUE_DATE_FORMAT_MSG = "Due date must be a valid date"
PRIORITY_MSG = "Priority must be low, medium, or high"
STATUS_MSG = "Status must be pending, in-progress, or completed"
TAGS_MSG = "Tags must be an array with maximum 10 items"
TAG_MSG = "Each tag must be between 1 and 20 characters"
IMPORTANT_MSG = "is_important must be a boolean"


# ===== field checks =====

def check_title(v):
    if not isinstance(v, str) or not 1 <= len(v.strip()) <= 100:
        raise ValueError(TITLE_MSG)
    return v.strip()


def check_description(v):
    if v is None:
        return ""
    if not isinstance(v, str):
        raise ValueError(DESCRIPTION_MSG)
    v = v.strip()
    if len(v) > 500:
        raise ValueError(DESCRIPTION_MSG)
    return v


def parse_due_date(v):
    """Accepts a date, a datetime or an ISO 8601 string; keeps the calendar date only."""
    if v is None or isinstance(v, date) and not isinstance(v, datetime):
        return v
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, str) and v.strip():
        try:
            return datetime.fromisoformat(v.strip().replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise ValueError(DUE_DATE_FORMAT_MSG)


def check_choice(v, allowed: type, message: str):
    values = {m.value for m in allowed}
    if isinstance(v, allowed):
        return v.value
    if isinstance(v, str) and v in values:
        return v
    raise ValueError(message)


def check_tags(v):
    if v is None:
        return []
    if not isinstance(v, list) or len(v) > 10:
        raise ValueError(TAGS_MSG)
    tags = []
    for tag in v:
        if not isinstance(tag, str) or not 1 <= len(tag.strip()) <= 20:
            raise ValueError(TAG_MSG)
        tags.append(tag.strip())
    return tags


def check_bool(v, message: str):
    if isinstance(v, bool):
        return v
    if isinstance(v, str) and v.strip().lower() in ("true", "1"):
        return True
    if isinstance(v, str) and v.strip().lower() in ("false", "0"):
        return False
    raise ValueError(message)


def check_int_range(v, low: int, high: Optional[int], message: str) -> int:
    if isinstance(v, bool):
        raise ValueError(message)
    try:
        n = int(v)
    except (TypeError, ValueError):
        raise ValueError(message)
    if n < low or (high is not None and n > high):
        raise ValueError(message)
    return n


# ===== requests =====

class TaskFields(BaseModel):
    """Validators shared by create and update payloads."""

    @field_validator("title", mode="before", check_fields=False)
    @classmethod
    def validate_title(cls, v):
        return check_title(v)

    @field_validator("description", mode="before", check_fields=False)
    @classmethod
    def validate_description(cls, v):
        return check_description(v)

    @field_validator("due_date", mode="before", check_fields=False)
    @classmethod
    def validate_due_date(cls, v):
        return parse_due_date(v)

    @field_validator("priority", mode="before", check_fields=False)
    @classmethod
    def validate_priority(cls, v):
        return check_choice(v, TaskPriority, PRIORITY_MSG)

    @field_validator("status", mode="before", check_fields=False)
    @classmethod
    def validate_status(cls, v):
        return check_choice(v, TaskStatus, STATUS_MSG)

    @field_validator("tags", mode="before", check_fields=False)
    @classmethod
    def validate_tags(cls, v):
        return check_tags(v)

    @field_validator("is_important", mode="before", check_fields=False)
    @classmethod
    def validate_is_important(cls, v):
        return check_bool(v, IMPORTANT_MSG)


class TaskCreate(TaskFields):
    title: str
    description: str = ""
    due_date: Optional[date] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    tags: List[str] = []
    is_important: Optional[bool] = None


class TaskUpdate(TaskFields):
    """Partial update: only keys present in the body are applied."""

    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    tags: Optional[List[str]] = None
    is_important: Optional[bool] = None


class TaskListQuery(BaseModel):
    status: Optional[str] = None
    priority: Optional[str] = None
    search: Optional[str] = None
    is_important: Optional[bool] = None
    sort: str = "createdAt"
    order: str = "desc"
    page: int = 1
    limit: int = 20

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v):
        return check_choice(v, TaskStatus, STATUS_MSG)

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, v):
        return check_choice(v, TaskPriority, PRIORITY_MSG)

    @field_validator("search", mode="before")
    @classmethod
    def validate_search(cls, v):
        if not isinstance(v, str) or not 1 <= len(v.strip()) <= 100:
            raise ValueError("Search term must be between 1 and 100 characters")
        return v.strip()

    @field_validator("is_important", mode="before")
    @classmethod
    def validate_is_important(cls, v):
        return check_bool(v, IMPORTANT_MSG)

    @field_validator("sort", mode="before")
    @classmethod
    def validate_sort(cls, v):
        if v not in SORT_FIELDS:
            raise ValueError("Invalid sort field")
        return v

    @field_validator("order", mode="before")
    @classmethod
    def validate_order(cls, v):
        if v not in ("asc", "desc"):
            raise ValueError("Order must be asc or desc")
        return v

    @field_validator("page", mode="before")
    @classmethod
    def validate_page(cls, v):
        page = check_int_range(v, 1, None, "Page must be a positive integer")
        if page > MAX_PAGE:
            raise ValueError(f"Page cannot exceed {MAX_PAGE}")
        return page

    @field_validator("limit", mode="before")
    @classmethod
    def validate_limit(cls, v):
        return check_int_range(v, 1, MAX_PAGE_SIZE, f"Limit must be between 1 and {MAX_PAGE_SIZE}")


class DueSoonQuery(BaseModel):
    days: int = 3

    @field_validator("days", mode="before")
    @classmethod
    def validate_days(cls, v):
        return check_int_range(v, 1, 30, "Days must be between 1 and 30")


# ===== responses =====

class TaskRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    task_id: UUID
    user_id: UUID
    title: str
    description: str
    due_date: Optional[date] = None
    priority: str
    status: str
    tags: List[str]
    is_important: bool
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def is_overdue(self) -> bool:
        return task_model.is_overdue(self.status, self.due_date, clock.today())

    @computed_field
    @property
    def is_due_soon(self) -> bool:
        return task_model.is_due_soon(self.status, self.due_date, clock.today())

    @computed_field
    @property
    def formatted_due_date(self) -> Optional[str]:
        return self.due_date.isoformat() if self.due_date else None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class TaskStats(BaseModel):
    total: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0
    high_priority: int = 0
    overdue: int = 0


class TaskListData(BaseModel):
    tasks: List[TaskRead]
    pagination: Pagination
    stats: TaskStats


class TaskData(BaseModel):
    task: TaskRead


class TaskCollection(BaseModel):
    tasks: List[TaskRead]
