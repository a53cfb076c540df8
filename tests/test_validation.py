from datetime import date

import pytest

from taskmanager.core.errors import ValidationError
from taskmanager.core.validation import check, first_error
from taskmanager.schemas.task import MAX_PAGE, DueSoonQuery, TaskCreate, TaskListQuery, TaskUpdate
from taskmanager.schemas.user import RegisterRequest, UpdatePasswordRequest, UpdateProfileRequest


def test_register_request_normalizes_email():
    result = check(RegisterRequest, {"name": " Alice ", "email": "Alice@X.com", "password": "Passw0rd"})

    assert result.ok
    assert result.value.email == "alice@x.com"
    assert result.value.name == "Alice"


def test_name_with_digits_is_rejected():
    result = check(RegisterRequest, {"name": "R2D2", "email": "r@x.com", "password": "Passw0rd"})

    assert not result.ok
    assert result.field == "name"
    assert result.message == "Name can only contain letters and spaces"


def test_only_the_first_violation_is_reported():
    result = check(RegisterRequest, {"name": "A", "email": "nope", "password": "weak"})

    assert result.field == "name"
    assert result.message == "Name must be between 2 and 50 characters"


def test_password_complexity_message():
    result = check(RegisterRequest, {"name": "Alice", "email": "a@x.com", "password": "password1"})

    assert result.field == "password"
    assert "one uppercase letter" in result.message


def test_missing_field_reads_as_required():
    result = check(RegisterRequest, {"name": "Alice", "password": "Passw0rd"})

    assert result.field == "email"
    assert result.message == "email is required"


def test_new_password_label():
    result = check(UpdatePasswordRequest, {"current_password": "x", "new_password": "abc"})

    assert result.message == "New password must be at least 6 characters long"


def test_profile_update_requires_a_field():
    result = check(UpdateProfileRequest, {})

    assert result.message == "No valid fields to update"


def test_profile_avatar_must_be_url():
    assert check(UpdateProfileRequest, {"avatar": "not a url"}).message == "Avatar must be a valid URL"
    assert check(UpdateProfileRequest, {"avatar": "https://cdn.example.com/a.png"}).ok


def test_unwrap_raises_validation_error_with_field():
    result = check(TaskCreate, {"title": ""})

    with pytest.raises(ValidationError) as exc:
        result.unwrap()

    assert exc.value.status_code == 400
    assert exc.value.field == "title"
    assert exc.value.to_body() == {
        "success": False,
        "error": "Title must be between 1 and 100 characters",
        "field": "title",
    }


def test_task_create_defaults_and_due_date_parsing():
    task = check(TaskCreate, {"title": " Write report ", "due_date": "2030-05-01T15:30:00Z"}).unwrap()

    assert task.title == "Write report"
    assert task.description == ""
    assert task.due_date == date(2030, 5, 1)
    assert task.tags == []
    assert task.priority is None and task.status is None


@pytest.mark.parametrize(
    ("payload", "field", "message"),
    [
        ({"title": "x" * 101}, "title", "Title must be between 1 and 100 characters"),
        ({"title": "t", "description": "d" * 501}, "description", "Description cannot exceed 500 characters"),
        ({"title": "t", "due_date": "tomorrow"}, "due_date", "Due date must be a valid date"),
        ({"title": "t", "priority": "urgent"}, "priority", "Priority must be low, medium, or high"),
        ({"title": "t", "status": "done"}, "status", "Status must be pending, in-progress, or completed"),
        ({"title": "t", "tags": [str(i) for i in range(11)]}, "tags", "Tags must be an array with maximum 10 items"),
        ({"title": "t", "tags": ["x" * 21]}, "tags", "Each tag must be between 1 and 20 characters"),
        ({"title": "t", "is_important": "yes"}, "is_important", "is_important must be a boolean"),
    ],
)
def test_task_create_rejections(payload, field, message):
    result = check(TaskCreate, payload)

    assert (result.field, result.message) == (field, message)


def test_task_update_tracks_only_sent_keys():
    update = check(TaskUpdate, {"priority": "high"}).unwrap()

    assert update.model_dump(exclude_unset=True) == {"priority": "high"}


def test_task_update_rejects_null_title():
    assert check(TaskUpdate, {"title": None}).field == "title"


def test_list_query_defaults():
    query = check(TaskListQuery, {}).unwrap()

    assert (query.sort, query.order, query.page, query.limit) == ("createdAt", "desc", 1, 20)


@pytest.mark.parametrize(
    ("params", "message"),
    [
        ({"sort": "due_date"}, "Invalid sort field"),
        ({"order": "up"}, "Order must be asc or desc"),
        ({"page": "0"}, "Page must be a positive integer"),
        ({"limit": "101"}, "Limit must be between 1 and 100"),
        ({"limit": "abc"}, "Limit must be between 1 and 100"),
    ],
)
def test_list_query_rejections(params, message):
    assert check(TaskListQuery, params).message == message


def test_list_query_rejects_page_past_offset_range():
    assert check(TaskListQuery, {"page": str(MAX_PAGE + 1)}).message == f"Page cannot exceed {MAX_PAGE}"
    assert check(TaskListQuery, {"page": str(MAX_PAGE)}).ok


def test_list_query_coerces_strings():
    query = check(TaskListQuery, {"page": "2", "limit": "5", "is_important": "true"}).unwrap()

    assert (query.page, query.limit, query.is_important) == (2, 5, True)


@pytest.mark.parametrize("days", ["0", "31", "-1"])
def test_due_soon_days_bounds(days):
    assert check(DueSoonQuery, {"days": days}).message == "Days must be between 1 and 30"


def test_first_error_skips_location_roots():
    errors = [{"type": "uuid_parsing", "loc": ("path", "task_id"), "msg": "Input should be a valid UUID"}]

    assert first_error(errors) == ("task_id", "Input should be a valid UUID")


def test_first_error_without_errors():
    assert first_error([]) == (None, "Invalid request")
