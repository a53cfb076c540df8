from datetime import timedelta

import pytest

from taskmanager.core import clock
from taskmanager.models.task import Task
from taskmanager.schemas.task import MAX_PAGE


def _day(offset: int):
    return clock.today() + timedelta(days=offset)


def _create(client, headers, title, **fields):
    r = client.post("/tasks", headers=headers, json={"title": title, **fields})
    assert r.status_code == 201, r.text
    return r.json()["data"]["task"]


def _insert(db, owner, title, **fields):
    """Direct insert; past due dates cannot go through the API."""
    task = Task(user_id=owner["user_id"], title=title, **fields)
    if task.status == "completed":
        task.completed_at = clock.utcnow()
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def _list(client, headers, **params):
    r = client.get("/tasks", headers=headers, params=params)
    assert r.status_code == 200, r.text
    return r.json()["data"]


def _titles(data):
    return [t["title"] for t in data["tasks"]]


def test_filter_with_pagination_and_stats(client, alice):
    for i in range(3):
        _create(client, alice["headers"], f"done {i}", status="completed")
    for i in range(2):
        _create(client, alice["headers"], f"todo {i}")

    data = _list(client, alice["headers"], status="completed", limit=2)

    assert len(data["tasks"]) == 2
    assert all(t["status"] == "completed" for t in data["tasks"])
    assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
    assert data["stats"]["total"] == 5
    assert data["stats"]["completed"] == 3
    assert data["stats"]["pending"] == 2
    assert data["stats"]["in_progress"] == 0


def test_second_page_and_page_past_the_end(client, alice, ticking_clock):
    for i in range(5):
        _create(client, alice["headers"], f"task {i}")

    page2 = _list(client, alice["headers"], sort="createdAt", order="asc", page=2, limit=2)
    beyond = _list(client, alice["headers"], page=9, limit=2)

    assert _titles(page2) == ["task 2", "task 3"]
    assert beyond["tasks"] == []
    assert beyond["pagination"]["total"] == 5
    assert beyond["pagination"]["pages"] == 3


def test_default_order_is_newest_first(client, alice, ticking_clock):
    for title in ("first", "second", "third"):
        _create(client, alice["headers"], title)

    assert _titles(_list(client, alice["headers"])) == ["third", "second", "first"]


def test_list_is_scoped_to_owner(client, alice, bob):
    _create(client, alice["headers"], "alice task", priority="high")
    _create(client, bob["headers"], "bob task 1")
    _create(client, bob["headers"], "bob task 2")

    data = _list(client, alice["headers"])

    assert _titles(data) == ["alice task"]
    assert data["stats"]["total"] == 1
    assert data["stats"]["high_priority"] == 1


def test_search_matches_title_or_description_case_insensitively(client, alice):
    _create(client, alice["headers"], "Buy Milk")
    _create(client, alice["headers"], "Groceries", description="milk and eggs")
    _create(client, alice["headers"], "Call mom")

    data = _list(client, alice["headers"], search="MILK", sort="title", order="asc")

    assert _titles(data) == ["Buy Milk", "Groceries"]


def test_search_treats_wildcards_literally(client, alice):
    _create(client, alice["headers"], "100% done")
    _create(client, alice["headers"], "1000 steps")

    assert _titles(_list(client, alice["headers"], search="0%")) == ["100% done"]


def test_priority_and_importance_filters(client, alice):
    _create(client, alice["headers"], "low plain", priority="low")
    _create(client, alice["headers"], "high plain", priority="high")
    _create(client, alice["headers"], "high flagged", priority="high", is_important=True)

    assert sorted(_titles(_list(client, alice["headers"], priority="high"))) == ["high flagged", "high plain"]
    assert _titles(_list(client, alice["headers"], is_important="true")) == ["high flagged"]
    assert len(_list(client, alice["headers"], is_important="false")["tasks"]) == 2


@pytest.mark.parametrize(
    ("order", "expected"),
    [("asc", ["l", "m", "h"]), ("desc", ["h", "m", "l"])],
)
def test_sort_by_priority_uses_rank(client, alice, order, expected):
    _create(client, alice["headers"], "m", priority="medium")
    _create(client, alice["headers"], "h", priority="high")
    _create(client, alice["headers"], "l", priority="low")

    assert _titles(_list(client, alice["headers"], sort="priority", order=order)) == expected


def test_sort_by_status_uses_rank(client, alice):
    _create(client, alice["headers"], "c", status="completed")
    _create(client, alice["headers"], "p", status="pending")
    _create(client, alice["headers"], "i", status="in-progress")

    assert _titles(_list(client, alice["headers"], sort="status", order="asc")) == ["p", "i", "c"]


def test_sort_by_due_date(client, alice):
    _create(client, alice["headers"], "later", due_date=_day(9).isoformat())
    _create(client, alice["headers"], "sooner", due_date=_day(1).isoformat())

    assert _titles(_list(client, alice["headers"], sort="dueDate", order="asc")) == ["sooner", "later"]


def test_blank_params_are_ignored(client, alice):
    _create(client, alice["headers"], "one")

    data = _list(client, alice["headers"], status="", search="  ")

    assert _titles(data) == ["one"]


@pytest.mark.parametrize(
    ("params", "message"),
    [
        ({"sort": "due_date"}, "Invalid sort field"),
        ({"status": "done"}, "Status must be pending, in-progress, or completed"),
        ({"limit": "0"}, "Limit must be between 1 and 100"),
        ({"page": "-2"}, "Page must be a positive integer"),
        ({"page": str(10**20)}, f"Page cannot exceed {MAX_PAGE}"),
    ],
)
def test_invalid_list_params(client, alice, params, message):
    r = client.get("/tasks", headers=alice["headers"], params=params)

    assert r.status_code == 400
    assert r.json()["error"] == message


def test_overdue(client, db, alice, bob):
    _insert(db, alice, "late", due_date=_day(-2))
    _insert(db, alice, "late but done", due_date=_day(-2), status="completed")
    _insert(db, alice, "due today", due_date=_day(0))
    _insert(db, alice, "no date")
    _insert(db, bob, "bob late", due_date=_day(-1))

    r = client.get("/tasks/overdue", headers=alice["headers"])

    assert r.status_code == 200
    tasks = r.json()["data"]["tasks"]
    assert [t["title"] for t in tasks] == ["late"]
    assert tasks[0]["is_overdue"] is True

    stats = _list(client, alice["headers"])["stats"]
    assert stats["overdue"] == 1
    assert stats["total"] == 4


def test_overdue_flag_in_list(client, db, alice):
    _insert(db, alice, "late", due_date=_day(-1), status="in-progress")

    task = _list(client, alice["headers"])["tasks"][0]

    assert task["is_overdue"] is True
    assert task["is_due_soon"] is False


def test_due_soon_default_window(client, db, alice):
    _insert(db, alice, "today", due_date=_day(0))
    _insert(db, alice, "in three", due_date=_day(3))
    _insert(db, alice, "in four", due_date=_day(4))
    _insert(db, alice, "yesterday", due_date=_day(-1))
    _insert(db, alice, "done", due_date=_day(1), status="completed")

    r = client.get("/tasks/due-soon", headers=alice["headers"])

    assert r.status_code == 200
    assert [t["title"] for t in r.json()["data"]["tasks"]] == ["today", "in three"]


def test_due_soon_custom_window(client, db, alice):
    _insert(db, alice, "in four", due_date=_day(4))
    _insert(db, alice, "in six", due_date=_day(6))

    r = client.get("/tasks/due-soon", headers=alice["headers"], params={"days": 5})

    assert [t["title"] for t in r.json()["data"]["tasks"]] == ["in four"]


@pytest.mark.parametrize("days", ["0", "31", "soon"])
def test_due_soon_rejects_bad_window(client, alice, days):
    r = client.get("/tasks/due-soon", headers=alice["headers"], params={"days": days})

    assert r.status_code == 400
    assert r.json()["error"] == "Days must be between 1 and 30"


def test_empty_list(client, alice):
    data = _list(client, alice["headers"])

    assert data["tasks"] == []
    assert data["pagination"] == {"page": 1, "limit": 20, "total": 0, "pages": 0}
    assert data["stats"] == {
        "total": 0,
        "completed": 0,
        "pending": 0,
        "in_progress": 0,
        "high_priority": 0,
        "overdue": 0,
    }


@pytest.mark.parametrize(
    ("order", "expected"),
    [("asc", ["sooner", "later", "no date"]), ("desc", ["later", "sooner", "no date"])],
)
def test_sort_by_due_date_puts_undated_last(client, alice, order, expected):
    _create(client, alice["headers"], "no date")
    _create(client, alice["headers"], "later", due_date=_day(9).isoformat())
    _create(client, alice["headers"], "sooner", due_date=_day(1).isoformat())

    assert _titles(_list(client, alice["headers"], sort="dueDate", order=order)) == expected


def test_last_allowed_page_is_empty_not_an_error(client, alice):
    _create(client, alice["headers"], "one")

    data = _list(client, alice["headers"], page=MAX_PAGE, limit=100)

    assert data["tasks"] == []
    assert data["pagination"]["total"] == 1
