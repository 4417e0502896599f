# tests/test_task_service.py
# PURPOSE: task service against a real SQLite session: creation, dependency
# edge reconciliation, soft delete, ownership/status filters, atomicity.

from datetime import date

import pytest

from task_manager import store_db
from task_manager.db_models import TaskDB, TaskDependencyDB
from task_manager.models import NewTask, UpdateTask
from task_manager.results import ErrorKind
from task_manager.services import task_service


def _new(title="X", **overrides) -> NewTask:
    data = {
        "title": title,
        "priority": "HIGH",
        "recurrence": "DAILY",
        "due_date": "2024-01-01",
        "is_dependent": False,
    }
    data.update(overrides)
    return NewTask(**data)


def _update(title="Updated", **overrides) -> UpdateTask:
    data = {
        "title": title,
        "priority": "MEDIUM",
        "recurrence": "WEEKLY",
        "due_date": "2024-01-02",
        "is_dependent": False,
    }
    data.update(overrides)
    return UpdateTask(**data)


def _edges(db):
    return db.query(TaskDependencyDB).all()


def test_add_new_task_example(db_session, make_user):
    uid = make_user()
    result = task_service.add_new_task(db_session, _new("X"), owner_id=uid)

    assert result.ok
    task = result.value
    assert task.title == "X"
    assert task.priority == "HIGH"
    assert task.recurrence == "DAILY"
    assert task.due_date == date(2024, 1, 1)
    assert task.next_recurrence == date(2024, 1, 2)
    assert task.active is True
    assert task.status == "NOT_DONE"
    assert task.user_id == uid


def test_add_without_dependency_never_writes_edge(db_session, make_user):
    uid = make_user()
    task_service.add_new_task(db_session, _new("A"), owner_id=uid)
    # prerequisite is ignored when the task is not dependent
    task_service.add_new_task(db_session, _new("B", prerequisite=1), owner_id=uid)
    assert _edges(db_session) == []


def test_add_dependent_task_creates_exactly_one_edge(db_session, make_user):
    uid = make_user()
    first = task_service.add_new_task(db_session, _new("First"), owner_id=uid).value

    result = task_service.add_new_task(
        db_session, _new("Second", is_dependent=True, prerequisite=first.id), owner_id=uid
    )

    assert result.ok
    edges = _edges(db_session)
    assert len(edges) == 1
    assert edges[0].dependent_id == result.value.id
    assert edges[0].prerequisite_id == first.id
    assert [d.prerequisite_id for d in result.value.dependencies] == [first.id]


def test_add_dependent_on_foreign_task_is_not_found(db_session, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    bobs = task_service.add_new_task(db_session, _new("Bob's"), owner_id=bob).value

    result = task_service.add_new_task(
        db_session, _new("Mine", is_dependent=True, prerequisite=bobs.id), owner_id=alice
    )

    assert result.error is ErrorKind.NOT_FOUND
    assert db_session.query(TaskDB).filter(TaskDB.user_id == alice).count() == 0


def test_add_rolls_back_task_when_edge_write_fails(db_session, make_user, monkeypatch):
    uid = make_user()
    prereq = task_service.add_new_task(db_session, _new("P"), owner_id=uid).value

    def boom(*args, **kwargs):
        raise RuntimeError("edge write failed")

    monkeypatch.setattr(store_db, "create_dependency", boom)

    with pytest.raises(RuntimeError):
        task_service.add_new_task(db_session, _new("D", is_dependent=True, prerequisite=prereq.id), owner_id=uid)

    titles = [t.title for t in db_session.query(TaskDB).all()]
    assert titles == ["P"]


def test_update_replaces_fields_and_recomputes_recurrence(db_session, make_user):
    uid = make_user()
    task = task_service.add_new_task(db_session, _new("Old"), owner_id=uid).value

    result = task_service.update_task(db_session, task.id, _update("New"), owner_id=uid)

    assert result.ok
    updated = result.value
    assert updated.title == "New"
    assert updated.priority == "MEDIUM"
    assert updated.recurrence == "WEEKLY"
    assert updated.due_date == date(2024, 1, 2)
    assert updated.next_recurrence == date(2024, 1, 9)


def test_update_to_none_recurrence_clears_next(db_session, make_user):
    uid = make_user()
    task = task_service.add_new_task(db_session, _new("R"), owner_id=uid).value

    updated = task_service.update_task(db_session, task.id, _update(recurrence="NONE"), owner_id=uid).value

    assert updated.next_recurrence is None


def test_update_missing_task_is_not_found(db_session, make_user):
    uid = make_user()
    result = task_service.update_task(db_session, 999, _update(), owner_id=uid)
    assert result.error is ErrorKind.NOT_FOUND
    assert result.message == "Task with id 999 not found"


def test_update_foreign_task_is_not_found_and_unchanged(db_session, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    task = task_service.add_new_task(db_session, _new("Alice's"), owner_id=alice).value

    result = task_service.update_task(db_session, task.id, _update("Hijacked"), owner_id=bob)

    assert result.error is ErrorKind.NOT_FOUND
    db_session.expire_all()
    assert db_session.get(TaskDB, task.id).title == "Alice's"


def test_update_done_task_is_not_found(db_session, make_user):
    uid = make_user()
    task = task_service.add_new_task(db_session, _new("Done"), owner_id=uid).value
    # DONE is set outside these operations
    task.status = "DONE"
    db_session.commit()

    result = task_service.update_task(db_session, task.id, _update(), owner_id=uid)

    assert result.error is ErrorKind.NOT_FOUND


def test_update_inactive_task_is_not_found(db_session, make_user):
    uid = make_user()
    task = task_service.add_new_task(db_session, _new("Gone"), owner_id=uid).value
    assert task_service.delete_task(db_session, task.id, owner_id=uid).ok

    result = task_service.update_task(db_session, task.id, _update(), owner_id=uid)

    assert result.error is ErrorKind.NOT_FOUND


def test_update_toggle_dependency_on_then_off(db_session, make_user):
    uid = make_user()
    prereq = task_service.add_new_task(db_session, _new("P"), owner_id=uid).value
    task = task_service.add_new_task(db_session, _new("T"), owner_id=uid).value

    # false -> true: exactly one edge
    on = task_service.update_task(
        db_session, task.id, _update(is_dependent=True, prerequisite=prereq.id), owner_id=uid
    )
    assert on.ok
    edges = _edges(db_session)
    assert [(e.dependent_id, e.prerequisite_id) for e in edges] == [(task.id, prereq.id)]

    # same prerequisite again: still one edge
    task_service.update_task(db_session, task.id, _update(is_dependent=True, prerequisite=prereq.id), owner_id=uid)
    assert len(_edges(db_session)) == 1

    # true -> false: edge removed
    off = task_service.update_task(db_session, task.id, _update(is_dependent=False), owner_id=uid)
    assert off.ok
    assert _edges(db_session) == []
    assert off.value.dependencies == []


def test_update_switching_prerequisite_keeps_single_edge(db_session, make_user):
    uid = make_user()
    p1 = task_service.add_new_task(db_session, _new("P1"), owner_id=uid).value
    p2 = task_service.add_new_task(db_session, _new("P2"), owner_id=uid).value
    task = task_service.add_new_task(
        db_session, _new("T", is_dependent=True, prerequisite=p1.id), owner_id=uid
    ).value

    result = task_service.update_task(
        db_session, task.id, _update(is_dependent=True, prerequisite=p2.id), owner_id=uid
    )

    assert result.ok
    edges = _edges(db_session)
    assert len(edges) == 1
    assert edges[0].dependent_id == task.id
    assert edges[0].prerequisite_id == p2.id


def test_update_self_dependency_is_conflict(db_session, make_user):
    uid = make_user()
    task = task_service.add_new_task(db_session, _new("Self"), owner_id=uid).value

    result = task_service.update_task(
        db_session, task.id, _update(is_dependent=True, prerequisite=task.id), owner_id=uid
    )

    assert result.error is ErrorKind.CONFLICT
    assert _edges(db_session) == []


def test_delete_is_soft_and_second_delete_not_found(db_session, make_user):
    uid = make_user()
    task = task_service.add_new_task(db_session, _new("Bye"), owner_id=uid).value

    first = task_service.delete_task(db_session, task.id, owner_id=uid)
    assert first.ok and first.value is True

    db_session.expire_all()
    row = db_session.get(TaskDB, task.id)
    assert row is not None  # never physically removed
    assert row.active is False

    second = task_service.delete_task(db_session, task.id, owner_id=uid)
    assert second.error is ErrorKind.NOT_FOUND


def test_delete_foreign_task_is_not_found(db_session, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    task = task_service.add_new_task(db_session, _new("Alice's"), owner_id=alice).value

    assert task_service.delete_task(db_session, task.id, owner_id=bob).error is ErrorKind.NOT_FOUND
    db_session.expire_all()
    assert db_session.get(TaskDB, task.id).active is True


def test_get_my_tasks_only_active_and_owned(db_session, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    keep = task_service.add_new_task(db_session, _new("Keep"), owner_id=alice).value
    gone = task_service.add_new_task(db_session, _new("Gone"), owner_id=alice).value
    task_service.add_new_task(db_session, _new("Bob's"), owner_id=bob)
    task_service.delete_task(db_session, gone.id, owner_id=alice)

    tasks = task_service.get_my_tasks(db_session, alice)

    assert [t.id for t in tasks] == [keep.id]
    assert all(t.active and t.user_id == alice for t in tasks)


def test_get_my_tasks_attaches_dependency(db_session, make_user):
    uid = make_user()
    p = task_service.add_new_task(db_session, _new("P"), owner_id=uid).value
    d = task_service.add_new_task(db_session, _new("D", is_dependent=True, prerequisite=p.id), owner_id=uid).value

    by_id = {t.id: t for t in task_service.get_my_tasks(db_session, uid)}

    assert by_id[p.id].dependencies == []
    assert [e.prerequisite_id for e in by_id[d.id].dependencies] == [p.id]


def test_get_my_tasks_empty(db_session, make_user):
    uid = make_user()
    assert task_service.get_my_tasks(db_session, uid) == []


def test_get_my_tasks_filters_and_ordering(db_session, make_user):
    uid = make_user()
    task_service.add_new_task(db_session, _new("Low", priority="LOW", due_date="2024-03-01"), owner_id=uid)
    task_service.add_new_task(db_session, _new("High", priority="HIGH", due_date="2024-01-01"), owner_id=uid)
    task_service.add_new_task(db_session, _new("Mid", priority="MEDIUM", due_date="2024-02-01"), owner_id=uid)

    high_only = task_service.get_my_tasks(db_session, uid, priority="HIGH")
    assert [t.title for t in high_only] == ["High"]

    by_due = task_service.get_my_tasks(db_session, uid, order_by="due_date", order_dir="asc")
    assert [t.title for t in by_due] == ["High", "Mid", "Low"]

    by_priority = task_service.get_my_tasks(db_session, uid, order_by="priority", order_dir="desc")
    assert [t.title for t in by_priority] == ["High", "Mid", "Low"]
