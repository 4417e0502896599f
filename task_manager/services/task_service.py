"""Task operations: create, update, soft-delete and list a user's tasks.

A task has at most one dependency edge (it waits on a single prerequisite).
The task write and the edge write of one operation are committed together;
on any failure the session is rolled back and the error propagates, except
for store uniqueness violations which come back as CONFLICT results.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import store_db
from ..db_models import TaskDB
from ..models import NewTask, TaskIn, TaskStatus, UpdateTask
from ..recurrence import calculate_next_recurrence
from ..results import ServiceResult

logger = logging.getLogger(__name__)


@contextmanager
def _transaction(db: Session) -> Iterator[None]:
    try:
        yield
        db.commit()
    except Exception:
        db.rollback()
        raise


def _task_fields(data: TaskIn) -> dict:
    """Column values derived from a task body, including nextRecurrence."""
    return {
        "title": data.title,
        "priority": data.priority.value,
        "recurrence": data.recurrence.value,
        "due_date": data.due_date,
        "next_recurrence": calculate_next_recurrence(data.recurrence, data.due_date),
    }


def _find_mutable_task(db: Session, task_id: int, owner_id: int, *, with_dependencies: bool = False) -> Optional[TaskDB]:
    # Only the owner's active, not yet done tasks can be changed.
    return store_db.find_task(
        db,
        task_id,
        owner_id=owner_id,
        active=True,
        status=TaskStatus.NOT_DONE.value,
        with_dependencies=with_dependencies,
    )


def _check_prerequisite(db: Session, data: TaskIn, owner_id: int) -> Optional[ServiceResult]:
    if not data.is_dependent:
        return None
    prerequisite = store_db.find_task(db, data.prerequisite, owner_id=owner_id, active=True)
    if prerequisite is None:
        return ServiceResult.not_found(f"Prerequisite task with id {data.prerequisite} not found")
    return None


def add_new_task(db: Session, data: NewTask, owner_id: int) -> ServiceResult[TaskDB]:
    """Create a task for `owner_id`, plus its dependency edge when `is_dependent`."""
    failed = _check_prerequisite(db, data, owner_id)
    if failed is not None:
        return failed

    try:
        with _transaction(db):
            row = store_db.create_task(db, _task_fields(data), owner_id=owner_id)
            if data.is_dependent:
                store_db.create_dependency(db, dependent_id=row.id, prerequisite_id=data.prerequisite)
    except IntegrityError as exc:
        logger.warning("task create conflict owner_id=%s: %s", owner_id, exc.orig)
        return ServiceResult.conflict("Task conflicts with existing data")

    db.refresh(row)
    logger.info("task created id=%s owner_id=%s dependent=%s", row.id, owner_id, data.is_dependent)
    return ServiceResult.success(row)


def update_task(db: Session, task_id: int, data: UpdateTask, owner_id: int) -> ServiceResult[TaskDB]:
    """Replace a task's fields and reconcile its single dependency edge.

    With `is_dependent` the existing edge is pointed at the new prerequisite
    (or one is created); without it any existing edge is removed.
    """
    task = _find_mutable_task(db, task_id, owner_id, with_dependencies=True)
    if task is None:
        return ServiceResult.not_found(f"Task with id {task_id} not found")

    if data.is_dependent and data.prerequisite == task.id:
        return ServiceResult.conflict("A task cannot depend on itself")
    failed = _check_prerequisite(db, data, owner_id)
    if failed is not None:
        return failed

    edge = task.dependencies[0] if task.dependencies else None
    try:
        with _transaction(db):
            store_db.update_task(db, task, _task_fields(data))
            if data.is_dependent:
                if edge is None:
                    store_db.create_dependency(db, dependent_id=task.id, prerequisite_id=data.prerequisite)
                elif edge.prerequisite_id != data.prerequisite:
                    store_db.update_dependency(db, edge, prerequisite_id=data.prerequisite)
            elif edge is not None:
                store_db.delete_dependency(db, edge)
    except IntegrityError as exc:
        logger.warning("task update conflict id=%s owner_id=%s: %s", task_id, owner_id, exc.orig)
        return ServiceResult.conflict(f"Task with id {task_id} conflicts with existing data")

    db.refresh(task)
    logger.info("task updated id=%s owner_id=%s", task_id, owner_id)
    return ServiceResult.success(task)


def delete_task(db: Session, task_id: int, owner_id: int) -> ServiceResult[bool]:
    """Soft delete: flip `active` off. Deleted tasks are invisible to every filter here."""
    task = _find_mutable_task(db, task_id, owner_id)
    if task is None:
        return ServiceResult.not_found(f"Task with id {task_id} not found")

    with _transaction(db):
        store_db.update_task(db, task, {"active": False})

    logger.info("task deleted id=%s owner_id=%s", task_id, owner_id)
    return ServiceResult.success(True)


def get_my_tasks(
    db: Session,
    owner_id: int,
    *,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    order_by: str = "created_at",
    order_dir: str = "desc",
) -> List[TaskDB]:
    return store_db.list_tasks(
        db,
        owner_id=owner_id,
        active=True,
        status=status,
        priority=priority,
        order_by=order_by,
        order_dir=order_dir,
    )
