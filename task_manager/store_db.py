# PURPOSE: data-store functions for tasks, dependency edges and users.
# Functions stage changes with flush(); committing is left to the caller so a
# task write and its dependency write can share one transaction.

from __future__ import annotations

from typing import Any, List, Optional

from sqlalchemy import case
from sqlalchemy.orm import Session, selectinload

from .db_models import TaskDB, TaskDependencyDB, UserDB, now_utc


# --- Session dependency ----------------------------------------------------


def get_db():
    """Yield a SQLAlchemy session (used as a FastAPI dependency)."""
    from .db import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# --- Helpers ---------------------------------------------------------------


def _apply_task_filters(
    query,
    *,
    task_id: Optional[int] = None,
    owner_id: Optional[int] = None,
    active: Optional[bool] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
):
    """Apply shared filters to a TaskDB query; None means 'no filter'."""
    if task_id is not None:
        query = query.filter(TaskDB.id == task_id)
    if owner_id is not None:
        query = query.filter(TaskDB.user_id == owner_id)
    if active is not None:
        query = query.filter(TaskDB.active == active)
    if status:
        query = query.filter(TaskDB.status == status)
    if priority:
        query = query.filter(TaskDB.priority == priority)
    return query


def _apply_ordering(query, *, order_by: str, order_dir: str):
    """
    Apply ordering with a safe allow-list of columns.
    Allowed: created_at, due_date, priority, status (fallback to created_at).
    Includes stable secondary ordering for deterministic results.
    """
    if order_by == "priority":
        primary: Any = case(
            (TaskDB.priority == "LOW", 0),
            (TaskDB.priority == "MEDIUM", 1),
            (TaskDB.priority == "HIGH", 2),
            else_=0,
        )
    elif order_by == "status":
        primary = case(
            (TaskDB.status == "NOT_DONE", 0),
            (TaskDB.status == "DONE", 1),
            else_=0,
        )
    elif order_by == "due_date":
        primary = TaskDB.due_date
    else:
        primary = TaskDB.created_at

    if order_dir == "asc":
        return query.order_by(primary.asc(), TaskDB.id.asc())
    return query.order_by(primary.desc(), TaskDB.id.desc())


# --- Tasks -----------------------------------------------------------------


def find_task(
    db: Session,
    task_id: int,
    *,
    owner_id: Optional[int] = None,
    active: Optional[bool] = None,
    status: Optional[str] = None,
    with_dependencies: bool = False,
) -> Optional[TaskDB]:
    """Fetch a single task matching every given filter, or None."""
    query = db.query(TaskDB)
    if with_dependencies:
        query = query.options(selectinload(TaskDB.dependencies))
    query = _apply_task_filters(query, task_id=task_id, owner_id=owner_id, active=active, status=status)
    return query.one_or_none()


def list_tasks(
    db: Session,
    *,
    owner_id: Optional[int] = None,
    active: Optional[bool] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    order_by: str = "created_at",
    order_dir: str = "desc",
) -> List[TaskDB]:
    """Return tasks with filters and ordering applied, dependency edges preloaded."""
    query = db.query(TaskDB).options(selectinload(TaskDB.dependencies))
    query = _apply_task_filters(query, owner_id=owner_id, active=active, status=status, priority=priority)
    query = _apply_ordering(query, order_by=order_by, order_dir=order_dir)
    return query.all()


def create_task(db: Session, fields: dict, *, owner_id: int) -> TaskDB:
    """Stage a new task row for `owner_id`; id is available after flush."""
    now = now_utc()
    row = TaskDB(
        **fields,
        user_id=owner_id,
        status="NOT_DONE",
        active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(row)
    db.flush()
    return row


def update_task(db: Session, row: TaskDB, fields: dict) -> TaskDB:
    """Apply `fields` to an already loaded task row."""
    for name, value in fields.items():
        setattr(row, name, value)
    row.updated_at = now_utc()
    db.add(row)
    db.flush()
    return row


# --- Dependency edges ------------------------------------------------------


def create_dependency(db: Session, *, dependent_id: int, prerequisite_id: int) -> TaskDependencyDB:
    edge = TaskDependencyDB(dependent_id=dependent_id, prerequisite_id=prerequisite_id)
    db.add(edge)
    db.flush()
    return edge


def update_dependency(db: Session, edge: TaskDependencyDB, *, prerequisite_id: int) -> TaskDependencyDB:
    edge.prerequisite_id = prerequisite_id
    db.add(edge)
    db.flush()
    return edge


def delete_dependency(db: Session, edge: TaskDependencyDB) -> None:
    db.delete(edge)
    db.flush()


# --- Users -----------------------------------------------------------------


def get_user(db: Session, user_id: int) -> Optional[UserDB]:
    return db.get(UserDB, user_id)


def find_user_by_user_name(db: Session, user_name: str) -> Optional[UserDB]:
    return db.query(UserDB).filter(UserDB.user_name == user_name).one_or_none()


def create_user(db: Session, *, name: str, user_name: str, password_hash: str) -> UserDB:
    row = UserDB(name=name, user_name=user_name, password_hash=password_hash, created_at=now_utc())
    db.add(row)
    db.flush()
    return row
