# PURPOSE: define how users, tasks and task dependencies look in the database.

from datetime import UTC, date, datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


def now_utc():
    """Return timezone-aware UTC datetime (stored in DB)."""
    return datetime.now(UTC)


class UserDB(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    user_name: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc)

    tasks: Mapped[list["TaskDB"]] = relationship(back_populates="owner")


class TaskDB(Base):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, default="NOT_DONE")  # NOT_DONE | DONE
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    priority: Mapped[str] = mapped_column(String, default="LOW")  # LOW | MEDIUM | HIGH
    recurrence: Mapped[str] = mapped_column(String, default="NONE")
    next_recurrence: Mapped[date | None] = mapped_column(Date, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    owner: Mapped[UserDB] = relationship(back_populates="tasks")
    # Edge where this task is the dependent; at most one row (see TaskDependencyDB).
    dependencies: Mapped[list["TaskDependencyDB"]] = relationship(
        foreign_keys="TaskDependencyDB.dependent_id",
        back_populates="dependent",
        cascade="all, delete-orphan",
        order_by="TaskDependencyDB.id",
    )


class TaskDependencyDB(Base):
    __tablename__ = "task_dependencies"
    __table_args__ = (
        UniqueConstraint("dependent_id", name="ux_task_dependencies_dependent"),
        CheckConstraint("dependent_id != prerequisite_id", name="ck_task_dependencies_no_self"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    dependent_id: Mapped[int] = mapped_column(Integer, ForeignKey("tasks.id"), nullable=False)
    prerequisite_id: Mapped[int] = mapped_column(Integer, ForeignKey("tasks.id"), nullable=False)

    dependent: Mapped[TaskDB] = relationship(foreign_keys=[dependent_id], back_populates="dependencies")
    prerequisite: Mapped[TaskDB] = relationship(foreign_keys=[prerequisite_id])


# Helpful indexes for filtering/sorting
Index("ix_tasks_user_active", TaskDB.user_id, TaskDB.active)
Index("ix_tasks_status", TaskDB.status)
Index("ix_tasks_priority", TaskDB.priority)
Index("ix_tasks_due_date", TaskDB.due_date)
Index("ix_task_dependencies_prerequisite", TaskDependencyDB.prerequisite_id)
