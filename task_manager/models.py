# PURPOSE: request/response schemas (Pydantic v2).
# Wire format is camelCase (dueDate, isDependent, ...); Python side stays snake_case.

from datetime import date, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Recurrence(str, Enum):
    NONE = "NONE"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class TaskStatus(str, Enum):
    NOT_DONE = "NOT_DONE"
    DONE = "DONE"


class CamelModel(BaseModel):
    """Base schema: accept and emit camelCase keys, allow ORM objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# --- Task schemas ---


class TaskIn(CamelModel):
    """Body shared by /task/new and /task/update/{id}."""

    title: str = Field(min_length=1, max_length=120)
    priority: Priority
    recurrence: Recurrence = Recurrence.NONE
    due_date: date
    is_dependent: bool = False
    prerequisite: int | None = Field(default=None, ge=1)

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "examples": [
                {
                    "title": "Pay rent",
                    "priority": "HIGH",
                    "recurrence": "MONTHLY",
                    "dueDate": "2024-01-31",
                    "isDependent": False,
                },
                {
                    "title": "Deploy release",
                    "priority": "MEDIUM",
                    "recurrence": "NONE",
                    "dueDate": "2024-02-10",
                    "isDependent": True,
                    "prerequisite": 3,
                },
            ]
        },
    )

    @model_validator(mode="after")
    def _prerequisite_required_when_dependent(self) -> "TaskIn":
        if self.is_dependent and self.prerequisite is None:
            raise ValueError("prerequisite is required when isDependent is true")
        return self


class NewTask(TaskIn):
    pass


class UpdateTask(TaskIn):
    pass


class TaskDependency(CamelModel):
    id: int
    dependent_id: int
    prerequisite_id: int


class Task(CamelModel):
    id: int
    title: str
    status: TaskStatus
    due_date: date
    priority: Priority
    recurrence: Recurrence
    next_recurrence: date | None
    active: bool
    created_at: datetime
    updated_at: datetime
    user_id: int
    dependencies: list[TaskDependency] = []


def task_payload(row: Any) -> dict:
    """Serialize an ORM task row to its camelCase JSON shape."""
    return Task.model_validate(row).model_dump(mode="json", by_alias=True)


# --- User / Auth schemas ---


class UserCreate(CamelModel):
    name: str = Field(min_length=1, max_length=120)
    user_name: str = Field(min_length=3, max_length=64)
    # Raw password only in create request
    password: str = Field(min_length=1)


class UserLogin(CamelModel):
    user_name: str
    password: str


class UserPublic(CamelModel):
    id: int
    name: str
    user_name: str


class LoginResult(CamelModel):
    name: str
    user_name: str
    token: str
    token_type: Literal["bearer"] = "bearer"
