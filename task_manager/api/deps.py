from typing import Literal

from fastapi import HTTPException, Query

from ..models import Priority, TaskStatus

# Shared order types
OrderBy = Literal["created_at", "due_date", "priority", "status"]
OrderDir = Literal["asc", "desc"]

_ORDER_BY_VALUES = ("created_at", "due_date", "priority", "status")


def _literal_error(field: str, msg: str, value: str) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail=[
            {
                "type": "literal_error",
                "loc": ["query", field],
                "msg": msg,
                "input": value,
            }
        ],
    )


def parse_status(status: str | None = Query(None)) -> str | None:
    if status is None or status == "":
        return None
    if status in TaskStatus.__members__:
        return status
    raise _literal_error("status", "status must be one of: NOT_DONE, DONE", status)


def parse_priority(priority: str | None = Query(None)) -> str | None:
    if priority is None or priority == "":
        return None
    if priority in Priority.__members__:
        return priority
    raise _literal_error("priority", "priority must be one of: LOW, MEDIUM, HIGH", priority)


def parse_order_by(order_by: str | None = Query(None)) -> OrderBy:
    if not order_by:
        return "created_at"
    if order_by in _ORDER_BY_VALUES:
        return order_by  # type: ignore[return-value]
    raise _literal_error("order_by", "order_by must be one of: created_at, due_date, priority, status", order_by)


def parse_order_dir(order_dir: str | None = Query(None)) -> OrderDir:
    if not order_dir:
        return "desc"
    if order_dir in ("asc", "desc"):
        return order_dir  # type: ignore[return-value]
    raise _literal_error("order_dir", "order_dir must be 'asc' or 'desc'", order_dir)
