# PURPOSE: /task/new, /task/update/{id}, /task/delete/{id}, /task/my
# Thin adapter: resolve the caller, call the task service, wrap the outcome
# in the response envelope. Unexpected errors reach the global 500 handler.

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..api.deps import OrderBy, OrderDir, parse_order_by, parse_order_dir, parse_priority, parse_status
from ..api.responses import failure_response, success_response
from ..auth import get_current_user
from ..models import NewTask, UpdateTask, UserPublic, task_payload
from ..services import task_service
from ..store_db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/task", tags=["tasks"])


@router.post("/new")
def add_new_task(
    item: NewTask,
    db: Session = Depends(get_db),
    user: UserPublic = Depends(get_current_user),
):
    result = task_service.add_new_task(db, item, owner_id=user.id)
    if not result.ok:
        logger.error("Error at /task/new : %s", result.message)
        return failure_response(result)
    return success_response("Successfully new task added", {"newTask": task_payload(result.value)})


@router.patch("/update/{task_id}")
def update_task(
    task_id: int,
    item: UpdateTask,
    db: Session = Depends(get_db),
    user: UserPublic = Depends(get_current_user),
):
    result = task_service.update_task(db, task_id, item, owner_id=user.id)
    if not result.ok:
        logger.error("Error at /task/update/%s: %s", task_id, result.message)
        return failure_response(result)
    return success_response(
        f"Successfully updated task id {task_id}",
        {"updatedTask": task_payload(result.value)},
    )


@router.delete("/delete/{task_id}")
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    user: UserPublic = Depends(get_current_user),
):
    result = task_service.delete_task(db, task_id, owner_id=user.id)
    if not result.ok:
        logger.error("Error at /task/delete/%s: %s", task_id, result.message)
        return failure_response(result)
    return success_response("Successfully deleted the task")


@router.get("/my")
def get_my_tasks(
    status: Optional[str] = Depends(parse_status),
    priority: Optional[str] = Depends(parse_priority),
    order_by: OrderBy = Depends(parse_order_by),
    order_dir: OrderDir = Depends(parse_order_dir),
    db: Session = Depends(get_db),
    user: UserPublic = Depends(get_current_user),
):
    tasks = task_service.get_my_tasks(
        db,
        user.id,
        status=status,
        priority=priority,
        order_by=order_by,
        order_dir=order_dir,
    )
    return success_response(
        "Successfully retrieved all tasks",
        {"tasks": [task_payload(t) for t in tasks]},
    )
