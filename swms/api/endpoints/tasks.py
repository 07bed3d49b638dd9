"""
Task endpoints.  The route table restricts create / delete to staff; the
ownership rules are applied inside the task service.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from swms.api.deps import get_caller, get_current_user, get_db
from swms.core.policy import Caller
from swms.models.task import Task
from swms.models.user import User
from swms.schemas.task import TaskCreate, TaskRead, TaskUpdate
from swms.services import tasks as task_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.post("", response_model=TaskRead, status_code=201)
async def create_task(
    body: TaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Task:
    return await task_service.create_task(db, current_user, body)


@router.get("", response_model=list[TaskRead])
async def list_tasks(
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> list[Task]:
    """Staff see every task, employees only those assigned to them."""
    return await task_service.list_tasks(db, caller)


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> Task:
    return await task_service.get_task(db, caller, task_id)


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: int,
    body: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> Task:
    return await task_service.update_task(db, caller, task_id, body)


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> Response:
    await task_service.delete_task(db, caller, task_id)
    return Response(status_code=204)
