"""
Task operations.  Each one applies the resource-level policy before it
touches the store.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from swms.core.enums import TaskStatus
from swms.core.exceptions import NotFoundError
from swms.core.policy import (Caller, ResourceAction, ResourceRef,
                              authorize_resource, list_scope)
from swms.db.identity_store import IdentityStore
from swms.models.task import Task
from swms.models.user import User
from swms.schemas.task import TaskCreate, TaskUpdate
from swms.services.access import ensure_allowed

logger = logging.getLogger(__name__)


def task_ref(task: Task) -> ResourceRef:
    return ResourceRef(owner_id=task.assigned_to_id, creator_id=task.created_by_id)


async def _find_task(db: AsyncSession, task_id: int) -> Task:
    task = await db.get(Task, task_id)
    if task is None:
        raise NotFoundError(f"Task not found: {task_id}")
    return task


async def _find_assignee(store: IdentityStore, user_id: int) -> User:
    user = await store.get(user_id)
    if user is None:
        raise NotFoundError(f"User not found with id: {user_id}")
    return user


async def create_task(db: AsyncSession, creator: User, body: TaskCreate) -> Task:
    assignee = await _find_assignee(IdentityStore(db), body.assigned_to_id)
    task = Task(
        title=body.title,
        description=body.description,
        status=body.status or TaskStatus.TODO,
        assigned_to_id=assignee.id,
        created_by_id=creator.id,
        deadline=body.deadline,
    )
    db.add(task)
    await db.commit()
    await db.refresh(task)
    logger.info("Task %d created by user %d for user %d", task.id, creator.id, assignee.id)
    return task


async def list_tasks(db: AsyncSession, caller: Caller) -> list[Task]:
    query = select(Task).order_by(Task.id)
    owner_id = list_scope(caller)
    if owner_id is not None:
        query = query.where(Task.assigned_to_id == owner_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_task(db: AsyncSession, caller: Caller, task_id: int) -> Task:
    task = await _find_task(db, task_id)
    ensure_allowed(
        authorize_resource(ResourceAction.TASK_READ, caller, task_ref(task)),
        "You do not have access to this task.",
    )
    return task


async def update_task(db: AsyncSession, caller: Caller, task_id: int, body: TaskUpdate) -> Task:
    task = await _find_task(db, task_id)
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    ensure_allowed(
        authorize_resource(ResourceAction.TASK_UPDATE, caller, task_ref(task), changes),
        "You can only update the status of tasks assigned to you.",
    )

    if "assigned_to_id" in changes:
        await _find_assignee(IdentityStore(db), changes["assigned_to_id"])
    for field, value in changes.items():
        setattr(task, field, value)

    await db.commit()
    await db.refresh(task)
    logger.info("Task %d updated by user %d (%s)", task_id, caller.user_id, ", ".join(changes))
    return task


async def delete_task(db: AsyncSession, caller: Caller, task_id: int) -> None:
    task = await _find_task(db, task_id)
    ensure_allowed(
        authorize_resource(ResourceAction.TASK_DELETE, caller, task_ref(task)),
        "Only the creator or an admin can delete this task.",
    )
    await db.delete(task)
    await db.commit()
    logger.info("Task %d deleted by user %d", task_id, caller.user_id)
