"""
Identity store — the only place that reads or writes ``users`` rows.

Lookups return ``None`` when nothing matches; callers decide whether that is
a NotFound, an invalid credential, or something else.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from swms.models.attendance import Attendance
from swms.models.task import Task
from swms.models.user import User

logger = logging.getLogger(__name__)


def normalise_login_key(email: str) -> str:
    return email.strip().lower()


class IdentityStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: int) -> User | None:
        return await self.session.get(User, user_id)

    async def find_by_login_key(self, email: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.email == normalise_login_key(email))
        )
        return result.scalar_one_or_none()

    async def find_by_reset_token(self, token: str) -> User | None:
        if not token:
            return None
        result = await self.session.execute(select(User).where(User.reset_token == token))
        return result.scalar_one_or_none()

    async def list_all(self) -> list[User]:
        result = await self.session.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def save(self, user: User) -> User:
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def delete(self, user: User) -> None:
        """Delete *user* together with its attendance and related tasks."""
        await self.session.execute(delete(Attendance).where(Attendance.user_id == user.id))
        await self.session.execute(
            delete(Task).where(or_(Task.assigned_to_id == user.id, Task.created_by_id == user.id))
        )
        await self.session.delete(user)
        await self.session.commit()
        logger.info("Deleted user %d with owned attendance and tasks", user.id)
