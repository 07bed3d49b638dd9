"""
FastAPI dependencies — database session, core components and the caller.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from swms.core.authn import Identity
from swms.core.exceptions import UnauthenticatedError
from swms.core.password_reset import PasswordResetManager
from swms.core.policy import Caller
from swms.core.security import TokenCodec
from swms.db.identity_store import IdentityStore
from swms.db.session import async_session_factory
from swms.models.user import User
from swms.services.access import load_caller


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_identity_store(db: AsyncSession = Depends(get_db)) -> IdentityStore:
    return IdentityStore(db)


# ── Core components (built once in create_app) ──────────────────────
def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_reset_manager(request: Request) -> PasswordResetManager:
    return request.app.state.reset_manager


# ── Auth dependencies ───────────────────────────────────────────────
def get_identity(request: Request) -> Identity:
    """Identity established by the gate middleware for this request."""
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise UnauthenticatedError("Not authenticated")
    return identity


async def get_current_user(
    identity: Identity = Depends(get_identity),
    store: IdentityStore = Depends(get_identity_store),
) -> User:
    user, _caller = await load_caller(store, identity)
    return user


async def get_caller(
    identity: Identity = Depends(get_identity),
    user: User = Depends(get_current_user),
) -> Caller:
    return Caller(user_id=user.id, role=identity.role)
