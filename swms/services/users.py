"""
User operations — registration, login, profile and account management.
"""

from __future__ import annotations

import logging

from swms.core.exceptions import ConflictError, NotFoundError, UnauthenticatedError
from swms.core.security import TokenCodec, get_password_hash, verify_password
from swms.db.identity_store import IdentityStore
from swms.models.user import User
from swms.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from swms.schemas.user import ProfileUpdate, UserUpdate

logger = logging.getLogger(__name__)


def _auth_response(user: User, codec: TokenCodec) -> AuthResponse:
    return AuthResponse(
        token=codec.issue(user.email, user.role),
        user_id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
    )


async def register(store: IdentityStore, codec: TokenCodec, body: RegisterRequest) -> AuthResponse:
    if await store.find_by_login_key(body.email) is not None:
        raise ConflictError(f"Email already registered: {body.email}")

    user = User(
        name=body.name,
        email=body.email,
        hashed_password=get_password_hash(body.password),
        department=body.department,
        role=body.role,
    )
    await store.save(user)
    logger.info("Registered user %d (%s)", user.id, user.role.value)
    return _auth_response(user, codec)


async def login(store: IdentityStore, codec: TokenCodec, body: LoginRequest) -> AuthResponse:
    user = await store.find_by_login_key(body.email)
    if user is None or not verify_password(body.password, user.hashed_password):
        logger.info("Failed login for %s", body.email)
        raise UnauthenticatedError("Incorrect email or password")
    return _auth_response(user, codec)


async def list_users(store: IdentityStore) -> list[User]:
    return await store.list_all()


async def get_user(store: IdentityStore, user_id: int) -> User:
    user = await store.get(user_id)
    if user is None:
        raise NotFoundError(f"User not found with id: {user_id}")
    return user


async def update_user(store: IdentityStore, user_id: int, body: UserUpdate) -> User:
    user = await get_user(store, user_id)
    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(user, field, value)
    await store.save(user)
    logger.info("Updated user %d", user_id)
    return user


async def update_profile(store: IdentityStore, user: User, body: ProfileUpdate) -> User:
    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(user, field, value)
    return await store.save(user)


async def delete_user(store: IdentityStore, user_id: int) -> None:
    user = await get_user(store, user_id)
    await store.delete(user)
