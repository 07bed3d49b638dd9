"""
User endpoints.

- ``/users/me``: any authenticated caller, on their own account.
- ``/api/users``: account management; role requirements live in the
  route policy table.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from swms.api.deps import get_current_user, get_identity_store
from swms.db.identity_store import IdentityStore
from swms.models.user import User
from swms.schemas.user import ProfileUpdate, UserRead, UserUpdate
from swms.services import users as user_service

profile_router = APIRouter(prefix="/users", tags=["profile"])
router = APIRouter(prefix="/api/users", tags=["users"])


@profile_router.get("/me", response_model=UserRead)
async def read_profile(current_user: User = Depends(get_current_user)) -> User:
    """Return profile of the currently authenticated user."""
    return current_user


@profile_router.put("/me", response_model=UserRead)
async def update_profile(
    body: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    store: IdentityStore = Depends(get_identity_store),
) -> User:
    return await user_service.update_profile(store, current_user, body)


@router.get("", response_model=list[UserRead])
async def list_users(store: IdentityStore = Depends(get_identity_store)) -> list[User]:
    return await user_service.list_users(store)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: int, store: IdentityStore = Depends(get_identity_store)) -> User:
    return await user_service.get_user(store, user_id)


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    body: UserUpdate,
    store: IdentityStore = Depends(get_identity_store),
) -> User:
    return await user_service.update_user(store, user_id, body)


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: int,
    store: IdentityStore = Depends(get_identity_store),
) -> Response:
    """Delete an account together with its tasks and attendance."""
    await user_service.delete_user(store, user_id)
    return Response(status_code=204)
