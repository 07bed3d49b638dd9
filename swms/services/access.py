"""
Glue between request identities and the resource-level policy.
"""

from __future__ import annotations

from swms.core.authn import Identity
from swms.core.exceptions import ForbiddenError, NotFoundError, UnauthenticatedError
from swms.core.policy import Caller, Decision
from swms.db.identity_store import IdentityStore
from swms.models.user import User


async def load_caller(store: IdentityStore, identity: Identity | None) -> tuple[User, Caller]:
    """Resolve the token subject to a stored user.

    The role is taken from the token, not from the stored row.
    """
    if identity is None:
        raise UnauthenticatedError("Not authenticated")
    user = await store.find_by_login_key(identity.subject)
    if user is None:
        raise NotFoundError(f"User not found: {identity.subject}")
    return user, Caller(user_id=user.id, role=identity.role)


def ensure_allowed(decision: Decision, detail: str) -> None:
    if decision is not Decision.ALLOW:
        raise ForbiddenError(detail)
