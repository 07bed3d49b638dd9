"""
Password-reset credential lifecycle.

Per identity the credential is either absent or pending.  ``request``
always moves to pending (overwriting an older token), ``consume`` moves a
pending, unexpired token back to absent while setting the new password.
The token is handed back to the caller directly; there is no mail delivery.
"""

from __future__ import annotations

import logging
import secrets
from datetime import timedelta, timezone
from enum import Enum
from typing import TYPE_CHECKING

from swms.core.exceptions import NotFoundError
from swms.core.security import Clock, get_password_hash, utcnow

if TYPE_CHECKING:
    from swms.db.identity_store import IdentityStore

logger = logging.getLogger(__name__)


class ResetOutcome(str, Enum):
    SUCCESS = "success"
    INVALID = "invalid"
    EXPIRED = "expired"


class PasswordResetManager:
    def __init__(self, ttl: timedelta = timedelta(minutes=15), clock: Clock = utcnow) -> None:
        self._ttl = ttl
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    async def request(self, store: IdentityStore, login_key: str) -> str:
        user = await store.find_by_login_key(login_key)
        if user is None:
            raise NotFoundError(f"No account found with email: {login_key}")

        token = secrets.token_urlsafe(32)
        user.reset_token = token
        user.reset_token_expires_at = self._clock() + self._ttl
        await store.save(user)
        logger.info("Password reset requested for user %d", user.id)
        return token

    async def consume(self, store: IdentityStore, token: str, new_password: str) -> ResetOutcome:
        user = await store.find_by_reset_token(token)
        if user is None:
            return ResetOutcome.INVALID

        expires_at = user.reset_token_expires_at
        if expires_at is not None and expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at is None or self._clock() > expires_at:
            logger.info("Expired reset token presented for user %d", user.id)
            return ResetOutcome.EXPIRED

        user.hashed_password = get_password_hash(new_password)
        user.reset_token = None
        user.reset_token_expires_at = None
        await store.save(user)
        logger.info("Password reset completed for user %d", user.id)
        return ResetOutcome.SUCCESS
