"""
JWT token creation / verification and password hashing (bcrypt).
"""

from __future__ import annotations

import binascii
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

from jose import JWTError, jwt
from jose.exceptions import JWTClaimsError
from jose.utils import base64url_decode, base64url_encode
from passlib.context import CryptContext

from swms.core.enums import Role

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Passwords ───────────────────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def get_password_hash(plain: str) -> str:
    return pwd_context.hash(plain)


# ── JWT tokens ──────────────────────────────────────────────────────
@dataclass(frozen=True)
class TokenClaims:
    subject: str
    role: Role
    issued_at: datetime
    expires_at: datetime


class TokenRejection(str, Enum):
    """Why a token failed verification. Logged only, never returned."""

    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad signature"
    INVALID_CLAIMS = "invalid claims"
    EXPIRED = "expired"


class _Rejected(Exception):
    def __init__(self, reason: TokenRejection) -> None:
        super().__init__(reason.value)
        self.reason = reason


def _is_canonical_segment(segment: str) -> bool:
    raw = segment.encode("ascii", errors="strict")
    try:
        return base64url_encode(base64url_decode(raw)) == raw
    except (binascii.Error, ValueError):
        return False


class TokenCodec:
    """Issues and verifies self-contained HS256 bearer tokens.

    The codec is built once from the frozen settings and shared read-only
    by every request.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=24),
        clock: Clock = utcnow,
    ) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret = secret_key
        self._algorithm = algorithm
        self._lifetime = lifetime
        self._clock = clock

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def issue(self, subject: str, role: Role) -> str:
        now = self._clock()
        return jwt.encode(
            {
                "sub": subject,
                "role": Role(role).value,
                "iat": int(now.timestamp()),
                "exp": int((now + self._lifetime).timestamp()),
            },
            self._secret,
            algorithm=self._algorithm,
        )

    def verify(self, token: str) -> TokenClaims | None:
        """Return the claims of a valid token, else ``None``."""
        try:
            return self._decode(token)
        except _Rejected as exc:
            logger.debug("Rejected bearer token: %s", exc.reason.value)
            return None

    def _decode(self, token: str) -> TokenClaims:
        segments = token.split(".")
        if len(segments) != 3 or not all(segments[:2]):
            raise _Rejected(TokenRejection.MALFORMED)
        try:
            if not all(_is_canonical_segment(s) for s in segments):
                raise _Rejected(TokenRejection.MALFORMED)
            jwt.get_unverified_header(token)
        except (JWTError, UnicodeEncodeError):
            raise _Rejected(TokenRejection.MALFORMED) from None

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                # expiry is checked against the injected clock below
                options={"verify_exp": False, "require_sub": True},
            )
        except JWTClaimsError:
            raise _Rejected(TokenRejection.INVALID_CLAIMS) from None
        except JWTError:
            raise _Rejected(TokenRejection.BAD_SIGNATURE) from None

        try:
            role = Role(payload.get("role"))
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (KeyError, TypeError, ValueError, OverflowError, OSError):
            raise _Rejected(TokenRejection.INVALID_CLAIMS) from None

        if self._clock() > expires_at:
            raise _Rejected(TokenRejection.EXPIRED)

        return TokenClaims(
            subject=payload["sub"],
            role=role,
            issued_at=issued_at,
            expires_at=expires_at,
        )
