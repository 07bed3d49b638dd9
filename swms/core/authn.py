"""
Request authentication — turns an ``Authorization`` header into an identity.

Failure never rejects the request here: an absent, malformed or invalid
credential simply yields an anonymous request, and the route layer decides
whether the route needs an identity.
"""

from __future__ import annotations

from dataclasses import dataclass

from swms.core.enums import Role
from swms.core.security import TokenCodec

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class Identity:
    """Authenticated caller for the lifetime of one request.

    ``role`` comes from the token claim and is not re-read from the store,
    so a role change only takes effect once the caller's token is re-issued.
    """

    subject: str
    role: Role


def authenticate_request(header_value: str | None, codec: TokenCodec) -> Identity | None:
    if not header_value or not header_value.startswith(BEARER_PREFIX):
        return None

    claims = codec.verify(header_value[len(BEARER_PREFIX):])
    if claims is None:
        return None
    return Identity(subject=claims.subject, role=claims.role)
