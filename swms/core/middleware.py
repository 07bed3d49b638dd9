"""
Authentication gate — runs once per request, before routing.

1. Resolve the bearer credential into an :class:`Identity` (or none).
2. Store it on ``request.state.identity`` for the handlers.
3. Apply the route-level policy; a denied request never reaches a handler.
"""

from __future__ import annotations

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from swms.core.authn import authenticate_request
from swms.core.exceptions import ErrorKind, error_response
from swms.core.policy import Decision, authorize_route
from swms.core.security import TokenCodec

logger = logging.getLogger(__name__)


class AuthGateMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, codec: TokenCodec) -> None:
        super().__init__(app)
        self.codec = codec

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        identity = authenticate_request(request.headers.get("Authorization"), self.codec)
        request.state.identity = identity

        decision = authorize_route(request.method, request.url.path, identity)
        if decision is Decision.UNAUTHENTICATED:
            return error_response(ErrorKind.UNAUTHENTICATED, "Not authenticated")
        if decision is Decision.FORBIDDEN:
            logger.info(
                "Route denied: %s %s for %s (%s)",
                request.method,
                request.url.path,
                identity.subject if identity else "-",
                identity.role.value if identity else "-",
            )
            return error_response(ErrorKind.FORBIDDEN, "Insufficient role for this route")

        return await call_next(request)
