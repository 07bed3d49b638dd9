"""
Auth endpoints — registration, login and the password-reset flow.

Every route here is public; the reset token is returned in the response
body because no mail delivery exists.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from swms.api.deps import get_identity_store, get_reset_manager, get_token_codec
from swms.core.exceptions import ConflictError
from swms.core.password_reset import PasswordResetManager, ResetOutcome
from swms.core.security import TokenCodec
from swms.db.identity_store import IdentityStore
from swms.schemas.auth import (AuthResponse, ForgotPasswordRequest,
                               ForgotPasswordResponse, LoginRequest,
                               MessageResponse, RegisterRequest,
                               ResetPasswordRequest)
from swms.services import users as user_service

# Rate limiter — keyed by client IP
limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/auth", tags=["auth"])

_RESET_FAILURES = {
    ResetOutcome.INVALID: "Invalid reset token.",
    ResetOutcome.EXPIRED: "Reset token has expired. Please request a new one.",
}


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    body: RegisterRequest,
    store: IdentityStore = Depends(get_identity_store),
    codec: TokenCodec = Depends(get_token_codec),
) -> AuthResponse:
    """Create an account and return a bearer token for it."""
    return await user_service.register(store, codec, body)


@router.post("/login", response_model=AuthResponse)
@limiter.limit("5/minute")
async def login(
    request: Request,
    body: LoginRequest,
    store: IdentityStore = Depends(get_identity_store),
    codec: TokenCodec = Depends(get_token_codec),
) -> AuthResponse:
    """Authenticate with email / password."""
    return await user_service.login(store, codec, body)


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
@limiter.limit("5/minute")
async def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    store: IdentityStore = Depends(get_identity_store),
    manager: PasswordResetManager = Depends(get_reset_manager),
) -> ForgotPasswordResponse:
    token = await manager.request(store, body.email)
    minutes = int(manager.ttl.total_seconds() // 60)
    return ForgotPasswordResponse(
        message=f"Reset token generated. Use it within {minutes} minutes.",
        token=token,
    )


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    body: ResetPasswordRequest,
    store: IdentityStore = Depends(get_identity_store),
    manager: PasswordResetManager = Depends(get_reset_manager),
) -> MessageResponse:
    outcome = await manager.consume(store, body.token, body.new_password)
    if outcome is not ResetOutcome.SUCCESS:
        raise ConflictError(_RESET_FAILURES[outcome])
    return MessageResponse(message="Password reset successfully. You can now log in.")
