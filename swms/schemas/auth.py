"""Pydantic schemas for login, registration and password reset."""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from swms.core.enums import Role
from swms.schemas.user import normalise_email, validate_password


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return normalise_email(v)


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str
    department: str | None = None
    role: Role = Role.EMPLOYEE

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return normalise_email(v)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return validate_password(v)


class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user_id: int
    name: str
    email: str
    role: Role


class ForgotPasswordRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return normalise_email(v)


class ForgotPasswordResponse(BaseModel):
    message: str
    token: str


class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str

    @field_validator("token")
    @classmethod
    def _token(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Reset token is required")
        return v

    @field_validator("new_password")
    @classmethod
    def _password(cls, v: str) -> str:
        return validate_password(v)


class MessageResponse(BaseModel):
    message: str
