"""Pydantic schemas for User CRUD."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

from swms.core.enums import Role

MIN_PASSWORD_LENGTH = 6


def normalise_email(v: str) -> str:
    v = v.strip().lower()
    if "@" not in v or v.startswith("@") or v.endswith("@"):
        raise ValueError("Invalid email address")
    return v


def validate_password(v: str) -> str:
    if len(v) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return v


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    department: str | None
    role: Role
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    """Admin / manager update of another account."""

    name: str | None = None
    department: str | None = None
    role: Role | None = None


class ProfileUpdate(BaseModel):
    """Self-service update; role is deliberately absent."""

    name: str | None = None
    department: str | None = None
