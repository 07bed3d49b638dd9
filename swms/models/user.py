"""
User model — identity, credentials & role-based access control.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, Integer, String

from swms.core.enums import Role
from swms.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    email: str = Column(String(320), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    department: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    hashed_password: str = Column(String(128), nullable=False)  # type: ignore[assignment]
    role: Role = Column(  # type: ignore[assignment]
        Enum(Role, native_enum=False, length=20, validate_strings=True),
        nullable=False,
        default=Role.EMPLOYEE,
    )
    # One outstanding reset credential at most; a new request overwrites it.
    reset_token: str | None = Column(String(128), unique=True, nullable=True)  # type: ignore[assignment]
    reset_token_expires_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
