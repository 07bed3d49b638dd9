"""
Task model — work items assigned by staff to users.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from swms.core.enums import TaskStatus
from swms.db.base import Base


class Task(Base):
    __tablename__ = "tasks"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    title: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    description: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    status: TaskStatus = Column(  # type: ignore[assignment]
        Enum(TaskStatus, native_enum=False, length=20, validate_strings=True),
        nullable=False,
        default=TaskStatus.TODO,
    )
    assigned_to_id: int | None = Column(  # type: ignore[assignment]
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    created_by_id: int | None = Column(  # type: ignore[assignment]
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    deadline: date | None = Column(Date, nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    assignee = relationship("User", foreign_keys=[assigned_to_id], lazy="joined")
    creator = relationship("User", foreign_keys=[created_by_id], lazy="joined")

    @property
    def assigned_to_name(self) -> str | None:
        return self.assignee.name if self.assignee is not None else None

    @property
    def created_by_name(self) -> str | None:
        return self.creator.name if self.creator is not None else None
