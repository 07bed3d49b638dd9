"""
Attendance model — one record per user per calendar day.
"""

from __future__ import annotations

import datetime as dt

from sqlalchemy import Column, Date, Enum, ForeignKey, Index, Integer, String, Time, UniqueConstraint
from sqlalchemy.orm import relationship

from swms.core.enums import AttendanceStatus
from swms.db.base import Base


class Attendance(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_attendance_user_date"),
        Index("ix_attendance_user_date", "user_id", "date"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    date: dt.date = Column(Date, nullable=False, index=True)  # type: ignore[assignment]
    check_in: dt.time | None = Column(Time, nullable=True)  # type: ignore[assignment]
    check_out: dt.time | None = Column(Time, nullable=True)  # type: ignore[assignment]
    status: AttendanceStatus = Column(  # type: ignore[assignment]
        Enum(AttendanceStatus, native_enum=False, length=20, validate_strings=True),
        nullable=False,
        default=AttendanceStatus.ABSENT,
    )
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]

    user = relationship("User", lazy="joined")

    @property
    def user_name(self) -> str | None:
        return self.user.name if self.user is not None else None
