"""Pydantic schemas for attendance records."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field, model_validator

from swms.core.enums import AttendanceStatus


class AttendanceCreate(BaseModel):
    user_id: int
    date: dt.date
    check_in: dt.time | None = None
    check_out: dt.time | None = None
    status: AttendanceStatus | None = None  # derived from the times when omitted
    notes: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _times_ordered(self) -> "AttendanceCreate":
        if self.check_in and self.check_out and self.check_out < self.check_in:
            raise ValueError("check_out must not be earlier than check_in")
        return self


class AttendanceUpdate(BaseModel):
    check_in: dt.time | None = None
    check_out: dt.time | None = None
    status: AttendanceStatus | None = None
    notes: str | None = Field(default=None, max_length=500)


class AttendanceRead(BaseModel):
    id: int
    user_id: int
    user_name: str | None = None  # joined from users table
    date: dt.date
    check_in: dt.time | None
    check_out: dt.time | None
    status: AttendanceStatus
    notes: str | None = None

    model_config = {"from_attributes": True}
