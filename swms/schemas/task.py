"""Pydantic schemas for Task CRUD."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, field_validator

from swms.core.enums import TaskStatus


class TaskCreate(BaseModel):
    title: str
    description: str | None = None
    status: TaskStatus | None = None
    assigned_to_id: int
    deadline: date | None = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        if len(v) > 200:
            raise ValueError("Title must not exceed 200 characters")
        return v


class TaskUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    assigned_to_id: int | None = None
    deadline: date | None = None


class TaskRead(BaseModel):
    id: int
    title: str
    description: str | None
    status: TaskStatus
    assigned_to_id: int | None
    assigned_to_name: str | None = None
    created_by_id: int | None
    created_by_name: str | None = None
    deadline: date | None
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {"from_attributes": True}
