"""
Attendance endpoints.  Any authenticated caller reaches them; the
ownership and staff-only rules are applied inside the attendance service.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from swms.api.deps import get_caller, get_db
from swms.core.policy import Caller
from swms.models.attendance import Attendance
from swms.schemas.attendance import AttendanceCreate, AttendanceRead, AttendanceUpdate
from swms.services import attendance as attendance_service

router = APIRouter(prefix="/api/attendance", tags=["attendance"])


@router.post("", response_model=AttendanceRead, status_code=201)
async def create_record(
    body: AttendanceCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> Attendance:
    """Record attendance; the status is derived from the times when omitted."""
    return await attendance_service.create_record(db, caller, body)


@router.get("", response_model=list[AttendanceRead])
async def list_records(
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> list[Attendance]:
    return await attendance_service.list_records(db, caller)


@router.get("/date/{day}", response_model=list[AttendanceRead])
async def records_for_date(
    day: date,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> list[Attendance]:
    return await attendance_service.records_for_date(db, caller, day)


@router.get("/range", response_model=list[AttendanceRead])
async def records_for_range(
    user_id: int,
    start: date = Query(..., alias="from"),
    end: date = Query(..., alias="to"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> list[Attendance]:
    if end < start:
        raise HTTPException(status_code=422, detail="'to' must not be earlier than 'from'")
    return await attendance_service.records_for_range(db, caller, user_id, start, end)


@router.get("/{record_id}", response_model=AttendanceRead)
async def get_record(
    record_id: int,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> Attendance:
    return await attendance_service.get_record(db, caller, record_id)


@router.put("/{record_id}", response_model=AttendanceRead)
async def update_record(
    record_id: int,
    body: AttendanceUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> Attendance:
    return await attendance_service.update_record(db, caller, record_id, body)


@router.delete("/{record_id}", status_code=204)
async def delete_record(
    record_id: int,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> Response:
    await attendance_service.delete_record(db, caller, record_id)
    return Response(status_code=204)
