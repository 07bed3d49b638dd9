"""
Attendance operations.  Each one applies the resource-level policy before
it touches the store; the status is derived unless the caller declares it.
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from swms.core.attendance_status import resolve_attendance_status
from swms.core.exceptions import ConflictError, NotFoundError
from swms.core.policy import (Caller, ResourceAction, ResourceRef,
                              authorize_resource, list_scope)
from swms.db.identity_store import IdentityStore
from swms.models.attendance import Attendance
from swms.schemas.attendance import AttendanceCreate, AttendanceUpdate
from swms.services.access import ensure_allowed

logger = logging.getLogger(__name__)

_REPORT_DENIED = "Only admins and managers can view attendance reports."


def attendance_ref(record: Attendance) -> ResourceRef:
    return ResourceRef(owner_id=record.user_id)


async def _find_record(db: AsyncSession, record_id: int) -> Attendance:
    record = await db.get(Attendance, record_id)
    if record is None:
        raise NotFoundError(f"Attendance record not found: {record_id}")
    return record


async def create_record(db: AsyncSession, caller: Caller, body: AttendanceCreate) -> Attendance:
    target = await IdentityStore(db).get(body.user_id)
    if target is None:
        raise NotFoundError(f"User not found with id: {body.user_id}")
    ensure_allowed(
        authorize_resource(
            ResourceAction.ATTENDANCE_CREATE, caller, ResourceRef(owner_id=target.id)
        ),
        "You can only record your own attendance.",
    )

    conflict = f"Attendance already recorded for {target.name} on {body.date}"
    duplicate = await db.execute(
        select(Attendance.id).where(
            Attendance.user_id == target.id, Attendance.date == body.date
        )
    )
    if duplicate.scalar_one_or_none() is not None:
        raise ConflictError(conflict)

    record = Attendance(
        user_id=target.id,
        date=body.date,
        check_in=body.check_in,
        check_out=body.check_out,
        status=resolve_attendance_status(body.check_in, body.check_out, body.status),
        notes=body.notes,
    )
    db.add(record)
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent request inserted the same (user, date) first.
        await db.rollback()
        raise ConflictError(conflict) from None
    await db.refresh(record)
    logger.info(
        "Attendance %d recorded for user %d on %s (%s)",
        record.id, target.id, record.date, record.status.value,
    )
    return record


async def list_records(db: AsyncSession, caller: Caller) -> list[Attendance]:
    query = select(Attendance).order_by(Attendance.date.desc(), Attendance.id)
    owner_id = list_scope(caller)
    if owner_id is not None:
        query = query.where(Attendance.user_id == owner_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def records_for_date(db: AsyncSession, caller: Caller, day: date) -> list[Attendance]:
    ensure_allowed(authorize_resource(ResourceAction.ATTENDANCE_REPORT, caller), _REPORT_DENIED)
    result = await db.execute(
        select(Attendance).where(Attendance.date == day).order_by(Attendance.user_id)
    )
    return list(result.scalars().all())


async def records_for_range(
    db: AsyncSession, caller: Caller, user_id: int, start: date, end: date
) -> list[Attendance]:
    ensure_allowed(authorize_resource(ResourceAction.ATTENDANCE_REPORT, caller), _REPORT_DENIED)
    if await IdentityStore(db).get(user_id) is None:
        raise NotFoundError(f"User not found with id: {user_id}")
    result = await db.execute(
        select(Attendance)
        .where(
            Attendance.user_id == user_id,
            Attendance.date >= start,
            Attendance.date <= end,
        )
        .order_by(Attendance.date)
    )
    return list(result.scalars().all())


async def get_record(db: AsyncSession, caller: Caller, record_id: int) -> Attendance:
    record = await _find_record(db, record_id)
    ensure_allowed(
        authorize_resource(ResourceAction.ATTENDANCE_READ, caller, attendance_ref(record)),
        "You can only view your own attendance.",
    )
    return record


async def update_record(
    db: AsyncSession, caller: Caller, record_id: int, body: AttendanceUpdate
) -> Attendance:
    record = await _find_record(db, record_id)
    ensure_allowed(
        authorize_resource(ResourceAction.ATTENDANCE_UPDATE, caller, attendance_ref(record)),
        "You can only update your own attendance.",
    )

    check_in = body.check_in if body.check_in is not None else record.check_in
    check_out = body.check_out if body.check_out is not None else record.check_out
    if check_in and check_out and check_out < check_in:
        raise ConflictError(
            f"check_out {check_out} is earlier than check_in {check_in} on record {record_id}"
        )

    record.check_in = check_in
    record.check_out = check_out
    if body.notes is not None:
        record.notes = body.notes
    record.status = resolve_attendance_status(check_in, check_out, body.status)

    await db.commit()
    await db.refresh(record)
    logger.info("Attendance %d updated by user %d", record_id, caller.user_id)
    return record


async def delete_record(db: AsyncSession, caller: Caller, record_id: int) -> None:
    record = await _find_record(db, record_id)
    ensure_allowed(
        authorize_resource(ResourceAction.ATTENDANCE_DELETE, caller, attendance_ref(record)),
        "Only admins and managers can delete attendance records.",
    )
    await db.delete(record)
    await db.commit()
    logger.info("Attendance %d deleted by user %d", record_id, caller.user_id)
