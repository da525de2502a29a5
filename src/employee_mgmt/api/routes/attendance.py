"""Attendance endpoints: clock-in/out, history and daily views."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from employee_mgmt.api.dependencies import (
    AdminIdentity,
    AppClock,
    AppSettings,
    CurrentIdentity,
    DbSession,
    EmployeeIdentity,
    RoleGatedRoute,
)
from employee_mgmt.api.schemas import (
    AttendanceListResponse,
    AttendanceResponse,
    AttendanceStatsResponse,
    ClockInResponse,
    ClockOutRequest,
    ErrorResponse,
    MessageResponse,
)
from employee_mgmt.errors import AuthorizationError
from employee_mgmt.models import Attendance
from employee_mgmt.services.attendance_service import AttendanceRow, AttendanceService
from employee_mgmt.services.employee_service import require_profile

router = APIRouter(prefix="/attendance", tags=["attendance"], route_class=RoleGatedRoute)


def _record(record: Attendance, first_name: str | None = None, last_name: str | None = None) -> AttendanceResponse:
    return AttendanceResponse(
        id=record.id,
        employee_id=record.employee_id,
        work_date=record.work_date,
        check_in=record.check_in,
        check_out=record.check_out,
        status=record.status,
        first_name=first_name,
        last_name=last_name,
    )


def _rows(rows: list[AttendanceRow]) -> list[AttendanceResponse]:
    return [_record(row.record, row.first_name, row.last_name) for row in rows]


def _service(db: DbSession, clock: AppClock, settings: AppSettings) -> AttendanceService:
    return AttendanceService(db, clock, settings.late_cutoff)


@router.post(
    "/clock-in",
    response_model=ClockInResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def clock_in(
    db: DbSession,
    clock: AppClock,
    settings: AppSettings,
    identity: EmployeeIdentity,
) -> ClockInResponse:
    """Open today's attendance record for the calling employee."""
    employee = await require_profile(db, identity.id)
    record = await _service(db, clock, settings).clock_in(employee.id)
    await db.commit()
    return ClockInResponse(message="Clocked in successfully", attendance=_record(record))


@router.post(
    "/clock-out",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def clock_out(
    db: DbSession,
    clock: AppClock,
    settings: AppSettings,
    identity: EmployeeIdentity,
    payload: ClockOutRequest,
) -> MessageResponse:
    """Close one of the caller's own attendance records."""
    employee = await require_profile(db, identity.id)
    await _service(db, clock, settings).clock_out(payload.attendance_id, employee.id)
    await db.commit()
    return MessageResponse(message="Clocked out successfully")


@router.get(
    "/employee/{user_id}",
    response_model=AttendanceListResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def employee_attendance(
    db: DbSession,
    clock: AppClock,
    settings: AppSettings,
    identity: CurrentIdentity,
    user_id: Annotated[int, Path()],
    limit: Annotated[int, Query(ge=1, le=366)] = 30,
) -> AttendanceListResponse:
    """Attendance history for an account, newest first."""
    if not identity.is_admin and identity.id != user_id:
        raise AuthorizationError("Access denied")
    employee = await require_profile(db, user_id)
    records = await _service(db, clock, settings).history(employee.id, limit)
    return AttendanceListResponse(records=[_record(r) for r in records])


@router.get("/today", response_model=AttendanceListResponse)
async def today_attendance(
    db: DbSession,
    clock: AppClock,
    settings: AppSettings,
    identity: AdminIdentity,
) -> AttendanceListResponse:
    """Everyone's records for today."""
    rows = await _service(db, clock, settings).today()
    return AttendanceListResponse(records=_rows(rows))


@router.get("/stats", response_model=AttendanceStatsResponse)
async def attendance_stats(
    db: DbSession,
    clock: AppClock,
    settings: AppSettings,
    identity: AdminIdentity,
) -> AttendanceStatsResponse:
    """Present, absent and still-clocked-in counts for today."""
    stats = await _service(db, clock, settings).stats_for_today()
    return AttendanceStatsResponse(
        present=stats.present,
        absent=stats.absent,
        clocked_in=stats.clocked_in,
        total=stats.total,
        records=_rows(stats.records),
    )


@router.get("/date/{day}", response_model=AttendanceListResponse)
async def attendance_by_date(
    db: DbSession,
    clock: AppClock,
    settings: AppSettings,
    identity: AdminIdentity,
    day: Annotated[date, Path()],
) -> AttendanceListResponse:
    """Everyone's records for a given date."""
    rows = await _service(db, clock, settings).by_date(day)
    return AttendanceListResponse(records=_rows(rows))
