"""Attendance ledger: clock-in/out and daily statistics."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, time

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from employee_mgmt.clock import Clock
from employee_mgmt.errors import ConflictError, NotFoundError
from employee_mgmt.models import Attendance, Employee, User

logger = logging.getLogger(__name__)

DEFAULT_LATE_CUTOFF = time(9, 0, 0)
PRESENT_STATUSES = ("present", "late")


def checkin_status(at: time, cutoff: time = DEFAULT_LATE_CUTOFF) -> str:
    """Anything strictly after the cutoff is late."""
    return "late" if at > cutoff else "present"


@dataclass
class AttendanceRow:
    """Attendance record with the owner's name."""

    record: Attendance
    first_name: str
    last_name: str


@dataclass
class DailyStats:
    """Today's attendance summary."""

    present: int
    absent: int
    clocked_in: int
    total: int
    records: list[AttendanceRow] = field(default_factory=list)


class AttendanceService:
    """Service for the per-employee, per-day attendance ledger."""

    def __init__(self, session: AsyncSession, clock: Clock, late_cutoff: time = DEFAULT_LATE_CUTOFF):
        self.session = session
        self.clock = clock
        self.late_cutoff = late_cutoff

    async def find(self, employee_id: int, day: date) -> Attendance | None:
        result = await self.session.execute(
            select(Attendance).where(
                Attendance.employee_id == employee_id,
                Attendance.work_date == day,
            )
        )
        return result.scalar_one_or_none()

    async def clock_in(self, employee_id: int) -> Attendance:
        """Open today's record. A second clock-in on the same day is a conflict."""
        now = self.clock.now()
        today = now.date()
        if await self.find(employee_id, today) is not None:
            raise ConflictError("Already clocked in today")

        check_in = now.time().replace(microsecond=0)
        record = Attendance(
            employee_id=employee_id,
            work_date=today,
            check_in=check_in,
            check_out=None,
            status=checkin_status(check_in, self.late_cutoff),
        )
        self.session.add(record)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            # Lost a race with a concurrent clock-in for the same day
            raise ConflictError("Already clocked in today") from exc
        logger.info(
            "Employee %s clocked in at %s (%s)", employee_id, record.check_in, record.status
        )
        return record

    async def clock_out(self, attendance_id: int, employee_id: int | None = None) -> Attendance:
        """Close a record. When ``employee_id`` is given the record must be theirs."""
        record = await self.session.get(Attendance, attendance_id)
        if record is None or (employee_id is not None and record.employee_id != employee_id):
            raise NotFoundError("Attendance record not found")
        if record.check_out is not None:
            raise ConflictError("Already clocked out")
        record.check_out = self.clock.now().time().replace(microsecond=0)
        await self.session.flush()
        logger.info("Employee %s clocked out at %s", record.employee_id, record.check_out)
        return record

    async def history(self, employee_id: int, limit: int = 30) -> list[Attendance]:
        result = await self.session.execute(
            select(Attendance)
            .where(Attendance.employee_id == employee_id)
            .order_by(Attendance.work_date.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def by_date(self, day: date) -> list[AttendanceRow]:
        """All records for a day with employee names, earliest check-in first."""
        result = await self.session.execute(
            select(Attendance, User.first_name, User.last_name)
            .join(Employee, Attendance.employee_id == Employee.id)
            .join(User, Employee.user_id == User.id)
            .where(Attendance.work_date == day)
            .order_by(Attendance.check_in)
        )
        return [AttendanceRow(record, first, last) for record, first, last in result.all()]

    async def today(self) -> list[AttendanceRow]:
        return await self.by_date(self.clock.today())

    async def stats_for_today(self) -> DailyStats:
        """Present/late count, absent remainder of active staff, still clocked in."""
        rows = await self.today()
        total = await self.session.scalar(
            select(func.count(Employee.id)).where(Employee.status == "active")
        ) or 0
        present = sum(1 for row in rows if row.record.status in PRESENT_STATUSES)
        clocked_in = sum(1 for row in rows if row.record.check_out is None)
        return DailyStats(
            present=present,
            absent=max(total - present, 0),
            clocked_in=clocked_in,
            total=total,
            records=rows,
        )
