"""Leave register: applications, decisions and withdrawal."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy import case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_mgmt.clock import Clock
from employee_mgmt.errors import NotFoundError, ValidationError
from employee_mgmt.models import Employee, LeaveApplication, User
from employee_mgmt.security import Identity
from employee_mgmt.services.employee_service import require_profile
from employee_mgmt.services.state_machine import LeaveStateMachine, LeaveStatus

logger = logging.getLogger(__name__)


def leave_days(start: date, end: date) -> int:
    """Inclusive day count: a one-day leave has start == end."""
    return (end - start).days + 1


def validate_leave_dates(start: date, end: date, today: date) -> None:
    if start > end:
        raise ValidationError("End date must be after start date")
    if start < today:
        raise ValidationError("Start date cannot be in the past")


@dataclass
class LeaveRow:
    """Leave application with the requester's contact details."""

    leave: LeaveApplication
    first_name: str
    last_name: str
    email: str
    phone: str | None = None


@dataclass(frozen=True)
class LeaveStats:
    pending: int
    approved: int
    rejected: int
    total: int


class LeaveService:
    """Service for leave requests.

    Lifecycle: pending → approved | rejected (admin decision, terminal).
    Owners may withdraw only while pending; admins may delete anything.
    """

    def __init__(self, session: AsyncSession, clock: Clock):
        self.session = session
        self.clock = clock

    async def apply(
        self,
        employee_id: int,
        leave_type: str,
        department: str,
        start_date: date,
        end_date: date,
        reason: str | None = None,
    ) -> LeaveApplication:
        """File a pending request for a profile id."""
        if not leave_type or not department:
            raise ValidationError("All fields are required")
        validate_leave_dates(start_date, end_date, self.clock.today())

        now = self.clock.now()
        leave = LeaveApplication(
            employee_id=employee_id,
            leave_type=leave_type,
            department=department,
            start_date=start_date,
            end_date=end_date,
            days=leave_days(start_date, end_date),
            reason=reason,
            status=LeaveStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        self.session.add(leave)
        await self.session.flush()
        logger.info(
            "Employee %s applied for %s leave %s..%s (%d days)",
            employee_id, leave_type, start_date, end_date, leave.days,
        )
        return leave

    def _listing(self):
        return (
            select(LeaveApplication, User.first_name, User.last_name, User.email, Employee.phone)
            .join(Employee, LeaveApplication.employee_id == Employee.id)
            .join(User, Employee.user_id == User.id)
            .order_by(LeaveApplication.created_at.desc(), LeaveApplication.id.desc())
        )

    async def list_for_employee(self, employee_id: int) -> list[LeaveRow]:
        result = await self.session.execute(
            self._listing().where(LeaveApplication.employee_id == employee_id)
        )
        return [LeaveRow(*row) for row in result.all()]

    async def list_all(
        self,
        status: str | None = None,
        user_id: int | None = None,
        name: str | None = None,
    ) -> list[LeaveRow]:
        """Admin listing. ``status='all'`` disables the status filter."""
        query = self._listing()
        if status and status != "all":
            query = query.where(LeaveApplication.status == status)
        if user_id is not None:
            query = query.where(User.id == user_id)
        if name:
            pattern = f"%{name.lower()}%"
            query = query.where(
                or_(
                    func.lower(User.first_name).like(pattern),
                    func.lower(User.last_name).like(pattern),
                )
            )
        result = await self.session.execute(query)
        return [LeaveRow(*row) for row in result.all()]

    async def set_status(self, leave_id: int, status: str) -> LeaveApplication:
        """Admin decision on a pending request."""
        if not LeaveStateMachine.is_decision(status):
            raise ValidationError("Invalid status")
        leave = await self.session.get(LeaveApplication, leave_id)
        if leave is None:
            raise NotFoundError("Leave application not found")
        LeaveStateMachine.validate_transition(leave.status, status)

        leave.status = status
        leave.updated_at = self.clock.now()
        await self.session.flush()
        logger.info("Leave %s %s", leave_id, status)
        return leave

    async def delete(self, leave_id: int, requester: Identity) -> None:
        """Admins delete anything; owners only their own pending requests.

        Every refusal is reported as the same not-found error.
        """
        leave = await self.session.get(LeaveApplication, leave_id)
        refused = NotFoundError("Leave application not found or cannot be deleted")
        if leave is None:
            raise refused
        if not requester.is_admin:
            employee = await require_profile(self.session, requester.id)
            if leave.employee_id != employee.id or not LeaveStateMachine.can_withdraw(leave.status):
                raise refused

        await self.session.delete(leave)
        await self.session.flush()
        logger.info("Leave %s deleted by account %s", leave_id, requester.id)

    async def stats(self) -> LeaveStats:
        """Counts per status, recomputed on every call."""
        def count_of(status: LeaveStatus):
            return func.count(case((LeaveApplication.status == status.value, 1)))

        pending, approved, rejected, total = (
            await self.session.execute(
                select(
                    count_of(LeaveStatus.PENDING),
                    count_of(LeaveStatus.APPROVED),
                    count_of(LeaveStatus.REJECTED),
                    func.count(LeaveApplication.id),
                )
            )
        ).one()
        return LeaveStats(
            pending=pending or 0,
            approved=approved or 0,
            rejected=rejected or 0,
            total=total or 0,
        )
