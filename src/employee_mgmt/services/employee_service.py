"""Employee directory: accounts with role=employee plus their profiles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from employee_mgmt.clock import Clock
from employee_mgmt.errors import ConflictError, NotFoundError, ValidationError
from employee_mgmt.models import Document, Employee, Salary, User
from employee_mgmt.security import ROLE_EMPLOYEE
from employee_mgmt.services.auth_service import AuthService
from employee_mgmt.services.salary_service import SalaryService, parse_amount

logger = logging.getLogger(__name__)

ACCOUNT_FIELDS = ("first_name", "last_name", "email")
PROFILE_FIELDS = ("phone", "position", "department", "hire_date", "salary", "status")
EMPLOYEE_STATUSES = ("active", "inactive")


async def require_profile(session: AsyncSession, user_id: int) -> Employee:
    """Employee profile of an account, or NotFoundError."""
    result = await session.execute(select(Employee).where(Employee.user_id == user_id))
    employee = result.scalar_one_or_none()
    if employee is None:
        raise NotFoundError("Employee record not found. Please contact administrator.")
    return employee


@dataclass
class DirectoryEntry:
    """Account + profile, plus the amount of the latest salary record.

    ``employee.salary`` is the baseline on the profile; ``current_salary``
    comes from the salary ledger and may differ.
    """

    user: User
    employee: Employee | None
    current_salary: Decimal | None


class EmployeeService:
    """Admin CRUD over employee accounts and profiles.

    Salary changes are delegated to SalaryService so the ledger stays the
    only writer of salary records.
    """

    def __init__(self, session: AsyncSession, clock: Clock, auth: AuthService):
        self.session = session
        self.clock = clock
        self.auth = auth
        self.salaries = SalaryService(session, clock)

    def _directory_query(self):
        latest_salary = (
            select(Salary.amount)
            .where(Salary.employee_id == Employee.id)
            .order_by(Salary.year.desc(), Salary.month.desc(), Salary.paid_at.desc())
            .limit(1)
            .correlate(Employee)
            .scalar_subquery()
        )
        return (
            select(User, Employee, latest_salary)
            .outerjoin(Employee, Employee.user_id == User.id)
            .where(User.role == ROLE_EMPLOYEE)
        )

    async def list_entries(self) -> list[DirectoryEntry]:
        query = self._directory_query().order_by(User.created_at.desc(), User.id.desc())
        result = await self.session.execute(query)
        return [DirectoryEntry(user, employee, current) for user, employee, current in result.all()]

    async def get(self, user_id: int) -> DirectoryEntry:
        result = await self.session.execute(self._directory_query().where(User.id == user_id))
        row = result.first()
        if row is None:
            raise NotFoundError("Employee not found")
        user, employee, current = row
        return DirectoryEntry(user, employee, current)

    async def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        phone: str | None = None,
        position: str | None = None,
        department: str | None = None,
        hire_date: date | None = None,
        salary: Any = None,
        status: str | None = None,
    ) -> DirectoryEntry:
        """Create account + profile, and an initial paid salary record if a salary is given.

        Profiles start active unless ``status`` says otherwise. Everything
        happens in the caller's transaction.
        """
        if status is not None and status not in EMPLOYEE_STATUSES:
            raise ValidationError("Invalid status")
        user = await self.auth.create_account(
            first_name,
            last_name,
            email,
            password,
            ROLE_EMPLOYEE,
            conflict_message="User with this email already exists",
        )
        employee = user.employee
        employee.phone = phone or ""
        employee.position = position or "Employee"
        employee.department = department or "General"
        employee.hire_date = hire_date
        employee.status = status or "active"
        await self.session.flush()

        current = None
        if salary is not None and salary != "":
            employee.salary = parse_amount(salary, "salary")
            record = await self.salaries.record_baseline(employee.id, employee.salary)
            current = record.amount

        logger.info("Created employee %s (profile %s)", user.id, employee.id)
        return DirectoryEntry(user, employee, current)

    async def update(self, user_id: int, changes: dict[str, Any]) -> DirectoryEntry:
        """Apply a partial update split across account and profile."""
        result = await self.session.execute(
            select(User)
            .where(User.id == user_id, User.role == ROLE_EMPLOYEE)
            .options(selectinload(User.employee))
        )
        user = result.scalar_one_or_none()
        if user is None or user.employee is None:
            raise NotFoundError("Employee not found")
        employee = user.employee

        email = changes.get("email")
        if email and email != user.email:
            existing = await self.auth.find_by_email(email)
            if existing is not None:
                raise ConflictError("User with this email already exists")

        for field in ACCOUNT_FIELDS:
            if changes.get(field):
                setattr(user, field, changes[field])

        if "status" in changes and changes["status"] is not None:
            if changes["status"] not in EMPLOYEE_STATUSES:
                raise ValidationError("Invalid status")
            employee.status = changes["status"]
        for field in ("phone", "position", "department"):
            if changes.get(field) is not None:
                setattr(employee, field, changes[field])
        if "hire_date" in changes:
            employee.hire_date = changes["hire_date"]

        if "salary" in changes:
            if changes["salary"] is None or changes["salary"] == "":
                employee.salary = None
            else:
                employee.salary = parse_amount(changes["salary"], "salary")
                await self.session.flush()
                await self.salaries.record_baseline(employee.id, employee.salary)

        await self.session.flush()
        logger.info("Updated employee %s fields=%s", user_id, sorted(changes))
        return await self.get(user_id)

    async def delete(self, user_id: int) -> list[str]:
        """Delete account, profile and every ledger row referencing the profile.

        Returns the stored file names of the profile's documents so the
        caller can remove the blobs once the transaction has committed.
        """
        result = await self.session.execute(
            select(User)
            .where(User.id == user_id, User.role == ROLE_EMPLOYEE)
            .options(selectinload(User.employee))
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("Employee not found")

        blobs: list[str] = []
        if user.employee is not None:
            docs = await self.session.execute(
                select(Document.file_path).where(Document.employee_id == user.employee.id)
            )
            blobs = list(docs.scalars().all())
            await self.session.delete(user.employee)
        await self.session.delete(user)
        await self.session.flush()
        logger.info("Deleted employee %s with %d document(s)", user_id, len(blobs))
        return blobs
