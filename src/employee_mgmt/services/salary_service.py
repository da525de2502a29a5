"""Salary ledger: the single write path for salary records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_mgmt.clock import Clock
from employee_mgmt.errors import ConflictError, NotFoundError, ValidationError
from employee_mgmt.models import Employee, Salary, User
from employee_mgmt.services.state_machine import SalaryStateMachine, SalaryStatus

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Any) -> Decimal:
    """Normalize a stored or aggregated value to two decimal places.

    None (an aggregate over no rows) becomes 0.00.
    """
    if value is None:
        return ZERO
    return Decimal(str(value)).quantize(CENTS)


def parse_amount(value: Any, label: str, default: Decimal | None = None) -> Decimal:
    """Parse a non-negative money amount from user input."""
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"Invalid {label} amount")
        return default
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {label} amount")
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid {label} amount") from exc
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"Invalid {label} amount")
    return amount.quantize(CENTS)


def net_amount(base_salary: Decimal, incentives: Decimal, deductions: Decimal) -> Decimal:
    """Net pay: base + incentives - deductions."""
    return (base_salary + incentives - deductions).quantize(CENTS)


@dataclass(frozen=True)
class SalaryStats:
    """Aggregates over a set of salary records."""

    total_paid: Decimal
    total_pending: Decimal
    average_salary: Decimal
    total_records: int


class SalaryService:
    """Service owning every salary record mutation.

    Operations:
    - create: insert a record for an unused (employee, month, year)
    - update: patch components/status and recompute the net amount
    - record_baseline: upsert the current period from a directory salary edit
    - delete, list_all, list_for_employee
    - stats: paid/pending totals, paid average and record count
    """

    def __init__(self, session: AsyncSession, clock: Clock):
        self.session = session
        self.clock = clock

    async def get(self, salary_id: int) -> Salary:
        salary = await self.session.get(Salary, salary_id)
        if salary is None:
            raise NotFoundError("Salary record not found")
        return salary

    async def find_for_period(self, employee_id: int, month: int, year: int) -> Salary | None:
        result = await self.session.execute(
            select(Salary).where(
                Salary.employee_id == employee_id,
                Salary.month == month,
                Salary.year == year,
            )
        )
        return result.scalar_one_or_none()

    def _apply_status(self, salary: Salary, to_status: str) -> None:
        from_status = salary.status or SalaryStatus.PENDING.value
        SalaryStateMachine.validate_transition(from_status, to_status)
        if SalaryStateMachine.is_payment(from_status, to_status) or (
            to_status == SalaryStatus.PAID and salary.paid_at is None
        ):
            salary.paid_at = self.clock.now()
        elif SalaryStateMachine.is_reversal(from_status, to_status):
            salary.paid_at = None
        salary.status = to_status

    async def create(
        self,
        employee_id: int,
        month: int,
        year: int,
        base_salary: Any,
        incentives: Any = None,
        deductions: Any = None,
        status: str | None = None,
    ) -> Salary:
        """Insert a new record. ``employee_id`` is the profile id.

        Flushes but does not commit.
        """
        if not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")
        if int(year) < 1900:
            raise ValidationError("Invalid year")
        base = parse_amount(base_salary, "base salary")
        extra = parse_amount(incentives, "incentives", default=ZERO)
        minus = parse_amount(deductions, "deductions", default=ZERO)
        status = status or SalaryStatus.PENDING.value
        if not SalaryStateMachine.is_valid_status(status):
            raise ValidationError("Invalid status")

        if await self.find_for_period(employee_id, month, year) is not None:
            raise ConflictError("Salary record already exists for this employee and period")

        salary = Salary(
            employee_id=employee_id,
            month=int(month),
            year=int(year),
            base_salary=base,
            incentives=extra,
            deductions=minus,
            amount=net_amount(base, extra, minus),
            status=SalaryStatus.PENDING.value,
            paid_at=None,
        )
        self._apply_status(salary, status)
        self.session.add(salary)
        await self.session.flush()
        logger.info(
            "Created salary %s for employee %s period %02d/%s amount=%s status=%s",
            salary.id, employee_id, salary.month, salary.year, salary.amount, salary.status,
        )
        return salary

    async def update(
        self,
        salary_id: int,
        base_salary: Any = None,
        incentives: Any = None,
        deductions: Any = None,
        status: str | None = None,
    ) -> Salary:
        """Patch a record. Unspecified fields keep their value; amount is recomputed."""
        salary = await self.get(salary_id)
        base = parse_amount(base_salary, "base salary", default=to_money(salary.base_salary))
        extra = parse_amount(incentives, "incentives", default=to_money(salary.incentives))
        minus = parse_amount(deductions, "deductions", default=to_money(salary.deductions))
        if status is not None:
            if not SalaryStateMachine.is_valid_status(status):
                raise ValidationError("Invalid status")
            self._apply_status(salary, status)

        salary.base_salary = base
        salary.incentives = extra
        salary.deductions = minus
        salary.amount = net_amount(base, extra, minus)
        await self.session.flush()
        logger.info("Updated salary %s amount=%s status=%s", salary.id, salary.amount, salary.status)
        return salary

    async def record_baseline(self, employee_id: int, base_salary: Any) -> Salary:
        """Reflect a directory salary change in the current period as paid."""
        today = self.clock.today()
        existing = await self.find_for_period(employee_id, today.month, today.year)
        if existing is None:
            return await self.create(
                employee_id,
                today.month,
                today.year,
                base_salary,
                status=SalaryStatus.PAID.value,
            )
        return await self.update(existing.id, base_salary=base_salary, status=SalaryStatus.PAID.value)

    async def delete(self, salary_id: int) -> None:
        salary = await self.get(salary_id)
        await self.session.delete(salary)
        await self.session.flush()
        logger.info("Deleted salary %s", salary_id)

    def _listing(self):
        return (
            select(Salary, User.first_name, User.last_name, User.email)
            .join(Employee, Salary.employee_id == Employee.id)
            .join(User, Employee.user_id == User.id)
            .order_by(Salary.year.desc(), Salary.month.desc(), Salary.paid_at.desc())
        )

    async def list_all(self) -> list[tuple[Salary, str, str, str]]:
        """All records with the owner's name, newest period first."""
        result = await self.session.execute(self._listing())
        return [tuple(row) for row in result.all()]

    async def list_for_employee(self, employee_id: int) -> list[Salary]:
        result = await self.session.execute(
            select(Salary)
            .where(Salary.employee_id == employee_id)
            .order_by(Salary.year.desc(), Salary.month.desc())
        )
        return list(result.scalars().all())

    async def stats(self, employee_id: int | None = None) -> SalaryStats:
        """Aggregate over all records, or one employee's. Empty sets give zeros."""
        paid = Salary.status == SalaryStatus.PAID.value
        pending = Salary.status == SalaryStatus.PENDING.value
        query = select(
            func.sum(case((paid, Salary.amount))),
            func.sum(case((pending, Salary.amount))),
            func.avg(case((paid, Salary.amount))),
            func.count(Salary.id),
        )
        if employee_id is not None:
            query = query.where(Salary.employee_id == employee_id)
        total_paid, total_pending, average, count = (await self.session.execute(query)).one()
        return SalaryStats(
            total_paid=to_money(total_paid),
            total_pending=to_money(total_pending),
            average_salary=to_money(average),
            total_records=int(count or 0),
        )
