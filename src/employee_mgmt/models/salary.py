"""Salary ledger model."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from employee_mgmt.models.base import Base

if TYPE_CHECKING:
    from employee_mgmt.models.account import Employee


class Salary(Base):
    """Compensation record for one employee and one month.

    ``amount`` is always base_salary + incentives - deductions and is written
    only by the salary service.
    """

    __tablename__ = "salaries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    base_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    incentives: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    deductions: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    paid_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint("employee_id", "month", "year", name="salaries_employee_period_unique"),
        CheckConstraint("month BETWEEN 1 AND 12", name="salaries_month_check"),
        CheckConstraint("status IN ('pending', 'paid')", name="salaries_status_check"),
        CheckConstraint(
            "base_salary >= 0 AND incentives >= 0 AND deductions >= 0",
            name="salaries_components_check",
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="salaries")
