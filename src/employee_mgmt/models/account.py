"""Account (login identity) and employee profile models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from employee_mgmt.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from employee_mgmt.models.attendance import Attendance
    from employee_mgmt.models.document import Document
    from employee_mgmt.models.leave import LeaveApplication
    from employee_mgmt.models.salary import Salary


class User(Base, TimestampMixin):
    """Login identity: name, email, password hash and role."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="employee")

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'employee')", name="users_role_check"),
    )

    # Relationships
    employee: Mapped[Employee | None] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        uselist=False,
    )


class Employee(Base):
    """Employment profile attached one-to-one to an employee-role account."""

    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    position: Mapped[str] = mapped_column(String(100), nullable=False, default="Employee")
    department: Mapped[str] = mapped_column(String(100), nullable=False, default="General")
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    salary: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    __table_args__ = (
        CheckConstraint("status IN ('active', 'inactive')", name="employees_status_check"),
    )

    # Relationships
    user: Mapped[User] = relationship(back_populates="employee")
    attendance: Mapped[list[Attendance]] = relationship(
        back_populates="employee", cascade="all, delete-orphan", passive_deletes=True
    )
    leaves: Mapped[list[LeaveApplication]] = relationship(
        back_populates="employee", cascade="all, delete-orphan", passive_deletes=True
    )
    salaries: Mapped[list[Salary]] = relationship(
        back_populates="employee", cascade="all, delete-orphan", passive_deletes=True
    )
    documents: Mapped[list[Document]] = relationship(
        back_populates="employee", cascade="all, delete-orphan", passive_deletes=True
    )
