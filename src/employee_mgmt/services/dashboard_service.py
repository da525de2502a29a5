"""Read-only rollups for the admin dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_mgmt.clock import Clock
from employee_mgmt.models import Document, Employee
from employee_mgmt.services.attendance_service import AttendanceService
from employee_mgmt.services.leave_service import LeaveService
from employee_mgmt.services.salary_service import SalaryService, to_money


@dataclass(frozen=True)
class DashboardStats:
    total_employees: int
    present_today: int
    absent_today: int
    attendance_rate: int
    total_salary_paid: Decimal
    avg_salary: Decimal
    documents_uploaded: int
    approved_leaves: int
    pending_leaves: int


class DashboardService:
    """Aggregates across the ledgers without writing to any of them."""

    def __init__(self, session: AsyncSession, clock: Clock):
        self.session = session
        self.attendance = AttendanceService(session, clock)
        self.leaves = LeaveService(session, clock)
        self.salaries = SalaryService(session, clock)

    async def stats(self) -> DashboardStats:
        today = await self.attendance.stats_for_today()
        leave_stats = await self.leaves.stats()
        salary_stats = await self.salaries.stats()

        documents = await self.session.scalar(select(func.count(Document.id))) or 0
        avg_baseline = await self.session.scalar(
            select(func.avg(Employee.salary)).where(
                Employee.status == "active",
                Employee.salary.is_not(None),
            )
        )
        total = today.total
        rate = round(today.present / total * 100) if total > 0 else 0

        return DashboardStats(
            total_employees=total,
            present_today=today.present,
            absent_today=today.absent,
            attendance_rate=rate,
            total_salary_paid=salary_stats.total_paid,
            avg_salary=to_money(avg_baseline),
            documents_uploaded=documents,
            approved_leaves=leave_stats.approved,
            pending_leaves=leave_stats.pending,
        )
