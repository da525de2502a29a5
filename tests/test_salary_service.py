"""Tests for salary arithmetic and the salary ledger."""

from datetime import datetime
from decimal import Decimal

import pytest

from employee_mgmt.errors import ConflictError, NotFoundError, ValidationError
from employee_mgmt.services.salary_service import (
    SalaryService,
    net_amount,
    parse_amount,
    to_money,
)


class TestAmounts:
    """Money parsing and the net-pay formula."""

    def test_net_amount(self):
        assert net_amount(Decimal("5000"), Decimal("500"), Decimal("200")) == Decimal("5300.00")
        assert net_amount(Decimal("1000.10"), Decimal("0"), Decimal("0.05")) == Decimal("1000.05")

    def test_parse_amount(self):
        assert parse_amount("4000", "base salary") == Decimal("4000.00")
        assert parse_amount(12.5, "incentives") == Decimal("12.50")
        assert parse_amount(None, "deductions", default=Decimal("0.00")) == Decimal("0.00")
        assert parse_amount("", "deductions", default=Decimal("0.00")) == Decimal("0.00")

    @pytest.mark.parametrize("value", ["abc", "-1", "NaN", "Infinity", True, None])
    def test_parse_amount_rejects(self, value):
        with pytest.raises(ValidationError, match="Invalid base salary amount"):
            parse_amount(value, "base salary")

    def test_to_money(self):
        assert to_money(None) == Decimal("0.00")
        assert to_money(1234.5) == Decimal("1234.50")


class TestSalaryService:
    """Salary ledger writes and aggregates."""

    @pytest.fixture
    def service(self, session, clock) -> SalaryService:
        return SalaryService(session, clock)

    async def test_create_computes_amount(self, service, employee_user):
        salary = await service.create(employee_user.employee.id, 6, 2024, "5000", "500", "200")

        assert salary.amount == Decimal("5300.00")
        assert salary.status == "pending"
        assert salary.paid_at is None

    async def test_create_paid_stamps_paid_at(self, service, employee_user, clock):
        salary = await service.create(employee_user.employee.id, 6, 2024, 5000, status="paid")

        assert salary.status == "paid"
        assert salary.paid_at == clock.now()
        assert salary.incentives == Decimal("0.00")
        assert salary.deductions == Decimal("0.00")

    async def test_duplicate_period_conflicts(self, service, employee_user):
        await service.create(employee_user.employee.id, 6, 2024, 5000)
        with pytest.raises(ConflictError):
            await service.create(employee_user.employee.id, 6, 2024, 6000)

    @pytest.mark.parametrize("month", [0, 13])
    async def test_month_out_of_range(self, service, employee_user, month):
        with pytest.raises(ValidationError, match="Month"):
            await service.create(employee_user.employee.id, month, 2024, 5000)

    async def test_invalid_status(self, service, employee_user):
        with pytest.raises(ValidationError, match="Invalid status"):
            await service.create(employee_user.employee.id, 6, 2024, 5000, status="cancelled")

    async def test_update_recomputes_amount(self, service, employee_user):
        salary = await service.create(employee_user.employee.id, 6, 2024, "5000", "500", "200")

        updated = await service.update(salary.id, deductions="700")

        assert updated.base_salary == Decimal("5000.00")
        assert updated.incentives == Decimal("500.00")
        assert updated.amount == Decimal("4800.00")

    async def test_pay_then_revert(self, service, employee_user, clock):
        salary = await service.create(employee_user.employee.id, 6, 2024, 5000)

        paid = await service.update(salary.id, status="paid")
        assert paid.paid_at == clock.now()

        reverted = await service.update(salary.id, status="pending")
        assert reverted.status == "pending"
        assert reverted.paid_at is None

    async def test_update_unknown(self, service):
        with pytest.raises(NotFoundError):
            await service.update(999, base_salary=1)

    async def test_record_baseline_upserts_current_period(self, service, employee_user, clock):
        profile_id = employee_user.employee.id
        first = await service.record_baseline(profile_id, 4000)
        assert (first.month, first.year) == (clock.today().month, clock.today().year)
        assert first.status == "paid"
        assert first.amount == Decimal("4000.00")

        await service.update(first.id, incentives=100)
        second = await service.record_baseline(profile_id, 4500)

        assert second.id == first.id
        assert second.amount == Decimal("4600.00")
        assert len(await service.list_for_employee(profile_id)) == 1

    async def test_stats(self, service, employee_user):
        profile_id = employee_user.employee.id
        await service.create(profile_id, 4, 2024, 3000, status="paid")
        await service.create(profile_id, 5, 2024, 5000, status="paid")
        await service.create(profile_id, 6, 2024, 1000)

        stats = await service.stats()
        assert stats.total_paid == Decimal("8000.00")
        assert stats.total_pending == Decimal("1000.00")
        assert stats.average_salary == Decimal("4000.00")
        assert stats.total_records == 3

        # Reading stats never changes them
        assert await service.stats() == stats

    async def test_stats_empty(self, service):
        stats = await service.stats()
        assert stats.total_paid == Decimal("0.00")
        assert stats.average_salary == Decimal("0.00")
        assert stats.total_records == 0

    async def test_list_all_newest_period_first(self, service, employee_user, clock):
        profile_id = employee_user.employee.id
        await service.create(profile_id, 12, 2023, 1000)
        await service.create(profile_id, 2, 2024, 1000)

        rows = await service.list_all()
        assert [(row[0].month, row[0].year) for row in rows] == [(2, 2024), (12, 2023)]
        assert rows[0][1] == "Eve"

    async def test_delete(self, service, employee_user):
        salary = await service.create(employee_user.employee.id, 6, 2024, 5000)
        await service.delete(salary.id)
        with pytest.raises(NotFoundError):
            await service.get(salary.id)
