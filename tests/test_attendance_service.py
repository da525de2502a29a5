"""Tests for the attendance ledger."""

from datetime import date, datetime, time

import pytest

from employee_mgmt.errors import ConflictError, NotFoundError
from employee_mgmt.services.attendance_service import AttendanceService, checkin_status


class TestCheckinStatus:
    """Late means strictly after the cutoff."""

    def test_before_cutoff(self):
        assert checkin_status(time(8, 59, 59)) == "present"

    def test_exactly_at_cutoff(self):
        assert checkin_status(time(9, 0, 0)) == "present"

    def test_after_cutoff(self):
        assert checkin_status(time(9, 0, 1)) == "late"

    def test_custom_cutoff(self):
        assert checkin_status(time(9, 30), cutoff=time(10, 0)) == "present"


class TestAttendanceService:
    @pytest.fixture
    def service(self, session, clock) -> AttendanceService:
        return AttendanceService(session, clock)

    async def test_clock_in_present(self, service, employee_user):
        record = await service.clock_in(employee_user.employee.id)

        assert record.status == "present"
        assert record.work_date == date(2024, 6, 3)
        assert record.check_in == time(8, 30)
        assert record.is_clocked_in is True

    async def test_clock_in_late(self, service, employee_user, clock):
        clock.set(datetime(2024, 6, 3, 9, 15, 42, 123456))
        record = await service.clock_in(employee_user.employee.id)

        assert record.status == "late"
        assert record.check_in == time(9, 15, 42)

    async def test_second_clock_in_same_day_conflicts(self, service, employee_user, clock):
        await service.clock_in(employee_user.employee.id)
        clock.set(datetime(2024, 6, 3, 13, 0))

        with pytest.raises(ConflictError, match="Already clocked in today"):
            await service.clock_in(employee_user.employee.id)

    async def test_concurrent_clock_in_hits_unique_constraint(self, service, employee_user, monkeypatch):
        """Two requests can both miss the lookup; the unique index decides."""
        await service.clock_in(employee_user.employee.id)

        async def stale_find(employee_id, day):
            return None

        monkeypatch.setattr(service, "find", stale_find)
        with pytest.raises(ConflictError, match="Already clocked in today"):
            await service.clock_in(employee_user.employee.id)

    async def test_clock_in_next_day_allowed(self, service, employee_user, clock):
        await service.clock_in(employee_user.employee.id)
        clock.set(datetime(2024, 6, 4, 8, 0))

        record = await service.clock_in(employee_user.employee.id)
        assert record.work_date == date(2024, 6, 4)

    async def test_clock_out(self, service, employee_user, clock):
        record = await service.clock_in(employee_user.employee.id)
        clock.set(datetime(2024, 6, 3, 17, 5))

        closed = await service.clock_out(record.id, employee_user.employee.id)
        assert closed.check_out == time(17, 5)
        assert closed.is_clocked_in is False

        with pytest.raises(ConflictError, match="Already clocked out"):
            await service.clock_out(record.id, employee_user.employee.id)

    async def test_clock_out_someone_elses_record(self, service, employee_user, auth):
        other = await auth.create_account("Bob", "Other", "bob@example.com", "pw")
        record = await service.clock_in(employee_user.employee.id)

        with pytest.raises(NotFoundError):
            await service.clock_out(record.id, other.employee.id)

    async def test_clock_out_unknown(self, service):
        with pytest.raises(NotFoundError, match="Attendance record not found"):
            await service.clock_out(12345)

    async def test_history_newest_first_with_limit(self, service, employee_user, clock):
        for day in (3, 4, 5):
            clock.set(datetime(2024, 6, day, 8, 0))
            await service.clock_in(employee_user.employee.id)

        history = await service.history(employee_user.employee.id, limit=2)
        assert [r.work_date.day for r in history] == [5, 4]

    async def test_stats_for_today(self, service, employee_user, auth, clock):
        await auth.create_account("Bob", "Absent", "bob@example.com", "pw")
        late = await auth.create_account("Cat", "Late", "cat@example.com", "pw")

        await service.clock_in(employee_user.employee.id)
        clock.set(datetime(2024, 6, 3, 9, 30))
        await service.clock_in(late.employee.id)

        stats = await service.stats_for_today()
        assert stats.total == 3
        assert stats.present == 2
        assert stats.absent == 1
        assert stats.clocked_in == 2
        assert [row.first_name for row in stats.records] == ["Eve", "Cat"]

    async def test_absent_never_negative(self, service, employee_user, session):
        await service.clock_in(employee_user.employee.id)
        employee_user.employee.status = "inactive"
        await session.flush()

        stats = await service.stats_for_today()
        assert stats.total == 0
        assert stats.present == 1
        assert stats.absent == 0
