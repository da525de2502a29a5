"""Tests for signup/login and the employee directory."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from employee_mgmt.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from employee_mgmt.models import Attendance, Document, Employee, LeaveApplication, Salary, User
from employee_mgmt.security import decode_token
from employee_mgmt.services.attendance_service import AttendanceService
from employee_mgmt.services.employee_service import EmployeeService, require_profile
from employee_mgmt.services.leave_service import LeaveService
from employee_mgmt.services.salary_service import SalaryService

from .conftest import TEST_SECRET


class TestAuthService:
    """Credential store behaviour."""

    async def test_signup_provisions_profile(self, auth, session):
        user, token = await auth.signup("Eve", "Worker", "eve@example.com", "pw")

        profile = await require_profile(session, user.id)
        assert (profile.phone, profile.position, profile.department, profile.status) == (
            "",
            "Employee",
            "General",
            "active",
        )
        assert decode_token(token, TEST_SECRET).id == user.id

    async def test_admin_signup_has_no_profile(self, auth, session):
        user, _ = await auth.signup("Ada", "Admin", "ada@example.com", "pw", "admin")
        with pytest.raises(NotFoundError):
            await require_profile(session, user.id)

    async def test_duplicate_email(self, auth):
        await auth.signup("Eve", "Worker", "eve@example.com", "pw")
        with pytest.raises(ConflictError, match="User already exists"):
            await auth.signup("Eve", "Again", "eve@example.com", "pw2")

    async def test_invalid_role(self, auth):
        with pytest.raises(ValidationError, match="Invalid role"):
            await auth.signup("Eve", "Worker", "eve@example.com", "pw", "owner")

    async def test_login(self, auth, employee_user):
        user, token = await auth.login("eve@example.com", "eve-pass")
        assert user.id == employee_user.id
        assert (await auth.resolve(token)).id == employee_user.id

    @pytest.mark.parametrize("email,password", [("eve@example.com", "nope"), ("who@example.com", "eve-pass")])
    async def test_login_failures_look_the_same(self, auth, employee_user, email, password):
        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await auth.login(email, password)


class TestEmployeeService:
    """Directory CRUD and its salary side effects."""

    @pytest.fixture
    def service(self, session, clock, auth) -> EmployeeService:
        return EmployeeService(session, clock, auth)

    async def _create_jane(self, service, salary="4000"):
        return await service.create(
            first_name="Jane",
            last_name="Doe",
            email="jane@example.com",
            password="pw",
            phone="555-0100",
            position="Engineer",
            department="R&D",
            hire_date=date(2024, 1, 15),
            salary=salary,
        )

    async def test_create_with_salary_records_current_period(self, service, session, clock):
        entry = await self._create_jane(service)

        assert entry.user.role == "employee"
        assert entry.employee.salary == Decimal("4000.00")
        assert entry.current_salary == Decimal("4000.00")

        salaries = await SalaryService(session, clock).list_for_employee(entry.employee.id)
        assert len(salaries) == 1
        assert (salaries[0].month, salaries[0].year, salaries[0].status) == (6, 2024, "paid")

    async def test_create_without_salary(self, service, session, clock):
        entry = await self._create_jane(service, salary=None)
        assert entry.current_salary is None
        assert await SalaryService(session, clock).list_for_employee(entry.employee.id) == []

    async def test_create_status(self, service):
        entry = await self._create_jane(service)
        assert entry.employee.status == "active"

        entry = await service.create("Ivan", "Idle", "ivan@example.com", "pw", status="inactive")
        assert entry.employee.status == "inactive"

    async def test_create_invalid_status_writes_nothing(self, service, session):
        with pytest.raises(ValidationError, match="Invalid status"):
            await service.create("Rita", "Retired", "rita@example.com", "pw", status="retired")
        assert await session.scalar(select(func.count()).select_from(User)) == 0

    async def test_create_duplicate_email(self, service, employee_user):
        with pytest.raises(ConflictError, match="User with this email already exists"):
            await service.create("Eve", "Dup", "eve@example.com", "pw")

    async def test_list_and_get(self, service, admin_user, employee_user):
        await self._create_jane(service)

        entries = await service.list_entries()
        assert sorted(e.user.email for e in entries) == ["eve@example.com", "jane@example.com"]

        entry = await service.get(employee_user.id)
        assert entry.employee.id == employee_user.employee.id
        with pytest.raises(NotFoundError):
            await service.get(admin_user.id)

    async def test_update_splits_fields(self, service, employee_user):
        entry = await service.update(
            employee_user.id,
            {"first_name": "Evelyn", "department": "Ops", "status": "inactive"},
        )
        assert entry.user.first_name == "Evelyn"
        assert entry.employee.department == "Ops"
        assert entry.employee.status == "inactive"

    async def test_update_salary_goes_through_ledger(self, service, session, clock):
        created = await self._create_jane(service)

        entry = await service.update(created.user.id, {"salary": "4500"})

        assert entry.employee.salary == Decimal("4500.00")
        assert entry.current_salary == Decimal("4500.00")
        salaries = await SalaryService(session, clock).list_for_employee(created.employee.id)
        assert len(salaries) == 1

    async def test_update_email_conflict(self, service, employee_user):
        created = await self._create_jane(service)
        with pytest.raises(ConflictError):
            await service.update(created.user.id, {"email": "eve@example.com"})

    async def test_update_invalid_status(self, service, employee_user):
        with pytest.raises(ValidationError):
            await service.update(employee_user.id, {"status": "retired"})

    async def test_delete_cascades(self, service, session, clock, storage):
        created = await self._create_jane(service)
        profile_id = created.employee.id
        await AttendanceService(session, clock).clock_in(profile_id)
        await LeaveService(session, clock).apply(
            profile_id, "sick", "R&D", date(2024, 6, 5), date(2024, 6, 5)
        )
        session.add(Document(employee_id=profile_id, document_type="other", file_path="jane.pdf"))
        await session.flush()

        blobs = await service.delete(created.user.id)

        assert blobs == ["jane.pdf"]
        for model in (User, Employee, Attendance, LeaveApplication, Salary, Document):
            count = await session.scalar(select(func.count()).select_from(model))
            assert count == 0, model.__name__

    async def test_delete_unknown(self, service):
        with pytest.raises(NotFoundError):
            await service.delete(999)
