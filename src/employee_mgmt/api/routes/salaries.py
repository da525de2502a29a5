"""Salary ledger endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, status
from sqlalchemy import select

from employee_mgmt.api.dependencies import (
    AdminIdentity,
    AppClock,
    CurrentIdentity,
    DbSession,
    RoleGatedRoute,
)
from employee_mgmt.api.schemas import (
    ErrorResponse,
    MessageResponse,
    SalaryCreate,
    SalaryEnvelope,
    SalaryListResponse,
    SalaryResponse,
    SalaryStatsResponse,
    SalaryUpdate,
)
from employee_mgmt.errors import AuthorizationError, NotFoundError
from employee_mgmt.models import Employee, Salary
from employee_mgmt.services.employee_service import require_profile
from employee_mgmt.services.salary_service import SalaryService, SalaryStats

router = APIRouter(prefix="/salaries", tags=["salaries"], route_class=RoleGatedRoute)


def _salary(
    salary: Salary,
    first_name: str | None = None,
    last_name: str | None = None,
    email: str | None = None,
) -> SalaryResponse:
    return SalaryResponse(
        id=salary.id,
        employee_id=salary.employee_id,
        month=salary.month,
        year=salary.year,
        base_salary=salary.base_salary,
        incentives=salary.incentives,
        deductions=salary.deductions,
        amount=salary.amount,
        status=salary.status,
        paid_at=salary.paid_at,
        first_name=first_name,
        last_name=last_name,
        email=email,
    )


def _stats(stats: SalaryStats) -> SalaryStatsResponse:
    return SalaryStatsResponse(
        total_paid=stats.total_paid,
        total_pending=stats.total_pending,
        average_salary=stats.average_salary,
        total_records=stats.total_records,
    )


@router.get("", response_model=SalaryListResponse)
async def list_salaries(db: DbSession, clock: AppClock, identity: AdminIdentity) -> SalaryListResponse:
    """Every salary record with the employee's name, newest period first."""
    rows = await SalaryService(db, clock).list_all()
    return SalaryListResponse(salaries=[_salary(*row) for row in rows])


@router.get(
    "/my",
    response_model=SalaryListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def my_salaries(db: DbSession, clock: AppClock, identity: CurrentIdentity) -> SalaryListResponse:
    """The caller's own salary records."""
    employee = await require_profile(db, identity.id)
    records = await SalaryService(db, clock).list_for_employee(employee.id)
    return SalaryListResponse(salaries=[_salary(s) for s in records])


@router.get(
    "/employee/{user_id}",
    response_model=SalaryListResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def employee_salaries(
    db: DbSession,
    clock: AppClock,
    identity: CurrentIdentity,
    user_id: Annotated[int, Path()],
) -> SalaryListResponse:
    """Salary records of one account: admins any, employees only their own."""
    if not identity.is_admin and identity.id != user_id:
        raise AuthorizationError("Access denied")
    employee = await require_profile(db, user_id)
    records = await SalaryService(db, clock).list_for_employee(employee.id)
    return SalaryListResponse(salaries=[_salary(s) for s in records])


@router.post(
    "",
    response_model=SalaryEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_salary(
    db: DbSession,
    clock: AppClock,
    identity: AdminIdentity,
    payload: SalaryCreate,
) -> SalaryEnvelope:
    """Create a record for an (employee, month, year) that has none yet."""
    employee = await db.scalar(select(Employee).where(Employee.user_id == payload.employee_id))
    if employee is None:
        raise NotFoundError("Employee does not exist")
    salary = await SalaryService(db, clock).create(
        employee.id,
        payload.month,
        payload.year,
        payload.base_salary,
        payload.incentives,
        payload.deductions,
        payload.status,
    )
    await db.commit()
    return SalaryEnvelope(message="Salary record created successfully", salary=_salary(salary))


@router.put(
    "/{salary_id}",
    response_model=SalaryEnvelope,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_salary(
    db: DbSession,
    clock: AppClock,
    identity: AdminIdentity,
    salary_id: Annotated[int, Path()],
    payload: SalaryUpdate,
) -> SalaryEnvelope:
    """Patch components or status; the net amount is recomputed."""
    salary = await SalaryService(db, clock).update(
        salary_id,
        base_salary=payload.base_salary,
        incentives=payload.incentives,
        deductions=payload.deductions,
        status=payload.status,
    )
    await db.commit()
    return SalaryEnvelope(message="Salary record updated successfully", salary=_salary(salary))


@router.delete(
    "/{salary_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_salary(
    db: DbSession,
    clock: AppClock,
    identity: AdminIdentity,
    salary_id: Annotated[int, Path()],
) -> MessageResponse:
    await SalaryService(db, clock).delete(salary_id)
    await db.commit()
    return MessageResponse(message="Salary record deleted successfully")


@router.get("/stats/admin", response_model=SalaryStatsResponse)
async def admin_salary_stats(db: DbSession, clock: AppClock, identity: AdminIdentity) -> SalaryStatsResponse:
    """Totals across every employee."""
    return _stats(await SalaryService(db, clock).stats())


@router.get(
    "/stats/employee",
    response_model=SalaryStatsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def employee_salary_stats(db: DbSession, clock: AppClock, identity: CurrentIdentity) -> SalaryStatsResponse:
    """Totals for the caller's own records."""
    employee = await require_profile(db, identity.id)
    return _stats(await SalaryService(db, clock).stats(employee.id))
