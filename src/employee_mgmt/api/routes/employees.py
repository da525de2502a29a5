"""Employee directory endpoints (admin only)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Path, status

from employee_mgmt.api.dependencies import (
    AdminIdentity,
    AppClock,
    AppSettings,
    DbSession,
    RoleGatedRoute,
    Storage,
)
from employee_mgmt.api.schemas import (
    EmployeeCreate,
    EmployeeEnvelope,
    EmployeeListResponse,
    EmployeeResponse,
    EmployeeUpdate,
    ErrorResponse,
    MessageResponse,
)
from employee_mgmt.services.auth_service import AuthService
from employee_mgmt.services.employee_service import DirectoryEntry, EmployeeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"], route_class=RoleGatedRoute)


def _entry(entry: DirectoryEntry) -> EmployeeResponse:
    user, employee = entry.user, entry.employee
    return EmployeeResponse(
        id=user.id,
        employee_id=employee.id if employee else None,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        role=user.role,
        created_at=user.created_at,
        phone=employee.phone if employee else None,
        position=employee.position if employee else None,
        department=employee.department if employee else None,
        hire_date=employee.hire_date if employee else None,
        salary=employee.salary if employee else None,
        current_salary=entry.current_salary,
        status=employee.status if employee else None,
    )


def _service(db: DbSession, clock: AppClock, settings: AppSettings) -> EmployeeService:
    auth = AuthService(db, settings.jwt_secret, settings.token_ttl_hours)
    return EmployeeService(db, clock, auth)


@router.get("", response_model=EmployeeListResponse)
async def list_employees(
    db: DbSession,
    clock: AppClock,
    settings: AppSettings,
    identity: AdminIdentity,
) -> EmployeeListResponse:
    """All employee accounts with profile and latest salary record."""
    entries = await _service(db, clock, settings).list_entries()
    return EmployeeListResponse(employees=[_entry(e) for e in entries])


@router.post(
    "",
    response_model=EmployeeEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_employee(
    db: DbSession,
    clock: AppClock,
    settings: AppSettings,
    identity: AdminIdentity,
    payload: EmployeeCreate,
) -> EmployeeEnvelope:
    """Create account, profile and (with a salary) the current period's salary record."""
    service = _service(db, clock, settings)
    created = await service.create(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        password=payload.password,
        phone=payload.phone,
        position=payload.position,
        department=payload.department,
        hire_date=payload.hire_date,
        salary=payload.salary,
        status=payload.status,
    )
    await db.commit()
    entry = await service.get(created.user.id)
    return EmployeeEnvelope(message="Employee created successfully", employee=_entry(entry))


@router.get(
    "/{user_id}",
    response_model=EmployeeEnvelope,
    responses={404: {"model": ErrorResponse}},
)
async def get_employee(
    db: DbSession,
    clock: AppClock,
    settings: AppSettings,
    identity: AdminIdentity,
    user_id: Annotated[int, Path()],
) -> EmployeeEnvelope:
    entry = await _service(db, clock, settings).get(user_id)
    return EmployeeEnvelope(employee=_entry(entry))


@router.put(
    "/{user_id}",
    response_model=EmployeeEnvelope,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_employee(
    db: DbSession,
    clock: AppClock,
    settings: AppSettings,
    identity: AdminIdentity,
    user_id: Annotated[int, Path()],
    payload: EmployeeUpdate,
) -> EmployeeEnvelope:
    """Partial update; a salary change is mirrored into the salary ledger."""
    service = _service(db, clock, settings)
    await service.update(user_id, payload.model_dump(exclude_unset=True))
    await db.commit()
    entry = await service.get(user_id)
    return EmployeeEnvelope(message="Employee updated successfully", employee=_entry(entry))


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_employee(
    db: DbSession,
    clock: AppClock,
    settings: AppSettings,
    storage: Storage,
    identity: AdminIdentity,
    user_id: Annotated[int, Path()],
) -> MessageResponse:
    """Delete the employee with all attendance, leave, salary and document data."""
    blobs = await _service(db, clock, settings).delete(user_id)
    await db.commit()
    for name in blobs:
        storage.remove(name)
    return MessageResponse(message="Employee deleted successfully")
