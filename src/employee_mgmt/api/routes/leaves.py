"""Leave application endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from employee_mgmt.api.dependencies import (
    AdminIdentity,
    AppClock,
    CurrentIdentity,
    DbSession,
    RoleGatedRoute,
)
from employee_mgmt.api.schemas import (
    ErrorResponse,
    LeaveCreate,
    LeaveEnvelope,
    LeaveListResponse,
    LeaveResponse,
    LeaveStats,
    LeaveStatsResponse,
    LeaveStatusUpdate,
    MessageResponse,
)
from employee_mgmt.models import LeaveApplication
from employee_mgmt.services.employee_service import require_profile
from employee_mgmt.services.leave_service import LeaveRow, LeaveService

router = APIRouter(prefix="/leaves", tags=["leaves"], route_class=RoleGatedRoute)


def _leave(leave: LeaveApplication, row: LeaveRow | None = None) -> LeaveResponse:
    return LeaveResponse(
        id=leave.id,
        employee_id=leave.employee_id,
        leave_type=leave.leave_type,
        department=leave.department,
        start_date=leave.start_date,
        end_date=leave.end_date,
        days=leave.days,
        reason=leave.reason,
        status=leave.status,
        created_at=leave.created_at,
        updated_at=leave.updated_at,
        first_name=row.first_name if row else None,
        last_name=row.last_name if row else None,
        email=row.email if row else None,
        phone=row.phone if row else None,
    )


@router.post(
    "",
    response_model=LeaveEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def apply_for_leave(
    db: DbSession,
    clock: AppClock,
    identity: CurrentIdentity,
    payload: LeaveCreate,
) -> LeaveEnvelope:
    """File a pending leave request for the caller."""
    employee = await require_profile(db, identity.id)
    leave = await LeaveService(db, clock).apply(
        employee.id,
        payload.leave_type,
        payload.department,
        payload.start_date,
        payload.end_date,
        payload.reason,
    )
    await db.commit()
    return LeaveEnvelope(message="Leave application submitted successfully", leave=_leave(leave))


@router.get(
    "",
    response_model=LeaveListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def my_leaves(db: DbSession, clock: AppClock, identity: CurrentIdentity) -> LeaveListResponse:
    """The caller's own leave requests, newest first."""
    employee = await require_profile(db, identity.id)
    rows = await LeaveService(db, clock).list_for_employee(employee.id)
    return LeaveListResponse(leaves=[_leave(row.leave, row) for row in rows])


@router.get("/admin", response_model=LeaveListResponse)
async def all_leaves(
    db: DbSession,
    clock: AppClock,
    identity: AdminIdentity,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    emp_id: Annotated[int | None, Query(alias="empId")] = None,
    name: Annotated[str | None, Query()] = None,
) -> LeaveListResponse:
    """Every leave request, optionally filtered by status, account or name."""
    rows = await LeaveService(db, clock).list_all(status_filter, emp_id, name)
    return LeaveListResponse(leaves=[_leave(row.leave, row) for row in rows])


@router.put(
    "/{leave_id}/status",
    response_model=LeaveEnvelope,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def decide_leave(
    db: DbSession,
    clock: AppClock,
    identity: AdminIdentity,
    leave_id: Annotated[int, Path()],
    payload: LeaveStatusUpdate,
) -> LeaveEnvelope:
    """Approve or reject a pending request."""
    leave = await LeaveService(db, clock).set_status(leave_id, payload.status)
    await db.commit()
    return LeaveEnvelope(
        message=f"Leave application {leave.status} successfully",
        leave=_leave(leave),
    )


@router.get("/stats/admin", response_model=LeaveStatsResponse)
async def leave_stats(db: DbSession, clock: AppClock, identity: AdminIdentity) -> LeaveStatsResponse:
    stats = await LeaveService(db, clock).stats()
    return LeaveStatsResponse(
        stats=LeaveStats(
            pending=stats.pending,
            approved=stats.approved,
            rejected=stats.rejected,
            total=stats.total,
        )
    )


@router.delete(
    "/{leave_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_leave(
    db: DbSession,
    clock: AppClock,
    identity: CurrentIdentity,
    leave_id: Annotated[int, Path()],
) -> MessageResponse:
    """Admins delete any request; employees only their own pending ones."""
    await LeaveService(db, clock).delete(leave_id, identity)
    await db.commit()
    return MessageResponse(message="Leave application deleted successfully")
