"""Admin dashboard rollups."""

from fastapi import APIRouter

from employee_mgmt.api.dependencies import AdminIdentity, AppClock, DbSession, RoleGatedRoute
from employee_mgmt.api import schemas
from employee_mgmt.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"], route_class=RoleGatedRoute)


@router.get("/stats", response_model=schemas.DashboardResponse)
async def dashboard_stats(db: DbSession, clock: AppClock, identity: AdminIdentity) -> schemas.DashboardResponse:
    """Headline numbers plus chart groupings."""
    stats = await DashboardService(db, clock).stats()
    return schemas.DashboardResponse(
        stats=schemas.DashboardStats(
            total_employees=stats.total_employees,
            present_today=stats.present_today,
            total_salary_paid=stats.total_salary_paid,
            documents_uploaded=stats.documents_uploaded,
            attendance_rate=stats.attendance_rate,
            avg_salary=stats.avg_salary,
            approved_leaves=stats.approved_leaves,
            pending_leaves=stats.pending_leaves,
            attendance_overview=schemas.AttendanceOverview(
                present=stats.present_today,
                absent=stats.absent_today,
            ),
            salary_distribution=schemas.SalaryDistribution(
                total_paid=stats.total_salary_paid,
                avg_salary=stats.avg_salary,
            ),
            leave_status=schemas.LeaveStatusBreakdown(
                approved=stats.approved_leaves,
                pending=stats.pending_leaves,
            ),
        )
    )
