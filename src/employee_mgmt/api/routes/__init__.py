"""API route modules."""

from employee_mgmt.api.routes.attendance import router as attendance_router
from employee_mgmt.api.routes.auth import router as auth_router
from employee_mgmt.api.routes.dashboard import router as dashboard_router
from employee_mgmt.api.routes.documents import router as documents_router
from employee_mgmt.api.routes.employees import router as employees_router
from employee_mgmt.api.routes.health import router as health_router
from employee_mgmt.api.routes.leaves import router as leaves_router
from employee_mgmt.api.routes.salaries import router as salaries_router

__all__ = [
    "attendance_router",
    "auth_router",
    "dashboard_router",
    "documents_router",
    "employees_router",
    "health_router",
    "leaves_router",
    "salaries_router",
]
