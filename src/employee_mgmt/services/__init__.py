"""Business services."""

from employee_mgmt.services.state_machine import (
    InvalidTransitionError,
    LeaveStateMachine,
    LeaveStatus,
    SalaryStateMachine,
    SalaryStatus,
)
from employee_mgmt.services.auth_service import AuthService
from employee_mgmt.services.salary_service import SalaryService
from employee_mgmt.services.employee_service import EmployeeService
from employee_mgmt.services.attendance_service import AttendanceService
from employee_mgmt.services.leave_service import LeaveService
from employee_mgmt.services.document_service import DocumentService, DocumentStorage
from employee_mgmt.services.dashboard_service import DashboardService

__all__ = [
    "AttendanceService",
    "AuthService",
    "DashboardService",
    "DocumentService",
    "DocumentStorage",
    "EmployeeService",
    "InvalidTransitionError",
    "LeaveService",
    "LeaveStateMachine",
    "LeaveStatus",
    "SalaryService",
    "SalaryStateMachine",
    "SalaryStatus",
]
