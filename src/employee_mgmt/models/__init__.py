"""ORM models."""

from employee_mgmt.models.base import Base, TimestampMixin
from employee_mgmt.models.account import Employee, User
from employee_mgmt.models.attendance import Attendance
from employee_mgmt.models.document import Document
from employee_mgmt.models.leave import LeaveApplication
from employee_mgmt.models.salary import Salary

__all__ = [
    "Attendance",
    "Base",
    "Document",
    "Employee",
    "LeaveApplication",
    "Salary",
    "TimestampMixin",
    "User",
]
