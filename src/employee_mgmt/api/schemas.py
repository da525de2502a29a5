"""Pydantic schemas for API request/response models.

Wire names are camelCase; attributes are snake_case.
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
OptionalDate = Annotated[date | None, BeforeValidator(_blank_to_none)]
OptionalAmount = Annotated[Decimal | None, BeforeValidator(_blank_to_none)]
NonEmptyStr = Annotated[str, Field(min_length=1)]


# ============================================================================
# Base schemas
# ============================================================================


class RequestModel(BaseModel):
    """Base for request bodies: camelCase in, unknown fields rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


class ResponseModel(BaseModel):
    """Base for responses: built from ORM objects, camelCase out."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """Every failure is reported as a single message."""

    error: str


class MessageResponse(ResponseModel):
    message: str


# ============================================================================
# Auth schemas
# ============================================================================


class LoginRequest(RequestModel):
    email: NonEmptyStr
    password: NonEmptyStr


class SignupRequest(RequestModel):
    first_name: NonEmptyStr
    last_name: NonEmptyStr
    email: NonEmptyStr
    password: NonEmptyStr
    role: str | None = None


class UserResponse(ResponseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    role: str
    created_at: datetime | None = None


class AuthResponse(ResponseModel):
    user: UserResponse
    token: str


class VerifyResponse(ResponseModel):
    user: UserResponse


# ============================================================================
# Attendance schemas
# ============================================================================


class ClockOutRequest(RequestModel):
    attendance_id: int


class AttendanceResponse(ResponseModel):
    id: int
    employee_id: int
    work_date: date = Field(serialization_alias="date")
    check_in: time
    check_out: time | None = None
    status: str
    first_name: str | None = None
    last_name: str | None = None


class ClockInResponse(ResponseModel):
    message: str
    attendance: AttendanceResponse


class AttendanceListResponse(ResponseModel):
    records: list[AttendanceResponse]


class AttendanceStatsResponse(ResponseModel):
    present: int
    absent: int
    clocked_in: int
    total: int
    records: list[AttendanceResponse]


# ============================================================================
# Employee schemas
# ============================================================================


class EmployeeCreate(RequestModel):
    first_name: NonEmptyStr
    last_name: NonEmptyStr
    email: NonEmptyStr
    password: NonEmptyStr
    phone: str | None = None
    position: str | None = None
    department: str | None = None
    hire_date: OptionalDate = None
    salary: OptionalAmount = None
    status: Literal["active", "inactive"] | None = None


class EmployeeUpdate(RequestModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    position: str | None = None
    department: str | None = None
    hire_date: OptionalDate = None
    salary: OptionalAmount = None
    status: Literal["active", "inactive"] | None = None


class EmployeeResponse(ResponseModel):
    """Directory entry. ``salary`` is the profile baseline, ``current_salary``
    the latest salary record."""

    id: int
    employee_id: int | None = None
    first_name: str
    last_name: str
    email: str
    role: str
    created_at: datetime | None = None
    phone: str | None = None
    position: str | None = None
    department: str | None = None
    hire_date: date | None = None
    salary: Money | None = None
    current_salary: Money | None = None
    status: str | None = None


class EmployeeEnvelope(ResponseModel):
    message: str | None = None
    employee: EmployeeResponse


class EmployeeListResponse(ResponseModel):
    employees: list[EmployeeResponse]


# ============================================================================
# Salary schemas
# ============================================================================


class SalaryCreate(RequestModel):
    employee_id: int
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=1900, le=9999)
    base_salary: Decimal
    incentives: OptionalAmount = None
    deductions: OptionalAmount = None
    status: Literal["pending", "paid"] | None = None


class SalaryUpdate(RequestModel):
    base_salary: OptionalAmount = None
    incentives: OptionalAmount = None
    deductions: OptionalAmount = None
    status: Literal["pending", "paid"] | None = None


class SalaryResponse(ResponseModel):
    id: int
    employee_id: int
    month: int
    year: int
    base_salary: Money
    incentives: Money
    deductions: Money
    amount: Money
    status: str
    paid_at: datetime | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None


class SalaryEnvelope(ResponseModel):
    message: str
    salary: SalaryResponse


class SalaryListResponse(ResponseModel):
    salaries: list[SalaryResponse]


class SalaryStatsResponse(ResponseModel):
    total_paid: Money
    total_pending: Money
    average_salary: Money
    total_records: int


# ============================================================================
# Leave schemas
# ============================================================================


class LeaveCreate(RequestModel):
    leave_type: NonEmptyStr
    department: NonEmptyStr
    start_date: date
    end_date: date
    reason: str | None = None


class LeaveStatusUpdate(RequestModel):
    status: str


class LeaveResponse(ResponseModel):
    id: int
    employee_id: int
    leave_type: str
    department: str
    start_date: date
    end_date: date
    days: int
    reason: str | None = None
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None


class LeaveEnvelope(ResponseModel):
    message: str
    leave: LeaveResponse


class LeaveListResponse(ResponseModel):
    leaves: list[LeaveResponse]


class LeaveStats(ResponseModel):
    pending: int
    approved: int
    rejected: int
    total: int


class LeaveStatsResponse(ResponseModel):
    stats: LeaveStats


# ============================================================================
# Document schemas
# ============================================================================


class DocumentResponse(ResponseModel):
    id: int
    employee_id: int
    document_type: str
    file_path: str
    original_name: str | None = None
    uploaded_at: datetime | None = None
    first_name: str | None = None
    last_name: str | None = None


class DocumentEnvelope(ResponseModel):
    message: str
    document: DocumentResponse


class DocumentListResponse(ResponseModel):
    documents: list[DocumentResponse]


# ============================================================================
# Dashboard schemas
# ============================================================================


class AttendanceOverview(ResponseModel):
    present: int
    absent: int


class SalaryDistribution(ResponseModel):
    total_paid: Money
    avg_salary: Money


class LeaveStatusBreakdown(ResponseModel):
    approved: int
    pending: int


class DashboardStats(ResponseModel):
    total_employees: int
    present_today: int
    total_salary_paid: Money
    documents_uploaded: int
    attendance_rate: int
    avg_salary: Money
    approved_leaves: int
    pending_leaves: int
    attendance_overview: AttendanceOverview
    salary_distribution: SalaryDistribution
    leave_status: LeaveStatusBreakdown


class DashboardResponse(ResponseModel):
    stats: DashboardStats
