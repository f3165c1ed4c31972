"""
PeopleDesk - Record Models

Pydantic models for every entity the data layer stores.

All records share an integer id, a status drawn from the entity's
enumeration and created/updated timestamps. The JSON form uses camelCase
aliases to match the backend; snake_case names are accepted as well.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import ClassVar, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from peopledesk.models.enums import (
    AssetStatus,
    AssetType,
    AttendanceStatus,
    BenefitStatus,
    CoverageLevel,
    ExpenseStatus,
    ExpenseType,
    LeaveStatus,
    PayrollRunStatus,
)


class Record(BaseModel):
    """Common shape of every stored entity."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: int
    status: str
    created_at: datetime
    updated_at: datetime

    # Fields that are never changed after insert
    IMMUTABLE_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"id", "created_at"})

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


# ===========================================
# PAYROLL
# ===========================================

class PayrollRun(Record):
    """A payroll run for one organization and pay period."""
    status: PayrollRunStatus
    organization_id: int
    name: Optional[str] = None
    pay_period_start: date
    pay_period_end: date
    pay_date: date
    employee_count: int = 0

    # Totals (illustrative, not audited payroll math)
    total_gross: Optional[Decimal] = None
    total_deductions: Optional[Decimal] = None
    total_net: Optional[Decimal] = None
    total_taxes: Optional[Decimal] = None

    # Workflow
    processed_by: Optional[int] = None
    approved_by: Optional[int] = None
    processed_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    comments: Optional[str] = None
    notes: Optional[str] = None


# ===========================================
# LEAVE
# ===========================================

class LeaveRequest(Record):
    """An employee's request for time off."""
    status: LeaveStatus
    employee_id: int
    leave_type_id: int
    start_date: date
    end_date: date
    total_days: Decimal = Decimal("0")
    reason: Optional[str] = None
    is_half_day: bool = False
    is_emergency: bool = False

    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    review_comments: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    withdrawn_at: Optional[datetime] = None


# ===========================================
# ATTENDANCE
# ===========================================

class AttendanceRecord(Record):
    """One employee's attendance for one day."""
    status: AttendanceStatus
    employee_id: int
    attendance_date: date
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    total_hours: Optional[Decimal] = None
    overtime_hours: Optional[Decimal] = None
    break_hours: Optional[Decimal] = None
    notes: Optional[str] = None


# ===========================================
# BENEFITS
# ===========================================

class BenefitEnrollment(Record):
    """An employee's enrollment in a benefit plan."""
    status: BenefitStatus
    employee_id: int
    benefit_plan_id: int
    coverage_level: CoverageLevel = CoverageLevel.EMPLOYEE_ONLY
    enrollment_date: date
    effective_date: date
    termination_date: Optional[date] = None
    monthly_cost: Optional[Decimal] = None
    activated_at: Optional[datetime] = None
    terminated_at: Optional[datetime] = None


# ===========================================
# ASSETS
# ===========================================

class Asset(Record):
    """A company-owned asset and its custody state."""
    status: AssetStatus
    organization_id: int
    asset_type: AssetType
    asset_tag: Optional[str] = None
    serial_number: Optional[str] = None
    assigned_employee_id: Optional[int] = None
    assigned_at: Optional[datetime] = None
    returned_at: Optional[datetime] = None
    damaged_at: Optional[datetime] = None
    retired_at: Optional[datetime] = None
    purchase_cost: Optional[Decimal] = None


# ===========================================
# EXPENSES
# ===========================================

class ExpenseClaim(Record):
    """An expense submitted by an employee for reimbursement."""
    status: ExpenseStatus
    employee_id: int
    expense_type: ExpenseType
    amount: Optional[Decimal] = None
    expense_date: Optional[date] = None
    description: Optional[str] = None
    receipt_url: Optional[str] = None

    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    paid_at: Optional[datetime] = None
    payment_method: Optional[str] = None
