"""
PeopleDesk - Resource Payload Schemas

Pydantic schemas for create and update payloads. Unknown keys are
rejected so that typos never silently drop data.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from peopledesk.models.enums import (
    AssetType,
    AttendanceStatus,
    CoverageLevel,
    ExpenseType,
)


class PayloadBase(BaseModel):
    """Base for inbound payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


# ===========================================
# PAYROLL RUN SCHEMAS
# ===========================================

class PayrollRunCreate(PayloadBase):
    """Create payroll run request."""
    organization_id: int = Field(..., ge=1)
    pay_period_start: date
    pay_period_end: date
    pay_date: date
    name: Optional[str] = Field(None, max_length=255)
    employee_count: int = Field(0, ge=0)
    total_gross: Optional[Decimal] = None
    total_deductions: Optional[Decimal] = None
    total_net: Optional[Decimal] = None
    total_taxes: Optional[Decimal] = None
    notes: Optional[str] = None


class PayrollRunUpdate(PayloadBase):
    """Update payroll run request. Status changes go through transitions."""
    name: Optional[str] = Field(None, max_length=255)
    pay_date: Optional[date] = None
    employee_count: Optional[int] = Field(None, ge=0)
    total_gross: Optional[Decimal] = None
    total_deductions: Optional[Decimal] = None
    total_net: Optional[Decimal] = None
    total_taxes: Optional[Decimal] = None
    notes: Optional[str] = None


# ===========================================
# LEAVE REQUEST SCHEMAS
# ===========================================

class LeaveRequestCreate(PayloadBase):
    """Create leave request."""
    employee_id: int = Field(..., ge=1)
    leave_type_id: int = Field(..., ge=1)
    start_date: date
    end_date: date
    reason: Optional[str] = None
    total_days: Optional[Decimal] = Field(None, ge=0)
    is_half_day: bool = False
    is_emergency: bool = False


class LeaveRequestUpdate(PayloadBase):
    """Update leave request."""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None
    total_days: Optional[Decimal] = Field(None, ge=0)
    is_half_day: Optional[bool] = None
    is_emergency: Optional[bool] = None


# ===========================================
# ATTENDANCE SCHEMAS
# ===========================================

class AttendanceRecordCreate(PayloadBase):
    """Create attendance record. Status is free-form per day."""
    employee_id: int = Field(..., ge=1)
    attendance_date: date
    status: AttendanceStatus = AttendanceStatus.PRESENT
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    total_hours: Optional[Decimal] = Field(None, ge=0)
    overtime_hours: Optional[Decimal] = Field(None, ge=0)
    break_hours: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class AttendanceRecordUpdate(PayloadBase):
    """Update attendance record, including its status."""
    status: Optional[AttendanceStatus] = None
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    total_hours: Optional[Decimal] = Field(None, ge=0)
    overtime_hours: Optional[Decimal] = Field(None, ge=0)
    break_hours: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


# ===========================================
# BENEFIT ENROLLMENT SCHEMAS
# ===========================================

class BenefitEnrollmentCreate(PayloadBase):
    """Enroll an employee in a benefit plan."""
    employee_id: int = Field(..., ge=1)
    benefit_plan_id: int = Field(..., ge=1)
    coverage_level: CoverageLevel = CoverageLevel.EMPLOYEE_ONLY
    enrollment_date: date
    effective_date: date
    monthly_cost: Optional[Decimal] = Field(None, ge=0)


class BenefitEnrollmentUpdate(PayloadBase):
    coverage_level: Optional[CoverageLevel] = None
    effective_date: Optional[date] = None
    monthly_cost: Optional[Decimal] = Field(None, ge=0)


# ===========================================
# ASSET SCHEMAS
# ===========================================

class AssetCreate(PayloadBase):
    """Register a new asset."""
    organization_id: int = Field(..., ge=1)
    asset_type: AssetType
    asset_tag: Optional[str] = Field(None, max_length=100)
    serial_number: Optional[str] = Field(None, max_length=100)
    purchase_cost: Optional[Decimal] = Field(None, ge=0)


class AssetUpdate(PayloadBase):
    asset_tag: Optional[str] = Field(None, max_length=100)
    serial_number: Optional[str] = Field(None, max_length=100)
    purchase_cost: Optional[Decimal] = Field(None, ge=0)


# ===========================================
# EXPENSE CLAIM SCHEMAS
# ===========================================

class ExpenseClaimCreate(PayloadBase):
    """Submit an expense claim."""
    employee_id: int = Field(..., ge=1)
    expense_type: ExpenseType
    amount: Decimal = Field(..., ge=0)
    expense_date: Optional[date] = None
    description: Optional[str] = None
    receipt_url: Optional[str] = None


class ExpenseClaimUpdate(PayloadBase):
    expense_type: Optional[ExpenseType] = None
    amount: Optional[Decimal] = Field(None, ge=0)
    expense_date: Optional[date] = None
    description: Optional[str] = None
    receipt_url: Optional[str] = None


# ===========================================
# BULK SCHEMAS
# ===========================================

class BulkTransitionRequest(PayloadBase):
    """Ids to move through one action, plus shared transition metadata."""
    ids: List[int] = Field(..., min_length=1)
    metadata: Dict[str, Any] = Field(default_factory=dict)
