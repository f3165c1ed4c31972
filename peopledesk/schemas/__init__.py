"""
PeopleDesk - Schemas Package

Pydantic schemas for request payloads and response envelopes.
"""

from peopledesk.schemas.common import PageEnvelope, Summary
from peopledesk.schemas.resources import (
    PayloadBase,
    BulkTransitionRequest,
    # Payroll
    PayrollRunCreate,
    PayrollRunUpdate,
    # Leave
    LeaveRequestCreate,
    LeaveRequestUpdate,
    # Attendance
    AttendanceRecordCreate,
    AttendanceRecordUpdate,
    # Benefits
    BenefitEnrollmentCreate,
    BenefitEnrollmentUpdate,
    # Assets
    AssetCreate,
    AssetUpdate,
    # Expenses
    ExpenseClaimCreate,
    ExpenseClaimUpdate,
)

__all__ = [
    "PageEnvelope",
    "Summary",
    "PayloadBase",
    "BulkTransitionRequest",
    "PayrollRunCreate",
    "PayrollRunUpdate",
    "LeaveRequestCreate",
    "LeaveRequestUpdate",
    "AttendanceRecordCreate",
    "AttendanceRecordUpdate",
    "BenefitEnrollmentCreate",
    "BenefitEnrollmentUpdate",
    "AssetCreate",
    "AssetUpdate",
    "ExpenseClaimCreate",
    "ExpenseClaimUpdate",
]
