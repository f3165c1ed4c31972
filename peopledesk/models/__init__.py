"""
PeopleDesk - Models Package

Record models and status enumerations for every managed entity.
"""

from peopledesk.models.enums import (
    EntityType,
    PayrollRunStatus,
    LeaveStatus,
    AttendanceStatus,
    BenefitStatus,
    AssetStatus,
    ExpenseStatus,
    CoverageLevel,
    AssetType,
    ExpenseType,
)
from peopledesk.models.records import (
    Record,
    PayrollRun,
    LeaveRequest,
    AttendanceRecord,
    BenefitEnrollment,
    Asset,
    ExpenseClaim,
)

__all__ = [
    "EntityType",
    "PayrollRunStatus",
    "LeaveStatus",
    "AttendanceStatus",
    "BenefitStatus",
    "AssetStatus",
    "ExpenseStatus",
    "CoverageLevel",
    "AssetType",
    "ExpenseType",
    "Record",
    "PayrollRun",
    "LeaveRequest",
    "AttendanceRecord",
    "BenefitEnrollment",
    "Asset",
    "ExpenseClaim",
]
