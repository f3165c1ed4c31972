"""
PeopleDesk - Status and Category Enumerations

Each entity type declares the closed set of statuses its records may hold.
Values match the backend wire format exactly.
"""

from enum import Enum


class EntityType(str, Enum):
    """Entity types managed by the data layer."""
    PAYROLL_RUN = "payroll_run"
    LEAVE_REQUEST = "leave_request"
    ATTENDANCE_RECORD = "attendance_record"
    BENEFIT_ENROLLMENT = "benefit_enrollment"
    ASSET = "asset"
    EXPENSE_CLAIM = "expense_claim"


# ===========================================
# WORKFLOW STATUSES
# ===========================================

class PayrollRunStatus(str, Enum):
    """Payroll run lifecycle."""
    DRAFT = "DRAFT"
    PROCESSING = "PROCESSING"
    APPROVED = "APPROVED"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class LeaveStatus(str, Enum):
    """Leave request approval workflow."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"
    WITHDRAWN = "WITHDRAWN"


class BenefitStatus(str, Enum):
    """Benefit enrollment lifecycle."""
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    TERMINATED = "TERMINATED"


class AssetStatus(str, Enum):
    """Company asset custody states."""
    AVAILABLE = "AVAILABLE"
    ASSIGNED = "ASSIGNED"
    DAMAGED = "DAMAGED"
    RETIRED = "RETIRED"


class ExpenseStatus(str, Enum):
    """Expense claim reimbursement workflow."""
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PAID = "PAID"


# ===========================================
# NON-WORKFLOW STATUSES
# ===========================================

class AttendanceStatus(str, Enum):
    """
    Daily attendance marker.

    Not a workflow: any value may be set on any day.
    """
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    HALF_DAY = "HALF_DAY"
    ON_LEAVE = "ON_LEAVE"
    HOLIDAY = "HOLIDAY"
    WEEKEND = "WEEKEND"
    WORK_FROM_HOME = "WORK_FROM_HOME"


# ===========================================
# CATEGORIES
# ===========================================

class CoverageLevel(str, Enum):
    EMPLOYEE_ONLY = "EMPLOYEE_ONLY"
    EMPLOYEE_SPOUSE = "EMPLOYEE_SPOUSE"
    EMPLOYEE_CHILDREN = "EMPLOYEE_CHILDREN"
    FAMILY = "FAMILY"


class AssetType(str, Enum):
    LAPTOP = "LAPTOP"
    ID_CARD = "ID_CARD"
    MOBILE = "MOBILE"
    OTHER = "OTHER"


class ExpenseType(str, Enum):
    TRAVEL = "TRAVEL"
    FOOD = "FOOD"
    ACCOMMODATION = "ACCOMMODATION"
    OFFICE = "OFFICE"
    OTHER = "OTHER"
