"""
PeopleDesk - Seed Fixtures

Static records loaded into a fresh store when SEED_FIXTURES is on. Rows use
the backend's camelCase wire names, exactly as the live API returns them.
Stores are rebuilt from these rows on every process start.
"""

from typing import Any, Dict, List

from peopledesk.models.enums import EntityType


PAYROLL_RUNS: List[Dict[str, Any]] = [
    {
        "organizationId": 1,
        "name": "January 2024 - First Half",
        "payPeriodStart": "2024-01-01",
        "payPeriodEnd": "2024-01-15",
        "payDate": "2024-01-20",
        "status": "APPROVED",
        "totalGross": "215000.00",
        "totalDeductions": "43000.00",
        "totalNet": "172000.00",
        "totalTaxes": "38000.00",
        "employeeCount": 2,
        "processedBy": 2,
        "approvedBy": 1,
        "processedAt": "2024-01-18T10:00:00Z",
        "approvedAt": "2024-01-19T09:30:00Z",
        "createdAt": "2024-01-16T08:00:00Z",
        "updatedAt": "2024-01-19T09:30:00Z",
    },
    {
        "organizationId": 1,
        "name": "January 2024 - Second Half",
        "payPeriodStart": "2024-01-16",
        "payPeriodEnd": "2024-01-31",
        "payDate": "2024-02-05",
        "status": "PROCESSING",
        "totalGross": "218000.00",
        "totalDeductions": "43600.00",
        "totalNet": "174400.00",
        "totalTaxes": "38500.00",
        "employeeCount": 2,
        "processedBy": 2,
        "processedAt": "2024-02-01T11:00:00Z",
        "createdAt": "2024-02-01T08:00:00Z",
        "updatedAt": "2024-02-01T11:00:00Z",
    },
    {
        "organizationId": 1,
        "name": "February 2024 - First Half",
        "payPeriodStart": "2024-02-01",
        "payPeriodEnd": "2024-02-15",
        "payDate": "2024-02-20",
        "status": "DRAFT",
        "totalGross": "0",
        "totalDeductions": "0",
        "totalNet": "0",
        "totalTaxes": "0",
        "employeeCount": 0,
        "createdAt": "2024-02-16T08:00:00Z",
        "updatedAt": "2024-02-16T08:00:00Z",
    },
]

LEAVE_REQUESTS: List[Dict[str, Any]] = [
    {
        "employeeId": 1,
        "leaveTypeId": 1,
        "startDate": "2024-02-12",
        "endDate": "2024-02-14",
        "totalDays": "3",
        "reason": "Family vacation",
        "status": "APPROVED",
        "reviewedBy": 2,
        "reviewedAt": "2024-02-02T10:00:00Z",
        "reviewComments": "Approved",
        "createdAt": "2024-02-01T09:00:00Z",
        "updatedAt": "2024-02-02T10:00:00Z",
    },
    {
        "employeeId": 2,
        "leaveTypeId": 2,
        "startDate": "2024-02-20",
        "endDate": "2024-02-20",
        "totalDays": "1",
        "reason": "Medical appointment",
        "status": "PENDING",
        "createdAt": "2024-02-15T14:30:00Z",
        "updatedAt": "2024-02-15T14:30:00Z",
    },
    {
        "employeeId": 3,
        "leaveTypeId": 1,
        "startDate": "2024-03-04",
        "endDate": "2024-03-08",
        "totalDays": "5",
        "reason": "Personal travel",
        "status": "PENDING",
        "createdAt": "2024-02-18T08:15:00Z",
        "updatedAt": "2024-02-18T08:15:00Z",
    },
    {
        "employeeId": 1,
        "leaveTypeId": 3,
        "startDate": "2024-01-22",
        "endDate": "2024-01-22",
        "totalDays": "0.5",
        "isHalfDay": True,
        "reason": "Bank errand",
        "status": "REJECTED",
        "reviewedBy": 2,
        "reviewedAt": "2024-01-19T16:00:00Z",
        "reviewComments": "Month-end close",
        "createdAt": "2024-01-18T11:00:00Z",
        "updatedAt": "2024-01-19T16:00:00Z",
    },
]

ATTENDANCE_RECORDS: List[Dict[str, Any]] = [
    {
        "employeeId": 1,
        "attendanceDate": "2024-02-12",
        "status": "ON_LEAVE",
        "createdAt": "2024-02-12T00:00:00Z",
        "updatedAt": "2024-02-12T00:00:00Z",
    },
    {
        "employeeId": 2,
        "attendanceDate": "2024-02-12",
        "status": "PRESENT",
        "checkInTime": "2024-02-12T09:02:00Z",
        "checkOutTime": "2024-02-12T18:05:00Z",
        "totalHours": "8.5",
        "overtimeHours": "0.5",
        "breakHours": "0.5",
        "createdAt": "2024-02-12T09:02:00Z",
        "updatedAt": "2024-02-12T18:05:00Z",
    },
    {
        "employeeId": 3,
        "attendanceDate": "2024-02-12",
        "status": "LATE",
        "checkInTime": "2024-02-12T10:20:00Z",
        "checkOutTime": "2024-02-12T18:30:00Z",
        "totalHours": "7.5",
        "breakHours": "0.5",
        "notes": "Traffic",
        "createdAt": "2024-02-12T10:20:00Z",
        "updatedAt": "2024-02-12T18:30:00Z",
    },
    {
        "employeeId": 2,
        "attendanceDate": "2024-02-13",
        "status": "WORK_FROM_HOME",
        "totalHours": "8",
        "createdAt": "2024-02-13T09:00:00Z",
        "updatedAt": "2024-02-13T17:00:00Z",
    },
]

BENEFIT_ENROLLMENTS: List[Dict[str, Any]] = [
    {
        "employeeId": 1,
        "benefitPlanId": 1,
        "coverageLevel": "FAMILY",
        "enrollmentDate": "2024-01-01",
        "effectiveDate": "2024-01-01",
        "monthlyCost": "450.00",
        "status": "ACTIVE",
        "activatedAt": "2024-01-01T00:00:00Z",
        "createdAt": "2023-12-15T10:00:00Z",
        "updatedAt": "2024-01-01T00:00:00Z",
    },
    {
        "employeeId": 2,
        "benefitPlanId": 2,
        "coverageLevel": "EMPLOYEE_ONLY",
        "enrollmentDate": "2024-02-01",
        "effectiveDate": "2024-03-01",
        "monthlyCost": "120.00",
        "status": "PENDING",
        "createdAt": "2024-02-01T12:00:00Z",
        "updatedAt": "2024-02-01T12:00:00Z",
    },
    {
        "employeeId": 3,
        "benefitPlanId": 1,
        "coverageLevel": "EMPLOYEE_SPOUSE",
        "enrollmentDate": "2023-01-01",
        "effectiveDate": "2023-01-01",
        "terminationDate": "2023-12-31",
        "monthlyCost": "300.00",
        "status": "TERMINATED",
        "activatedAt": "2023-01-01T00:00:00Z",
        "terminatedAt": "2023-12-31T00:00:00Z",
        "createdAt": "2022-12-10T10:00:00Z",
        "updatedAt": "2023-12-31T00:00:00Z",
    },
]

ASSETS: List[Dict[str, Any]] = [
    {
        "organizationId": 1,
        "assetType": "LAPTOP",
        "assetTag": "LAP-001",
        "serialNumber": "DL-XPS-2024-001",
        "status": "ASSIGNED",
        "assignedEmployeeId": 1,
        "assignedAt": "2024-01-02T09:00:00Z",
        "purchaseCost": "1450.00",
        "createdAt": "2023-12-20T09:00:00Z",
        "updatedAt": "2024-01-02T09:00:00Z",
    },
    {
        "organizationId": 1,
        "assetType": "MOBILE",
        "assetTag": "MOB-001",
        "serialNumber": "IP15-2024-001",
        "status": "AVAILABLE",
        "purchaseCost": "999.00",
        "createdAt": "2024-01-05T09:00:00Z",
        "updatedAt": "2024-01-05T09:00:00Z",
    },
    {
        "organizationId": 1,
        "assetType": "ID_CARD",
        "assetTag": "ID-003",
        "status": "DAMAGED",
        "damagedAt": "2024-02-10T15:00:00Z",
        "purchaseCost": "5.00",
        "createdAt": "2023-06-01T09:00:00Z",
        "updatedAt": "2024-02-10T15:00:00Z",
    },
]

EXPENSE_CLAIMS: List[Dict[str, Any]] = [
    {
        "employeeId": 1,
        "expenseType": "TRAVEL",
        "amount": "245.50",
        "expenseDate": "2024-02-05",
        "description": "Client visit taxi fares",
        "status": "SUBMITTED",
        "createdAt": "2024-02-06T09:00:00Z",
        "updatedAt": "2024-02-06T09:00:00Z",
    },
    {
        "employeeId": 2,
        "expenseType": "FOOD",
        "amount": "60.00",
        "expenseDate": "2024-02-07",
        "description": "Team lunch",
        "status": "APPROVED",
        "approvedBy": 1,
        "approvedAt": "2024-02-08T11:00:00Z",
        "createdAt": "2024-02-07T15:00:00Z",
        "updatedAt": "2024-02-08T11:00:00Z",
    },
    {
        "employeeId": 3,
        "expenseType": "ACCOMMODATION",
        "amount": "380.00",
        "expenseDate": "2024-01-24",
        "description": "Hotel for onsite training",
        "status": "PAID",
        "approvedBy": 1,
        "approvedAt": "2024-01-26T10:00:00Z",
        "paidAt": "2024-01-31T12:00:00Z",
        "paymentMethod": "BANK_TRANSFER",
        "createdAt": "2024-01-25T08:00:00Z",
        "updatedAt": "2024-01-31T12:00:00Z",
    },
]


FIXTURES: Dict[EntityType, List[Dict[str, Any]]] = {
    EntityType.PAYROLL_RUN: PAYROLL_RUNS,
    EntityType.LEAVE_REQUEST: LEAVE_REQUESTS,
    EntityType.ATTENDANCE_RECORD: ATTENDANCE_RECORDS,
    EntityType.BENEFIT_ENROLLMENT: BENEFIT_ENROLLMENTS,
    EntityType.ASSET: ASSETS,
    EntityType.EXPENSE_CLAIM: EXPENSE_CLAIMS,
}


def fixtures_for(entity_type: EntityType) -> List[Dict[str, Any]]:
    """Fresh copies of the seed rows for one entity type."""
    return [dict(row) for row in FIXTURES.get(entity_type, [])]
