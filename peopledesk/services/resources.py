"""
PeopleDesk - Resource Definitions and Registry

Declarative definition of every managed entity type, and the factory that
builds one facade per entity from Settings.

The data mode is decided here, once: build_resource_facades() reads
settings.use_mock and hands each facade either a RecordStore or the
RemoteBackend. Facades themselves never consult configuration.
"""

import logging
from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from peopledesk.config import Settings, get_settings
from peopledesk.models.enums import (
    AssetStatus,
    AttendanceStatus,
    BenefitStatus,
    EntityType,
    ExpenseStatus,
    LeaveStatus,
    PayrollRunStatus,
)
from peopledesk.models.records import (
    Asset,
    AttendanceRecord,
    BenefitEnrollment,
    ExpenseClaim,
    LeaveRequest,
    PayrollRun,
)
from peopledesk.schemas.resources import (
    AssetCreate,
    AssetUpdate,
    AttendanceRecordCreate,
    AttendanceRecordUpdate,
    BenefitEnrollmentCreate,
    BenefitEnrollmentUpdate,
    ExpenseClaimCreate,
    ExpenseClaimUpdate,
    LeaveRequestCreate,
    LeaveRequestUpdate,
    PayrollRunCreate,
    PayrollRunUpdate,
)
from peopledesk.services.aggregation import SummarySpec
from peopledesk.services.fixtures import fixtures_for
from peopledesk.services.lifecycle import LifecycleValidator, lifecycle_validator
from peopledesk.services.query_engine import FieldFilter
from peopledesk.services.record_store import Clock, RecordStore
from peopledesk.services.remote_backend import HttpRemoteBackend, RemoteBackend
from peopledesk.services.resource_facade import (
    Delay,
    RemoteResourceFacade,
    ResourceDefinition,
    ResourceFacade,
    SimulatedLatency,
    SimulatedResourceFacade,
)
from peopledesk.utils.error_handling import (
    InvalidArgumentException,
    InvalidDateRangeException,
)

logger = logging.getLogger(__name__)


# ===========================================
# CREATE / UPDATE HOOKS
# ===========================================

def check_date_range(start: Optional[date], end: Optional[date]) -> None:
    if start is not None and end is not None and end < start:
        raise InvalidDateRangeException(start.isoformat(), end.isoformat())


def leave_days(start: date, end: date, is_half_day: bool = False) -> Decimal:
    """Inclusive calendar days; a half day takes half a day off the total."""
    days = Decimal((end - start).days + 1)
    return days - Decimal("0.5") if is_half_day else days


def prepare_payroll_run(values: Dict[str, Any]) -> Dict[str, Any]:
    start, end = values["pay_period_start"], values["pay_period_end"]
    check_date_range(start, end)
    values.setdefault("name", f"Payroll {start.isoformat()} - {end.isoformat()}")
    for total in ("total_gross", "total_deductions", "total_net", "total_taxes"):
        values.setdefault(total, Decimal("0"))
    return values


def prepare_leave_request(values: Dict[str, Any]) -> Dict[str, Any]:
    check_date_range(values["start_date"], values["end_date"])
    if "total_days" not in values:
        values["total_days"] = leave_days(
            values["start_date"], values["end_date"], values.get("is_half_day", False)
        )
    return values


def prepare_leave_update(current: LeaveRequest, changes: Dict[str, Any]) -> Dict[str, Any]:
    start = changes.get("start_date") or current.start_date
    end = changes.get("end_date") or current.end_date
    check_date_range(start, end)
    reshaped = {"start_date", "end_date", "is_half_day"}.intersection(changes)
    if reshaped and changes.get("total_days") is None:
        half_day = changes.get("is_half_day")
        changes["total_days"] = leave_days(
            start, end, current.is_half_day if half_day is None else half_day
        )
    return changes


def prepare_benefit_transition(
    current: BenefitEnrollment, target: Enum, changes: Dict[str, Any]
) -> Dict[str, Any]:
    if target == BenefitStatus.TERMINATED and not changes.get("termination_date"):
        stamped = changes.get("terminated_at")
        changes["termination_date"] = stamped.date() if stamped else date.today()
    return changes


def prepare_asset_transition(current: Asset, target: Enum, changes: Dict[str, Any]) -> Dict[str, Any]:
    """Keep the custodian in step with the asset's status."""
    if target == AssetStatus.ASSIGNED:
        if not changes.get("assigned_employee_id"):
            raise InvalidArgumentException(
                message="assignedEmployeeId is required to assign an asset",
                field="assigned_employee_id",
            )
    elif current.assigned_employee_id is not None:
        changes["assigned_employee_id"] = None
    return changes


# ===========================================
# DEFINITIONS
# ===========================================

PAYROLL_RUN_RESOURCE = ResourceDefinition(
    entity_type=EntityType.PAYROLL_RUN,
    resource_name="Payroll run",
    model=PayrollRun,
    create_schema=PayrollRunCreate,
    update_schema=PayrollRunUpdate,
    path="/payroll/runs",
    statuses=PayrollRunStatus,
    initial_status=PayrollRunStatus.DRAFT,
    filter_fields={
        "status": FieldFilter("status"),
        "organizationId": FieldFilter("organization_id"),
        "payPeriodStart": FieldFilter("pay_period_start", "gte"),
        "payPeriodEnd": FieldFilter("pay_period_end", "lte"),
        "search": FieldFilter("name", "contains"),
    },
    stamps={
        "PROCESSING": "processed_at",
        "APPROVED": "approved_at",
        "PAID": "paid_at",
        "CANCELLED": "cancelled_at",
    },
    actions={
        "PROCESSING": "process",
        "APPROVED": "approve",
        "PAID": "pay",
        "CANCELLED": "cancel",
    },
    transition_fields=frozenset({"processed_by", "approved_by", "comments", "cancellation_reason"}),
    summary_spec=SummarySpec.for_statuses(
        PayrollRunStatus,
        groups={
            "pendingRuns": [PayrollRunStatus.DRAFT, PayrollRunStatus.PROCESSING],
            "completedRuns": [PayrollRunStatus.APPROVED, PayrollRunStatus.PAID],
        },
        sum_fields=["employee_count", "total_gross", "total_deductions", "total_net", "total_taxes"],
        average_fields=["total_net"],
    ),
    prepare_create=prepare_payroll_run,
)

LEAVE_REQUEST_RESOURCE = ResourceDefinition(
    entity_type=EntityType.LEAVE_REQUEST,
    resource_name="Leave request",
    model=LeaveRequest,
    create_schema=LeaveRequestCreate,
    update_schema=LeaveRequestUpdate,
    path="/leaves",
    statuses=LeaveStatus,
    initial_status=LeaveStatus.PENDING,
    filter_fields={
        "status": FieldFilter("status"),
        "employeeId": FieldFilter("employee_id"),
        "leaveTypeId": FieldFilter("leave_type_id"),
        "startDateFrom": FieldFilter("start_date", "gte"),
        "startDateTo": FieldFilter("start_date", "lte"),
        "search": FieldFilter("reason", "contains"),
    },
    stamps={
        "APPROVED": "reviewed_at",
        "REJECTED": "reviewed_at",
        "CANCELLED": "cancelled_at",
        "WITHDRAWN": "withdrawn_at",
    },
    actions={
        "APPROVED": "approve",
        "REJECTED": "reject",
        "CANCELLED": "cancel",
        "WITHDRAWN": "withdraw",
    },
    transition_fields=frozenset({"reviewed_by", "review_comments"}),
    summary_spec=SummarySpec.for_statuses(
        LeaveStatus,
        groups={
            "open": [LeaveStatus.PENDING],
            "closed": [LeaveStatus.REJECTED, LeaveStatus.CANCELLED, LeaveStatus.WITHDRAWN],
        },
        sum_fields=["total_days"],
        average_fields=["total_days"],
    ),
    prepare_create=prepare_leave_request,
    prepare_update=prepare_leave_update,
)

ATTENDANCE_RECORD_RESOURCE = ResourceDefinition(
    entity_type=EntityType.ATTENDANCE_RECORD,
    resource_name="Attendance record",
    model=AttendanceRecord,
    create_schema=AttendanceRecordCreate,
    update_schema=AttendanceRecordUpdate,
    path="/attendance",
    statuses=AttendanceStatus,
    initial_status=AttendanceStatus.PRESENT,
    filter_fields={
        "status": FieldFilter("status"),
        "employeeId": FieldFilter("employee_id"),
        "startDate": FieldFilter("attendance_date", "gte"),
        "endDate": FieldFilter("attendance_date", "lte"),
        "search": FieldFilter("notes", "contains"),
    },
    transition_fields=frozenset({"notes"}),
    summary_spec=SummarySpec.for_statuses(
        AttendanceStatus,
        groups={
            "present": [
                AttendanceStatus.PRESENT,
                AttendanceStatus.LATE,
                AttendanceStatus.HALF_DAY,
                AttendanceStatus.WORK_FROM_HOME,
            ],
            "absent": [AttendanceStatus.ABSENT],
            "onLeave": [AttendanceStatus.ON_LEAVE],
        },
        sum_fields=["total_hours", "overtime_hours"],
        average_fields=["total_hours"],
    ),
)

BENEFIT_ENROLLMENT_RESOURCE = ResourceDefinition(
    entity_type=EntityType.BENEFIT_ENROLLMENT,
    resource_name="Benefit enrollment",
    model=BenefitEnrollment,
    create_schema=BenefitEnrollmentCreate,
    update_schema=BenefitEnrollmentUpdate,
    path="/benefits/employee-benefits",
    statuses=BenefitStatus,
    initial_status=BenefitStatus.PENDING,
    filter_fields={
        "status": FieldFilter("status"),
        "employeeId": FieldFilter("employee_id"),
        "benefitPlanId": FieldFilter("benefit_plan_id"),
        "coverageLevel": FieldFilter("coverage_level"),
    },
    stamps={
        "ACTIVE": "activated_at",
        "TERMINATED": "terminated_at",
    },
    actions={
        "ACTIVE": "activate",
        "TERMINATED": "terminate",
    },
    transition_fields=frozenset({"termination_date"}),
    summary_spec=SummarySpec.for_statuses(
        BenefitStatus,
        groups={"enrolled": [BenefitStatus.PENDING, BenefitStatus.ACTIVE]},
        sum_fields=["monthly_cost"],
        average_fields=["monthly_cost"],
    ),
    prepare_transition=prepare_benefit_transition,
)

ASSET_RESOURCE = ResourceDefinition(
    entity_type=EntityType.ASSET,
    resource_name="Asset",
    model=Asset,
    create_schema=AssetCreate,
    update_schema=AssetUpdate,
    path="/assets",
    statuses=AssetStatus,
    initial_status=AssetStatus.AVAILABLE,
    filter_fields={
        "status": FieldFilter("status"),
        "assetType": FieldFilter("asset_type"),
        "organizationId": FieldFilter("organization_id"),
        "assignedEmployeeId": FieldFilter("assigned_employee_id"),
        "search": FieldFilter("asset_tag", "contains"),
    },
    stamps={
        "ASSIGNED": "assigned_at",
        "AVAILABLE": "returned_at",
        "DAMAGED": "damaged_at",
        "RETIRED": "retired_at",
    },
    actions={
        "ASSIGNED": "assign",
        "AVAILABLE": "return",
        "DAMAGED": "damage",
        "RETIRED": "retire",
    },
    transition_fields=frozenset({"assigned_employee_id"}),
    summary_spec=SummarySpec.for_statuses(
        AssetStatus,
        groups={"inService": [AssetStatus.AVAILABLE, AssetStatus.ASSIGNED]},
        sum_fields=["purchase_cost"],
    ),
    prepare_transition=prepare_asset_transition,
)

EXPENSE_CLAIM_RESOURCE = ResourceDefinition(
    entity_type=EntityType.EXPENSE_CLAIM,
    resource_name="Expense claim",
    model=ExpenseClaim,
    create_schema=ExpenseClaimCreate,
    update_schema=ExpenseClaimUpdate,
    path="/expenses",
    statuses=ExpenseStatus,
    initial_status=ExpenseStatus.SUBMITTED,
    filter_fields={
        "status": FieldFilter("status"),
        "employeeId": FieldFilter("employee_id"),
        "expenseType": FieldFilter("expense_type"),
        "startDate": FieldFilter("expense_date", "gte"),
        "endDate": FieldFilter("expense_date", "lte"),
        "minAmount": FieldFilter("amount", "gte"),
        "maxAmount": FieldFilter("amount", "lte"),
        "search": FieldFilter("description", "contains"),
    },
    stamps={
        "APPROVED": "approved_at",
        "REJECTED": "rejected_at",
        "PAID": "paid_at",
    },
    actions={
        "APPROVED": "approve",
        "REJECTED": "reject",
        "PAID": "mark-paid",
    },
    transition_fields=frozenset({"approved_by", "rejection_reason", "payment_method"}),
    summary_spec=SummarySpec.for_statuses(
        ExpenseStatus,
        groups={"outstanding": [ExpenseStatus.SUBMITTED, ExpenseStatus.APPROVED]},
        sum_fields=["amount"],
        average_fields=["amount"],
    ),
)

RESOURCE_DEFINITIONS: Dict[EntityType, ResourceDefinition] = {
    definition.entity_type: definition
    for definition in (
        PAYROLL_RUN_RESOURCE,
        LEAVE_REQUEST_RESOURCE,
        ATTENDANCE_RECORD_RESOURCE,
        BENEFIT_ENROLLMENT_RESOURCE,
        ASSET_RESOURCE,
        EXPENSE_CLAIM_RESOURCE,
    )
}


# ===========================================
# REGISTRY
# ===========================================

@dataclass
class ResourceFacades:
    """One facade per entity type, all in the same data mode."""
    payroll_runs: ResourceFacade
    leave_requests: ResourceFacade
    attendance_records: ResourceFacade
    benefit_enrollments: ResourceFacade
    assets: ResourceFacade
    expense_claims: ResourceFacade

    def __iter__(self) -> Iterator[ResourceFacade]:
        return (getattr(self, f.name) for f in fields(self))

    def for_entity(self, entity_type: Any) -> ResourceFacade:
        for facade in self:
            if facade.entity_type.value == getattr(entity_type, "value", entity_type):
                return facade
        raise InvalidArgumentException(
            message=f"Unknown entity type: {entity_type}",
            field="entity_type",
        )

    def all(self) -> List[ResourceFacade]:
        return list(self)


def build_simulated_facade(
    definition: ResourceDefinition,
    delay: Delay,
    clock: Optional[Clock] = None,
    seed: bool = True,
    validator: LifecycleValidator = lifecycle_validator,
    default_page_size: int = 10,
) -> SimulatedResourceFacade:
    store = RecordStore(definition.model, definition.resource_name, clock=clock)
    if seed:
        store.seed(fixtures_for(definition.entity_type))
    return SimulatedResourceFacade(
        definition,
        store=store,
        validator=validator,
        delay=delay,
        default_page_size=default_page_size,
    )


def build_resource_facades(
    settings: Optional[Settings] = None,
    backend: Optional[RemoteBackend] = None,
    delay: Optional[Delay] = None,
    clock: Optional[Clock] = None,
    seed: Optional[bool] = None,
    validator: LifecycleValidator = lifecycle_validator,
) -> ResourceFacades:
    """
    Build every facade in the mode chosen by ``settings.use_mock``.

    Args:
        settings: Defaults to the cached application settings.
        backend: RemoteBackend for live mode. Defaults to HttpRemoteBackend.
        delay: Simulated latency. Defaults to settings.mock_delay_ms.
        clock: Store clock for simulated mode.
        seed: Load fixtures into fresh stores. Defaults to settings.seed_fixtures.
    """
    settings = settings or get_settings()
    page_size = settings.default_page_size
    built: Dict[EntityType, ResourceFacade] = {}

    if settings.use_mock:
        delay = delay if delay is not None else SimulatedLatency(settings.mock_delay_ms)
        seed = settings.seed_fixtures if seed is None else seed
        for entity_type, definition in RESOURCE_DEFINITIONS.items():
            built[entity_type] = build_simulated_facade(
                definition,
                delay=delay,
                clock=clock,
                seed=seed,
                validator=validator,
                default_page_size=page_size,
            )
        logger.info(f"Resource facades running in simulation mode (delay={delay!r}, seeded={seed})")
    else:
        backend = backend or HttpRemoteBackend(settings=settings)
        for entity_type, definition in RESOURCE_DEFINITIONS.items():
            built[entity_type] = RemoteResourceFacade(
                definition,
                backend=backend,
                default_page_size=page_size,
                lifecycle_governed=validator.has_lifecycle(entity_type),
            )
        logger.info(f"Resource facades forwarding to {settings.backend_base_url}")

    return ResourceFacades(
        payroll_runs=built[EntityType.PAYROLL_RUN],
        leave_requests=built[EntityType.LEAVE_REQUEST],
        attendance_records=built[EntityType.ATTENDANCE_RECORD],
        benefit_enrollments=built[EntityType.BENEFIT_ENROLLMENT],
        assets=built[EntityType.ASSET],
        expense_claims=built[EntityType.EXPENSE_CLAIM],
    )
