"""
PeopleDesk - Lifecycle Validator

Finite state machines for entity statuses.

Each workflow entity type has a closed set of statuses and an explicit
allow-list of (from, to) pairs. Anything not on the list is rejected
before the record store is touched. Attendance has no table: its status
is a daily marker, not a workflow.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Type, Union

from peopledesk.models.enums import (
    AssetStatus,
    BenefitStatus,
    EntityType,
    ExpenseStatus,
    LeaveStatus,
    PayrollRunStatus,
)
from peopledesk.utils.error_handling import (
    IllegalTransitionException,
    InvalidArgumentException,
)


StatusLike = Union[str, Enum]


def status_value(status: StatusLike) -> str:
    """Plain string form of a status, whether given as enum or str."""
    return status.value if isinstance(status, Enum) else str(status)


@dataclass(frozen=True)
class TransitionTable:
    """Statuses and legal transitions of one entity type."""
    entity_type: EntityType
    statuses: Type[Enum]
    initial: Enum
    transitions: FrozenSet[Tuple[Enum, Enum]]

    def coerce(self, status: StatusLike) -> Optional[Enum]:
        """Return the enum member for ``status``, or None if it is not one."""
        try:
            return self.statuses(status_value(status))
        except ValueError:
            return None

    def targets_from(self, status: Enum) -> List[Enum]:
        """Legal targets from ``status`` in declaration order of the enum."""
        return [
            target for target in self.statuses
            if (status, target) in self.transitions
        ]


def build_table(
    entity_type: EntityType,
    statuses: Type[Enum],
    initial: Enum,
    pairs: Iterable[Tuple[Enum, Enum]],
) -> TransitionTable:
    return TransitionTable(
        entity_type=entity_type,
        statuses=statuses,
        initial=initial,
        transitions=frozenset(pairs),
    )


# ===========================================
# TRANSITION TABLES
# ===========================================

PAYROLL_RUN_LIFECYCLE = build_table(
    EntityType.PAYROLL_RUN,
    PayrollRunStatus,
    PayrollRunStatus.DRAFT,
    [
        (PayrollRunStatus.DRAFT, PayrollRunStatus.PROCESSING),
        (PayrollRunStatus.PROCESSING, PayrollRunStatus.APPROVED),
        (PayrollRunStatus.APPROVED, PayrollRunStatus.PAID),
        (PayrollRunStatus.DRAFT, PayrollRunStatus.CANCELLED),
        (PayrollRunStatus.PROCESSING, PayrollRunStatus.CANCELLED),
    ],
)

LEAVE_REQUEST_LIFECYCLE = build_table(
    EntityType.LEAVE_REQUEST,
    LeaveStatus,
    LeaveStatus.PENDING,
    [
        (LeaveStatus.PENDING, LeaveStatus.APPROVED),
        (LeaveStatus.PENDING, LeaveStatus.REJECTED),
        (LeaveStatus.PENDING, LeaveStatus.CANCELLED),
        (LeaveStatus.APPROVED, LeaveStatus.CANCELLED),
        (LeaveStatus.APPROVED, LeaveStatus.WITHDRAWN),
    ],
)

BENEFIT_ENROLLMENT_LIFECYCLE = build_table(
    EntityType.BENEFIT_ENROLLMENT,
    BenefitStatus,
    BenefitStatus.PENDING,
    [
        (BenefitStatus.PENDING, BenefitStatus.ACTIVE),
        (BenefitStatus.ACTIVE, BenefitStatus.TERMINATED),
    ],
)

# Assets cycle between AVAILABLE and ASSIGNED for their whole service life
ASSET_LIFECYCLE = build_table(
    EntityType.ASSET,
    AssetStatus,
    AssetStatus.AVAILABLE,
    [
        (AssetStatus.AVAILABLE, AssetStatus.ASSIGNED),
        (AssetStatus.ASSIGNED, AssetStatus.AVAILABLE),
        (AssetStatus.AVAILABLE, AssetStatus.DAMAGED),
        (AssetStatus.ASSIGNED, AssetStatus.DAMAGED),
        (AssetStatus.DAMAGED, AssetStatus.AVAILABLE),
        (AssetStatus.AVAILABLE, AssetStatus.RETIRED),
        (AssetStatus.DAMAGED, AssetStatus.RETIRED),
    ],
)

EXPENSE_CLAIM_LIFECYCLE = build_table(
    EntityType.EXPENSE_CLAIM,
    ExpenseStatus,
    ExpenseStatus.SUBMITTED,
    [
        (ExpenseStatus.SUBMITTED, ExpenseStatus.APPROVED),
        (ExpenseStatus.SUBMITTED, ExpenseStatus.REJECTED),
        (ExpenseStatus.APPROVED, ExpenseStatus.PAID),
    ],
)

DEFAULT_TABLES: Tuple[TransitionTable, ...] = (
    PAYROLL_RUN_LIFECYCLE,
    LEAVE_REQUEST_LIFECYCLE,
    BENEFIT_ENROLLMENT_LIFECYCLE,
    ASSET_LIFECYCLE,
    EXPENSE_CLAIM_LIFECYCLE,
)


# ===========================================
# VALIDATOR
# ===========================================

class LifecycleValidator:
    """
    Gate on status transitions.

    Holds only immutable tables, so one instance can be shared by every
    facade.
    """

    def __init__(self, tables: Iterable[TransitionTable] = DEFAULT_TABLES):
        self._tables: Dict[str, TransitionTable] = {
            status_value(table.entity_type): table for table in tables
        }

    def has_lifecycle(self, entity_type: StatusLike) -> bool:
        return status_value(entity_type) in self._tables

    def table(self, entity_type: StatusLike) -> TransitionTable:
        table = self._tables.get(status_value(entity_type))
        if table is None:
            raise InvalidArgumentException(
                message=f"No lifecycle defined for entity type: {status_value(entity_type)}",
                field="entity_type",
            )
        return table

    def _member(self, table: TransitionTable, status: StatusLike) -> Enum:
        member = table.coerce(status)
        if member is None:
            raise InvalidArgumentException(
                message=(
                    f"Unknown {table.entity_type.value} status: {status_value(status)}"
                ),
                field="status",
                details={"allowed": [s.value for s in table.statuses]},
            )
        return member

    def can_transition(
        self,
        entity_type: StatusLike,
        from_status: StatusLike,
        to_status: StatusLike,
    ) -> bool:
        """True if (from, to) is on the allow-list; unknown statuses are never legal."""
        table = self.table(entity_type)
        source = table.coerce(from_status)
        target = table.coerce(to_status)
        if source is None or target is None:
            return False
        return (source, target) in table.transitions

    def assert_transition(
        self,
        entity_type: StatusLike,
        from_status: StatusLike,
        to_status: StatusLike,
    ) -> Any:
        """
        Raise IllegalTransitionException unless (from, to) is legal.

        Returns the target status as an enum member.
        """
        table = self.table(entity_type)
        source = self._member(table, from_status)
        target = self._member(table, to_status)
        if (source, target) not in table.transitions:
            raise IllegalTransitionException(
                entity_type=table.entity_type.value,
                from_status=source.value,
                to_status=target.value,
            )
        return target

    def allowed_targets(self, entity_type: StatusLike, from_status: StatusLike) -> List[Enum]:
        table = self.table(entity_type)
        return table.targets_from(self._member(table, from_status))

    def is_terminal(self, entity_type: StatusLike, status: StatusLike) -> bool:
        """A status with no outgoing transitions."""
        return not self.allowed_targets(entity_type, status)

    def initial_status(self, entity_type: StatusLike) -> Enum:
        return self.table(entity_type).initial


lifecycle_validator = LifecycleValidator()
