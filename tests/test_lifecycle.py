"""
PeopleDesk - Lifecycle Validator Tests

Every (from, to) pair of every workflow entity is checked: pairs on the
allow-list pass, every other pair is rejected.
"""

from itertools import product

import pytest

from peopledesk.models.enums import (
    AssetStatus,
    BenefitStatus,
    EntityType,
    ExpenseStatus,
    LeaveStatus,
    PayrollRunStatus,
)
from peopledesk.services.lifecycle import (
    DEFAULT_TABLES,
    LifecycleValidator,
    lifecycle_validator,
)
from peopledesk.utils.error_handling import (
    IllegalTransitionException,
    InvalidArgumentException,
)


LEGAL = {
    EntityType.PAYROLL_RUN: {
        (PayrollRunStatus.DRAFT, PayrollRunStatus.PROCESSING),
        (PayrollRunStatus.PROCESSING, PayrollRunStatus.APPROVED),
        (PayrollRunStatus.APPROVED, PayrollRunStatus.PAID),
        (PayrollRunStatus.DRAFT, PayrollRunStatus.CANCELLED),
        (PayrollRunStatus.PROCESSING, PayrollRunStatus.CANCELLED),
    },
    EntityType.LEAVE_REQUEST: {
        (LeaveStatus.PENDING, LeaveStatus.APPROVED),
        (LeaveStatus.PENDING, LeaveStatus.REJECTED),
        (LeaveStatus.PENDING, LeaveStatus.CANCELLED),
        (LeaveStatus.APPROVED, LeaveStatus.CANCELLED),
        (LeaveStatus.APPROVED, LeaveStatus.WITHDRAWN),
    },
    EntityType.BENEFIT_ENROLLMENT: {
        (BenefitStatus.PENDING, BenefitStatus.ACTIVE),
        (BenefitStatus.ACTIVE, BenefitStatus.TERMINATED),
    },
    EntityType.ASSET: {
        (AssetStatus.AVAILABLE, AssetStatus.ASSIGNED),
        (AssetStatus.ASSIGNED, AssetStatus.AVAILABLE),
        (AssetStatus.AVAILABLE, AssetStatus.DAMAGED),
        (AssetStatus.ASSIGNED, AssetStatus.DAMAGED),
        (AssetStatus.DAMAGED, AssetStatus.AVAILABLE),
        (AssetStatus.AVAILABLE, AssetStatus.RETIRED),
        (AssetStatus.DAMAGED, AssetStatus.RETIRED),
    },
    EntityType.EXPENSE_CLAIM: {
        (ExpenseStatus.SUBMITTED, ExpenseStatus.APPROVED),
        (ExpenseStatus.SUBMITTED, ExpenseStatus.REJECTED),
        (ExpenseStatus.APPROVED, ExpenseStatus.PAID),
    },
}

STATUSES = {
    EntityType.PAYROLL_RUN: PayrollRunStatus,
    EntityType.LEAVE_REQUEST: LeaveStatus,
    EntityType.BENEFIT_ENROLLMENT: BenefitStatus,
    EntityType.ASSET: AssetStatus,
    EntityType.EXPENSE_CLAIM: ExpenseStatus,
}

ALL_PAIRS = [
    (entity_type, source, target)
    for entity_type, statuses in STATUSES.items()
    for source, target in product(statuses, statuses)
]


def pair_id(value):
    return value.value if hasattr(value, "value") else str(value)


class TestTransitionTables:
    """Test the full status cross product of every workflow."""

    @pytest.mark.parametrize("entity_type,source,target", ALL_PAIRS, ids=pair_id)
    def test_assert_transition(self, entity_type, source, target):
        """Test legal pairs pass and every other pair raises."""
        if (source, target) in LEGAL[entity_type]:
            assert lifecycle_validator.assert_transition(entity_type, source, target) == target
        else:
            with pytest.raises(IllegalTransitionException) as exc_info:
                lifecycle_validator.assert_transition(entity_type, source, target)
            error = exc_info.value
            assert error.entity_type == entity_type.value
            assert error.from_status == source.value
            assert error.to_status == target.value
            assert error.status_code == 409

    @pytest.mark.parametrize("entity_type,source,target", ALL_PAIRS, ids=pair_id)
    def test_can_transition_agrees(self, entity_type, source, target):
        expected = (source, target) in LEGAL[entity_type]
        assert lifecycle_validator.can_transition(entity_type, source, target) is expected

    def test_accepts_plain_strings(self):
        """Test statuses and entity types given as strings."""
        assert lifecycle_validator.can_transition("payroll_run", "DRAFT", "PROCESSING")
        assert not lifecycle_validator.can_transition("payroll_run", "DRAFT", "PAID")

    def test_initial_statuses(self):
        assert lifecycle_validator.initial_status(EntityType.PAYROLL_RUN) == PayrollRunStatus.DRAFT
        assert lifecycle_validator.initial_status(EntityType.LEAVE_REQUEST) == LeaveStatus.PENDING
        assert lifecycle_validator.initial_status(EntityType.ASSET) == AssetStatus.AVAILABLE
        assert lifecycle_validator.initial_status(EntityType.EXPENSE_CLAIM) == ExpenseStatus.SUBMITTED


class TestLifecycleQueries:
    """Test allowed targets and terminal states."""

    def test_allowed_targets(self):
        targets = lifecycle_validator.allowed_targets(EntityType.PAYROLL_RUN, PayrollRunStatus.DRAFT)
        assert targets == [PayrollRunStatus.PROCESSING, PayrollRunStatus.CANCELLED]

    @pytest.mark.parametrize("entity_type,status", [
        (EntityType.PAYROLL_RUN, PayrollRunStatus.PAID),
        (EntityType.PAYROLL_RUN, PayrollRunStatus.CANCELLED),
        (EntityType.LEAVE_REQUEST, LeaveStatus.REJECTED),
        (EntityType.LEAVE_REQUEST, LeaveStatus.WITHDRAWN),
        (EntityType.BENEFIT_ENROLLMENT, BenefitStatus.TERMINATED),
        (EntityType.ASSET, AssetStatus.RETIRED),
        (EntityType.EXPENSE_CLAIM, ExpenseStatus.PAID),
    ])
    def test_terminal_states(self, entity_type, status):
        """Test terminal states have no outgoing transitions."""
        assert lifecycle_validator.is_terminal(entity_type, status)

    def test_asset_cycle_is_not_terminal(self):
        """Test assets can move back and forth between AVAILABLE and ASSIGNED."""
        assert not lifecycle_validator.is_terminal(EntityType.ASSET, AssetStatus.AVAILABLE)
        assert not lifecycle_validator.is_terminal(EntityType.ASSET, AssetStatus.ASSIGNED)

    def test_unknown_status_raises_invalid_argument(self):
        """Test a value outside the enumeration is not an illegal transition."""
        with pytest.raises(InvalidArgumentException):
            lifecycle_validator.assert_transition(EntityType.PAYROLL_RUN, "DRAFT", "ARCHIVED")
        assert not lifecycle_validator.can_transition(EntityType.PAYROLL_RUN, "DRAFT", "ARCHIVED")


class TestEntitiesWithoutLifecycle:
    """Test attendance has no transition table."""

    def test_attendance_has_no_lifecycle(self):
        assert not lifecycle_validator.has_lifecycle(EntityType.ATTENDANCE_RECORD)
        assert lifecycle_validator.has_lifecycle(EntityType.PAYROLL_RUN)

    def test_asking_about_attendance_raises(self):
        with pytest.raises(InvalidArgumentException):
            lifecycle_validator.can_transition(EntityType.ATTENDANCE_RECORD, "PRESENT", "ABSENT")

    def test_custom_table_set(self):
        """Test a validator built from a subset of tables."""
        validator = LifecycleValidator(DEFAULT_TABLES[:1])
        assert validator.has_lifecycle(EntityType.PAYROLL_RUN)
        assert not validator.has_lifecycle(EntityType.LEAVE_REQUEST)
