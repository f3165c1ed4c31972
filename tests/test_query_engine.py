"""
PeopleDesk - Query Engine Tests

Tests for filtering, sorting and pagination.
"""

import math
from datetime import date
from decimal import Decimal

import pytest

from factories import leave_data, payroll_data
from peopledesk.models.enums import LeaveStatus
from peopledesk.services.query_engine import (
    MAX_PAGE_SIZE,
    Criterion,
    FieldFilter,
    FilterSpec,
    Sort,
    paginate,
    query,
)
from peopledesk.utils.error_handling import InvalidArgumentException


LEAVE_FIELDS = {
    "status": FieldFilter("status"),
    "employeeId": FieldFilter("employee_id"),
    "startDateFrom": FieldFilter("start_date", "gte"),
    "startDateTo": FieldFilter("start_date", "lte"),
    "search": FieldFilter("reason", "contains"),
}


@pytest.fixture
def leaves(leave_store):
    """Five leave requests across three employees."""
    rows = [
        leave_data(employee_id=1, start_date=date(2024, 3, 4), end_date=date(2024, 3, 4), reason="Dentist"),
        leave_data(employee_id=2, start_date=date(2024, 3, 11), end_date=date(2024, 3, 12), status="APPROVED"),
        leave_data(employee_id=1, start_date=date(2024, 3, 18), end_date=date(2024, 3, 22), reason="Family trip"),
        leave_data(employee_id=3, start_date=date(2024, 3, 11), end_date=date(2024, 3, 11), status="REJECTED"),
        leave_data(employee_id=2, start_date=date(2024, 4, 1), end_date=date(2024, 4, 2), reason="Moving house"),
    ]
    for row in rows:
        leave_store.insert(row)
    return leave_store


class TestPagination:
    """Test the page window and envelope invariants."""

    @pytest.mark.parametrize("total", [0, 1, 9, 10, 11, 25])
    @pytest.mark.parametrize("size", [1, 3, 10, 100])
    @pytest.mark.parametrize("page", [0, 1, 2, 5])
    def test_envelope_invariants(self, total, size, page):
        """Test content length, page count and first/last flags."""
        envelope = paginate(list(range(total)), page, size)

        expected_len = max(0, min(size, total - page * size))
        assert len(envelope.content) == expected_len
        assert envelope.total_elements == total
        assert envelope.total_pages == math.ceil(total / size)
        assert envelope.is_first == (page == 0)
        assert envelope.is_last == ((page + 1) * size >= total)
        assert envelope.content == list(range(total))[page * size:page * size + size]

    def test_empty_result(self):
        """Test an empty source yields a single empty, first and last page."""
        envelope = paginate([], 0, 10)
        assert envelope.content == []
        assert envelope.total_pages == 0
        assert envelope.is_first and envelope.is_last

    @pytest.mark.parametrize("page,size", [(-1, 10), (0, 0), (0, -5), (0, MAX_PAGE_SIZE + 1), ("x", 10)])
    def test_invalid_window_raises(self, page, size):
        """Test negative pages, non-positive or oversized sizes are rejected."""
        with pytest.raises(InvalidArgumentException):
            paginate([1, 2, 3], page, size)

    def test_string_window_is_coerced(self):
        """Test page and size arriving as query strings."""
        envelope = paginate(list(range(30)), "1", "10")
        assert envelope.content == list(range(10, 20))

    def test_wire_aliases(self):
        """Test the envelope serializes to the page wire shape."""
        data = paginate([1, 2, 3], 0, 2).model_dump(by_alias=True)
        assert data == {
            "content": [1, 2],
            "totalElements": 3,
            "totalPages": 2,
            "number": 0,
            "size": 2,
            "first": True,
            "last": False,
        }


class TestFilterSpec:
    """Test filter construction and matching."""

    def test_blank_params_match_all(self, leaves):
        """Test None and empty-string parameters produce no criteria."""
        spec = FilterSpec.from_params({"status": None, "employeeId": "", "search": "  "}, LEAVE_FIELDS)
        assert spec.criteria == ()
        assert query(leaves, spec).total_elements == 5

    def test_unknown_param_raises(self):
        """Test parameters outside the field map are rejected."""
        with pytest.raises(InvalidArgumentException) as exc_info:
            FilterSpec.from_params({"colour": "blue"}, LEAVE_FIELDS)
        assert exc_info.value.details["parameters"] == ["colour"]

    def test_status_string_matches_enum(self, leaves):
        """Test a plain string filter matches enum-valued status."""
        spec = FilterSpec.from_params({"status": "PENDING"}, LEAVE_FIELDS)
        page = query(leaves, spec)
        assert [r.id for r in page.content] == [1, 3, 5]

    def test_integer_param_from_string(self, leaves):
        """Test numeric parameters arriving as strings."""
        spec = FilterSpec.from_params({"employeeId": "2"}, LEAVE_FIELDS)
        assert [r.id for r in query(leaves, spec).content] == [2, 5]

    def test_date_range_is_inclusive(self, leaves):
        """Test ISO date strings against date fields, both bounds inclusive."""
        spec = FilterSpec.from_params(
            {"startDateFrom": "2024-03-11", "startDateTo": "2024-03-18"}, LEAVE_FIELDS
        )
        assert [r.id for r in query(leaves, spec).content] == [2, 3, 4]

    def test_between_with_open_bound(self, leaves):
        """Test a blank bound leaves that side of the range open."""
        spec = FilterSpec().between("start_date", start=date(2024, 3, 18), end=None)
        assert [r.id for r in query(leaves, spec).content] == [3, 5]

    def test_contains_is_case_insensitive(self, leaves):
        """Test substring search ignores case."""
        spec = FilterSpec.from_params({"search": "TRIP"}, LEAVE_FIELDS)
        assert [r.id for r in query(leaves, spec).content] == [3]

    def test_conjunction(self, leaves):
        """Test multiple criteria must all hold."""
        spec = FilterSpec.where(employee_id=1, status=LeaveStatus.PENDING)
        spec = spec.between("start_date", start="2024-03-10")
        assert [r.id for r in query(leaves, spec).content] == [3]

    def test_uncoercible_value_raises(self, leaves):
        """Test a value that cannot become the field's type is rejected."""
        spec = FilterSpec.from_params({"startDateFrom": "next tuesday"}, LEAVE_FIELDS)
        with pytest.raises(InvalidArgumentException) as exc_info:
            query(leaves, spec)
        assert exc_info.value.field == "start_date"

    @pytest.mark.parametrize("params", [
        {"status": "BOGUS"},
        {"startDateFrom": "not-a-date"},
        {"employeeId": "seven"},
    ])
    def test_bad_value_rejected_on_empty_store(self, leave_store, params):
        """Test malformed values fail even when no record is examined."""
        spec = FilterSpec.from_params(params, LEAVE_FIELDS)
        with pytest.raises(InvalidArgumentException):
            query(leave_store, spec)

    def test_bad_value_rejected_when_field_always_missing(self, payroll_store):
        """Test a field that is None on every record still validates its filter."""
        payroll_store.insert(payroll_data(total_net=None))
        with pytest.raises(InvalidArgumentException) as exc_info:
            query(payroll_store, FilterSpec((Criterion("total_net", "gte", "lots"),)))
        assert exc_info.value.field == "total_net"

    def test_bind_converts_to_field_types(self, leave_store):
        spec = FilterSpec.from_params(
            {"status": "PENDING", "employeeId": "7", "startDateFrom": "2024-03-01", "search": "Trip"},
            LEAVE_FIELDS,
        )
        bound = spec.bind(leave_store.model)

        assert [c.value for c in bound.criteria] == [LeaveStatus.PENDING, 7, date(2024, 3, 1), "Trip"]

    def test_missing_value_never_matches_range(self, payroll_store):
        """Test records whose field is None fall outside every range."""
        payroll_store.insert(payroll_data(total_net=Decimal("1000")))
        payroll_store.insert(payroll_data(total_net=None))

        spec = FilterSpec((Criterion("total_net", "gte", "0"),))
        assert [r.id for r in query(payroll_store, spec).content] == [1]

    def test_unknown_field_raises(self, leaves):
        """Test criteria naming a field the model lacks."""
        with pytest.raises(InvalidArgumentException):
            query(leaves, FilterSpec.where(colour="blue"))

    def test_unsupported_operator_raises(self):
        """Test only eq, gte, lte and contains are accepted."""
        with pytest.raises(InvalidArgumentException):
            Criterion("status", "regex", ".*")


class TestSorting:
    """Test single-field stable sorting."""

    def test_parse_inline_direction(self):
        """Test the 'field,desc' form."""
        assert Sort.parse("start_date,desc") == Sort("start_date", descending=True)

    def test_parse_separate_direction(self):
        """Test an explicit direction parameter wins."""
        assert Sort.parse("start_date", "ASC") == Sort("start_date", descending=False)

    def test_parse_blank_returns_none(self):
        assert Sort.parse(None) is None
        assert Sort.parse("") is None

    def test_parse_bad_direction_raises(self):
        with pytest.raises(InvalidArgumentException):
            Sort.parse("start_date", "sideways")

    def test_ascending_sort_is_stable(self, leaves):
        """Test ties keep insertion order."""
        page = query(leaves, sort=Sort("start_date"))
        assert [r.id for r in page.content] == [1, 2, 4, 3, 5]

    def test_descending_sort_is_stable(self, leaves):
        page = query(leaves, sort=Sort("start_date", descending=True))
        assert [r.id for r in page.content] == [5, 3, 2, 4, 1]

    def test_missing_values_sort_last(self, leaves):
        """Test None sorts after every value in both directions."""
        for descending in (False, True):
            page = query(leaves, sort=Sort("reason", descending=descending))
            assert [r.id for r in page.content][-2:] == [2, 4]

    def test_unknown_sort_field_raises(self, leaves):
        with pytest.raises(InvalidArgumentException):
            query(leaves, sort=Sort("colour"))

    def test_results_are_deterministic(self, leaves):
        """Test identical parameters on a static store give identical pages."""
        spec = FilterSpec.from_params({"employeeId": "1"}, LEAVE_FIELDS)
        first = query(leaves, spec, page=0, size=1, sort=Sort("start_date"))
        second = query(leaves, spec, page=0, size=1, sort=Sort("start_date"))
        assert first == second
        assert first.content[0].id == 1
