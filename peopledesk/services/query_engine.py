"""
PeopleDesk - Query Engine

Filtering, sorting and pagination over a Record Store snapshot.

A FilterSpec is a conjunction of criteria. Parameters that are absent,
None or an empty string produce no criterion, so an omitted filter always
means "match all".
"""

import math
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from functools import lru_cache
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import TypeAdapter, ValidationError

from peopledesk.models.records import Record
from peopledesk.schemas.common import PageEnvelope
from peopledesk.services.record_store import RecordStore, describe_validation_error
from peopledesk.utils.error_handling import InvalidArgumentException


# ===========================================
# CONSTANTS
# ===========================================

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

OPERATORS = ("eq", "gte", "lte", "contains")


def is_blank(value: Any) -> bool:
    """True for values that mean "not filtered": None and empty string."""
    return value is None or (isinstance(value, str) and value.strip() == "")


# ===========================================
# VALUE COERCION
# ===========================================

def coerce_like(value: Any, reference: Any, field_name: str) -> Any:
    """
    Convert a filter value to the type of a stored field value.

    Query parameters usually arrive as strings; records hold dates,
    enums and Decimals.
    """
    try:
        if isinstance(reference, Enum):
            raw = value.value if isinstance(value, Enum) else value
            return type(reference)(raw)
        if isinstance(reference, bool):
            if isinstance(value, str):
                if value.lower() in ("true", "1", "yes"):
                    return True
                if value.lower() in ("false", "0", "no"):
                    return False
                raise ValueError(value)
            return bool(value)
        if isinstance(reference, datetime):
            if isinstance(value, datetime):
                return value if value.tzinfo or not reference.tzinfo else value.replace(tzinfo=reference.tzinfo)
            if isinstance(value, date):
                return datetime(value.year, value.month, value.day, tzinfo=reference.tzinfo)
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
            if parsed.tzinfo is None and reference.tzinfo is not None:
                parsed = parsed.replace(tzinfo=reference.tzinfo)
            return parsed
        if isinstance(reference, date):
            if isinstance(value, datetime):
                return value.date()
            if isinstance(value, date):
                return value
            return date.fromisoformat(str(value)[:10])
        if isinstance(reference, Decimal):
            return Decimal(str(value))
        if isinstance(reference, int):
            return int(value)
        if isinstance(reference, float):
            return float(value)
        if isinstance(reference, str):
            return value.value if isinstance(value, Enum) else str(value)
    except (ValueError, TypeError, InvalidOperation) as e:
        raise InvalidArgumentException(
            message=f"Invalid filter value for {field_name}: {value!r}",
            field=field_name,
        ) from e
    return value


@lru_cache(maxsize=None)
def field_adapter(annotation: Any) -> TypeAdapter:
    return TypeAdapter(annotation)


def coerce_to_field(model: type, criterion: "Criterion") -> "Criterion":
    """Convert a criterion's value using the model's annotation for its field."""
    value = criterion.value
    if criterion.op == "contains":
        return replace(criterion, value=str(value.value if isinstance(value, Enum) else value))

    annotation = model.model_fields[criterion.field].annotation
    if isinstance(value, datetime) and annotation in (date, Optional[date]):
        value = value.date()
    try:
        coerced = field_adapter(annotation).validate_python(value)
    except ValidationError as e:
        raise InvalidArgumentException(
            message=f"Invalid filter value for {criterion.field}: {value!r}",
            field=criterion.field,
            details={"errors": describe_validation_error(e)},
        ) from e
    return replace(criterion, value=coerced)


# ===========================================
# FILTERS
# ===========================================

@dataclass(frozen=True)
class Criterion:
    """One predicate over one record field."""
    field: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in OPERATORS:
            raise InvalidArgumentException(
                message=f"Unsupported filter operator: {self.op}",
                field=self.field,
            )

    def matches(self, record: Record) -> bool:
        actual = getattr(record, self.field, None)
        if actual is None:
            return False

        if self.op == "contains":
            return str(self.value).lower() in str(
                actual.value if isinstance(actual, Enum) else actual
            ).lower()

        expected = coerce_like(self.value, actual, self.field)
        if self.op == "eq":
            return actual == expected
        if self.op == "gte":
            return actual >= expected
        return actual <= expected


@dataclass(frozen=True)
class FieldFilter:
    """Maps one query parameter onto a record field and operator."""
    field: str
    op: str = "eq"


@dataclass(frozen=True)
class FilterSpec:
    """Conjunction of criteria. Empty spec matches every record."""
    criteria: Tuple[Criterion, ...] = ()

    @classmethod
    def where(cls, **equals: Any) -> "FilterSpec":
        """Equality criteria from keyword arguments, skipping blank values."""
        return cls(tuple(
            Criterion(name, "eq", value)
            for name, value in equals.items()
            if not is_blank(value)
        ))

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        field_map: Mapping[str, FieldFilter],
    ) -> "FilterSpec":
        """
        Build criteria from search parameters.

        Unknown parameter names are rejected; blank values are skipped.
        """
        unknown = sorted(name for name in params if name not in field_map)
        if unknown:
            raise InvalidArgumentException(
                message=f"Unknown filter parameter(s): {', '.join(unknown)}",
                details={"parameters": unknown, "allowed": sorted(field_map)},
            )
        criteria = []
        for name, value in params.items():
            if is_blank(value):
                continue
            mapping = field_map[name]
            criteria.append(Criterion(mapping.field, mapping.op, value))
        return cls(tuple(criteria))

    def and_(self, *criteria: Criterion) -> "FilterSpec":
        return FilterSpec(self.criteria + tuple(criteria))

    def between(self, field_name: str, start: Any = None, end: Any = None) -> "FilterSpec":
        """Add an inclusive range on one field; a blank bound is open."""
        extra = []
        if not is_blank(start):
            extra.append(Criterion(field_name, "gte", start))
        if not is_blank(end):
            extra.append(Criterion(field_name, "lte", end))
        return self.and_(*extra)

    def matches(self, record: Record) -> bool:
        return all(criterion.matches(record) for criterion in self.criteria)

    def bind(self, model: type) -> "FilterSpec":
        """
        Check every criterion against ``model`` and convert its value to
        the field's declared type.

        Runs before any record is read, so a malformed value fails the
        same way whatever the store holds.
        """
        unknown = sorted({c.field for c in self.criteria if c.field not in model.model_fields})
        if unknown:
            raise InvalidArgumentException(
                message=f"Cannot filter on unknown field(s): {', '.join(unknown)}",
                details={"fields": unknown},
            )
        return FilterSpec(tuple(coerce_to_field(model, c) for c in self.criteria))


# ===========================================
# SORTING
# ===========================================

@dataclass(frozen=True)
class Sort:
    """Single-field stable sort."""
    field: str
    descending: bool = False

    @classmethod
    def parse(cls, sort: Optional[str], direction: Optional[str] = None) -> Optional["Sort"]:
        """
        Parse ``sort`` ("field" or "field,desc") plus an optional direction.

        Returns None when no sort field is given.
        """
        if is_blank(sort):
            return None
        name, _, inline_direction = str(sort).partition(",")
        raw_direction = (direction or inline_direction or "asc").strip().lower()
        if raw_direction not in ("asc", "desc"):
            raise InvalidArgumentException(
                message=f"Invalid sort direction: {raw_direction}",
                field="direction",
            )
        return cls(field=name.strip(), descending=raw_direction == "desc")


def sort_records(records: Sequence[Record], sort: Sort) -> List[Record]:
    """
    Stable sort by one field; ties keep insertion order and records
    without a value always come last.
    """
    present = [r for r in records if getattr(r, sort.field, None) is not None]
    missing = [r for r in records if getattr(r, sort.field, None) is None]
    # sorted() stays stable with reverse=True
    ordered = sorted(present, key=lambda r: getattr(r, sort.field), reverse=sort.descending)
    return ordered + missing


# ===========================================
# QUERY
# ===========================================

def validate_page_window(page: Any, size: Any) -> Tuple[int, int]:
    """Coerce and check a zero-based page number and page size."""
    try:
        page_number = int(page)
        page_size = int(size)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentException(
            message=f"Page and size must be integers (got page={page!r}, size={size!r})",
        ) from e
    if page_number < 0:
        raise InvalidArgumentException(message="Page must be zero or greater", field="page")
    if page_size < 1:
        raise InvalidArgumentException(message="Size must be at least 1", field="size")
    if page_size > MAX_PAGE_SIZE:
        raise InvalidArgumentException(
            message=f"Size must not exceed {MAX_PAGE_SIZE}",
            field="size",
        )
    return page_number, page_size


def paginate(records: Sequence[Any], page: int, size: int) -> PageEnvelope:
    """Cut one page out of an already filtered and sorted sequence."""
    page, size = validate_page_window(page, size)
    total = len(records)
    start = page * size
    end = start + size
    return PageEnvelope(
        content=list(records[start:end]),
        total_elements=total,
        total_pages=math.ceil(total / size),
        page_number=page,
        page_size=size,
        is_first=page == 0,
        is_last=end >= total,
    )


def apply_filter(records: Iterable[Record], filter_spec: Optional[FilterSpec]) -> List[Record]:
    if filter_spec is None or not filter_spec.criteria:
        return list(records)
    return [record for record in records if filter_spec.matches(record)]


def query(
    source: Union[RecordStore, Sequence[Record]],
    filter_spec: Optional[FilterSpec] = None,
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
    sort: Optional[Sort] = None,
) -> PageEnvelope:
    """
    Filter, sort and paginate a store (or a snapshot of one).

    Results are deterministic for a static store: the same parameters
    always yield the same page.
    """
    page, size = validate_page_window(page, size)
    records = source.all() if isinstance(source, RecordStore) else list(source)

    if isinstance(source, RecordStore):
        model = source.model
        if filter_spec is not None:
            filter_spec = filter_spec.bind(model)
        if sort is not None and sort.field not in model.model_fields:
            raise InvalidArgumentException(
                message=f"Cannot sort on unknown field: {sort.field}",
                field="sort",
            )

    matched = apply_filter(records, filter_spec)
    if sort is not None:
        matched = sort_records(matched, sort)
    return paginate(matched, page, size)
