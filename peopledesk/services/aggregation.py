"""
PeopleDesk - Aggregation Engine

Summary statistics over a (filtered) set of records: counts per status,
named status groups, sums and averages of numeric fields.

Summaries are recomputed on every call and never cached.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Sequence, Tuple

from peopledesk.models.records import Record
from peopledesk.schemas.common import Summary


ZERO = Decimal("0")


def _category(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _as_decimal(value: Any) -> Decimal:
    """Numeric field value as Decimal; missing values count as zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class SummarySpec:
    """
    What to aggregate for one entity type.

    ``categories`` are pre-seeded with zero so every status appears in
    the counts even when no record holds it.
    """
    count_by: str = "status"
    categories: Tuple[str, ...] = ()
    groups: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
    sum_fields: Tuple[str, ...] = ()
    average_fields: Tuple[str, ...] = ()

    @classmethod
    def for_statuses(
        cls,
        statuses: Iterable[Enum],
        groups: Optional[Mapping[str, Iterable[Enum]]] = None,
        sum_fields: Sequence[str] = (),
        average_fields: Sequence[str] = (),
    ) -> "SummarySpec":
        """Spec that counts by status over a status enumeration."""
        return cls(
            count_by="status",
            categories=tuple(_category(s) for s in statuses),
            groups={
                name: frozenset(_category(s) for s in members)
                for name, members in (groups or {}).items()
            },
            sum_fields=tuple(sum_fields),
            average_fields=tuple(average_fields),
        )


def summarize(records: Sequence[Record], spec: SummarySpec) -> Summary:
    """Compute a Summary for ``records``. An empty input yields all zeros."""
    counts: Dict[str, int] = {category: 0 for category in spec.categories}
    for record in records:
        key = _category(getattr(record, spec.count_by, None))
        if key is None:
            continue
        counts[str(key)] = counts.get(str(key), 0) + 1

    groups = {
        name: sum(counts.get(member, 0) for member in members)
        for name, members in spec.groups.items()
    }

    fields = dict.fromkeys(spec.sum_fields + spec.average_fields)
    totals = {
        name: sum((_as_decimal(getattr(record, name, None)) for record in records), ZERO)
        for name in fields
    }

    total = len(records)
    averages = {
        name: (totals[name] / total) if total else ZERO
        for name in spec.average_fields
    }

    return Summary(
        total_count=total,
        counts=counts,
        groups=groups,
        sums={name: totals[name] for name in spec.sum_fields},
        averages=averages,
    )
