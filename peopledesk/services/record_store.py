"""
PeopleDesk - Record Store

In-memory table of one entity type's records, keyed by integer id.

Every method is synchronous, so a read-modify-write such as replace()
never contains a suspension point and cannot interleave with another
coroutine on the same event loop.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from pydantic import ValidationError

from peopledesk.models.records import Record
from peopledesk.utils.error_handling import InvalidArgumentException, NotFoundException

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=Record)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current UTC time. Wrapped so tests can inject a fixed clock."""
    return datetime.now(timezone.utc)


def describe_validation_error(exc: ValidationError) -> List[Dict[str, Any]]:
    """Flatten a pydantic ValidationError into field/message pairs."""
    return [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


class RecordStore(Generic[RecordT]):
    """
    Exclusive owner of all records of one entity type.

    Records go in and come out as copies; callers never hold a live
    reference into the table.
    """

    def __init__(
        self,
        model: Type[RecordT],
        resource_name: Optional[str] = None,
        clock: Optional[Clock] = None,
    ):
        self.model = model
        self.resource_name = resource_name or model.__name__
        self._clock = clock or utc_now
        self._records: Dict[int, RecordT] = {}
        self._next_id = 1

    def now(self) -> datetime:
        """Current time from the store clock, always timezone-aware."""
        now = self._clock()
        return now if now.tzinfo else now.replace(tzinfo=timezone.utc)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def insert(self, data: Mapping[str, Any]) -> RecordT:
        """
        Store a new record and return a copy of it.

        The next identifier is always assigned here; any id in ``data`` is
        ignored. Timestamps default to the store clock, but seed data may
        carry its own.
        """
        now = self.now()
        values = dict(data)
        values.pop("id", None)
        values["id"] = self._next_id
        created_at = values.get("created_at") or values.get("createdAt") or now
        values.setdefault("created_at", created_at)
        values.setdefault("updated_at", values.get("updatedAt") or created_at)

        try:
            record = self.model.model_validate(values)
        except ValidationError as e:
            raise InvalidArgumentException(
                message=f"Invalid {self.resource_name} data",
                details={"errors": describe_validation_error(e)},
            ) from e

        if record.updated_at < record.created_at:
            record = record.model_copy(update={"updated_at": record.created_at})

        self._records[record.id] = record
        self._next_id += 1
        return record.model_copy(deep=True)

    def replace(self, record_id: int, patch: Mapping[str, Any]) -> RecordT:
        """
        Merge ``patch`` into an existing record and return the new copy.

        The merged record is validated before it is committed; on any
        failure the stored record is left untouched.
        """
        current = self._records.get(record_id)
        if current is None:
            raise NotFoundException(resource_type=self.resource_name, resource_id=record_id)

        changes = dict(patch)
        unknown = sorted(key for key in changes if key not in self.model.model_fields)
        if unknown:
            raise InvalidArgumentException(
                message=f"Unknown {self.resource_name} field(s): {', '.join(unknown)}",
                details={"fields": unknown},
            )

        for name in self.model.IMMUTABLE_FIELDS:
            if name in changes and changes[name] != getattr(current, name):
                raise InvalidArgumentException(
                    message=f"{name} cannot be changed",
                    field=name,
                )
            changes.pop(name, None)

        merged = current.model_dump()
        merged.update(changes)
        merged["updated_at"] = max(self.now(), current.created_at)

        try:
            record = self.model.model_validate(merged)
        except ValidationError as e:
            raise InvalidArgumentException(
                message=f"Invalid {self.resource_name} data",
                details={"errors": describe_validation_error(e)},
            ) from e

        self._records[record_id] = record
        return record.model_copy(deep=True)

    def delete(self, record_id: int) -> RecordT:
        """Remove a record and return it. Identifiers are never reused."""
        record = self._records.pop(record_id, None)
        if record is None:
            raise NotFoundException(resource_type=self.resource_name, resource_id=record_id)
        return record

    # =========================================================================
    # READS
    # =========================================================================

    def get(self, record_id: int) -> RecordT:
        """Return a copy of one record."""
        record = self._records.get(record_id)
        if record is None:
            raise NotFoundException(resource_type=self.resource_name, resource_id=record_id)
        return record.model_copy(deep=True)

    def all(self) -> List[RecordT]:
        """Snapshot of every record in insertion order."""
        return [record.model_copy(deep=True) for record in self._records.values()]

    def find(self, predicate: Callable[[RecordT], bool]) -> List[RecordT]:
        """Snapshot of the records matching ``predicate``, in insertion order."""
        return [
            record.model_copy(deep=True)
            for record in self._records.values()
            if predicate(record)
        ]

    def seed(self, rows: List[Mapping[str, Any]]) -> int:
        """Insert fixture rows in order. Returns the number inserted."""
        for row in rows:
            self.insert(row)
        logger.debug(f"Seeded {len(rows)} {self.resource_name} record(s)")
        return len(rows)
