"""
PeopleDesk - Resource Facade

The public per-entity contract: list, get, create, update, delete,
transition, bulk transition and summary. Two implementations exist and one
is chosen once at construction:

- SimulatedResourceFacade serves every call from an in-memory RecordStore
  after an injectable latency.
- RemoteResourceFacade forwards every call to a RemoteBackend and parses
  the JSON into the same result types.

Callers never branch on which one they hold.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    FrozenSet,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    Union,
)

from pydantic import BaseModel, TypeAdapter, ValidationError

from peopledesk.models.enums import EntityType
from peopledesk.models.records import Record
from peopledesk.schemas.common import PageEnvelope, Summary
from peopledesk.services.aggregation import SummarySpec, summarize
from peopledesk.services.lifecycle import (
    LifecycleValidator,
    lifecycle_validator,
    status_value,
)
from peopledesk.services.query_engine import (
    DEFAULT_PAGE_SIZE,
    FieldFilter,
    FilterSpec,
    Sort,
    apply_filter,
    is_blank,
    query,
)
from peopledesk.services.record_store import RecordStore, describe_validation_error
from peopledesk.services.remote_backend import RemoteBackend
from peopledesk.utils.error_handling import (
    ExternalServiceException,
    IllegalTransitionException,
    InvalidArgumentException,
)

logger = logging.getLogger(__name__)


Delay = Callable[[], Awaitable[None]]
Payload = Union[BaseModel, Mapping[str, Any]]

# List parameters that control the page window rather than filter records
PAGING_KEYS = frozenset({"page", "size", "sort", "direction"})


# ===========================================
# SIMULATED LATENCY
# ===========================================

class SimulatedLatency:
    """Awaitable delay applied before every simulated operation."""

    def __init__(self, milliseconds: int = 500):
        self.seconds = max(milliseconds, 0) / 1000

    async def __call__(self) -> None:
        if self.seconds > 0:
            await asyncio.sleep(self.seconds)

    def __repr__(self) -> str:
        return f"SimulatedLatency({int(self.seconds * 1000)}ms)"


async def no_latency() -> None:
    """Zero delay, for tests and the mock backend API."""
    return None


# ===========================================
# RESOURCE DEFINITION
# ===========================================

@dataclass(frozen=True)
class ResourceDefinition:
    """
    Everything that differs between entity types.

    One generic facade implementation is instantiated per definition.
    """
    entity_type: EntityType
    resource_name: str
    model: Type[Record]
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    path: str
    statuses: Type[Enum]
    initial_status: Enum
    filter_fields: Mapping[str, FieldFilter] = field(default_factory=dict)
    # target status value -> timestamp field set when entering it
    stamps: Mapping[str, str] = field(default_factory=dict)
    # target status value -> URL action segment, defaults to the lowercased status
    actions: Mapping[str, str] = field(default_factory=dict)
    # attribute names a transition's metadata may set
    transition_fields: FrozenSet[str] = frozenset()
    summary_spec: SummarySpec = field(default_factory=SummarySpec)
    prepare_create: Optional[Callable[[Dict[str, Any]], Dict[str, Any]]] = None
    prepare_update: Optional[Callable[[Record, Dict[str, Any]], Dict[str, Any]]] = None
    prepare_transition: Optional[Callable[[Record, Enum, Dict[str, Any]], Dict[str, Any]]] = None

    def action_for(self, target: Enum) -> str:
        return self.actions.get(target.value, target.value.lower())

    def target_for_action(self, action: str) -> Optional[Enum]:
        """Inverse of action_for; None when the action is unknown."""
        for status in self.statuses:
            if self.action_for(status) == action:
                return status
        return None

    def coerce_status(self, status: Any) -> Enum:
        try:
            return self.statuses(status_value(status))
        except ValueError as e:
            raise InvalidArgumentException(
                message=f"Unknown {self.resource_name} status: {status_value(status)}",
                field="status",
                details={"allowed": [s.value for s in self.statuses]},
            ) from e

    def resolve_field(self, name: str) -> str:
        """Map a camelCase wire name to the model's attribute name."""
        fields = self.model.model_fields
        if name in fields:
            return name
        for attribute, info in fields.items():
            if info.alias == name:
                return attribute
        return name

    def transition_changes(self, metadata: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Metadata keyed by attribute name, limited to ``transition_fields``.

        Timestamps and every other field are owned by the transition itself.
        """
        changes = {self.resolve_field(key): value for key, value in (metadata or {}).items()}
        rejected = sorted(set(changes) - self.transition_fields)
        if rejected:
            raise InvalidArgumentException(
                message=f"{self.resource_name} transitions cannot set: {', '.join(rejected)}",
                details={"fields": rejected, "allowed": sorted(self.transition_fields)},
            )
        return changes


# ===========================================
# PAYLOAD HELPERS
# ===========================================

def validate_payload(schema: Type[BaseModel], payload: Payload) -> BaseModel:
    """Validate an inbound DTO against ``schema``; errors become InvalidArgument."""
    if isinstance(payload, schema):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    if not isinstance(payload, Mapping):
        raise InvalidArgumentException(
            message=f"Payload must be an object, got {type(payload).__name__}",
        )
    try:
        return schema.model_validate(dict(payload))
    except ValidationError as e:
        raise InvalidArgumentException(
            message="Invalid request payload",
            details={"errors": describe_validation_error(e)},
        ) from e


def split_list_params(
    params: Optional[Mapping[str, Any]],
    default_size: int = DEFAULT_PAGE_SIZE,
) -> Tuple[Any, Any, Optional[Sort], Dict[str, Any]]:
    """Separate page/size/sort/direction from filter parameters."""
    values = dict(params or {})
    page = values.pop("page", None)
    size = values.pop("size", None)
    sort = Sort.parse(values.pop("sort", None), values.pop("direction", None))
    return (
        0 if is_blank(page) else page,
        default_size if is_blank(size) else size,
        sort,
        values,
    )


# ===========================================
# FACADE CONTRACT
# ===========================================

class ResourceFacade(ABC):
    """Mode-agnostic operations on one entity type."""

    def __init__(self, definition: ResourceDefinition, default_page_size: int = DEFAULT_PAGE_SIZE):
        self.definition = definition
        self.default_page_size = default_page_size

    @property
    def entity_type(self) -> EntityType:
        return self.definition.entity_type

    @abstractmethod
    async def list(self, params: Optional[Mapping[str, Any]] = None) -> PageEnvelope:
        """One page of records matching ``params`` (filters plus page/size/sort)."""

    @abstractmethod
    async def get(self, record_id: int) -> Record:
        """One record by id. Raises NotFoundException."""

    @abstractmethod
    async def create(self, dto: Payload) -> Record:
        """Create a record in the entity's initial status."""

    @abstractmethod
    async def update(self, record_id: int, patch: Payload) -> Record:
        """Edit non-status fields of a record."""

    @abstractmethod
    async def transition(
        self,
        record_id: int,
        target_status: Any,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Record:
        """Move a record to ``target_status`` if its lifecycle allows it."""

    @abstractmethod
    async def bulk_transition(
        self,
        record_ids: Sequence[int],
        target_status: Any,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> List[Record]:
        """
        Move several records to ``target_status`` in one call.

        Ids that do not exist are skipped. If any existing record may not
        make the transition, none of them is changed.
        """

    @abstractmethod
    async def delete(self, record_id: int) -> None:
        """Remove a record. Raises NotFoundException."""

    @abstractmethod
    async def summary(self, params: Optional[Mapping[str, Any]] = None) -> Summary:
        """Aggregate statistics over the records matching ``params``."""

    # =========================================================================
    # CONVENIENCE VERBS
    # =========================================================================

    async def bulk_process(self, record_ids: Sequence[int], **metadata: Any) -> List[Record]:
        return await self.bulk_transition(record_ids, "PROCESSING", metadata)

    async def bulk_approve(self, record_ids: Sequence[int], **metadata: Any) -> List[Record]:
        return await self.bulk_transition(record_ids, "APPROVED", metadata)

    async def process(self, record_id: int, **metadata: Any) -> Record:
        return await self.transition(record_id, "PROCESSING", metadata)

    async def approve(self, record_id: int, **metadata: Any) -> Record:
        return await self.transition(record_id, "APPROVED", metadata)

    async def pay(self, record_id: int, **metadata: Any) -> Record:
        return await self.transition(record_id, "PAID", metadata)

    async def cancel(self, record_id: int, **metadata: Any) -> Record:
        return await self.transition(record_id, "CANCELLED", metadata)

    async def reject(self, record_id: int, **metadata: Any) -> Record:
        return await self.transition(record_id, "REJECTED", metadata)

    async def withdraw(self, record_id: int, **metadata: Any) -> Record:
        return await self.transition(record_id, "WITHDRAWN", metadata)

    async def activate(self, record_id: int, **metadata: Any) -> Record:
        return await self.transition(record_id, "ACTIVE", metadata)

    async def terminate(self, record_id: int, **metadata: Any) -> Record:
        return await self.transition(record_id, "TERMINATED", metadata)

    async def assign(self, record_id: int, **metadata: Any) -> Record:
        return await self.transition(record_id, "ASSIGNED", metadata)

    async def release(self, record_id: int, **metadata: Any) -> Record:
        return await self.transition(record_id, "AVAILABLE", metadata)

    async def mark_damaged(self, record_id: int, **metadata: Any) -> Record:
        return await self.transition(record_id, "DAMAGED", metadata)

    async def retire(self, record_id: int, **metadata: Any) -> Record:
        return await self.transition(record_id, "RETIRED", metadata)


# ===========================================
# SIMULATED FACADE
# ===========================================

class SimulatedResourceFacade(ResourceFacade):
    """
    Serves one entity type from a local RecordStore.

    Every operation awaits the latency first and then runs its
    validate-then-mutate work synchronously, so no other coroutine can
    observe or interleave with a half-applied change.
    """

    def __init__(
        self,
        definition: ResourceDefinition,
        store: Optional[RecordStore] = None,
        validator: LifecycleValidator = lifecycle_validator,
        delay: Delay = no_latency,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ):
        super().__init__(definition, default_page_size)
        self.store = store or RecordStore(definition.model, definition.resource_name)
        self.validator = validator
        self._delay = delay

    @property
    def has_lifecycle(self) -> bool:
        return self.validator.has_lifecycle(self.definition.entity_type)

    def _filter_spec(self, filters: Mapping[str, Any]) -> FilterSpec:
        spec = FilterSpec.from_params(filters, self.definition.filter_fields)
        return spec.bind(self.definition.model)

    async def list(self, params: Optional[Mapping[str, Any]] = None) -> PageEnvelope:
        await self._delay()
        page, size, sort, filters = split_list_params(params, self.default_page_size)
        if sort is not None:
            sort = Sort(self.definition.resolve_field(sort.field), sort.descending)
        return query(self.store, self._filter_spec(filters), page, size, sort)

    async def get(self, record_id: int) -> Record:
        await self._delay()
        return self.store.get(record_id)

    async def create(self, dto: Payload) -> Record:
        await self._delay()
        payload = validate_payload(self.definition.create_schema, dto)
        values = payload.model_dump(exclude_none=True)
        if self.definition.prepare_create is not None:
            values = self.definition.prepare_create(values)
        if self.has_lifecycle or "status" not in values:
            values["status"] = self.definition.initial_status

        record = self.store.insert(values)
        logger.info(
            f"Created {self.definition.resource_name} {record.id} in status {status_value(record.status)}"
        )
        return record

    async def update(self, record_id: int, patch: Payload) -> Record:
        await self._delay()
        if self.has_lifecycle:
            reject_status_change(self.definition, patch)
        payload = validate_payload(self.definition.update_schema, patch)
        changes = payload.model_dump(exclude_unset=True)

        current = self.store.get(record_id)
        if self.definition.prepare_update is not None:
            changes = self.definition.prepare_update(current, changes)
        record = self.store.replace(record_id, changes)
        logger.debug(f"Updated {self.definition.resource_name} {record_id}: {sorted(changes)}")
        return record

    async def transition(
        self,
        record_id: int,
        target_status: Any,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Record:
        await self._delay()
        current = self.store.get(record_id)
        target, changes = self._plan_transition(current, target_status, metadata)
        return self._commit_transition(current, target, changes)

    async def bulk_transition(
        self,
        record_ids: Sequence[int],
        target_status: Any,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> List[Record]:
        await self._delay()
        plans = []
        for record_id in dict.fromkeys(record_ids):
            if record_id not in self.store:
                logger.debug(f"Bulk transition skipping missing {self.definition.resource_name} {record_id}")
                continue
            current = self.store.get(record_id)
            plans.append((current, *self._plan_transition(current, target_status, metadata)))

        # every record is checked before the first one is changed
        return [self._commit_transition(current, target, changes) for current, target, changes in plans]

    def _plan_transition(
        self,
        current: Record,
        target_status: Any,
        metadata: Optional[Mapping[str, Any]],
    ) -> Tuple[Enum, Dict[str, Any]]:
        target = self._check_transition(current, target_status)
        changes = self.definition.transition_changes(metadata)
        stamp = self.definition.stamps.get(target.value)
        if stamp:
            changes[stamp] = self.store.now()
        if self.definition.prepare_transition is not None:
            changes = self.definition.prepare_transition(current, target, changes)
        changes["status"] = target
        return target, changes

    def _commit_transition(self, current: Record, target: Enum, changes: Dict[str, Any]) -> Record:
        record = self.store.replace(current.id, changes)
        logger.info(
            f"{self.definition.resource_name} {current.id}: "
            f"{status_value(current.status)} -> {target.value}"
        )
        return record

    def _check_transition(self, current: Record, target_status: Any) -> Enum:
        if not self.has_lifecycle:
            # Attendance-style status markers: any member may be set
            return self.definition.coerce_status(target_status)
        try:
            return self.validator.assert_transition(
                self.definition.entity_type, current.status, target_status
            )
        except IllegalTransitionException as e:
            logger.warning(f"Rejected transition on {self.definition.resource_name} {current.id}: {e.message}")
            raise

    async def delete(self, record_id: int) -> None:
        await self._delay()
        removed = self.store.delete(record_id)
        logger.info(
            f"Deleted {self.definition.resource_name} {record_id} in status {status_value(removed.status)}"
        )

    async def summary(self, params: Optional[Mapping[str, Any]] = None) -> Summary:
        await self._delay()
        filters = {k: v for k, v in (params or {}).items() if k not in PAGING_KEYS}
        records = apply_filter(self.store.all(), self._filter_spec(filters))
        return summarize(records, self.definition.summary_spec)


def reject_status_change(definition: ResourceDefinition, patch: Payload) -> None:
    """Status on lifecycle entities only changes through transition()."""
    keys = patch.model_fields_set if isinstance(patch, BaseModel) else set(patch)
    if "status" in keys:
        raise InvalidArgumentException(
            message=f"{definition.resource_name} status can only be changed through a transition",
            field="status",
        )


# ===========================================
# REMOTE FACADE
# ===========================================

class RemoteResourceFacade(ResourceFacade):
    """
    Forwards every operation to the HR backend.

    Payloads are validated locally with the same schemas the simulation
    uses, so malformed input fails the same way in both modes.
    """

    def __init__(
        self,
        definition: ResourceDefinition,
        backend: RemoteBackend,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        lifecycle_governed: Optional[bool] = None,
    ):
        super().__init__(definition, default_page_size)
        self.backend = backend
        self.lifecycle_governed = (
            lifecycle_validator.has_lifecycle(definition.entity_type)
            if lifecycle_governed is None
            else lifecycle_governed
        )

    def _item_path(self, record_id: int) -> str:
        return f"{self.definition.path}/{int(record_id)}"

    def _parse(self, model: Any, data: Any) -> Any:
        try:
            return TypeAdapter(model).validate_python(data)
        except ValidationError as e:
            raise ExternalServiceException(
                service_name="hr-backend",
                message=f"Unexpected {self.definition.resource_name} response from backend",
                original_error=e,
                details={"errors": describe_validation_error(e)},
            ) from e

    async def list(self, params: Optional[Mapping[str, Any]] = None) -> PageEnvelope:
        values = dict(params or {})
        if is_blank(values.get("size")):
            values["size"] = self.default_page_size
        data = await self.backend.request("GET", self.definition.path, params=values)
        return self._parse(PageEnvelope[self.definition.model], data)

    async def get(self, record_id: int) -> Record:
        data = await self.backend.request("GET", self._item_path(record_id))
        return self._parse(self.definition.model, data)

    async def create(self, dto: Payload) -> Record:
        payload = validate_payload(self.definition.create_schema, dto)
        data = await self.backend.request(
            "POST",
            self.definition.path,
            json=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return self._parse(self.definition.model, data)

    async def update(self, record_id: int, patch: Payload) -> Record:
        if self.lifecycle_governed:
            reject_status_change(self.definition, patch)
        payload = validate_payload(self.definition.update_schema, patch)
        data = await self.backend.request(
            "PUT",
            self._item_path(record_id),
            json=payload.model_dump(mode="json", by_alias=True, exclude_unset=True),
        )
        return self._parse(self.definition.model, data)

    async def transition(
        self,
        record_id: int,
        target_status: Any,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Record:
        target = self.definition.coerce_status(target_status)
        self.definition.transition_changes(metadata)
        action = self.definition.action_for(target)
        logger.debug(f"Forwarding {action} for {self.definition.resource_name} {record_id}")
        data = await self.backend.request(
            "POST",
            f"{self._item_path(record_id)}/{action}",
            json=dict(metadata or {}),
        )
        return self._parse(self.definition.model, data)

    async def bulk_transition(
        self,
        record_ids: Sequence[int],
        target_status: Any,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> List[Record]:
        target = self.definition.coerce_status(target_status)
        self.definition.transition_changes(metadata)
        action = self.definition.action_for(target)
        data = await self.backend.request(
            "POST",
            f"{self.definition.path}/bulk-{action}",
            json={"ids": [int(record_id) for record_id in record_ids], "metadata": dict(metadata or {})},
        )
        return self._parse(List[self.definition.model], data)

    async def delete(self, record_id: int) -> None:
        await self.backend.request("DELETE", self._item_path(record_id))

    async def summary(self, params: Optional[Mapping[str, Any]] = None) -> Summary:
        filters = {k: v for k, v in (params or {}).items() if k not in PAGING_KEYS}
        data = await self.backend.request(
            "GET", f"{self.definition.path}/summary", params=filters
        )
        return self._parse(Summary, data)
