"""
PeopleDesk - Services Package

Record store, query engine, lifecycle validator, aggregation engine and the
resource facades built on top of them.
"""

from peopledesk.services.record_store import RecordStore
from peopledesk.services.query_engine import (
    MAX_PAGE_SIZE,
    Criterion,
    FieldFilter,
    FilterSpec,
    Sort,
    paginate,
    query,
)
from peopledesk.services.lifecycle import (
    LifecycleValidator,
    TransitionTable,
    lifecycle_validator,
)
from peopledesk.services.aggregation import SummarySpec, summarize
from peopledesk.services.remote_backend import (
    HttpRemoteBackend,
    RemoteBackend,
    build_query_params,
)
from peopledesk.services.resource_facade import (
    RemoteResourceFacade,
    ResourceDefinition,
    ResourceFacade,
    SimulatedLatency,
    SimulatedResourceFacade,
    no_latency,
)
from peopledesk.services.resources import (
    RESOURCE_DEFINITIONS,
    ResourceFacades,
    build_resource_facades,
)

__all__ = [
    "RecordStore",
    "MAX_PAGE_SIZE",
    "Criterion",
    "FieldFilter",
    "FilterSpec",
    "Sort",
    "paginate",
    "query",
    "LifecycleValidator",
    "TransitionTable",
    "lifecycle_validator",
    "SummarySpec",
    "summarize",
    "HttpRemoteBackend",
    "RemoteBackend",
    "build_query_params",
    "RemoteResourceFacade",
    "ResourceDefinition",
    "ResourceFacade",
    "SimulatedLatency",
    "SimulatedResourceFacade",
    "no_latency",
    "RESOURCE_DEFINITIONS",
    "ResourceFacades",
    "build_resource_facades",
]
