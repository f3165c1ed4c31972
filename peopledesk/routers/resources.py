"""
PeopleDesk - Resource Router

HTTP endpoints for one entity type, generated from its ResourceDefinition.

Routes (relative to the resource path P):
- GET    P                  list, with filter and page/size/sort parameters
- GET    P/summary          aggregate statistics over the filtered records
- GET    P/{id}             one record
- POST   P                  create
- PUT    P/{id}             update non-status fields
- DELETE P/{id}             remove a record
- POST   P/{id}/{action}    status transition, e.g. /payroll/runs/1/process
- POST   P/bulk-{action}    the same transition for a list of ids
"""

from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, Request, status

from peopledesk.dependencies import get_resource_facades
from peopledesk.schemas.common import PageEnvelope, Summary
from peopledesk.schemas.resources import BulkTransitionRequest
from peopledesk.services.resource_facade import ResourceDefinition, ResourceFacade
from peopledesk.services.resources import ResourceFacades
from peopledesk.utils.error_handling import NotFoundException


def facade_dependency(definition: ResourceDefinition) -> Callable[..., ResourceFacade]:
    """Dependency resolving the facade for ``definition`` from the app state."""

    def get_facade(facades: ResourceFacades = Depends(get_resource_facades)) -> ResourceFacade:
        return facades.for_entity(definition.entity_type)

    return get_facade


def build_resource_router(definition: ResourceDefinition) -> APIRouter:
    """Build the router for one entity type. Mount it at the resource path."""
    router = APIRouter()
    get_facade = facade_dependency(definition)
    name = definition.resource_name
    model = definition.model

    # ===========================================
    # READ ENDPOINTS
    # ===========================================

    @router.get(
        "",
        response_model=PageEnvelope[model],
        summary=f"List {name.lower()}s",
        description="Filter parameters are optional; page is zero-based, size is at most 100.",
    )
    async def list_records(
        request: Request,
        page: Optional[int] = Query(None, description="Zero-based page number"),
        size: Optional[int] = Query(None, description="Page size"),
        sort: Optional[str] = Query(None, description="Sort field, optionally 'field,desc'"),
        direction: Optional[str] = Query(None, description="asc or desc"),
        facade: ResourceFacade = Depends(get_facade),
    ):
        return await facade.list(dict(request.query_params))

    @router.get(
        "/summary",
        response_model=Summary,
        summary=f"{name} summary",
    )
    async def get_summary(
        request: Request,
        facade: ResourceFacade = Depends(get_facade),
    ):
        return await facade.summary(dict(request.query_params))

    @router.get(
        "/{record_id}",
        response_model=model,
        summary=f"Get {name.lower()} by ID",
    )
    async def get_record(
        record_id: int = Path(..., ge=1),
        facade: ResourceFacade = Depends(get_facade),
    ):
        return await facade.get(record_id)

    # ===========================================
    # WRITE ENDPOINTS
    # ===========================================

    @router.post(
        "",
        response_model=model,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {name.lower()}",
    )
    async def create_record(
        payload: Dict[str, Any] = Body(...),
        facade: ResourceFacade = Depends(get_facade),
    ):
        return await facade.create(payload)

    @router.put(
        "/{record_id}",
        response_model=model,
        summary=f"Update {name.lower()}",
        description="Status is changed through the action endpoints, not here.",
    )
    async def update_record(
        record_id: int = Path(..., ge=1),
        payload: Dict[str, Any] = Body(...),
        facade: ResourceFacade = Depends(get_facade),
    ):
        return await facade.update(record_id, payload)

    @router.delete(
        "/{record_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary=f"Delete {name.lower()}",
    )
    async def delete_record(
        record_id: int = Path(..., ge=1),
        facade: ResourceFacade = Depends(get_facade),
    ):
        await facade.delete(record_id)

    @router.post(
        "/bulk-{action}",
        response_model=List[model],
        summary=f"Change status of several {name.lower()}s",
        description="Unknown ids are skipped; if any record may not make the change, none is changed.",
    )
    async def bulk_transition_records(
        body: BulkTransitionRequest,
        action: str = Path(...),
        facade: ResourceFacade = Depends(get_facade),
    ):
        target = definition.target_for_action(action)
        if target is None:
            raise NotFoundException(resource_type=f"{name} action", resource_id=action)
        return await facade.bulk_transition(body.ids, target, body.metadata)

    @router.post(
        "/{record_id}/{action}",
        response_model=model,
        summary=f"Change {name.lower()} status",
    )
    async def transition_record(
        record_id: int = Path(..., ge=1),
        action: str = Path(...),
        metadata: Optional[Dict[str, Any]] = Body(None),
        facade: ResourceFacade = Depends(get_facade),
    ):
        target = definition.target_for_action(action)
        if target is None:
            raise NotFoundException(resource_type=f"{name} action", resource_id=action)
        return await facade.transition(record_id, target, metadata)

    return router
