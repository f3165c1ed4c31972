"""
PeopleDesk - Remote Backend Tests

Tests for the httpx backend and the live-mode facades, using
httpx.MockTransport in place of a real server.
"""

import json
from datetime import date

import httpx
import pytest

from factories import payroll_payload
from peopledesk.models.enums import PayrollRunStatus
from peopledesk.services.remote_backend import HttpRemoteBackend, build_query_params
from peopledesk.services.resource_facade import RemoteResourceFacade
from peopledesk.services.resources import ASSET_RESOURCE, PAYROLL_RUN_RESOURCE
from peopledesk.utils.error_handling import (
    BackendUnavailableException,
    ExternalServiceException,
    IllegalTransitionException,
    InvalidArgumentException,
    NotFoundException,
)


RUN_JSON = {
    "id": 1,
    "organizationId": 1,
    "name": "March 2024",
    "payPeriodStart": "2024-03-01",
    "payPeriodEnd": "2024-03-31",
    "payDate": "2024-04-05",
    "status": "DRAFT",
    "employeeCount": 0,
    "createdAt": "2024-03-01T09:00:00Z",
    "updatedAt": "2024-03-01T09:00:00Z",
}


def error_body(code, message, **details):
    return {"detail": {"code": code, "message": message, "timestamp": "2024-03-01T09:00:00Z", "details": details}}


def make_backend(handler):
    return HttpRemoteBackend(base_url="http://hr.test/api", transport=httpx.MockTransport(handler))


class Recorder:
    """Request handler that records every request and replies with a fixed response."""

    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self.body = body
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


class TestBuildQueryParams:
    """Test query string encoding."""

    def test_blank_values_are_dropped(self):
        assert build_query_params({"status": None, "search": "", "page": 0}) == {"page": 0}

    def test_values_are_encoded(self):
        params = build_query_params({
            "status": PayrollRunStatus.DRAFT,
            "payPeriodStart": date(2024, 3, 1),
            "isHalfDay": True,
        })
        assert params == {"status": "DRAFT", "payPeriodStart": "2024-03-01", "isHalfDay": "true"}

    def test_empty(self):
        assert build_query_params(None) == {}


class TestHttpRemoteBackend:
    """Test request forwarding and error translation."""

    @pytest.mark.asyncio
    async def test_success_returns_decoded_json(self):
        handler = Recorder(body=RUN_JSON)
        backend = make_backend(handler)

        data = await backend.request("GET", "/payroll/runs/1", params={"expand": None})

        assert data == RUN_JSON
        assert handler.last.method == "GET"
        assert handler.last.url.path == "/api/payroll/runs/1"
        assert handler.last.url.query == b""
        await backend.aclose()

    @pytest.mark.asyncio
    async def test_params_and_body_are_sent(self):
        handler = Recorder(status_code=201, body=RUN_JSON)
        backend = make_backend(handler)

        await backend.request("POST", "payroll/runs", params={"page": 1}, json={"payDate": date(2024, 4, 5)})

        assert handler.last.url.params["page"] == "1"
        assert json.loads(handler.last.content) == {"payDate": "2024-04-05"}

    @pytest.mark.asyncio
    async def test_empty_body_is_none(self):
        backend = make_backend(lambda request: httpx.Response(204))
        assert await backend.request("DELETE", "/payroll/runs/1") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code,body,expected", [
        (404, error_body("NOT_FOUND", "Payroll run with ID '9' not found", resource_type="Payroll run", resource_id="9"), NotFoundException),
        (409, error_body("ILLEGAL_TRANSITION", "Cannot move", entity_type="payroll_run", from_status="PROCESSING", to_status="PAID"), IllegalTransitionException),
        (422, error_body("INVALID_ARGUMENT", "size must be at most 100"), InvalidArgumentException),
        (500, error_body("INTERNAL_ERROR", "boom"), BackendUnavailableException),
        (404, None, NotFoundException),
    ])
    async def test_error_responses_map_to_exceptions(self, status_code, body, expected):
        """Test the error envelope becomes the same exception the simulation raises."""
        backend = make_backend(Recorder(status_code=status_code, body=body))

        with pytest.raises(expected):
            await backend.request("GET", "/payroll/runs/9")

    @pytest.mark.asyncio
    async def test_illegal_transition_keeps_statuses(self):
        body = error_body("ILLEGAL_TRANSITION", "Cannot move", entity_type="payroll_run", from_status="PROCESSING", to_status="PAID")
        backend = make_backend(Recorder(status_code=409, body=body))

        with pytest.raises(IllegalTransitionException) as exc_info:
            await backend.request("POST", "/payroll/runs/1/pay")
        assert exc_info.value.from_status == "PROCESSING"
        assert exc_info.value.to_status == "PAID"

    @pytest.mark.asyncio
    async def test_connection_error_is_unavailable(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        backend = make_backend(refuse)
        with pytest.raises(BackendUnavailableException) as exc_info:
            await backend.request("GET", "/leaves")
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_timeout_is_unavailable(self):
        def slow(request):
            raise httpx.ReadTimeout("timed out", request=request)

        backend = make_backend(slow)
        with pytest.raises(BackendUnavailableException) as exc_info:
            await backend.request("GET", "/leaves")
        assert "timeout" in exc_info.value.message.lower()

    @pytest.mark.asyncio
    async def test_invalid_json_on_success(self):
        backend = make_backend(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(BackendUnavailableException):
            await backend.request("GET", "/leaves")


class TestRemoteResourceFacade:
    """Test live-mode facades over a mocked backend."""

    @pytest.mark.asyncio
    async def test_list_parses_page_envelope(self):
        handler = Recorder(body={
            "content": [RUN_JSON],
            "totalElements": 1,
            "totalPages": 1,
            "number": 0,
            "size": 10,
            "first": True,
            "last": True,
        })
        facade = RemoteResourceFacade(PAYROLL_RUN_RESOURCE, make_backend(handler))

        page = await facade.list({"status": "DRAFT", "search": ""})

        assert page.total_elements == 1
        assert page.content[0].status == PayrollRunStatus.DRAFT
        assert page.content[0].pay_period_start == date(2024, 3, 1)
        assert handler.last.url.path == "/api/payroll/runs"
        assert dict(handler.last.url.params) == {"status": "DRAFT", "size": "10"}

    @pytest.mark.asyncio
    async def test_transition_posts_to_action_path(self):
        handler = Recorder(body={**RUN_JSON, "status": "PROCESSING"})
        facade = RemoteResourceFacade(PAYROLL_RUN_RESOURCE, make_backend(handler))

        run = await facade.process(1, processedBy=3)

        assert run.status == PayrollRunStatus.PROCESSING
        assert handler.last.method == "POST"
        assert handler.last.url.path == "/api/payroll/runs/1/process"
        assert json.loads(handler.last.content) == {"processedBy": 3}

    @pytest.mark.asyncio
    async def test_action_names_come_from_definition(self):
        handler = Recorder(body={
            "id": 4,
            "organizationId": 1,
            "assetType": "LAPTOP",
            "status": "AVAILABLE",
            "createdAt": "2024-03-01T09:00:00Z",
            "updatedAt": "2024-03-01T09:00:00Z",
        })
        facade = RemoteResourceFacade(ASSET_RESOURCE, make_backend(handler))

        await facade.release(4)
        assert handler.last.url.path == "/api/assets/4/return"

    @pytest.mark.asyncio
    async def test_create_sends_wire_names(self):
        handler = Recorder(status_code=201, body=RUN_JSON)
        facade = RemoteResourceFacade(PAYROLL_RUN_RESOURCE, make_backend(handler))

        await facade.create(payroll_payload())

        assert json.loads(handler.last.content) == {
            "organizationId": 1,
            "payPeriodStart": "2024-03-01",
            "payPeriodEnd": "2024-03-31",
            "payDate": "2024-04-05",
            "employeeCount": 0,
        }

    @pytest.mark.asyncio
    async def test_status_update_rejected_locally(self):
        """Test lifecycle entities refuse status edits before any request is made."""
        handler = Recorder(body=RUN_JSON)
        facade = RemoteResourceFacade(PAYROLL_RUN_RESOURCE, make_backend(handler))

        with pytest.raises(InvalidArgumentException):
            await facade.update(1, {"status": "PAID"})
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_summary_drops_paging_params(self):
        handler = Recorder(body={"totalCount": 0, "counts": {}, "groups": {}, "sums": {}, "averages": {}})
        facade = RemoteResourceFacade(PAYROLL_RUN_RESOURCE, make_backend(handler))

        summary = await facade.summary({"status": "PAID", "page": 2, "size": 5})

        assert summary.total_count == 0
        assert handler.last.url.path == "/api/payroll/runs/summary"
        assert dict(handler.last.url.params) == {"status": "PAID"}

    @pytest.mark.asyncio
    async def test_blank_size_uses_default(self):
        """Test a blank size is replaced the same way the simulation treats it."""
        handler = Recorder(body={
            "content": [],
            "totalElements": 0,
            "totalPages": 0,
            "number": 0,
            "size": 10,
            "first": True,
            "last": True,
        })
        facade = RemoteResourceFacade(PAYROLL_RUN_RESOURCE, make_backend(handler))

        await facade.list({"size": "", "page": 0})

        assert dict(handler.last.url.params) == {"size": "10", "page": "0"}

    @pytest.mark.asyncio
    async def test_delete_sends_delete(self):
        handler = Recorder(status_code=204)
        facade = RemoteResourceFacade(PAYROLL_RUN_RESOURCE, make_backend(handler))

        assert await facade.delete(1) is None
        assert handler.last.method == "DELETE"
        assert handler.last.url.path == "/api/payroll/runs/1"

    @pytest.mark.asyncio
    async def test_bulk_posts_ids_and_metadata(self):
        handler = Recorder(body=[{**RUN_JSON, "status": "PROCESSING", "processedBy": 2}])
        facade = RemoteResourceFacade(PAYROLL_RUN_RESOURCE, make_backend(handler))

        runs = await facade.bulk_process([1, 99], processedBy=2)

        assert [r.status for r in runs] == [PayrollRunStatus.PROCESSING]
        assert handler.last.url.path == "/api/payroll/runs/bulk-process"
        assert json.loads(handler.last.content) == {"ids": [1, 99], "metadata": {"processedBy": 2}}

    @pytest.mark.asyncio
    async def test_transition_metadata_checked_locally(self):
        """Test metadata outside the transition fields never reaches the backend."""
        handler = Recorder(body=RUN_JSON)
        facade = RemoteResourceFacade(PAYROLL_RUN_RESOURCE, make_backend(handler))

        with pytest.raises(InvalidArgumentException):
            await facade.process(1, organizationId=99)
        with pytest.raises(InvalidArgumentException):
            await facade.bulk_process([1], paidAt="2020-01-01T00:00:00Z")
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_unexpected_response_shape(self):
        facade = RemoteResourceFacade(PAYROLL_RUN_RESOURCE, make_backend(Recorder(body={"id": "x"})))
        with pytest.raises(ExternalServiceException):
            await facade.get(1)
