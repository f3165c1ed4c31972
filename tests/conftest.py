"""
PeopleDesk - Test Configuration

Pytest fixtures and configuration.
"""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from peopledesk.config import Settings
from peopledesk.models.records import LeaveRequest, PayrollRun
from peopledesk.services.record_store import RecordStore
from peopledesk.services.resource_facade import no_latency
from peopledesk.services.resources import ResourceFacades, build_resource_facades
from main import create_app


class FakeClock:
    """Deterministic store clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


# ===========================================
# CORE FIXTURES
# ===========================================

@pytest.fixture
def clock() -> FakeClock:
    """Clock fixed at 2024-03-01 09:00 UTC."""
    return FakeClock(datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def mock_settings() -> Settings:
    """Simulation-mode settings with no latency."""
    return Settings(use_mock=True, mock_delay_ms=0, seed_fixtures=False, debug=False)


@pytest.fixture
def facades(mock_settings: Settings, clock: FakeClock) -> ResourceFacades:
    """Empty simulated facades for every entity type."""
    return build_resource_facades(mock_settings, delay=no_latency, clock=clock, seed=False)


@pytest.fixture
def seeded_facades(mock_settings: Settings, clock: FakeClock) -> ResourceFacades:
    """Simulated facades pre-loaded with the fixture records."""
    return build_resource_facades(mock_settings, delay=no_latency, clock=clock, seed=True)


@pytest.fixture
def payroll_store(clock: FakeClock) -> RecordStore:
    return RecordStore(PayrollRun, "Payroll run", clock=clock)


@pytest.fixture
def leave_store(clock: FakeClock) -> RecordStore:
    return RecordStore(LeaveRequest, "Leave request", clock=clock)


# ===========================================
# API FIXTURES
# ===========================================

@pytest.fixture
def api_app():
    """Mock backend application with freshly seeded stores."""
    return create_app(Settings(use_mock=True, seed_fixtures=True, debug=False))


@pytest_asyncio.fixture(scope="function")
async def client(api_app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the mock backend in-process."""
    transport = ASGITransport(app=api_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
