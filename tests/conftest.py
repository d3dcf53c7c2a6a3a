'''
Pytest configuration for the availability editor.

This file sets up fixtures for:
1. Running async tests on asyncio through the anyio plugin.
2. A mocked workforce API client, so no test talks to the network.
3. Codecs, controllers and a registry wired to that mock.
4. A FastAPI TestClient whose editor registry uses the mock client.
'''
from typing import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from tests.constants import NURSE_ID, WEEK_START, MONDAY, API_MONDAY

from nurse_availability.main import app
from nurse_availability.core.range_codec import RangeCodec
from nurse_availability.models.availability import NurseOption, RangeRecord
from nurse_availability.services.availability_client import AvailabilityClient
from nurse_availability.services.availability_controller import AvailabilityController
from nurse_availability.services.editor_registry import EditorRegistry, get_editor_registry


@pytest.fixture(scope="session")
def anyio_backend():
    """
    Override the default 'anyio_backend' fixture.
    1. Forces the backend to 'asyncio' (solves 'trio' error).
    2. Promotes the scope to 'session' (solves 'ScopeMismatch').
    """
    return "asyncio"


# --- 1. DATA FIXTURES ---

@pytest.fixture
def monday_records() -> list[RangeRecord]:
    """Monday 09:00-12:00 available, 14:00-16:00 preferred."""
    return [
        RangeRecord(day_of_week=API_MONDAY, start_time="09:00", end_time="12:00",
                    is_available=True, is_preferred=False,
                    effective_from=MONDAY, effective_until=MONDAY),
        RangeRecord(day_of_week=API_MONDAY, start_time="14:00", end_time="16:00",
                    is_available=True, is_preferred=True,
                    effective_from=MONDAY, effective_until=MONDAY),
    ]


# --- 2. MOCKED WORKFORCE API ---

@pytest.fixture(scope="function")
def mock_client() -> AvailabilityClient:
    """Provides a mock AvailabilityClient: empty weeks, saves always succeed."""
    mock_service = MagicMock(spec=AvailabilityClient)
    mock_service.base_url = "http://workforce.test/api"
    mock_service.fetch_week = AsyncMock(return_value=[])
    mock_service.replace_week = AsyncMock(return_value=None)
    mock_service.list_nurses = AsyncMock(return_value=[
        NurseOption(worker_id=NURSE_ID, display_name="Alex Rivera"),
        NurseOption(worker_id=202, display_name="Sam Okafor"),
    ])
    return mock_service


# --- 3. SERVICE FIXTURES ---

@pytest.fixture(scope="function")
def codec() -> RangeCodec:
    return RangeCodec(mode="runs", emit_empty_day_sentinel=True)

@pytest.fixture(scope="function")
def bounding_codec() -> RangeCodec:
    """The legacy one-record-per-status-per-day encoder."""
    return RangeCodec(mode="bounding", emit_empty_day_sentinel=True)

@pytest.fixture(scope="function")
def controller(mock_client: AvailabilityClient, codec: RangeCodec) -> AvailabilityController:
    """A controller with nothing selected yet."""
    return AvailabilityController(client=mock_client, codec=codec, first_day_of_week=0)

@pytest.fixture(scope="function")
async def loaded_controller(
    controller: AvailabilityController,
    mock_client: AvailabilityClient,
    monday_records: list[RangeRecord]
) -> AvailabilityController:
    """A controller with NURSE_ID's week of WEEK_START loaded from `monday_records`."""
    mock_client.fetch_week.return_value = monday_records
    await controller.select_nurse(NURSE_ID, week_of=WEEK_START)
    mock_client.fetch_week.reset_mock()
    return controller

@pytest.fixture(scope="function")
def registry(mock_client: AvailabilityClient) -> EditorRegistry:
    return EditorRegistry(client=mock_client)


# --- 4. APP FIXTURE ---

@pytest.fixture(scope="function")
def client(registry: EditorRegistry) -> Iterator[TestClient]:
    """
    Runs the app's lifespan and points every route at the test registry,
    whose editors use the mocked workforce API.
    """
    app.dependency_overrides[get_editor_registry] = lambda: registry

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
