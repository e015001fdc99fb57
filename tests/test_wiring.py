"""
Tests for adapter wiring, registry bounds, shutdown, log formatting and the mock adapters.
"""

from __future__ import annotations

import logging
from datetime import datetime

import pytest
import pytest_asyncio

from booking_flow.core.config import settings
from booking_flow.infrastructure.availability.http_availability import HttpAvailabilityClient
from booking_flow.infrastructure.availability.mock_availability import MockAvailability
from booking_flow.main import ContextFormatter
from booking_flow.wiring import dependencies
from booking_flow.wiring.dependencies import (
    get_availability,
    get_page_session,
    get_session_storage,
    open_page,
    shutdown,
)

RECORD = {"_id": "svc_42", "title": "Laser", "price": 100}


@pytest_asyncio.fixture
async def clean_wiring(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "SESSION_STORE_DIR", str(tmp_path))
    await shutdown()
    yield
    await shutdown()


@pytest.mark.asyncio
async def test_oldest_page_is_evicted(clean_wiring, monkeypatch):
    monkeypatch.setattr(settings, "MAX_OPEN_PAGES", 2)

    first, _ = open_page("service_selection", session_id="s1", record=RECORD)
    second, _ = open_page("service_selection", session_id="s1", record=RECORD)
    # Touching the first page makes the second one the least recently used
    assert get_page_session(first.page.page_id) is first
    third, _ = open_page("service_selection", session_id="s1", record=RECORD)

    assert get_page_session(second.page.page_id) is None
    assert get_page_session(first.page.page_id) is first
    assert get_page_session(third.page.page_id) is third
    assert len(dependencies._pages) == 2


@pytest.mark.asyncio
async def test_oldest_session_storage_is_evicted(clean_wiring, monkeypatch):
    monkeypatch.setattr(settings, "ENV", "prod")
    monkeypatch.setattr(settings, "MAX_SESSIONS", 2)

    get_session_storage("s1").set_item("key", "one")
    get_session_storage("s2").set_item("key", "two")
    get_session_storage("s3").set_item("key", "three")

    assert get_session_storage("s3").get_item("key") == "three"
    assert get_session_storage("s1").get_item("key") is None
    assert len(dependencies._session_storages) == 2


@pytest.mark.asyncio
async def test_shutdown_closes_http_clients_and_forgets_pages(clean_wiring, monkeypatch):
    monkeypatch.setattr(settings, "ENV", "prod")
    monkeypatch.setattr(settings, "AVAILABILITY_API_URL", "https://api.test")
    client = get_availability()
    session, _ = open_page("service_selection", session_id="s1", record=RECORD)

    await shutdown()

    assert isinstance(client, HttpAvailabilityClient)
    assert client._client.is_closed
    assert get_page_session(session.page.page_id) is None
    assert get_availability.cache_info().currsize == 0


def test_context_formatter_scope_and_details():
    formatter = ContextFormatter("%(levelname)s:%(name)s:%(message)s")
    record = logging.makeLogRecord(
        {
            "msg": "Stale availability response dropped",
            "levelname": "INFO",
            "name": "booking_flow.refresh",
            "page_id": "p1",
            "widget": "calendar",
            "epoch": 2,
            "reason": "",
        }
    )

    assert formatter.format(record) == (
        "[p1/calendar] INFO:booking_flow.refresh:Stale availability response dropped | epoch=2"
    )


def test_context_formatter_without_extras():
    formatter = ContextFormatter("%(levelname)s:%(message)s")
    record = logging.makeLogRecord({"msg": "plain", "levelname": "WARNING"})

    assert formatter.format(record) == "WARNING:plain"


@pytest.mark.asyncio
async def test_mock_availability_slot_length_and_spacing():
    booked = {datetime(2024, 3, 4, 10, 0)}
    availability = MockAvailability(duration_minutes=60, booked=booked)

    days = await availability.get_availability(
        "svc_42", "2024-03-04T00:00:00+00:00", "2024-03-05T00:00:00+00:00", "UTC"
    )

    assert [day["date"] for day in days] == ["2024-03-04"]
    slots = days[0]["slots"]
    assert slots[0] == {"start": "2024-03-04T09:00:00", "end": "2024-03-04T10:00:00"}
    assert slots[1] == {"start": "2024-03-04T09:30:00", "end": "2024-03-04T10:30:00"}
    assert slots[-1] == {"start": "2024-03-04T16:00:00", "end": "2024-03-04T17:00:00"}
    assert "2024-03-04T10:00:00" not in [slot["start"] for slot in slots]
    assert len(slots) == 14
