from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from functools import lru_cache
import logging
from typing import Any, Mapping

from booking_flow.application.ports.availability import AvailabilityPort
from booking_flow.application.ports.booking_submission import BookingSubmissionPort
from booking_flow.application.ports.cart import CartPort
from booking_flow.application.ports.session_storage import SessionStoragePort
from booking_flow.application.use_cases.booking_page import BookingPage, BookingPageFactory, PageKind
from booking_flow.core.config import settings
from booking_flow.infrastructure.availability.http_availability import HttpAvailabilityClient
from booking_flow.infrastructure.availability.mock_availability import MockAvailability
from booking_flow.infrastructure.cart.http_cart import HttpCartClient
from booking_flow.infrastructure.cart.mock_cart import MockCart
from booking_flow.infrastructure.navigation.recording_navigator import RecordingNavigator
from booking_flow.infrastructure.storage.json_session_storage import JsonSessionStorage
from booking_flow.infrastructure.storage.memory_session_storage import MemorySessionStorage
from booking_flow.infrastructure.submission.http_submission import HttpBookingSubmissionClient
from booking_flow.infrastructure.submission.mock_submission import MockBookingSubmission
from booking_flow.infrastructure.view.recording_view import RecordingPageView


logger = logging.getLogger(__name__)


@dataclass
class PageSession:
    page: BookingPage
    navigator: RecordingNavigator
    view: RecordingPageView


# Least recently used first; both are capped by settings
_pages: OrderedDict[str, PageSession] = OrderedDict()
_session_storages: OrderedDict[str, MemorySessionStorage] = OrderedDict()


def _is_dev() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_availability() -> AvailabilityPort:
    if not settings.AVAILABILITY_API_URL or _is_dev():
        return MockAvailability()
    return HttpAvailabilityClient()


@lru_cache
def get_cart() -> CartPort:
    if not settings.CART_API_URL or _is_dev():
        return MockCart()
    return HttpCartClient()


@lru_cache
def get_booking_submitter() -> BookingSubmissionPort:
    if not settings.BOOKING_API_URL or _is_dev():
        return MockBookingSubmission()
    return HttpBookingSubmissionClient()


def get_session_storage(session_id: str) -> SessionStoragePort:
    if _is_dev():
        return JsonSessionStorage(session_id)
    storage = _session_storages.get(session_id)
    if storage is None:
        storage = MemorySessionStorage()
        _session_storages[session_id] = storage
        while len(_session_storages) > settings.MAX_SESSIONS:
            evicted, _ = _session_storages.popitem(last=False)
            logger.info("Session storage evicted", extra={"reason": evicted})
    else:
        _session_storages.move_to_end(session_id)
    return storage


@lru_cache
def get_page_factory() -> BookingPageFactory:
    return BookingPageFactory(
        availability=get_availability(),
        cart=get_cart(),
        submitter=get_booking_submitter(),
    )


def open_page(
    kind: PageKind,
    session_id: str,
    record: Mapping[str, Any] | None = None,
    params: Mapping[str, Any] | None = None,
    time_zone: str | None = None,
) -> tuple[PageSession | None, RecordingNavigator]:
    navigator = RecordingNavigator()
    view = RecordingPageView()
    page = get_page_factory().open(
        kind,
        storage=get_session_storage(session_id),
        navigator=navigator,
        view=view,
        record=record,
        params=params,
        time_zone=time_zone,
    )
    if page is None:
        return None, navigator

    session = PageSession(page=page, navigator=navigator, view=view)
    _pages[page.page_id] = session
    while len(_pages) > settings.MAX_OPEN_PAGES:
        evicted, _ = _pages.popitem(last=False)
        logger.info("Page evicted", extra={"page_id": evicted, "reason": "max_open_pages"})
    logger.info("Page registered", extra={"page_id": page.page_id})
    return session, navigator


def get_page_session(page_id: str) -> PageSession | None:
    session = _pages.get(page_id)
    if session is not None:
        _pages.move_to_end(page_id)
    return session


def close_page(page_id: str) -> bool:
    return _pages.pop(page_id, None) is not None


async def shutdown() -> None:
    """Close the backend clients and forget every page and session."""
    for provider in (get_availability, get_cart, get_booking_submitter):
        if provider.cache_info().currsize:
            client = provider()
            if isinstance(client, (HttpAvailabilityClient, HttpCartClient, HttpBookingSubmissionClient)):
                await client.aclose()
                logger.info("Backend client closed", extra={"reason": type(client).__name__})
        provider.cache_clear()
    get_page_factory.cache_clear()
    _pages.clear()
    _session_storages.clear()
