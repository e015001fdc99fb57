"""
End-to-end page scenarios through the booking page factory.
"""

from __future__ import annotations

import json
from urllib.parse import parse_qsl, urlparse

import pytest

from booking_flow.application.use_cases.booking_page import BookingPageFactory, PageKind
from booking_flow.application.use_cases.page_transition import CURRENT_SERVICE_KEY, PAYMENT_CHOICE_KEY
from booking_flow.domain.entities.payment_choice import PaymentType
from booking_flow.domain.entities.widget_message import WidgetRole
from booking_flow.infrastructure.availability.mock_availability import MockAvailability
from booking_flow.infrastructure.cart.mock_cart import MockCart
from booking_flow.infrastructure.navigation.recording_navigator import RecordingNavigator
from booking_flow.infrastructure.storage.memory_session_storage import MemorySessionStorage
from booking_flow.infrastructure.submission.mock_submission import MockBookingSubmission
from booking_flow.infrastructure.view.recording_view import RecordingPageView
from booking_flow.infrastructure.widgets.memory_widget import MemoryWidgetHandle

CATALOG_RECORD = {
    "_id": "svc_42",
    "title": "Laser Hair Removal",
    "price": 100,
    "duration": 45,
    "deposit": 30,
    "depositProductId": "dep-sku",
    "fullPaymentProductId": "full-sku",
}


def _factory(availability=None):
    availability = availability or MockAvailability()
    factory = BookingPageFactory(
        availability=availability,
        cart=MockCart(),
        submitter=MockBookingSubmission(),
        month_base=0,
        selection_path="/services",
    )
    return factory, availability


def test_missing_service_redirects_to_selection():
    """A page without a service id redirects and never queries availability."""
    factory, availability = _factory()
    navigator = RecordingNavigator()
    calendar = MemoryWidgetHandle()

    page = factory.open(
        PageKind.service_item,
        storage=MemorySessionStorage(),
        navigator=navigator,
        view=RecordingPageView(),
        record={"name": "No id"},
        calendar=calendar,
    )

    assert page is None
    assert navigator.history == ["/services"]
    assert availability.calls == []
    assert calendar.posted == []


def test_booking_page_without_handoff_redirects():
    factory, _ = _factory()
    navigator = RecordingNavigator()

    page = factory.open(
        "booking", storage=MemorySessionStorage(), navigator=navigator, view=RecordingPageView(), params={}
    )

    assert page is None
    assert navigator.last_url == "/services"


def test_service_selection_page_persists_current_service():
    factory, _ = _factory()
    storage = MemorySessionStorage()
    view = RecordingPageView()

    page = factory.open(
        PageKind.service_selection,
        storage=storage,
        navigator=RecordingNavigator(),
        view=view,
        record=CATALOG_RECORD,
        time_zone="UTC",
    )

    assert page is not None
    assert page.skus.deposit_sku == "dep-sku"
    assert view.events_of("service")[0]["service"]["name"] == "Laser Hair Removal"
    record = json.loads(storage.get_item(CURRENT_SERVICE_KEY))
    assert record["serviceId"] == "svc_42"
    assert record["fullPaySku"] == "full-sku"


@pytest.mark.asyncio
async def test_deposit_handoff_to_booking_page():
    """Choose a deposit on the selection page, then land on the booking page with it."""
    factory, _ = _factory()
    storage = MemorySessionStorage()
    navigator = RecordingNavigator()

    selection = factory.open(
        PageKind.service_selection,
        storage=storage,
        navigator=navigator,
        view=RecordingPageView(),
        record=CATALOG_RECORD,
        time_zone="UTC",
    )
    outcome = await selection.choose_payment("deposit", "booking")

    assert selection.draft.payment is not None
    assert selection.draft.payment.amount == 30.0
    assert storage.get_item(PAYMENT_CHOICE_KEY) is not None

    params = dict(parse_qsl(urlparse(outcome.url).query))
    view = RecordingPageView()
    booking = factory.open(
        PageKind.booking,
        storage=storage,
        navigator=RecordingNavigator(),
        view=view,
        params=params,
        time_zone="UTC",
    )

    assert booking is not None
    assert booking.service.service_id == "svc_42"
    assert booking.service.price == 100.0
    assert booking.handoff.payment.product_sku == "dep-sku"
    assert booking.draft.payment.type is PaymentType.deposit
    summary = view.events_of("payment_summary")[0]
    assert summary["label"] == "Deposit Payment"
    assert summary["amount"] == 30.0
    assert summary["remainingBalance"] == 70.0


@pytest.mark.asyncio
async def test_full_booking_flow_with_widgets():
    factory, availability = _factory()
    navigator = RecordingNavigator()
    view = RecordingPageView()
    calendar = MemoryWidgetHandle()
    addons = MemoryWidgetHandle()

    page = factory.open(
        PageKind.dynamic_service,
        storage=MemorySessionStorage(),
        navigator=navigator,
        view=view,
        record={"_id": "svc_7", "name": "Peel", "price": 80, "duration": 30},
        time_zone="UTC",
        calendar=calendar,
        addons=addons,
        page_id="page-1",
    )

    assert page.page_id == "page-1"
    assert page.router(WidgetRole.calendar) is page.calendar
    assert page.router("addons") is page.addons

    await calendar.deliver({"type": "READY"})
    await addons.deliver({"type": "READY"})
    await calendar.deliver({"type": "TIME_SELECTED", "dateLabel": "June 3", "timeLabel": "1:00 PM"})
    await addons.deliver({"type": "vx:addons", "payload": {"items": [{"id": "mask"}], "total": 20, "minutes": 10}})
    await addons.deliver({"type": "BOOKING_SUBMIT", "payload": {"customer": {"email": "ana@example.com"}}})

    assert len(availability.calls) == 1
    assert addons.messages_of("vx:context")[0]["payload"]["dateLabel"] == "June 3"
    assert calendar.messages_of("ADDONS_UPDATE")[0]["payload"]["addonsTotal"] == 20.0
    assert view.events_of("total_price")[-1]["amount"] == 100.0
    assert navigator.last_url.startswith("/booking-confirmation?id=temp-")

    draft = page.draft
    assert draft.selected_time == "1:00 PM"
    assert draft.addons.minutes == 10.0
    assert draft.timestamp is not None


@pytest.mark.asyncio
async def test_widget_attached_after_open():
    """A widget connecting later starts unready and gets SERVICE_DATA on READY."""
    factory, _ = _factory()
    page = factory.open(
        PageKind.service_item,
        storage=MemorySessionStorage(),
        navigator=RecordingNavigator(),
        view=RecordingPageView(),
        record={"bookingServiceId": "svc_1", "name": "Cut"},
        time_zone="UTC",
    )
    widget = MemoryWidgetHandle()

    page.attach_widget("addons", widget)
    await widget.deliver({"type": "READY"})

    assert widget.messages_of("SERVICE_DATA")[0]["data"]["name"] == "Cut"

    page.detach_widget("addons")
    assert page.addons.widget is None


def test_booking_page_without_stored_choice_uses_params():
    """When the payment choice never reached storage, the query params still carry it."""
    factory, _ = _factory()
    view = RecordingPageView()

    page = factory.open(
        PageKind.booking,
        storage=MemorySessionStorage(),
        navigator=RecordingNavigator(),
        view=view,
        params={
            "serviceId": "svc_42",
            "service": "Laser Hair Removal",
            "price": "100",
            "deposit": "30",
            "paymentType": "deposit",
            "paymentAmount": "30",
        },
        time_zone="UTC",
    )

    assert page.draft.payment is not None
    assert page.draft.payment.type is PaymentType.deposit
    assert page.draft.payment.amount == 30.0
    assert page.draft.to_record()["paymentType"] == "deposit"
    summary = view.events_of("payment_summary")[0]
    assert summary["amount"] == 30.0
    assert summary["remainingBalance"] == 70.0


def test_booking_page_without_any_payment():
    factory, _ = _factory()
    view = RecordingPageView()

    page = factory.open(
        PageKind.booking,
        storage=MemorySessionStorage(),
        navigator=RecordingNavigator(),
        view=view,
        params={"serviceId": "svc_42", "price": "100"},
        time_zone="UTC",
    )

    assert page.draft.payment is None
    assert view.events_of("payment_summary") == []
