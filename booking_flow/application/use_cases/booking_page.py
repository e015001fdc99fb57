from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import Any, Mapping

from booking_flow.application.exceptions import MissingServiceContext
from booking_flow.application.ports.availability import AvailabilityPort
from booking_flow.application.ports.booking_submission import BookingSubmissionPort
from booking_flow.application.ports.cart import CartPort
from booking_flow.application.ports.draft_store import BookingDraftStorePort
from booking_flow.application.ports.navigator import NavigatorPort
from booking_flow.application.ports.page_view import PageViewPort
from booking_flow.application.ports.session_storage import SessionStoragePort
from booking_flow.application.ports.widget import WidgetHandle
from booking_flow.application.use_cases.booking_submission import BookingSubmissionHandler
from booking_flow.application.use_cases.page_transition import Handoff, PageTransitionBridge
from booking_flow.application.use_cases.payment_choice import PaymentChoiceNegotiator, PaymentOutcome
from booking_flow.application.use_cases.service_context_resolver import (
    BOOKINGS_ITEM_MAPPING,
    CATALOG_MAPPING,
    CMS_ITEM_MAPPING,
    HANDOFF_MAPPING,
    FieldMapping,
    ServiceContextResolver,
)
from booking_flow.application.use_cases.widget_router import (
    AddonsMessageRouter,
    CalendarMessageRouter,
    WidgetMessageRouter,
)
from booking_flow.core.config import settings
from booking_flow.domain.entities.booking_draft import BookingDraft
from booking_flow.domain.entities.service_context import PaymentSkus, ServiceContext
from booking_flow.domain.entities.widget_message import WidgetRole
from booking_flow.infrastructure.store.memory_draft_store import MemoryDraftStore


class PageKind(str, Enum):
    service_item = "service_item"  # CMS item page
    dynamic_service = "dynamic_service"  # Bookings app dynamic page
    service_selection = "service_selection"  # catalog page with payment options
    booking = "booking"  # custom calendar page reached through a handoff


PAGE_MAPPINGS: dict[PageKind, FieldMapping] = {
    PageKind.service_item: CMS_ITEM_MAPPING,
    PageKind.dynamic_service: BOOKINGS_ITEM_MAPPING,
    PageKind.service_selection: CATALOG_MAPPING,
    PageKind.booking: HANDOFF_MAPPING,
}


class BookingPage:
    """Everything one page load owns: the draft, both widget routers and the payment negotiator."""

    def __init__(
        self,
        page_id: str,
        kind: PageKind,
        store: BookingDraftStorePort,
        calendar: CalendarMessageRouter,
        addons: AddonsMessageRouter,
        negotiator: PaymentChoiceNegotiator,
        skus: PaymentSkus,
        handoff: Handoff | None = None,
    ) -> None:
        self.page_id = page_id
        self.kind = kind
        self.calendar = calendar
        self.addons = addons
        self.handoff = handoff
        self._store = store
        self._negotiator = negotiator
        self._skus = skus

    @property
    def service(self) -> ServiceContext:
        return self._store.snapshot().service

    @property
    def draft(self) -> BookingDraft:
        return self._store.snapshot()

    @property
    def skus(self) -> PaymentSkus:
        return self._skus

    def router(self, role: WidgetRole | str) -> WidgetMessageRouter:
        if WidgetRole(role) is WidgetRole.calendar:
            return self.calendar
        return self.addons

    def attach_widget(self, role: WidgetRole | str, widget: WidgetHandle) -> None:
        self.router(role).attach(widget)

    def detach_widget(self, role: WidgetRole | str) -> None:
        self.router(role).detach()

    async def choose_payment(self, payment_type: str, destination: str) -> PaymentOutcome:
        outcome = await self._negotiator.choose(self.service, payment_type, destination, self._skus)
        self._store.set_payment(outcome.choice)
        return outcome


class BookingPageFactory:
    """
    Single orchestration entry point for every page variant.
    Page types differ only in how the service record is mapped (PAGE_MAPPINGS)
    and in whether the service arrives through a handoff.
    """

    def __init__(
        self,
        availability: AvailabilityPort,
        cart: CartPort,
        submitter: BookingSubmissionPort,
        month_base: int | None = None,
        selection_path: str | None = None,
    ) -> None:
        self._availability = availability
        self._cart = cart
        self._submitter = submitter
        self._month_base = month_base
        self._selection_path = selection_path or settings.SERVICE_SELECTION_PATH
        self._logger = logging.getLogger(__name__)

    def open(
        self,
        kind: PageKind | str,
        storage: SessionStoragePort,
        navigator: NavigatorPort,
        view: PageViewPort,
        record: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
        time_zone: str | None = None,
        calendar: WidgetHandle | None = None,
        addons: WidgetHandle | None = None,
        page_id: str | None = None,
    ) -> BookingPage | None:
        """Returns None after redirecting to service selection when no service can be resolved."""
        kind = PageKind(kind)
        page_id = page_id or uuid.uuid4().hex
        bridge = PageTransitionBridge(storage)
        resolver = ServiceContextResolver(PAGE_MAPPINGS[kind])

        handoff: Handoff | None = None
        try:
            if kind is PageKind.booking:
                handoff = bridge.decode(params or {}, bridge.load_persisted(), time_zone=time_zone)
                service = handoff.service
            else:
                service = resolver.resolve(record, handoff_params=params, time_zone=time_zone)
        except MissingServiceContext:
            self._logger.warning(
                "No service data found, redirecting to service selection",
                extra={"page_id": page_id, "reason": kind.value},
            )
            navigator.to(self._selection_path)
            return None

        skus = resolver.resolve_skus(record)
        store = MemoryDraftStore(service)
        if handoff is not None and handoff.payment is not None:
            store.set_payment(handoff.payment)

        submission = BookingSubmissionHandler(store, self._submitter, view, navigator)
        calendar_router = CalendarMessageRouter(
            calendar, store, view, self._availability, month_base=self._month_base
        )
        addons_router = AddonsMessageRouter(addons, store, view, submission)
        calendar_router.link(addons_router)
        addons_router.link(calendar_router)
        negotiator = PaymentChoiceNegotiator(bridge, self._cart, navigator, view)

        view.show_service(service)
        if kind is PageKind.service_selection:
            bridge.persist_service(service, skus)
        if handoff is not None and handoff.payment is not None:
            view.show_payment_summary(handoff.payment, handoff.payment.remaining_balance(service.price))

        self._logger.info(
            "Page opened",
            extra={"page_id": page_id, "service_id": service.service_id, "reason": kind.value},
        )
        return BookingPage(
            page_id=page_id,
            kind=kind,
            store=store,
            calendar=calendar_router,
            addons=addons_router,
            negotiator=negotiator,
            skus=skus,
            handoff=handoff,
        )
