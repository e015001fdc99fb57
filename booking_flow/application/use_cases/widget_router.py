from __future__ import annotations

import logging
from datetime import date
from typing import Any, Awaitable, Callable

from booking_flow.application.dto.widget_message import (
    WidgetMessageDTO,
    addons_update_message,
    context_message,
    service_data_message,
)
from booking_flow.application.ports.availability import AvailabilityPort
from booking_flow.application.ports.draft_store import BookingDraftStorePort
from booking_flow.application.ports.page_view import PageViewPort
from booking_flow.application.ports.widget import WidgetHandle
from booking_flow.application.use_cases.availability_refresh import AvailabilityRefreshCoordinator
from booking_flow.application.use_cases.booking_submission import BookingSubmissionHandler
from booking_flow.application.utils.calendar_range import month_anchor, today_in
from booking_flow.application.utils.coercion import to_number, to_text
from booking_flow.core.config import settings
from booking_flow.domain.entities.widget_message import MessageType, RouterState, WidgetRole

Handler = Callable[[WidgetMessageDTO], Awaitable[None]]


class WidgetMessageRouter:
    """
    Decode a widget's inbound messages, dispatch them and encode outbound ones.

    Routers are linked in pairs by the page; a widget never sees its peer, only the
    messages its router chooses to forward. With no widget mounted every operation
    is a no-op.
    """

    role: WidgetRole

    def __init__(
        self,
        widget: WidgetHandle | None,
        store: BookingDraftStorePort,
        view: PageViewPort,
    ) -> None:
        self._widget: WidgetHandle | None = None
        self._store = store
        self._view = view
        self._peer: WidgetMessageRouter | None = None
        self._state = RouterState.unready
        self._handlers: dict[str, Handler] = {}
        self._logger = logging.getLogger(__name__)
        self.attach(widget)

    @property
    def state(self) -> RouterState:
        return self._state

    @property
    def widget(self) -> WidgetHandle | None:
        return self._widget

    @property
    def is_present(self) -> bool:
        return self._widget is not None and self._widget.is_present()

    def link(self, peer: WidgetMessageRouter) -> None:
        self._peer = peer

    def attach(self, widget: WidgetHandle | None) -> None:
        self._widget = widget
        self._state = RouterState.unready
        if widget is not None and widget.is_present():
            widget.on_message(self.handle)

    def detach(self) -> None:
        self._widget = None
        self._state = RouterState.unready

    async def post(self, message: dict[str, Any]) -> None:
        if self._widget is None or not self._widget.is_present():
            return
        await self._widget.post_message(message)

    async def handle(self, raw: Any) -> None:
        if not self.is_present:
            return

        message = WidgetMessageDTO.decode(raw)
        if message is None or not message.type:
            self._logger.debug("Malformed widget message ignored", extra={"widget": self.role.value})
            return

        if message.type == MessageType.READY:
            self._state = RouterState.ready
            await self._on_ready()
            return

        handler = self._handlers.get(message.type)
        if handler is None:
            self._logger.debug(
                "Unrecognized widget message ignored",
                extra={"widget": self.role.value, "message_type": message.type},
            )
            return

        if self._state is RouterState.unready:
            self._logger.info(
                "Widget message before READY ignored",
                extra={"widget": self.role.value, "message_type": message.type},
            )
            return

        self._state = RouterState.active
        await handler(message)

    async def _on_ready(self) -> None:
        await self.post(service_data_message(self._store.snapshot().service))


class CalendarMessageRouter(WidgetMessageRouter):
    role = WidgetRole.calendar

    def __init__(
        self,
        widget: WidgetHandle | None,
        store: BookingDraftStorePort,
        view: PageViewPort,
        availability: AvailabilityPort,
        month_base: int | None = None,
        today: Callable[[str], date] = today_in,
    ) -> None:
        super().__init__(widget, store, view)
        self._coordinator = AvailabilityRefreshCoordinator(availability, self.post)
        self._month_base = settings.WIDGET_MONTH_BASE if month_base is None else month_base
        self._today = today
        self._handlers = {
            MessageType.MONTH_CHANGE: self._on_month_change,
            MessageType.TIME_SELECTED: self._on_time_selected,
        }

    @property
    def coordinator(self) -> AvailabilityRefreshCoordinator:
        return self._coordinator

    async def _on_ready(self) -> None:
        # A MONTH_CHANGE handled while SERVICE_DATA is in flight must supersede this refresh
        epoch = self._coordinator.reserve_epoch()
        await super()._on_ready()
        service = self._store.snapshot().service
        await self._coordinator.refresh(
            service.service_id, self._today(service.time_zone), service.time_zone, epoch=epoch
        )

    async def _on_month_change(self, message: WidgetMessageDTO) -> None:
        year = to_number(message.field("year"))
        month = to_number(message.field("month"))
        if year is None or month is None:
            self._logger.info(
                "MONTH_CHANGE without a usable year/month ignored",
                extra={"widget": self.role.value, "message_type": message.type},
            )
            return

        try:
            anchor = month_anchor(int(year), int(month), self._month_base)
        except (ValueError, OverflowError):
            self._logger.info(
                "MONTH_CHANGE out of range ignored",
                extra={"widget": self.role.value, "reason": f"{year}-{month}"},
            )
            return

        service = self._store.snapshot().service
        await self._coordinator.refresh(service.service_id, anchor, service.time_zone)

    async def _on_time_selected(self, message: WidgetMessageDTO) -> None:
        date_label = to_text(message.field("dateLabel"))
        time_label = to_text(message.field("timeLabel"))
        if not date_label or not time_label:
            self._logger.info(
                "Incomplete TIME_SELECTED ignored",
                extra={"widget": self.role.value, "message_type": message.type},
            )
            return

        self._store.set_selection(date_label, time_label)
        self._view.show_selection(date_label, time_label)

        if self._peer is not None:
            service = self._store.snapshot().service
            await self._peer.post(context_message(service.name, date_label, time_label))


class AddonsMessageRouter(WidgetMessageRouter):
    role = WidgetRole.addons

    def __init__(
        self,
        widget: WidgetHandle | None,
        store: BookingDraftStorePort,
        view: PageViewPort,
        submission: BookingSubmissionHandler | None = None,
    ) -> None:
        super().__init__(widget, store, view)
        self._submission = submission
        self._handlers = {
            MessageType.ADDONS: self._on_addons,
            MessageType.ADDONS_UPDATE: self._on_addons,
            MessageType.BOOKING_SUBMIT: self._on_booking_submit,
        }

    async def _on_addons(self, message: WidgetMessageDTO) -> None:
        # vx:addons uses short field names, ADDONS_UPDATE the prefixed ones
        if message.type == MessageType.ADDONS:
            total, minutes = message.field("total"), message.field("minutes")
        else:
            total, minutes = message.field("addonsTotal"), message.field("addonsMinutes")
        items = message.field("items") or message.field("addonsItems") or []

        self._store.set_addons(items, total, minutes)
        draft = self._store.snapshot()
        self._view.show_total_price(draft.combined_total)

        if self._peer is not None:
            await self._peer.post(addons_update_message(draft.addons))

    async def _on_booking_submit(self, message: WidgetMessageDTO) -> None:
        if self._submission is None:
            self._logger.warning("BOOKING_SUBMIT received but no submission handler is configured")
            return
        await self._submission.submit(dict(message.payload))
