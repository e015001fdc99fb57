from __future__ import annotations

import logging
from typing import Any

from booking_flow.application.ports.page_view import PageViewPort
from booking_flow.core.config import settings
from booking_flow.domain.entities.payment_choice import PaymentChoice
from booking_flow.domain.entities.service_context import ServiceContext


class RecordingPageView(PageViewPort):
    """Queues view updates for the host page to pick up and render."""

    def __init__(self, go_to_cart: bool | None = None) -> None:
        self.events: list[dict[str, Any]] = []
        self._go_to_cart = settings.CART_AUTO_VIEW if go_to_cart is None else go_to_cart
        self._logger = logging.getLogger(__name__)

    def _record(self, event: str, **data: Any) -> None:
        self.events.append({"event": event, **data})
        self._logger.debug("View updated", extra={"reason": event})

    def show_service(self, service: ServiceContext) -> None:
        self._record("service", service=service.to_record())

    def show_total_price(self, amount: float) -> None:
        self._record("total_price", amount=amount, text=f"${amount:.0f}")

    def show_selection(self, date_label: str, time_label: str) -> None:
        self._record("selection", date=date_label, time=time_label, text=f"Selected: {date_label} at {time_label}")

    def show_payment_summary(self, choice: PaymentChoice, remaining_balance: float) -> None:
        self._record(
            "payment_summary",
            paymentType=choice.type.value,
            label=choice.label,
            amount=choice.amount,
            remainingBalance=remaining_balance,
        )

    def show_loading(self, message: str) -> None:
        self._record("loading", text=message)

    def show_success(self, message: str) -> None:
        self._record("success", text=message)

    def show_error(self, message: str) -> None:
        self._record("error", text=message)

    def hide_payment_options(self) -> None:
        self._record("hide_payment_options")

    async def confirm_go_to_cart(self) -> bool:
        self._record("cart_decision", goToCart=self._go_to_cart)
        return self._go_to_cart

    def events_of(self, event: str) -> list[dict[str, Any]]:
        return [e for e in self.events if e["event"] == event]

    def drain(self) -> list[dict[str, Any]]:
        events, self.events = self.events, []
        return events
