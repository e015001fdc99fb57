from __future__ import annotations

import copy
from dataclasses import replace
from typing import Any, Sequence

from booking_flow.application.ports.draft_store import BookingDraftStorePort
from booking_flow.application.utils.coercion import non_negative
from booking_flow.domain.entities.booking_draft import AddonsSelection, BookingDraft
from booking_flow.domain.entities.payment_choice import PaymentChoice
from booking_flow.domain.entities.service_context import ServiceContext


class MemoryDraftStore(BookingDraftStorePort):
    """Owns the booking draft for the lifetime of one page."""

    def __init__(self, service: ServiceContext) -> None:
        self._draft = BookingDraft(service=service)

    def set_service(self, service: ServiceContext) -> None:
        self._draft = replace(self._draft, service=service)

    def set_selection(self, date_label: str, time_label: str) -> None:
        self._draft = replace(self._draft, selected_date=date_label, selected_time=time_label)

    def set_addons(self, items: Sequence[Any], total: Any, minutes: Any) -> None:
        if not isinstance(items, (list, tuple)):
            items = ()
        blobs = tuple(copy.deepcopy(item) for item in items)
        self._draft = replace(
            self._draft,
            addons=AddonsSelection(items=blobs, total=non_negative(total), minutes=non_negative(minutes)),
        )

    def set_payment(self, choice: PaymentChoice | None) -> None:
        self._draft = replace(self._draft, payment=choice)

    def mark_submitted(self, timestamp: str) -> None:
        self._draft = replace(self._draft, timestamp=timestamp)

    def snapshot(self) -> BookingDraft:
        return copy.deepcopy(self._draft)
