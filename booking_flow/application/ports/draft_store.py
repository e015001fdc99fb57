from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from booking_flow.domain.entities.booking_draft import BookingDraft
from booking_flow.domain.entities.payment_choice import PaymentChoice
from booking_flow.domain.entities.service_context import ServiceContext


class BookingDraftStorePort(ABC):
    @abstractmethod
    def set_service(self, service: ServiceContext) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_selection(self, date_label: str, time_label: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_addons(self, items: Sequence[Any], total: Any, minutes: Any) -> None:
        """
        Replace the add-ons selection.
        Totals are coerced to non-negative numbers; malformed values count as 0.
        """
        raise NotImplementedError

    @abstractmethod
    def set_payment(self, choice: PaymentChoice | None) -> None:
        raise NotImplementedError

    @abstractmethod
    def mark_submitted(self, timestamp: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def snapshot(self) -> BookingDraft:
        """Immutable copy of the current draft; mutating it never reaches the store."""
        raise NotImplementedError
