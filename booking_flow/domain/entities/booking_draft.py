from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

from booking_flow.domain.entities.payment_choice import PaymentChoice
from booking_flow.domain.entities.service_context import ServiceContext


@dataclass(frozen=True)
class AddonsSelection:
    items: tuple[Any, ...] = ()  # opaque blobs owned by the add-ons widget
    total: float = 0.0
    minutes: float = 0.0


@dataclass(frozen=True)
class BookingDraft:
    service: ServiceContext
    selected_date: str | None = None
    selected_time: str | None = None
    addons: AddonsSelection = AddonsSelection()
    payment: PaymentChoice | None = None
    timestamp: str | None = None

    @property
    def has_selection(self) -> bool:
        return self.selected_date is not None and self.selected_time is not None

    @property
    def combined_total(self) -> float:
        return self.service.price + self.addons.total

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "service": self.service.to_record(),
            "date": self.selected_date,
            "time": self.selected_time,
            "addons": {
                "items": copy.deepcopy(list(self.addons.items)),
                "total": self.addons.total,
                "minutes": self.addons.minutes,
            },
            "timestamp": self.timestamp,
        }
        if self.payment:
            record["paymentType"] = self.payment.type.value
            record["paymentAmount"] = self.payment.amount
            record["productSku"] = self.payment.product_sku
        return record
