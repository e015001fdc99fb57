from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from booking_flow.domain.entities.service_context import ServiceContext


class PaymentType(str, Enum):
    deposit = "deposit"
    full = "full"


class Destination(str, Enum):
    cart = "cart"
    booking = "booking"


@dataclass(frozen=True)
class PaymentChoice:
    type: PaymentType
    amount: float
    product_sku: str
    service_snapshot: ServiceContext

    @property
    def label(self) -> str:
        return "Deposit Payment" if self.type is PaymentType.deposit else "Full Payment"

    def remaining_balance(self, price: float | None = None) -> float:
        """Balance due at the appointment; zero unless only a deposit was paid."""
        if self.type is not PaymentType.deposit:
            return 0.0
        base = self.service_snapshot.price if price is None else price
        return max(base - self.amount, 0.0)

    def to_record(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "amount": self.amount,
            "productSku": self.product_sku,
            "serviceSnapshot": self.service_snapshot.to_record(),
        }
