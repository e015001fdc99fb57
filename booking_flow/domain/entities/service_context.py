from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ServiceContext:
    service_id: str
    name: str = ""
    price: float = 0.0
    duration_minutes: float = 0.0
    deposit: float = 0.0
    category: str = ""
    time_zone: str = "UTC"  # recomputed per page load, never taken from a handoff

    def to_payload(self) -> dict[str, Any]:
        """Payload of the SERVICE_DATA message sent to both widgets."""
        return {
            "serviceId": self.service_id,
            "name": self.name,
            "price": self.price,
            "durationMinutes": self.duration_minutes,
            "deposit": self.deposit,
            "timeZone": self.time_zone,
        }

    def to_record(self) -> dict[str, Any]:
        record = self.to_payload()
        record["category"] = self.category
        return record


@dataclass(frozen=True)
class PaymentSkus:
    deposit_sku: str = ""
    full_sku: str = ""
