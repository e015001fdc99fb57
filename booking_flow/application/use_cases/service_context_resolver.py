from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from booking_flow.application.exceptions import MissingServiceContext
from booking_flow.application.utils.calendar_range import resolve_time_zone
from booking_flow.application.utils.coercion import lookup_path, to_number, to_text
from booking_flow.core.config import settings
from booking_flow.domain.entities.service_context import PaymentSkus, ServiceContext


@dataclass(frozen=True)
class FieldMapping:
    """Candidate field paths per logical attribute, highest priority first."""

    service_id: tuple[str, ...]
    name: tuple[str, ...] = ("name",)
    price: tuple[str, ...] = ("price",)
    duration: tuple[str, ...] = ("durationMinutes",)
    deposit: tuple[str, ...] = ("deposit",)
    category: tuple[str, ...] = ("category",)
    deposit_sku: tuple[str, ...] = ()
    full_sku: tuple[str, ...] = ()
    default_name: str = ""
    default_deposit_ratio: float | None = None  # applied to price when no deposit resolves


CMS_ITEM_MAPPING = FieldMapping(
    service_id=("bookingServiceId",),
    category=("category.title", "category"),
)

BOOKINGS_ITEM_MAPPING = FieldMapping(
    service_id=("_id", "id", "serviceId", "bookingServiceId"),
    name=("name", "title", "serviceName"),
    price=("price", "pricing.price", "priceAmount", "price.amount"),
    duration=("duration", "sessionLength", "durationMinutes", "duration.minutes"),
    category=("category", "categories.0.name", "categoryName"),
    default_name="Service",
)

CATALOG_MAPPING = FieldMapping(
    service_id=("_id", "serviceId", "slug"),
    name=("title", "name", "serviceName"),
    price=("price", "basePrice", "pricing.price"),
    duration=("duration", "durationInMinutes"),
    deposit=("deposit", "depositAmount"),
    category=("category", "categories.0.name", "categoryName"),
    deposit_sku=("depositProductId", "depositSku"),
    full_sku=("fullPaymentProductId", "fullPaymentSku"),
    default_deposit_ratio=settings.DEFAULT_DEPOSIT_RATIO,
)

HANDOFF_MAPPING = FieldMapping(
    service_id=("serviceId",),
    name=("service",),
    price=("price",),
    duration=("duration",),
    deposit=("deposit",),
    category=("category",),
)


class ServiceContextResolver:
    """Normalize a raw service record into a ServiceContext using a per-page field mapping."""

    def __init__(self, mapping: FieldMapping, default_time_zone: str | None = None) -> None:
        self._mapping = mapping
        self._default_time_zone = default_time_zone or settings.DEFAULT_TIMEZONE
        self._logger = logging.getLogger(__name__)

    @property
    def mapping(self) -> FieldMapping:
        return self._mapping

    def resolve(
        self,
        raw_record: Mapping[str, Any] | None,
        handoff_params: Mapping[str, Any] | None = None,
        time_zone: str | None = None,
    ) -> ServiceContext:
        sources: list[tuple[Mapping[str, Any], FieldMapping]] = []
        if isinstance(raw_record, Mapping):
            sources.append((raw_record, self._mapping))
        if isinstance(handoff_params, Mapping):
            sources.append((handoff_params, HANDOFF_MAPPING))

        service_id = self._first_text(sources, "service_id")
        if not service_id:
            self._logger.warning("Could not resolve service id", extra={"reason": "missing_service_id"})
            raise MissingServiceContext("No service identifier found in record")

        price = self._first_number(sources, "price")
        deposit = self._first_number(sources, "deposit")
        if deposit is None and self._mapping.default_deposit_ratio is not None:
            deposit = (price or 0.0) * self._mapping.default_deposit_ratio

        return ServiceContext(
            service_id=service_id,
            name=self._first_text(sources, "name") or self._mapping.default_name,
            price=_clamp(price),
            duration_minutes=_clamp(self._first_number(sources, "duration")),
            deposit=_clamp(deposit),
            category=self._first_text(sources, "category") or "",
            time_zone=resolve_time_zone(time_zone, self._default_time_zone),
        )

    def resolve_skus(self, raw_record: Mapping[str, Any] | None) -> PaymentSkus:
        if not isinstance(raw_record, Mapping):
            return PaymentSkus()
        sources = [(raw_record, self._mapping)]
        return PaymentSkus(
            deposit_sku=self._first_text(sources, "deposit_sku") or "",
            full_sku=self._first_text(sources, "full_sku") or "",
        )

    def _first_text(self, sources: list[tuple[Mapping[str, Any], FieldMapping]], attribute: str) -> str | None:
        for record, mapping in sources:
            for path in getattr(mapping, attribute):
                value = to_text(lookup_path(record, path))
                if value:
                    return value
        return None

    def _first_number(self, sources: list[tuple[Mapping[str, Any], FieldMapping]], attribute: str) -> float | None:
        for record, mapping in sources:
            for path in getattr(mapping, attribute):
                value = to_number(lookup_path(record, path))
                if value is not None:
                    return value
        return None


def _clamp(value: float | None) -> float:
    if value is None:
        return 0.0
    return max(value, 0.0)
