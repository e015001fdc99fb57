from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import urlencode

from pydantic import ValidationError

from booking_flow.application.dto.payment_record import PaymentChoiceRecord
from booking_flow.application.exceptions import PersistedRecordParseError
from booking_flow.application.ports.session_storage import SessionStoragePort
from booking_flow.application.use_cases.service_context_resolver import HANDOFF_MAPPING, ServiceContextResolver
from booking_flow.application.utils.coercion import format_number, non_negative, to_text
from booking_flow.core.config import settings
from booking_flow.domain.entities.payment_choice import PaymentChoice, PaymentType
from booking_flow.domain.entities.service_context import PaymentSkus, ServiceContext

PAYMENT_CHOICE_KEY = "paymentChoice"
CURRENT_SERVICE_KEY = "currentService"


@dataclass(frozen=True)
class Decoded:
    value: PaymentChoice


@dataclass(frozen=True)
class DecodeFailure:
    error: PersistedRecordParseError


DecodeResult = Decoded | DecodeFailure


@dataclass(frozen=True)
class Handoff:
    """What survives a page transition: the service plus whatever payment data came along."""

    service: ServiceContext
    payment: PaymentChoice | None = None


class PageTransitionBridge:
    def __init__(
        self,
        storage: SessionStoragePort,
        booking_path: str | None = None,
        resolver: ServiceContextResolver | None = None,
    ) -> None:
        self._storage = storage
        self._booking_path = booking_path or settings.BOOKING_PAGE_PATH
        self._resolver = resolver or ServiceContextResolver(HANDOFF_MAPPING)
        self._logger = logging.getLogger(__name__)

    def encode(self, service: ServiceContext, choice: PaymentChoice | None = None) -> dict[str, str]:
        params = {
            "serviceId": service.service_id,
            "service": service.name,
            "price": format_number(service.price),
            "duration": format_number(service.duration_minutes),
            "deposit": format_number(service.deposit),
        }
        if choice is not None:
            params["paymentType"] = choice.type.value
            params["paymentAmount"] = format_number(choice.amount)
        return params

    def booking_url(self, choice: PaymentChoice) -> str:
        params = self.encode(choice.service_snapshot, choice)
        return f"{self._booking_path}?{urlencode(params)}"

    def persist(self, choice: PaymentChoice) -> None:
        self._storage.set_item(PAYMENT_CHOICE_KEY, json.dumps(choice.to_record()))

    def persist_service(self, service: ServiceContext, skus: PaymentSkus) -> None:
        record = service.to_record()
        record["depositSku"] = skus.deposit_sku
        record["fullPaySku"] = skus.full_sku
        self._storage.set_item(CURRENT_SERVICE_KEY, json.dumps(record))

    def load_persisted(self) -> str | None:
        return self._storage.get_item(PAYMENT_CHOICE_KEY)

    def decode_payment_record(
        self,
        raw: str | None,
        fallback_service: ServiceContext | None = None,
    ) -> DecodeResult:
        if not raw:
            return DecodeFailure(PersistedRecordParseError("No persisted payment choice"))
        try:
            record = PaymentChoiceRecord.model_validate_json(raw)
        except ValidationError as e:
            return DecodeFailure(PersistedRecordParseError(f"Malformed payment choice: {e.error_count()} error(s)"))
        return Decoded(record.to_entity(fallback_service))

    def decode(
        self,
        params: Mapping[str, Any],
        persisted_record: str | None = None,
        time_zone: str | None = None,
    ) -> Handoff:
        """
        Rebuild the handoff on the receiving page.
        Raises MissingServiceContext when no service id came through. The persisted
        record wins; without a usable one the payment comes from paymentType and
        paymentAmount in the params, without a product SKU.
        """
        service = self._resolver.resolve(None, handoff_params=params, time_zone=time_zone)

        result = self.decode_payment_record(persisted_record, fallback_service=service)
        if isinstance(result, Decoded):
            return Handoff(service=service, payment=result.value)

        if persisted_record:
            self._logger.warning(
                "Error parsing payment choice",
                extra={"service_id": service.service_id, "reason": str(result.error)},
            )
        else:
            self._logger.info("No payment choice persisted", extra={"service_id": service.service_id})
        return Handoff(service=service, payment=self._payment_from_params(params, service))

    def _payment_from_params(self, params: Mapping[str, Any], service: ServiceContext) -> PaymentChoice | None:
        raw_type = to_text(params.get("paymentType"))
        if raw_type is None:
            return None
        try:
            kind = PaymentType(raw_type)
        except ValueError:
            self._logger.warning(
                "Unknown payment type in transition params",
                extra={"service_id": service.service_id, "reason": raw_type},
            )
            return None

        self._logger.info(
            "Payment choice rebuilt from transition params",
            extra={"service_id": service.service_id, "reason": kind.value},
        )
        return PaymentChoice(
            type=kind,
            amount=non_negative(params.get("paymentAmount")),
            product_sku="",
            service_snapshot=service,
        )
