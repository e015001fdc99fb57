from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from booking_flow.application.utils.coercion import non_negative, to_number, to_text
from booking_flow.domain.entities.payment_choice import PaymentChoice, PaymentType
from booking_flow.domain.entities.service_context import ServiceContext


class ServiceSnapshotRecord(BaseModel):
    # Older pages persisted {serviceName, fullPrice, depositAmt, duration}
    model_config = ConfigDict(extra="ignore")

    service_id: str = Field("", validation_alias=AliasChoices("serviceId", "service_id"))
    name: str = Field("", validation_alias=AliasChoices("name", "serviceName"))
    price: float = Field(0.0, validation_alias=AliasChoices("price", "fullPrice"))
    duration_minutes: float = Field(0.0, validation_alias=AliasChoices("durationMinutes", "duration"))
    deposit: float = Field(0.0, validation_alias=AliasChoices("deposit", "depositAmt"))
    category: str = ""
    time_zone: str = Field("UTC", validation_alias=AliasChoices("timeZone", "time_zone"))

    @field_validator("price", "duration_minutes", "deposit", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> float:
        return non_negative(value)

    @field_validator("service_id", "name", "category", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return to_text(value) or ""

    def to_entity(self) -> ServiceContext:
        return ServiceContext(
            service_id=self.service_id,
            name=self.name,
            price=self.price,
            duration_minutes=self.duration_minutes,
            deposit=self.deposit,
            category=self.category,
            time_zone=self.time_zone,
        )


class PaymentChoiceRecord(BaseModel):
    """Persisted `paymentChoice` handoff record."""

    model_config = ConfigDict(extra="ignore")

    type: PaymentType
    amount: float
    product_sku: str = Field("", validation_alias=AliasChoices("productSku", "product_sku"))
    service_snapshot: ServiceSnapshotRecord | None = Field(
        None, validation_alias=AliasChoices("serviceSnapshot", "serviceData")
    )

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> float:
        number = to_number(value)
        if number is None or number < 0:
            raise ValueError("amount must be a non-negative number")
        return number

    @field_validator("product_sku", mode="before")
    @classmethod
    def _coerce_sku(cls, value: Any) -> str:
        return to_text(value) or ""

    def to_entity(self, fallback_service: ServiceContext | None = None) -> PaymentChoice:
        if self.service_snapshot is not None:
            snapshot = self.service_snapshot.to_entity()
        elif fallback_service is not None:
            snapshot = fallback_service
        else:
            snapshot = ServiceContext(service_id="")
        return PaymentChoice(
            type=self.type,
            amount=self.amount,
            product_sku=self.product_sku,
            service_snapshot=snapshot,
        )
