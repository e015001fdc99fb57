from typing import Any

from pydantic import BaseModel, Field

from booking_flow.application.use_cases.booking_page import PageKind


class OpenPageRequest(BaseModel):
    kind: PageKind
    session_id: str
    record: dict[str, Any] | None = None
    params: dict[str, Any] | None = None
    time_zone: str | None = None


class OpenPageResponse(BaseModel):
    page_id: str | None = None
    service: dict[str, Any] | None = None
    redirect: str | None = None


class PaymentChoiceRequest(BaseModel):
    payment_type: str
    destination: str = "booking"


class PaymentChoiceResponse(BaseModel):
    action: str
    payment_type: str
    amount: float
    product_sku: str
    url: str | None = None


class PageEventsResponse(BaseModel):
    events: list[dict[str, Any]] = Field(default_factory=list)
    navigations: list[str] = Field(default_factory=list)
