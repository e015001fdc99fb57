from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Response

from booking_flow.api.schemas import (
    OpenPageRequest,
    OpenPageResponse,
    PageEventsResponse,
    PaymentChoiceRequest,
    PaymentChoiceResponse,
)
from booking_flow.application.exceptions import InvalidDestination, InvalidPaymentType
from booking_flow.wiring.dependencies import PageSession, close_page, get_page_session, open_page


router = APIRouter()
logger = logging.getLogger(__name__)


def _require_page(page_id: str) -> PageSession:
    session = get_page_session(page_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Unknown page")
    return session


@router.post("/pages", response_model=OpenPageResponse)
def create_page(request: OpenPageRequest, response: Response) -> OpenPageResponse:
    session, navigator = open_page(
        request.kind,
        session_id=request.session_id,
        record=request.record,
        params=request.params,
        time_zone=request.time_zone,
    )
    if session is None:
        return OpenPageResponse(redirect=navigator.last_url)

    response.status_code = 201
    return OpenPageResponse(page_id=session.page.page_id, service=session.page.service.to_record())


@router.get("/pages/{page_id}/draft")
def get_draft(page_id: str) -> dict[str, Any]:
    return _require_page(page_id).page.draft.to_record()


@router.post("/pages/{page_id}/payment-choice", response_model=PaymentChoiceResponse)
async def choose_payment(page_id: str, request: PaymentChoiceRequest) -> PaymentChoiceResponse:
    session = _require_page(page_id)
    try:
        outcome = await session.page.choose_payment(request.payment_type, request.destination)
    except (InvalidPaymentType, InvalidDestination) as e:
        raise HTTPException(status_code=422, detail=str(e))

    return PaymentChoiceResponse(
        action=outcome.action,
        payment_type=outcome.choice.type.value,
        amount=outcome.choice.amount,
        product_sku=outcome.choice.product_sku,
        url=outcome.url,
    )


@router.get("/pages/{page_id}/events", response_model=PageEventsResponse)
def drain_events(page_id: str) -> PageEventsResponse:
    session = _require_page(page_id)
    return PageEventsResponse(events=session.view.drain(), navigations=session.navigator.drain())


@router.delete("/pages/{page_id}", status_code=204)
def delete_page(page_id: str) -> Response:
    if not close_page(page_id):
        raise HTTPException(status_code=404, detail="Unknown page")
    return Response(status_code=204)
