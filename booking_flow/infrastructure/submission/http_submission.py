from __future__ import annotations

import logging
from typing import Any

import httpx

from booking_flow.application.exceptions import BookingSubmissionError
from booking_flow.application.ports.booking_submission import BookingSubmissionPort
from booking_flow.core.config import settings


class HttpBookingSubmissionClient(BookingSubmissionPort):
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or settings.BOOKING_API_URL or "").rstrip("/")
        self._api_key = api_key or settings.BOOKING_API_KEY
        self._client = client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("BOOKING_API_URL is required for the booking submission client")

    async def submit(self, booking: dict[str, Any]) -> str:
        url = f"{self._base_url}/bookings"
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            response = await self._client.post(url, json=booking, headers=headers)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Booking submission failed", extra={"reason": str(e)})
            raise BookingSubmissionError(str(e) or "Booking submission failed") from e

        booking_id = (data.get("bookingId") or data.get("id")) if isinstance(data, dict) else None
        if not booking_id:
            raise BookingSubmissionError("No booking ID returned from booking API")

        self._logger.info("Booking created", extra={"reason": booking_id})
        return str(booking_id)

    async def aclose(self) -> None:
        await self._client.aclose()
