from __future__ import annotations

import logging
from typing import Any

import httpx

from booking_flow.application.exceptions import AvailabilityFetchError
from booking_flow.application.ports.availability import AvailabilityPort
from booking_flow.core.config import settings


class HttpAvailabilityClient(AvailabilityPort):
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or settings.AVAILABILITY_API_URL or "").rstrip("/")
        self._api_key = api_key or settings.AVAILABILITY_API_KEY
        self._client = client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("AVAILABILITY_API_URL is required for the availability client")

    async def get_availability(
        self,
        service_id: str,
        range_start_iso: str,
        range_end_iso: str,
        time_zone: str,
    ) -> list[dict[str, Any]]:
        url = f"{self._base_url}/availability"
        params = {
            "serviceId": service_id,
            "startDate": range_start_iso,
            "endDate": range_end_iso,
            "timeZone": time_zone,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}

        try:
            response = await self._client.get(url, params=params, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            self._logger.error(
                "Availability lookup failed",
                extra={"service_id": service_id, "reason": f"status={e.response.status_code}"},
            )
            raise AvailabilityFetchError(f"Availability lookup failed ({e.response.status_code})") from e
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Availability lookup failed", extra={"service_id": service_id, "reason": str(e)})
            raise AvailabilityFetchError(str(e) or "Availability lookup failed") from e

        # The backend answers either a bare list or {"days": [...]}
        days = data.get("days") if isinstance(data, dict) else data
        if not isinstance(days, list):
            raise AvailabilityFetchError("Unexpected availability payload")
        return [day for day in days if isinstance(day, dict)]

    async def aclose(self) -> None:
        await self._client.aclose()
