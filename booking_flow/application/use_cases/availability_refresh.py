from __future__ import annotations

import logging
from datetime import date
from typing import Any, Awaitable, Callable

from booking_flow.application.dto.widget_message import availability_error_message, availability_message
from booking_flow.application.exceptions import AvailabilityFetchError
from booking_flow.application.ports.availability import AvailabilityPort
from booking_flow.application.utils.calendar_range import month_range

PostMessage = Callable[[dict[str, Any]], Awaitable[None]]


class AvailabilityRefreshCoordinator:
    """
    Turn a "show me this month" request into one backend query and route the result
    (AVAILABILITY or AVAILABILITY_ERROR) to the calendar widget.

    Every call takes a new epoch. Fetches may overlap; a response whose epoch is no
    longer the latest is dropped, so an older month never replaces a newer one.
    """

    def __init__(self, availability: AvailabilityPort, post: PostMessage) -> None:
        self._availability = availability
        self._post = post
        self._epoch = 0
        self._logger = logging.getLogger(__name__)

    @property
    def latest_epoch(self) -> int:
        return self._epoch

    def reserve_epoch(self) -> int:
        """Claim the next epoch now for a refresh that will start after an await."""
        self._epoch += 1
        return self._epoch

    async def refresh(
        self,
        service_id: str,
        month_anchor: date,
        time_zone: str,
        epoch: int | None = None,
    ) -> None:
        """
        Fetch and post one month. A caller holding an epoch from reserve_epoch passes it
        in; otherwise the epoch is taken here, before the first await.
        """
        if not service_id:
            self._logger.warning("Availability refresh skipped", extra={"reason": "missing_service_id"})
            return

        start, end = month_range(month_anchor, time_zone)
        if epoch is None:
            epoch = self.reserve_epoch()

        try:
            days = await self._availability.get_availability(
                service_id, start.isoformat(), end.isoformat(), time_zone
            )
            if not isinstance(days, list):
                raise AvailabilityFetchError("Unexpected availability payload")
        except Exception as e:
            if self._is_stale(epoch, service_id):
                return
            message = str(e) or e.__class__.__name__
            self._logger.error(
                "Availability error",
                extra={"service_id": service_id, "epoch": epoch, "reason": message},
            )
            await self._post(availability_error_message(message, time_zone))
            return

        if self._is_stale(epoch, service_id):
            return
        self._logger.info(
            "Availability loaded",
            extra={"service_id": service_id, "epoch": epoch, "reason": f"{len(days)} days"},
        )
        await self._post(availability_message(days, time_zone))

    def _is_stale(self, epoch: int, service_id: str) -> bool:
        if epoch == self._epoch:
            return False
        self._logger.info(
            "Stale availability response dropped",
            extra={"service_id": service_id, "epoch": epoch, "reason": f"latest={self._epoch}"},
        )
        return True
