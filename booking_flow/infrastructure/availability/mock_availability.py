from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any

from booking_flow.application.ports.availability import AvailabilityPort


class MockAvailability(AvailabilityPort):
    """
    Every day in the range offers duration_minutes-long slots starting every 30 minutes,
    each ending by end_hour. Booked start times are left out.
    """

    def __init__(
        self,
        duration_minutes: int = 60,
        start_hour: int = 9,
        end_hour: int = 17,
        booked: set[datetime] | None = None,
    ) -> None:
        self._duration_minutes = duration_minutes
        self._start_hour = start_hour
        self._end_hour = end_hour
        self._booked = booked or set()
        self.calls: list[tuple[str, str, str, str]] = []
        self._logger = logging.getLogger(__name__)

    async def get_availability(
        self,
        service_id: str,
        range_start_iso: str,
        range_end_iso: str,
        time_zone: str,
    ) -> list[dict[str, Any]]:
        self.calls.append((service_id, range_start_iso, range_end_iso, time_zone))
        start = datetime.fromisoformat(range_start_iso).date()
        end = datetime.fromisoformat(range_end_iso).date()

        days: list[dict[str, Any]] = []
        current = start
        while current < end:
            days.append({"date": current.isoformat(), "slots": self._slots_for(current)})
            current += timedelta(days=1)

        self._logger.info(
            "Mock availability served",
            extra={"service_id": service_id, "reason": f"{len(days)} days"},
        )
        return days

    def _slots_for(self, day: date) -> list[dict[str, str]]:
        slots: list[dict[str, str]] = []
        current = datetime.combine(day, datetime.min.time().replace(hour=self._start_hour))
        end_time = datetime.combine(day, datetime.min.time().replace(hour=self._end_hour))

        while current + timedelta(minutes=self._duration_minutes) <= end_time:
            if current not in self._booked:
                slot_end = current + timedelta(minutes=self._duration_minutes)
                slots.append({"start": current.isoformat(), "end": slot_end.isoformat()})
            current += timedelta(minutes=30)

        return slots
