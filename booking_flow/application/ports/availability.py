from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class AvailabilityPort(ABC):
    @abstractmethod
    async def get_availability(
        self,
        service_id: str,
        range_start_iso: str,
        range_end_iso: str,
        time_zone: str,
    ) -> list[dict[str, Any]]:
        """Return ordered {date, slots} records for the half-open range. Raises on failure."""
        raise NotImplementedError
