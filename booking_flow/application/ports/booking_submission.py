from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BookingSubmissionPort(ABC):
    @abstractmethod
    async def submit(self, booking: dict[str, Any]) -> str:
        """Submit a completed booking draft. Returns booking_id."""
        raise NotImplementedError
