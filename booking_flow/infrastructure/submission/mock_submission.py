from __future__ import annotations

import logging
import time
from typing import Any

from booking_flow.application.exceptions import BookingSubmissionError
from booking_flow.application.ports.booking_submission import BookingSubmissionPort


class MockBookingSubmission(BookingSubmissionPort):
    def __init__(self, fail: bool = False) -> None:
        self.submitted: list[dict[str, Any]] = []
        self._fail = fail
        self._logger = logging.getLogger(__name__)

    async def submit(self, booking: dict[str, Any]) -> str:
        if self._fail:
            raise BookingSubmissionError("Mock booking backend is unavailable")
        self.submitted.append(booking)
        booking_id = f"temp-{int(time.time() * 1000)}"
        self._logger.info("Mock booking submitted", extra={"reason": booking_id})
        return booking_id
