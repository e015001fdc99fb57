from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable
from urllib.parse import urlencode

from booking_flow.application.exceptions import BookingSubmissionError
from booking_flow.application.ports.booking_submission import BookingSubmissionPort
from booking_flow.application.ports.draft_store import BookingDraftStorePort
from booking_flow.application.ports.navigator import NavigatorPort
from booking_flow.application.ports.page_view import PageViewPort
from booking_flow.core.config import settings


class BookingSubmissionHandler:
    def __init__(
        self,
        store: BookingDraftStorePort,
        submitter: BookingSubmissionPort,
        view: PageViewPort,
        navigator: NavigatorPort,
        confirmation_path: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._submitter = submitter
        self._view = view
        self._navigator = navigator
        self._confirmation_path = confirmation_path or settings.CONFIRMATION_PATH
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._logger = logging.getLogger(__name__)

    async def submit(self, payload: dict[str, Any] | None) -> str | None:
        """
        Merge the submission payload into the draft record and hand it to the submitter.
        Returns the booking id, or None when submission failed (the user may resubmit).
        """
        timestamp = self._clock().isoformat()
        self._store.mark_submitted(timestamp)
        booking = {**self._store.snapshot().to_record(), **(payload or {}), "timestamp": timestamp}

        self._view.show_loading("Submitting booking...")
        try:
            booking_id = await self._submitter.submit(booking)
        except Exception as e:
            error = e if isinstance(e, BookingSubmissionError) else BookingSubmissionError(str(e))
            self._logger.error("Error submitting booking", extra={"reason": str(error)})
            self._view.show_error(f"Error: {error}")
            return None

        self._logger.info(
            "Booking submitted",
            extra={"service_id": self._store.snapshot().service.service_id, "reason": booking_id},
        )
        self._view.show_success("Booking confirmed!")
        self._navigator.to(f"{self._confirmation_path}?{urlencode({'id': booking_id})}")
        return booking_id
