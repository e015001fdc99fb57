from __future__ import annotations

import logging

from booking_flow.application.ports.navigator import NavigatorPort


class RecordingNavigator(NavigatorPort):
    """Records navigation requests; the host page performs the actual redirect."""

    def __init__(self) -> None:
        self.history: list[str] = []
        self._logger = logging.getLogger(__name__)

    @property
    def last_url(self) -> str | None:
        return self.history[-1] if self.history else None

    def to(self, url: str) -> None:
        self.history.append(url)
        self._logger.info("Navigation requested", extra={"reason": url})

    def drain(self) -> list[str]:
        urls, self.history = self.history, []
        return urls
