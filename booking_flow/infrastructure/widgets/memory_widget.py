from __future__ import annotations

import copy
from typing import Any

from booking_flow.application.ports.widget import MessageCallback, WidgetHandle


class MemoryWidgetHandle(WidgetHandle):
    """In-process widget: records what the host posts and delivers inbound messages on demand."""

    def __init__(self, present: bool = True) -> None:
        self.posted: list[dict[str, Any]] = []
        self._present = present
        self._callback: MessageCallback | None = None

    def is_present(self) -> bool:
        return self._present

    async def post_message(self, message: dict[str, Any]) -> None:
        self.posted.append(copy.deepcopy(message))

    def on_message(self, callback: MessageCallback) -> None:
        self._callback = callback

    async def deliver(self, raw: Any) -> None:
        if self._callback is not None:
            await self._callback(raw)

    def messages_of(self, message_type: str) -> list[dict[str, Any]]:
        return [m for m in self.posted if m.get("type") == message_type]
