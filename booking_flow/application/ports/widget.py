from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable

MessageCallback = Callable[[Any], Awaitable[None]]


class WidgetHandle(ABC):
    """Capability interface of an embedded widget reachable only through messages."""

    @abstractmethod
    def is_present(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def post_message(self, message: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def on_message(self, callback: MessageCallback) -> None:
        """Register the callback invoked with every raw inbound message, in arrival order."""
        raise NotImplementedError
