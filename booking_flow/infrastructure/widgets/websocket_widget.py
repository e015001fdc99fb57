from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

from booking_flow.application.ports.widget import MessageCallback, WidgetHandle


class WebSocketWidgetHandle(WidgetHandle):
    def __init__(self, websocket: WebSocket, widget: str = "") -> None:
        self._websocket = websocket
        self._widget = widget
        self._callback: MessageCallback | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._closed = False
        self._logger = logging.getLogger(__name__)

    def is_present(self) -> bool:
        return not self._closed

    async def post_message(self, message: dict[str, Any]) -> None:
        if self._closed:
            return
        try:
            await self._websocket.send_json(message)
        except (WebSocketDisconnect, RuntimeError) as e:
            self._closed = True
            self._logger.info("Widget went away while posting", extra={"widget": self._widget, "reason": str(e)})

    def on_message(self, callback: MessageCallback) -> None:
        self._callback = callback

    async def run(self) -> None:
        """
        Pump inbound messages until the socket closes.
        Each message gets its own task, started in arrival order, so a handler
        waiting on the backend does not hold up the next message.
        """
        try:
            while True:
                text = await self._websocket.receive_text()
                try:
                    raw = json.loads(text)
                except json.JSONDecodeError:
                    self._logger.info("Non-JSON widget message ignored", extra={"widget": self._widget})
                    continue
                if self._callback is None:
                    continue
                task = asyncio.create_task(self._callback(raw))
                self._tasks.add(task)
                task.add_done_callback(self._on_task_done)
        except WebSocketDisconnect:
            self._logger.info("Widget disconnected", extra={"widget": self._widget})
        finally:
            self._closed = True

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._logger.error(
                "Widget message handler failed",
                exc_info=error,
                extra={"widget": self._widget, "reason": str(error)},
            )
