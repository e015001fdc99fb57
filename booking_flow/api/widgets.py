from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, status

from booking_flow.domain.entities.widget_message import WidgetRole
from booking_flow.infrastructure.widgets.websocket_widget import WebSocketWidgetHandle
from booking_flow.wiring.dependencies import get_page_session


router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/pages/{page_id}/widgets/{role}")
async def widget_channel(websocket: WebSocket, page_id: str, role: str) -> None:
    session = get_page_session(page_id)
    try:
        widget_role = WidgetRole(role)
    except ValueError:
        widget_role = None

    if session is None or widget_role is None:
        logger.info("Widget connection refused", extra={"page_id": page_id, "widget": role})
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    handle = WebSocketWidgetHandle(websocket, widget=widget_role.value)
    session.page.attach_widget(widget_role, handle)
    logger.info("Widget attached", extra={"page_id": page_id, "widget": widget_role.value})

    try:
        await handle.run()
    finally:
        # A reconnecting widget may already have replaced this handle
        if session.page.router(widget_role).widget is handle:
            session.page.detach_widget(widget_role)
        logger.info("Widget detached", extra={"page_id": page_id, "widget": widget_role.value})
