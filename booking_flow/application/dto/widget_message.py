from __future__ import annotations

import copy
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from booking_flow.domain.entities.booking_draft import AddonsSelection
from booking_flow.domain.entities.service_context import ServiceContext
from booking_flow.domain.entities.widget_message import MessageType


class WidgetMessageDTO(BaseModel):
    """Inbound widget message. Widgets put fields either under "payload" or at the top level."""

    model_config = ConfigDict(extra="allow")

    type: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def decode(cls, raw: Any) -> WidgetMessageDTO | None:
        if not isinstance(raw, dict):
            return None
        data = dict(raw)
        if not isinstance(data.get("payload"), dict):
            data["payload"] = {}
        try:
            return cls.model_validate(data)
        except ValidationError:
            return None

    def field(self, name: str) -> Any:
        if name in self.payload:
            return self.payload[name]
        return (self.model_extra or {}).get(name)


def service_data_message(service: ServiceContext) -> dict[str, Any]:
    return {"type": MessageType.SERVICE_DATA, "data": service.to_payload()}


def availability_message(days: list[dict[str, Any]], time_zone: str) -> dict[str, Any]:
    return {"type": MessageType.AVAILABILITY, "data": days, "timeZone": time_zone}


def availability_error_message(message: str, time_zone: str) -> dict[str, Any]:
    return {"type": MessageType.AVAILABILITY_ERROR, "message": message, "timeZone": time_zone}


def addons_update_message(addons: AddonsSelection) -> dict[str, Any]:
    return {
        "type": MessageType.ADDONS_UPDATE,
        "payload": {
            "addonsItems": copy.deepcopy(list(addons.items)),
            "addonsTotal": addons.total,
            "addonsMinutes": addons.minutes,
        },
    }


def context_message(service_name: str, date_label: str, time_label: str) -> dict[str, Any]:
    return {
        "type": MessageType.CONTEXT,
        "payload": {
            "serviceName": service_name,
            "dateLabel": date_label,
            "timeLabel": time_label,
        },
    }
