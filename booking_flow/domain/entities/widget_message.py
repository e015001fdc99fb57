from __future__ import annotations

from enum import Enum


class WidgetRole(str, Enum):
    calendar = "calendar"
    addons = "addons"


class RouterState(str, Enum):
    unready = "UNREADY"
    ready = "READY"
    active = "ACTIVE"


class MessageType:
    READY = "READY"
    MONTH_CHANGE = "MONTH_CHANGE"
    TIME_SELECTED = "TIME_SELECTED"
    SERVICE_DATA = "SERVICE_DATA"
    AVAILABILITY = "AVAILABILITY"
    AVAILABILITY_ERROR = "AVAILABILITY_ERROR"
    ADDONS_UPDATE = "ADDONS_UPDATE"
    ADDONS = "vx:addons"
    CONTEXT = "vx:context"
    BOOKING_SUBMIT = "BOOKING_SUBMIT"
