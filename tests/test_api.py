"""
Tests for the HTTP and WebSocket surface.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from booking_flow.core.config import settings
from booking_flow.main import app

CATALOG_RECORD = {
    "_id": "svc_42",
    "title": "Laser",
    "price": 100,
    "deposit": 30,
    "depositProductId": "dep-sku",
    "fullPaymentProductId": "full-sku",
}


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "SESSION_STORE_DIR", str(tmp_path))
    with TestClient(app) as test_client:
        yield test_client


def _open(client, kind="service_selection", record=None, **extra):
    body = {"kind": kind, "session_id": "browser-1", "record": record, "time_zone": "UTC", **extra}
    return client.post("/pages", json=body)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_open_page(client):
    response = _open(client, record=CATALOG_RECORD)

    assert response.status_code == 201
    data = response.json()
    assert data["page_id"]
    assert data["service"]["serviceId"] == "svc_42"
    assert data["redirect"] is None

    draft = client.get(f"/pages/{data['page_id']}/draft").json()
    assert draft["service"]["name"] == "Laser"
    assert draft["date"] is None


def test_open_page_without_service_redirects(client):
    response = _open(client, kind="service_item", record={"name": "No id"})

    assert response.status_code == 200
    assert response.json()["redirect"] == "/services"
    assert response.json()["page_id"] is None


def test_open_page_unknown_kind(client):
    response = _open(client, kind="landing", record=CATALOG_RECORD)

    assert response.status_code == 422


def test_payment_choice(client):
    page_id = _open(client, record=CATALOG_RECORD).json()["page_id"]

    response = client.post(
        f"/pages/{page_id}/payment-choice", json={"payment_type": "deposit", "destination": "booking"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["action"] == "booking"
    assert data["payment_type"] == "deposit"
    assert data["amount"] == 30.0
    assert data["product_sku"] == "dep-sku"
    assert data["url"].startswith("/booking-calendar?serviceId=svc_42")

    events = client.get(f"/pages/{page_id}/events").json()
    assert events["navigations"] == [data["url"]]
    assert client.get(f"/pages/{page_id}/events").json()["navigations"] == []


def test_payment_choice_to_cart(client):
    page_id = _open(client, record=CATALOG_RECORD).json()["page_id"]

    response = client.post(f"/pages/{page_id}/payment-choice", json={"payment_type": "full", "destination": "cart"})

    assert response.status_code == 200
    assert response.json()["action"] == "view_cart"
    assert response.json()["url"] == "/cart"


def test_invalid_payment_choice(client):
    page_id = _open(client, record=CATALOG_RECORD).json()["page_id"]

    bad_type = client.post(f"/pages/{page_id}/payment-choice", json={"payment_type": "partial"})
    bad_destination = client.post(
        f"/pages/{page_id}/payment-choice", json={"payment_type": "full", "destination": "moon"}
    )

    assert bad_type.status_code == 422
    assert bad_destination.status_code == 422


def test_unknown_page(client):
    assert client.get("/pages/nope/draft").status_code == 404
    assert client.delete("/pages/nope").status_code == 404


def test_booking_page_after_handoff(client):
    """The booking page in the same browser session picks up the persisted payment choice."""
    page_id = _open(client, record=CATALOG_RECORD).json()["page_id"]
    client.post(f"/pages/{page_id}/payment-choice", json={"payment_type": "deposit"})

    response = _open(client, kind="booking", params={"serviceId": "svc_42", "price": "100", "paymentType": "deposit"})
    booking_id = response.json()["page_id"]
    draft = client.get(f"/pages/{booking_id}/draft").json()

    assert response.status_code == 201
    assert draft["paymentType"] == "deposit"
    assert draft["paymentAmount"] == 30.0

    events = client.get(f"/pages/{booking_id}/events").json()["events"]
    summary = [e for e in events if e["event"] == "payment_summary"][0]
    assert summary["remainingBalance"] == 70.0


def test_delete_page(client):
    page_id = _open(client, record=CATALOG_RECORD).json()["page_id"]

    assert client.delete(f"/pages/{page_id}").status_code == 204
    assert client.get(f"/pages/{page_id}/draft").status_code == 404


def test_widget_websocket_ready(client):
    page_id = _open(client, record=CATALOG_RECORD).json()["page_id"]

    with client.websocket_connect(f"/pages/{page_id}/widgets/calendar") as websocket:
        websocket.send_json({"type": "READY"})
        service_data = websocket.receive_json()
        availability = websocket.receive_json()

    assert service_data["type"] == "SERVICE_DATA"
    assert service_data["data"]["serviceId"] == "svc_42"
    assert availability["type"] == "AVAILABILITY"
    assert availability["timeZone"] == "UTC"


def test_widget_websocket_time_selection(client):
    page_id = _open(client, record=CATALOG_RECORD).json()["page_id"]

    with client.websocket_connect(f"/pages/{page_id}/widgets/calendar") as websocket:
        websocket.send_json({"type": "READY"})
        websocket.receive_json()
        websocket.receive_json()
        websocket.send_json({"type": "TIME_SELECTED", "dateLabel": "May 12", "timeLabel": "10:00 AM"})
        # The next READY round trip guarantees the selection was handled first
        websocket.send_json({"type": "READY"})
        websocket.receive_json()
        websocket.receive_json()

    draft = client.get(f"/pages/{page_id}/draft").json()
    assert draft["date"] == "May 12"
    assert draft["time"] == "10:00 AM"


def test_widget_websocket_refused_for_unknown_page(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/pages/nope/widgets/calendar") as websocket:
            websocket.receive_json()


def test_widget_websocket_refused_for_unknown_role(client):
    page_id = _open(client, record=CATALOG_RECORD).json()["page_id"]

    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect(f"/pages/{page_id}/widgets/sidebar") as websocket:
            websocket.receive_json()
