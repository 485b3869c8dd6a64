from __future__ import annotations

import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from dinecore.api.deps import get_action_guard, get_gateway
from dinecore.api.main import app
from dinecore.application.ports.api import (
    CreateOrderResult,
    CreateReservationResult,
    RemoteRejectedError,
    TransportError,
)
from dinecore.application.use_cases.action_guard import ActionGuard
from dinecore.domain.lifecycle.states import EntityKind

CUSTOMER_HEADERS = {"Authorization": "Bearer customer-token", "X-User-Id": "usr_1"}
ADMIN_HEADERS = {"Authorization": "Bearer admin-token", "X-Admin-Request": "true"}
RECEIPT_DATA_URL = "data:image/png;base64,iVBORw0K"


class FakeGateway:
    def __init__(self) -> None:
        self.orders: list[Any] = []
        self.reservations: list[Any] = []
        self.uploads: list[str] = []
        self.updates: list[tuple[EntityKind, str, str]] = []
        self.cancelled_orders: list[str] = []
        self.daily_count: int | None = 0
        self.status_error: Exception | None = None
        self.upload_error: Exception | None = None
        self.order_error: Exception | None = None
        self.status_payload: dict[str, Any] | None = None

    async def create_order(self, request, session) -> CreateOrderResult:
        if self.order_error is not None:
            raise self.order_error
        self.orders.append(request)
        return CreateOrderResult(order_id="ord_1", order_number="ORD-0001")

    async def count_daily_reservations(self, booking_date, session) -> int:
        if self.daily_count is None:
            raise TransportError("store unreachable")
        return self.daily_count

    async def create_reservation(self, request, session) -> CreateReservationResult:
        self.reservations.append(request)
        return CreateReservationResult(reservation_id="res_1")

    async def upload_receipt(self, reservation_id, receipt, session) -> None:
        if self.upload_error is not None:
            raise self.upload_error
        self.uploads.append(reservation_id)

    async def update_status(self, kind, entity_id, status, session) -> dict[str, Any]:
        if self.status_error is not None:
            raise self.status_error
        self.updates.append((kind, entity_id, status))
        if self.status_payload is not None:
            return self.status_payload
        return {"data": {"status": status}}

    async def cancel_order(self, order_id, session) -> None:
        self.cancelled_orders.append(order_id)


@pytest.fixture
def gateway():
    fake = FakeGateway()
    app.dependency_overrides[get_gateway] = lambda: fake
    app.dependency_overrides[get_action_guard] = lambda: ActionGuard()
    yield fake
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _checkout_body(**changes) -> dict[str, Any]:
    body: dict[str, Any] = {
        "items": [{"itemId": "itm_bento", "name": "Salmon Bento", "price": 600, "quantity": 1}],
        "name": "Ana Cruz",
        "email": "ana@example.com",
        "phone": "09171234567",
        "address": "12 Mabini St",
        "city": "Makati",
        "zipCode": "1200",
        "paymentMethod": "cash",
    }
    body.update(changes)
    return body


def _reservation_body(**changes) -> dict[str, Any]:
    body: dict[str, Any] = {
        "date": (date.today() + timedelta(days=7)).isoformat(),
        "time": "19:00",
        "guests": 6,
        "diningPreference": "Main Dining",
        "name": "Ana Cruz",
        "email": "ana@example.com",
        "phone": "09171234567",
        "occasionType": "Business Meeting",
        "paymentMethod": "gcash",
        "paymentReference": "REF123",
        "receiptFile": RECEIPT_DATA_URL,
    }
    body.update(changes)
    return body


def test_payment_options_drop_cash_above_threshold(client: TestClient) -> None:
    response = client.post(
        "/v1/checkout/payment-options", json={"total": 1200, "selectedMethod": "cash"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["eligibleMethods"] == ["gcash", "security_bank"]
    assert body["selectedMethod"] == "gcash"
    assert body["switched"] is True
    assert body["receiptRequired"] is True


def test_checkout_creates_order(client: TestClient, gateway: FakeGateway) -> None:
    response = client.post("/v1/checkout", json=_checkout_body(), headers=CUSTOMER_HEADERS)
    assert response.status_code == 201
    body = response.json()
    assert body["orderNumber"] == "ORD-0001"
    assert body["status"] == "pending"
    assert body["total"]["amount"] == 600.0
    assert body["total"]["currency"] == "PHP"
    assert gateway.orders[0].customer_email == "ana@example.com"


def test_checkout_with_cash_above_threshold_is_refused(
    client: TestClient, gateway: FakeGateway
) -> None:
    items = [{"itemId": "itm_bento", "name": "Salmon Bento", "price": 600, "quantity": 2}]
    response = client.post(
        "/v1/checkout", json=_checkout_body(items=items), headers=CUSTOMER_HEADERS
    )
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "PAYMENT_METHOD_INELIGIBLE"
    assert gateway.orders == []


def test_checkout_errors(client: TestClient, gateway: FakeGateway) -> None:
    empty = client.post("/v1/checkout", json=_checkout_body(items=[]), headers=CUSTOMER_HEADERS)
    assert empty.status_code == 400
    assert empty.json()["error"]["code"] == "EMPTY_CART"

    missing = client.post("/v1/checkout", json=_checkout_body(phone=""), headers=CUSTOMER_HEADERS)
    assert missing.status_code == 400
    assert missing.json()["error"]["code"] == "MISSING_REQUIRED_FIELD"
    assert missing.json()["error"]["details"] == {"field": "phone"}

    anonymous = client.post("/v1/checkout", json=_checkout_body())
    assert anonymous.status_code == 401
    assert anonymous.json()["error"]["code"] == "UNAUTHORIZED"


def test_reservation_fee_endpoint(client: TestClient) -> None:
    response = client.get(
        "/v1/reservations/fee", params={"occasionType": "Business Meeting", "guests": 6}
    )
    assert response.status_code == 200
    assert response.json()["fee"]["amount"] == 1400.0

    too_many = client.get("/v1/reservations/fee", params={"guests": 11})
    assert too_many.status_code == 400
    assert too_many.json()["error"]["code"] == "VALIDATION_FAILED"


def test_daily_limit_endpoint(client: TestClient, gateway: FakeGateway) -> None:
    gateway.daily_count = 2
    response = client.get(
        "/v1/reservations/daily-limit", params={"date": "2026-12-24"}, headers=CUSTOMER_HEADERS
    )
    assert response.status_code == 200
    assert response.json() == {"date": "2026-12-24", "count": 2, "limit": 2, "allowed": False}

    gateway.daily_count = None
    failed = client.get(
        "/v1/reservations/daily-limit", params={"date": "2026-12-24"}, headers=CUSTOMER_HEADERS
    )
    assert failed.status_code == 502
    assert failed.json()["error"]["code"] == "DAILY_LIMIT_CHECK_FAILED"


def test_reservation_submission(client: TestClient, gateway: FakeGateway) -> None:
    response = client.post("/v1/reservations", json=_reservation_body(), headers=CUSTOMER_HEADERS)
    assert response.status_code == 201
    body = response.json()
    assert body["reservationId"] == "res_1"
    assert body["reservationFee"]["amount"] == 1400.0
    assert body["receiptUploaded"] is True
    assert gateway.reservations[0].reservation_fee == 1400.0
    assert gateway.uploads == ["res_1"]


def test_reservation_survives_receipt_upload_failure(
    client: TestClient, gateway: FakeGateway
) -> None:
    gateway.upload_error = TransportError("upload failed")
    response = client.post("/v1/reservations", json=_reservation_body(), headers=CUSTOMER_HEADERS)
    assert response.status_code == 201
    assert response.json()["receiptUploaded"] is False
    assert response.json()["receiptError"] == "upload failed"


def test_third_reservation_of_the_day_is_blocked(
    client: TestClient, gateway: FakeGateway
) -> None:
    gateway.daily_count = 2
    response = client.post("/v1/reservations", json=_reservation_body(), headers=CUSTOMER_HEADERS)
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "DAILY_LIMIT_REACHED"
    assert gateway.reservations == []


def test_reservation_without_receipt_is_refused(client: TestClient, gateway: FakeGateway) -> None:
    response = client.post(
        "/v1/reservations", json=_reservation_body(receiptFile=None), headers=CUSTOMER_HEADERS
    )
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "RECEIPT_REQUIRED"


def test_allowed_transitions(client: TestClient) -> None:
    response = client.get("/v1/orders/transitions", params={"status": "pending"})
    assert response.json()["allowed"] == ["cancelled", "confirmed"]

    customer = client.get(
        "/v1/orders/transitions", params={"status": "preparing", "role": "customer"}
    )
    assert customer.json()["allowed"] == []

    unknown = client.get("/v1/invoices/transitions", params={"status": "pending"})
    assert unknown.status_code == 404
    assert unknown.json()["error"]["code"] == "UNKNOWN_ENTITY_KIND"


def test_admin_status_change(client: TestClient, gateway: FakeGateway) -> None:
    response = client.post(
        "/v1/orders/ord_1/status",
        json={"currentStatus": "ready", "status": "delivered"},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 200
    assert response.json() == {
        "kind": "order",
        "entityId": "ord_1",
        "previousStatus": "ready",
        "status": "delivered",
        "updatedAt": None,
    }
    assert gateway.updates == [(EntityKind.ORDER, "ord_1", "delivered")]


def test_status_change_rejections(client: TestClient, gateway: FakeGateway) -> None:
    skipped = client.post(
        "/v1/orders/ord_1/status",
        json={"currentStatus": "preparing", "status": "delivered"},
        headers=ADMIN_HEADERS,
    )
    assert skipped.status_code == 409
    assert skipped.json()["error"]["code"] == "INVALID_TRANSITION"

    customer = client.post(
        "/v1/reservations/res_1/status",
        json={"currentStatus": "pending", "status": "confirmed"},
        headers=CUSTOMER_HEADERS,
    )
    assert customer.status_code == 403
    assert customer.json()["error"]["code"] == "FORBIDDEN"

    gateway.status_error = RemoteRejectedError("Reservation already cancelled", status_code=400)
    stale = client.post(
        "/v1/reservations/res_1/status",
        json={"currentStatus": "pending", "status": "confirmed"},
        headers=ADMIN_HEADERS,
    )
    assert stale.status_code == 409
    assert stale.json()["error"]["code"] == "TRANSITION_REJECTED"
    assert stale.json()["error"]["details"]["refreshRequired"] is True
    assert gateway.updates == []


def test_customer_cancel(client: TestClient, gateway: FakeGateway) -> None:
    response = client.post(
        "/v1/orders/ord_9/cancel", json={"currentStatus": "confirmed"}, headers=CUSTOMER_HEADERS
    )
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert gateway.cancelled_orders == ["ord_9"]

    too_late = client.post(
        "/v1/orders/ord_9/cancel", json={"currentStatus": "preparing"}, headers=CUSTOMER_HEADERS
    )
    assert too_late.status_code == 403


def test_checkout_forwards_store_rejection_status(
    client: TestClient, gateway: FakeGateway
) -> None:
    gateway.order_error = RemoteRejectedError("item out of stock", status_code=422)
    rejected = client.post("/v1/checkout", json=_checkout_body(), headers=CUSTOMER_HEADERS)
    assert rejected.status_code == 422
    assert rejected.json()["error"]["code"] == "SUBMISSION_FAILED"
    assert rejected.json()["error"]["message"] == "item out of stock"

    gateway.order_error = TransportError("store unreachable", status_code=503)
    unavailable = client.post("/v1/checkout", json=_checkout_body(), headers=CUSTOMER_HEADERS)
    assert unavailable.status_code == 502
    assert unavailable.json()["error"]["details"]["retryable"] is True


def test_malformed_body_is_invalid_request(client: TestClient, gateway: FakeGateway) -> None:
    response = client.post(
        "/v1/checkout", json={"items": "not-a-list"}, headers=CUSTOMER_HEADERS
    )
    assert response.status_code == 400
    body = response.json()
    assert body["error"]["code"] == "INVALID_REQUEST"
    assert body["requestId"] == response.headers["X-Request-Id"]


def test_status_change_reports_store_record_timestamp(
    client: TestClient, gateway: FakeGateway
) -> None:
    gateway.status_payload = {
        "data": {
            "id": "res_9",
            "date": "2026-12-24",
            "time": "19:00",
            "guests": 2,
            "status": "confirmed",
            "updated_at": "2026-10-19T08:30:00+00:00",
        }
    }
    response = client.post(
        "/v1/reservations/res_9/status",
        json={"currentStatus": "pending", "status": "confirmed"},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"
    assert response.json()["updatedAt"] == "2026-10-19T08:30:00+00:00"
