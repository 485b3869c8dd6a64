from __future__ import annotations

import logging
from datetime import date
from typing import Any

import httpx

from dinecore.api.middleware.request_id import REQUEST_ID_HEADER, get_request_id
from dinecore.application.dto.requests import (
    CreateOrderRequest,
    CreateReservationRequest,
    StatusUpdateRequest,
)
from dinecore.application.mappers.order_mapper import extract_order_id, extract_order_number
from dinecore.application.mappers.reservation_mapper import extract_reservation_id
from dinecore.application.ports.api import (
    GENERIC_FAILURE_MESSAGE,
    AuthError,
    CreateOrderResult,
    CreateReservationResult,
    RemoteRejectedError,
    TransportError,
)
from dinecore.application.ports.session import SessionContext
from dinecore.domain.lifecycle.states import EntityKind
from dinecore.domain.policies.payment import ReceiptAttachment
from dinecore.infrastructure.http.api_client import get_api_client
from dinecore.infrastructure.observability.otel import get_tracer, propagation_headers

logger = logging.getLogger(__name__)

ADMIN_HEADER = "X-Admin-Request"
# a 2xx body carrying success=false is treated as an unprocessable request
REFUSED_STATUS = 422

_STATUS_PATHS = {
    EntityKind.ORDER: "/orders/{id}",
    EntityKind.EVENT: "/events/{id}",
    EntityKind.RESERVATION: "/reservations/{id}",
}


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or GENERIC_FAILURE_MESSAGE
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return GENERIC_FAILURE_MESSAGE


class RestApiGateway:
    """Talks to the remote store. Implements the order, reservation and status gateways."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client if self._client is not None else get_api_client()

    def _headers(self, session: SessionContext, admin: bool = False) -> dict[str, str]:
        headers: dict[str, str] = propagation_headers()
        if session.token:
            headers["Authorization"] = f"Bearer {session.token}"
        if admin:
            headers[ADMIN_HEADER] = "true"
        request_id = get_request_id()
        if request_id:
            headers[REQUEST_ID_HEADER] = request_id
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        session: SessionContext,
        *,
        admin: bool = False,
        **kwargs: Any,
    ) -> dict[str, Any]:
        with get_tracer().start_as_current_span(f"remote_api {method} {path}") as span:
            span.set_attribute("http.request.method", method)
            span.set_attribute("url.path", path)
            try:
                response = await self.client.request(
                    method, path, headers=self._headers(session, admin=admin), **kwargs
                )
            except httpx.TimeoutException as exc:
                logger.warning("remote_api_timeout", extra={"method": method, "path": path})
                raise TransportError("request timed out") from exc
            except httpx.HTTPError as exc:
                logger.warning("remote_api_unreachable", extra={"method": method, "path": path})
                raise TransportError(str(exc) or GENERIC_FAILURE_MESSAGE) from exc
            span.set_attribute("http.response.status_code", response.status_code)

        if response.status_code == 401:
            session.on_unauthorized()
            raise AuthError(_error_message(response), status_code=401)
        if response.status_code >= 500:
            raise TransportError(_error_message(response), status_code=response.status_code)
        if response.status_code >= 400:
            raise RemoteRejectedError(_error_message(response), status_code=response.status_code)

        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {"data": body}

    async def create_order(
        self, request: CreateOrderRequest, session: SessionContext
    ) -> CreateOrderResult:
        body = await self._request("POST", "/orders", session, json=request.model_dump())
        if body.get("success") is False:
            raise RemoteRejectedError(
                body.get("message") or body.get("error"), status_code=REFUSED_STATUS
            )
        return CreateOrderResult(
            order_id=extract_order_id(body),
            order_number=extract_order_number(body),
            payload=body,
        )

    async def cancel_order(self, order_id: str, session: SessionContext) -> None:
        body = await self._request("POST", f"/orders/{order_id}/cancel", session)
        if body.get("success") is False:
            raise RemoteRejectedError(
                body.get("message") or "Failed to cancel order", status_code=REFUSED_STATUS
            )

    async def update_status(
        self,
        kind: EntityKind,
        entity_id: str,
        status: str,
        session: SessionContext,
    ) -> dict[str, Any]:
        path = _STATUS_PATHS[kind].format(id=entity_id)
        return await self._request(
            "PATCH",
            path,
            session,
            admin=kind == EntityKind.ORDER,
            json=StatusUpdateRequest(status=status).model_dump(),
        )

    async def count_daily_reservations(self, booking_date: date, session: SessionContext) -> int:
        body = await self._request(
            "GET",
            "/reservations/check-daily",
            session,
            params={"date": booking_date.isoformat()},
        )
        count = body.get("count")
        if count is None:
            raise TransportError("daily reservation count missing from response")
        return int(count)

    async def create_reservation(
        self, request: CreateReservationRequest, session: SessionContext
    ) -> CreateReservationResult:
        body = await self._request("POST", "/reservations", session, json=request.model_dump())
        reservation_id = extract_reservation_id(body)
        if reservation_id is None:
            raise TransportError("reservation id missing from response")
        return CreateReservationResult(reservation_id=reservation_id, payload=body)

    async def upload_receipt(
        self,
        reservation_id: str,
        receipt: ReceiptAttachment,
        session: SessionContext,
    ) -> None:
        await self._request(
            "POST",
            f"/reservations/upload-receipt/{reservation_id}",
            session,
            files={"receipt": (receipt.filename, receipt.content, receipt.content_type)},
        )
