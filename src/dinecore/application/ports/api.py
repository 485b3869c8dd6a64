from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Protocol

from dinecore.application.dto.requests import CreateOrderRequest, CreateReservationRequest
from dinecore.application.ports.session import SessionContext
from dinecore.domain.lifecycle.states import EntityKind
from dinecore.domain.policies.payment import ReceiptAttachment

GENERIC_FAILURE_MESSAGE = "request failed"


class RemoteApiError(Exception):
    def __init__(self, message: str | None, status_code: int | None = None) -> None:
        super().__init__(message or GENERIC_FAILURE_MESSAGE)
        self.status_code = status_code
        self.details: dict[str, Any] = {"upstreamStatus": status_code} if status_code else {}


class TransportError(RemoteApiError):
    """Network failure, timeout or 5xx. Shown with a retry affordance, never auto-retried."""


class AuthError(RemoteApiError):
    pass


class RemoteRejectedError(RemoteApiError):
    """The store answered with a 4xx other than 401."""


@dataclass(frozen=True)
class CreateOrderResult:
    order_id: str | None
    order_number: str
    payload: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class CreateReservationResult:
    reservation_id: str
    payload: dict[str, Any] = field(default_factory=dict, compare=False)


class OrderGateway(Protocol):
    async def create_order(
        self, request: CreateOrderRequest, session: SessionContext
    ) -> CreateOrderResult: ...


class ReservationGateway(Protocol):
    async def count_daily_reservations(
        self, booking_date: date, session: SessionContext
    ) -> int: ...

    async def create_reservation(
        self, request: CreateReservationRequest, session: SessionContext
    ) -> CreateReservationResult: ...

    async def upload_receipt(
        self,
        reservation_id: str,
        receipt: ReceiptAttachment,
        session: SessionContext,
    ) -> None: ...


class StatusGateway(Protocol):
    async def update_status(
        self,
        kind: EntityKind,
        entity_id: str,
        status: str,
        session: SessionContext,
    ) -> dict[str, Any]: ...

    async def cancel_order(self, order_id: str, session: SessionContext) -> None: ...
