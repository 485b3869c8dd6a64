from __future__ import annotations

from datetime import date, time
from typing import Any

from dinecore.application.dto.requests import CreateReservationRequest
from dinecore.application.mappers.common import parse_datetime
from dinecore.application.mappers.money_mapper import to_wire_amount
from dinecore.domain.common.ids import ReservationId
from dinecore.domain.common.money import Money
from dinecore.domain.lifecycle.machine import parse_status
from dinecore.domain.lifecycle.states import EntityKind, ReservationStatus
from dinecore.domain.policies.payment import PaymentMethod
from dinecore.domain.reservation.entities import Reservation


def to_create_reservation_request(
    *,
    booking_date: date,
    booking_time: time,
    guests: int,
    dining_preference: str,
    name: str,
    email: str,
    phone: str,
    special_requests: str,
    occasion_type: str,
    occasion_instructions: str,
    reservation_fee: Money,
    payment_method: PaymentMethod,
    payment_reference: str,
) -> CreateReservationRequest:
    return CreateReservationRequest(
        date=booking_date.isoformat(),
        time=booking_time.strftime("%H:%M"),
        guests=guests,
        dining_preference=dining_preference,
        name=name,
        email=email,
        phone=phone,
        special_requests=special_requests,
        occasion_type=occasion_type,
        occasion_instructions=occasion_instructions,
        reservation_fee=to_wire_amount(reservation_fee),
        payment_method=payment_method.value,
        payment_reference=payment_reference,
    )


def extract_reservation_id(payload: dict[str, Any]) -> str | None:
    for container in (payload, payload.get("data"), payload.get("reservation")):
        if not isinstance(container, dict):
            continue
        for key in ("reservation_id", "id"):
            value = container.get(key)
            if value is not None:
                return str(value)
    return None


def to_reservation(payload: dict[str, Any]) -> Reservation:
    """Map a stored reservation; the fee is the one saved at creation, never recomputed."""
    data = payload.get("reservation") if isinstance(payload.get("reservation"), dict) else payload
    status = data.get("status") or ReservationStatus.PENDING.value
    return Reservation(
        reservation_id=ReservationId(str(data.get("id", data.get("reservation_id", "")))),
        name=data.get("name") or "",
        email=data.get("email") or "",
        phone=data.get("phone") or "",
        date=date.fromisoformat(str(data["date"])[:10]),
        time=time.fromisoformat(str(data["time"])[:5]),
        guests=int(data.get("guests", 1)),
        dining_preference=data.get("dining_preference") or "",
        occasion_type=data.get("occasion_type") or "",
        reservation_fee=Money.of(data.get("reservation_fee") or 0),
        status=parse_status(EntityKind.RESERVATION, status),  # type: ignore[arg-type]
        special_requests=data.get("special_requests") or "",
        occasion_instructions=data.get("occasion_instructions") or "",
        payment_method=data.get("payment_method"),
        payment_reference=data.get("payment_reference"),
        receipt_url=data.get("payment_screenshot") or data.get("receipt_url"),
        created_at=parse_datetime(data.get("created_at")),
        updated_at=parse_datetime(data.get("updated_at")),
    )
