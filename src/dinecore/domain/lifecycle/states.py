from __future__ import annotations

from enum import Enum
from typing import Union


class EntityKind(str, Enum):
    ORDER = "order"
    EVENT = "event"
    RESERVATION = "reservation"


class ActorRole(str, Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class EventStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


Status = Union[OrderStatus, EventStatus, ReservationStatus]

STATUS_TYPES: dict[EntityKind, type[Enum]] = {
    EntityKind.ORDER: OrderStatus,
    EntityKind.EVENT: EventStatus,
    EntityKind.RESERVATION: ReservationStatus,
}

TRANSITIONS: dict[EntityKind, dict[Status, frozenset[Status]]] = {
    EntityKind.ORDER: {
        OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
        OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
        OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
        OrderStatus.READY: frozenset({OrderStatus.DELIVERED}),
        OrderStatus.DELIVERED: frozenset(),
        OrderStatus.CANCELLED: frozenset(),
    },
    EntityKind.EVENT: {
        EventStatus.PENDING: frozenset({EventStatus.CONFIRMED, EventStatus.CANCELLED}),
        EventStatus.CONFIRMED: frozenset({EventStatus.COMPLETED, EventStatus.CANCELLED}),
        EventStatus.COMPLETED: frozenset(),
        EventStatus.CANCELLED: frozenset(),
    },
    EntityKind.RESERVATION: {
        ReservationStatus.PENDING: frozenset(
            {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}
        ),
        ReservationStatus.CONFIRMED: frozenset({ReservationStatus.CANCELLED}),
        ReservationStatus.CANCELLED: frozenset(),
    },
}

CUSTOMER_CANCELLABLE: dict[EntityKind, frozenset[Status]] = {
    EntityKind.ORDER: frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED}),
    EntityKind.EVENT: frozenset({EventStatus.PENDING, EventStatus.CONFIRMED}),
    EntityKind.RESERVATION: frozenset(
        {ReservationStatus.PENDING, ReservationStatus.CONFIRMED}
    ),
}

CANCELLED: dict[EntityKind, Status] = {
    EntityKind.ORDER: OrderStatus.CANCELLED,
    EntityKind.EVENT: EventStatus.CANCELLED,
    EntityKind.RESERVATION: ReservationStatus.CANCELLED,
}

INITIAL: dict[EntityKind, Status] = {
    EntityKind.ORDER: OrderStatus.PENDING,
    EntityKind.EVENT: EventStatus.PENDING,
    EntityKind.RESERVATION: ReservationStatus.PENDING,
}
