from __future__ import annotations

import logging
from typing import Any, Callable, Union

from dinecore.application.mappers.event_mapper import to_event
from dinecore.application.mappers.order_mapper import to_order
from dinecore.application.mappers.reservation_mapper import to_reservation
from dinecore.application.mappers.status_mapper import entity_record
from dinecore.domain.common.errors import TransitionError
from dinecore.domain.event.entities import Event
from dinecore.domain.lifecycle.states import EntityKind
from dinecore.domain.order.entities import Order
from dinecore.domain.reservation.entities import Reservation

logger = logging.getLogger(__name__)

StoredEntity = Union[Order, Event, Reservation]

# A record counts as complete when it has an id and one of these kind-specific fields.
_MAPPERS: dict[EntityKind, tuple[Callable[[dict[str, Any]], StoredEntity], tuple[str, ...]]] = {
    EntityKind.ORDER: (to_order, ("order_number",)),
    EntityKind.EVENT: (to_event, ("event_type", "eventType")),
    EntityKind.RESERVATION: (to_reservation, ("date",)),
}


def stored_entity(kind: EntityKind, payload: dict[str, Any]) -> StoredEntity | None:
    """The record the store echoed after a change, or None when it only sent a status."""
    record = entity_record(payload, kind)
    mapper, markers = _MAPPERS[kind]
    if record.get("id") is None or not any(key in record for key in markers):
        return None
    try:
        return mapper(record)
    except (KeyError, TypeError, ValueError, TransitionError):
        logger.warning(
            "stored_entity_unmappable",
            extra={"entity_kind": kind.value, "entity_id": str(record.get("id"))},
        )
        return None
