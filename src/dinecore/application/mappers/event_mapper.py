from __future__ import annotations

from datetime import date
from typing import Any

from dinecore.application.mappers.common import parse_datetime
from dinecore.domain.common.ids import EventId, UserId
from dinecore.domain.event.entities import Event
from dinecore.domain.lifecycle.machine import parse_status
from dinecore.domain.lifecycle.states import EntityKind, EventStatus


def _field(data: dict[str, Any], snake: str, camel: str) -> Any:
    # the events endpoint accepts camelCase and stores snake_case
    value = data.get(snake)
    return value if value is not None else data.get(camel)


def to_event(data: dict[str, Any]) -> Event:
    user_id = _field(data, "user_id", "userId")
    return Event(
        event_id=EventId(str(data.get("id", ""))),
        name=data.get("name") or "",
        email=data.get("email") or "",
        event_type=str(_field(data, "event_type", "eventType") or "").lower(),
        guests=int(data.get("guests", 1)),
        preferred_date=date.fromisoformat(str(_field(data, "preferred_date", "preferredDate"))[:10]),
        preferred_time=str(_field(data, "preferred_time", "preferredTime") or "")[:5],
        venue_area=str(_field(data, "venue_area", "venueArea") or "").lower(),
        status=parse_status(EntityKind.EVENT, data.get("status") or EventStatus.PENDING.value),  # type: ignore[arg-type]
        user_id=UserId(str(user_id)) if user_id is not None else None,
        created_at=parse_datetime(_field(data, "created_at", "createdAt")),
        updated_at=parse_datetime(_field(data, "updated_at", "updatedAt")),
    )
