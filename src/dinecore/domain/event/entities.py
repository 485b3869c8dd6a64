from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from dinecore.domain.common.ids import EventId, UserId
from dinecore.domain.lifecycle.states import EventStatus

EVENT_TYPES = ("wedding", "corporate", "birthday", "conference", "other")
VENUE_AREAS = ("vip_area", "main_hall", "private_room")


@dataclass(frozen=True)
class Event:
    event_id: EventId
    name: str
    email: str
    event_type: str
    guests: int
    preferred_date: date
    preferred_time: str
    venue_area: str
    status: EventStatus
    user_id: UserId | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.guests < 1:
            raise ValueError("guests must be >= 1")
        if self.event_type not in EVENT_TYPES:
            raise ValueError(f"unknown event type: {self.event_type!r}")
        if self.venue_area not in VENUE_AREAS:
            raise ValueError(f"unknown venue area: {self.venue_area!r}")
