from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum

from dinecore.domain.common.ids import ReservationId
from dinecore.domain.common.money import Money
from dinecore.domain.lifecycle.states import ReservationStatus


class OccasionType(str, Enum):
    CASUAL_DINNER = "Casual Dinner"
    BIRTHDAY = "Birthday"
    BUSINESS_MEETING = "Business Meeting"
    ANNIVERSARY = "Anniversary"
    PRIVATE_EVENT = "Private Event"
    OTHER = "Other"


class DiningPreference(str, Enum):
    MAIN_DINING = "Main Dining"
    PRIVATE_TATAMI_ROOM = "Private Tatami Room"
    CHEFS_COUNTER = "Chef's Counter"
    WINDOW_SEAT = "Window Seat"
    CELEBRATION_AREA = "Celebration Area"
    FAMILY_SEATING = "Family Seating"
    GROUP_DINING = "Group Dining"


@dataclass(frozen=True)
class Reservation:
    reservation_id: ReservationId
    name: str
    email: str
    phone: str
    date: date
    time: time
    guests: int
    dining_preference: str
    occasion_type: str
    reservation_fee: Money
    status: ReservationStatus
    special_requests: str = ""
    occasion_instructions: str = ""
    payment_method: str | None = None
    payment_reference: str | None = None
    receipt_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.guests < 1:
            raise ValueError("guests must be >= 1")
