from __future__ import annotations

from datetime import date

from dinecore.domain.common.errors import PolicyViolation

DAILY_RESERVATION_LIMIT = 2


class DailyLimitReachedError(PolicyViolation):
    def __init__(self, booking_date: date, count: int, limit: int = DAILY_RESERVATION_LIMIT):
        super().__init__(
            f"You have reached the maximum of {limit} reservations per day. "
            "Please choose a different date."
        )
        self.booking_date = booking_date
        self.count = count
        self.details = {"date": booking_date.isoformat(), "count": count, "limit": limit}


def ensure_below_daily_limit(
    booking_date: date,
    existing_count: int,
    limit: int = DAILY_RESERVATION_LIMIT,
) -> None:
    if existing_count >= limit:
        raise DailyLimitReachedError(booking_date, existing_count, limit)
