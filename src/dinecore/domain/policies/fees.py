from __future__ import annotations

from dinecore.domain.common.money import Money

BASE_FEES: dict[str, int] = {
    "Birthday": 500,
    "Anniversary": 700,
    "Business Meeting": 1000,
    "Casual Dinner": 0,
    "Other": 300,
}

INCLUDED_GUESTS = 4
EXTRA_GUEST_FEE = 200


def base_fee(occasion_type: str | None) -> Money:
    # Unlisted occasions (including "Private Event") carry no base fee.
    return Money.of(BASE_FEES.get((occasion_type or "").strip(), 0))


def guest_surcharge(guests: int) -> Money:
    return Money.of(max(0, guests - INCLUDED_GUESTS) * EXTRA_GUEST_FEE)


def reservation_fee(occasion_type: str | None, guests: int) -> Money:
    """Fee for a reservation: occasion base fee plus 200 per guest past the fourth."""
    if guests < 1:
        raise ValueError("guests must be >= 1")
    return base_fee(occasion_type) + guest_surcharge(guests)
