from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from dinecore.domain.common.money import Money
from dinecore.domain.policies.fees import reservation_fee


def test_business_meeting_for_six_guests() -> None:
    assert reservation_fee("Business Meeting", 6) == Money.of(1400)


@pytest.mark.parametrize(
    ("occasion", "expected"),
    [
        ("Casual Dinner", 0),
        ("Birthday", 500),
        ("Anniversary", 700),
        ("Business Meeting", 1000),
        ("Other", 300),
        ("Private Event", 0),
        ("Something unlisted", 0),
    ],
)
def test_base_fee_for_four_guests(occasion: str, expected: int) -> None:
    assert reservation_fee(occasion, 4) == Money.of(expected)


def test_guest_surcharge_starts_at_the_fifth_guest() -> None:
    assert reservation_fee("Birthday", 1) == Money.of(500)
    assert reservation_fee("Birthday", 5) == Money.of(700)
    assert reservation_fee("Birthday", 10) == Money.of(1700)


def test_fee_never_decreases_as_party_grows() -> None:
    fees = [reservation_fee("Anniversary", guests).amount_cents for guests in range(1, 11)]
    assert fees == sorted(fees)


def test_zero_guests_is_rejected() -> None:
    with pytest.raises(ValueError):
        reservation_fee("Birthday", 0)
