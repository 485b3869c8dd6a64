from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from dinecore.domain.common.money import Money


def test_of_rounds_half_up_to_the_cent() -> None:
    assert Money.of("10.005").amount_cents == 1001
    assert Money.of(1200).amount == Decimal("1200")
    assert Money.of(1200).currency == "PHP"


def test_addition_requires_same_currency() -> None:
    assert Money.of(1) + Money.of(2) == Money.of(3)
    with pytest.raises(ValueError):
        Money.of(1) + Money.of(1, currency="USD")


def test_negative_amounts_are_rejected() -> None:
    with pytest.raises(ValueError):
        Money(amount_cents=-1)
