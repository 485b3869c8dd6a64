from __future__ import annotations

from dinecore.application.dto.responses import MoneyResponse
from dinecore.domain.common.money import Money


def to_money_response(money: Money) -> MoneyResponse:
    return MoneyResponse(
        amountCents=money.amount_cents,
        amount=float(money.amount),
        currency=money.currency,
    )


def to_wire_amount(money: Money) -> float:
    return float(money.amount)
