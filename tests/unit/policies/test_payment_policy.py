from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from dinecore.domain.common.errors import ValidationError
from dinecore.domain.common.money import Money
from dinecore.domain.policies.payment import (
    CASH_UNAVAILABLE_NOTICE,
    MAX_RECEIPT_BYTES,
    PaymentMethod,
    PaymentMethodIneligibleError,
    ReceiptAttachment,
    ReceiptInvalidError,
    ReceiptRequiredError,
    eligible_methods,
    ensure_eligible,
    ensure_receipt,
    parse_method,
    reconcile_selection,
)


def test_every_method_is_offered_up_to_the_threshold() -> None:
    assert eligible_methods(Money.of(1000)) == [
        PaymentMethod.CASH,
        PaymentMethod.GCASH,
        PaymentMethod.SECURITY_BANK,
    ]


def test_cash_is_withdrawn_strictly_above_the_threshold() -> None:
    assert PaymentMethod.CASH not in eligible_methods(Money.of("1000.01"))
    with pytest.raises(PaymentMethodIneligibleError):
        ensure_eligible(PaymentMethod.CASH, Money.of(1200))


def test_cash_selection_switches_to_gcash_when_total_grows() -> None:
    selection = reconcile_selection(PaymentMethod.CASH, Money.of(1200))
    assert selection.method == PaymentMethod.GCASH
    assert selection.switched is True
    assert selection.notice == CASH_UNAVAILABLE_NOTICE


def test_non_cash_selection_is_kept() -> None:
    selection = reconcile_selection(PaymentMethod.SECURITY_BANK, Money.of(5000))
    assert selection.method == PaymentMethod.SECURITY_BANK
    assert selection.switched is False
    assert selection.notice is None


def test_non_cash_methods_need_a_receipt() -> None:
    ensure_receipt(PaymentMethod.CASH, None)
    with pytest.raises(ReceiptRequiredError):
        ensure_receipt(PaymentMethod.GCASH, None)


def test_receipt_must_be_a_small_image() -> None:
    ReceiptAttachment(filename="r.png", content_type="image/png", content=b"\x89PNG")
    with pytest.raises(ReceiptInvalidError):
        ReceiptAttachment(filename="r.pdf", content_type="application/pdf", content=b"%PDF")
    with pytest.raises(ReceiptInvalidError):
        ReceiptAttachment(filename="r.png", content_type="image/png", content=b"")
    with pytest.raises(ReceiptInvalidError):
        ReceiptAttachment(
            filename="r.png",
            content_type="image/png",
            content=b"0" * (MAX_RECEIPT_BYTES + 1),
        )


def test_parse_method_accepts_wire_values() -> None:
    assert parse_method(" GCash ") == PaymentMethod.GCASH
    with pytest.raises(ValidationError):
        parse_method("card")
