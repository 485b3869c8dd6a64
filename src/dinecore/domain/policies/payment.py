from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from dinecore.domain.common.errors import PolicyViolation, ValidationError
from dinecore.domain.common.money import Money


class PaymentMethod(str, Enum):
    CASH = "cash"
    GCASH = "gcash"
    SECURITY_BANK = "security_bank"


HIGH_VALUE_THRESHOLD = Money.of(1000)
DEFAULT_NON_CASH_METHOD = PaymentMethod.GCASH
MAX_RECEIPT_BYTES = 2 * 1024 * 1024

CASH_UNAVAILABLE_NOTICE = (
    "Cash on Delivery is not available for orders above ₱1,000. Switched to GCash."
)


class PaymentMethodIneligibleError(PolicyViolation):
    def __init__(self, method: PaymentMethod, total: Money) -> None:
        super().__init__(
            f"payment method {method.value} is not available for a total of {total.amount}"
        )
        self.details = {"paymentMethod": method.value, "total": str(total.amount)}


class ReceiptRequiredError(PolicyViolation):
    def __init__(self, method: PaymentMethod | str) -> None:
        value = method.value if isinstance(method, PaymentMethod) else method
        super().__init__(f"a payment receipt is required for payment method {value}")
        self.details = {"paymentMethod": value}


class ReceiptInvalidError(ValidationError):
    def __init__(self, message: str) -> None:
        super().__init__(message, field="receipt")


@dataclass(frozen=True)
class ReceiptAttachment:
    filename: str
    content_type: str
    content: bytes

    def __post_init__(self) -> None:
        if not self.content:
            raise ReceiptInvalidError("receipt file is empty")
        if not self.content_type.startswith("image/"):
            raise ReceiptInvalidError("receipt must be an image")
        if len(self.content) > MAX_RECEIPT_BYTES:
            raise ReceiptInvalidError("receipt image must be smaller than 2MB")

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class PaymentSelection:
    method: PaymentMethod
    switched: bool = False
    notice: str | None = None


def parse_method(method: PaymentMethod | str) -> PaymentMethod:
    if isinstance(method, PaymentMethod):
        return method
    try:
        return PaymentMethod(str(method).strip().lower())
    except ValueError as exc:
        raise ValidationError(f"unknown payment method: {method!r}", field="paymentMethod") from exc


def is_high_value(total: Money) -> bool:
    return total.amount_cents > HIGH_VALUE_THRESHOLD.amount_cents


def eligible_methods(total: Money) -> list[PaymentMethod]:
    if is_high_value(total):
        return [PaymentMethod.GCASH, PaymentMethod.SECURITY_BANK]
    return list(PaymentMethod)


def ensure_eligible(method: PaymentMethod, total: Money) -> None:
    if method not in eligible_methods(total):
        raise PaymentMethodIneligibleError(method, total)


def requires_receipt(method: PaymentMethod) -> bool:
    return method != PaymentMethod.CASH


def ensure_receipt(method: PaymentMethod, receipt: object | None) -> None:
    if requires_receipt(method) and not receipt:
        raise ReceiptRequiredError(method)


def reconcile_selection(selected: PaymentMethod, total: Money) -> PaymentSelection:
    """Re-check a selection after the total moved; cash above the threshold is replaced."""
    if selected in eligible_methods(total):
        return PaymentSelection(method=selected)
    return PaymentSelection(
        method=DEFAULT_NON_CASH_METHOD,
        switched=True,
        notice=CASH_UNAVAILABLE_NOTICE,
    )
