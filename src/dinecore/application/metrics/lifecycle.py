from __future__ import annotations

from prometheus_client import Counter

STATUS_TRANSITION_TOTAL = Counter(
    "dinecore_status_transition_total",
    "Total number of status transitions confirmed by the store.",
    ["kind", "from", "to"],
)

STATUS_TRANSITION_REJECTED_TOTAL = Counter(
    "dinecore_status_transition_rejected_total",
    "Total number of status changes rejected before or by the store.",
    ["kind", "reason"],
)

CHECKOUT_SUBMISSIONS_TOTAL = Counter(
    "dinecore_checkout_submissions_total",
    "Total number of checkout submissions by outcome.",
    ["outcome"],
)

PAYMENT_METHOD_SWITCHED_TOTAL = Counter(
    "dinecore_payment_method_switched_total",
    "Total number of automatic switches away from cash on high-value orders.",
)

DAILY_LIMIT_BLOCKED_TOTAL = Counter(
    "dinecore_daily_limit_blocked_total",
    "Total number of reservation attempts blocked by the daily limit.",
)

RESERVATIONS_CREATED_TOTAL = Counter(
    "dinecore_reservations_created_total",
    "Total number of reservations created.",
    ["occasion_type"],
)

RECEIPT_UPLOAD_FAILED_TOTAL = Counter(
    "dinecore_receipt_upload_failed_total",
    "Total number of receipt uploads that failed after the reservation was created.",
)


def record_transition(kind: str, from_status: str, to_status: str) -> None:
    STATUS_TRANSITION_TOTAL.labels(**{"kind": kind, "from": from_status, "to": to_status}).inc()


def record_transition_rejected(kind: str, reason: str) -> None:
    STATUS_TRANSITION_REJECTED_TOTAL.labels(kind=kind, reason=reason).inc()


def record_checkout(outcome: str) -> None:
    CHECKOUT_SUBMISSIONS_TOTAL.labels(outcome=outcome).inc()


def record_payment_switch() -> None:
    PAYMENT_METHOD_SWITCHED_TOTAL.inc()


def record_daily_limit_block() -> None:
    DAILY_LIMIT_BLOCKED_TOTAL.inc()


def record_reservation_created(occasion_type: str) -> None:
    RESERVATIONS_CREATED_TOTAL.labels(occasion_type=occasion_type or "unknown").inc()


def record_receipt_upload_failed() -> None:
    RECEIPT_UPLOAD_FAILED_TOTAL.inc()
