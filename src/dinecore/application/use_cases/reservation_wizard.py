"""Four-stage reservation flow.

Stages run strictly in order and `advance()` refuses to leave a stage whose
fields are invalid. The fee is derived from the occasion and party size on
every read, so it can never be edited directly. Submission creates the
reservation first and uploads the receipt second; a failed upload is reported
on the result but does not undo the reservation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from datetime import date, datetime, time
from enum import IntEnum
from typing import Any, Callable

from dinecore.application.mappers.reservation_mapper import to_create_reservation_request
from dinecore.application.metrics.lifecycle import (
    record_receipt_upload_failed,
    record_reservation_created,
)
from dinecore.application.ports.api import (
    AuthError,
    RemoteApiError,
    RemoteRejectedError,
    ReservationGateway,
)
from dinecore.application.ports.session import SessionContext
from dinecore.application.use_cases.action_guard import ActionGuard, action_key
from dinecore.application.use_cases.checkout import SubmissionFailedError
from dinecore.application.use_cases.daily_limit import DailyBookingCount, DailyLimitGuard
from dinecore.domain.common.errors import ValidationError
from dinecore.domain.common.money import Money
from dinecore.domain.policies.fees import reservation_fee
from dinecore.domain.policies.payment import (
    PaymentMethod,
    ReceiptAttachment,
    ReceiptRequiredError,
    parse_method,
)
from dinecore.domain.policies.validators import (
    parse_date,
    parse_time,
    require_text,
    validate_booking_slot,
    validate_email,
    validate_guests,
    validate_phone,
)
from dinecore.domain.reservation.entities import DiningPreference, OccasionType

logger = logging.getLogger(__name__)


class WizardStage(IntEnum):
    BOOKING = 1
    CONTACT = 2
    OCCASION = 3
    PAYMENT = 4


class StageOrderError(Exception):
    pass


@dataclass(frozen=True)
class ReservationDraft:
    date: date | None = None
    time: time | None = None
    guests: int = 2
    dining_preference: str = DiningPreference.MAIN_DINING.value
    name: str = ""
    email: str = ""
    phone: str = ""
    occasion_type: str = OccasionType.CASUAL_DINNER.value
    occasion_instructions: str = ""
    special_requests: str = ""
    payment_method: PaymentMethod | None = None
    payment_reference: str = ""
    receipt: ReceiptAttachment | None = None


_DRAFT_FIELDS = {item.name for item in fields(ReservationDraft)}
_DINING_PREFERENCES = {item.value for item in DiningPreference}
_OCCASION_TYPES = {item.value for item in OccasionType}


@dataclass(frozen=True)
class ReservationSubmission:
    reservation_id: str
    reservation_fee: Money
    receipt_uploaded: bool
    receipt_error: str | None = None


class ReservationWizard:
    def __init__(
        self,
        gateway: ReservationGateway,
        daily_limit_guard: DailyLimitGuard,
        session: SessionContext,
        clock: Callable[[], datetime] = datetime.now,
        guard: ActionGuard | None = None,
    ) -> None:
        self._gateway = gateway
        self._daily_limit_guard = daily_limit_guard
        self._session = session
        self._clock = clock
        self._guard = guard or ActionGuard()
        self._stage = WizardStage.BOOKING
        self._draft = self._seeded_draft()
        self._daily_count: DailyBookingCount | None = None

    @property
    def stage(self) -> WizardStage:
        return self._stage

    @property
    def draft(self) -> ReservationDraft:
        return self._draft

    @property
    def daily_count(self) -> DailyBookingCount | None:
        return self._daily_count

    @property
    def fee(self) -> Money:
        return reservation_fee(self._draft.occasion_type, max(self._draft.guests, 1))

    def _seeded_draft(self) -> ReservationDraft:
        profile = self._session.profile
        return ReservationDraft(name=profile.name, email=profile.email, phone=profile.phone)

    def update(self, **changes: Any) -> ReservationDraft:
        unknown = set(changes) - _DRAFT_FIELDS
        if unknown:
            raise ValueError(f"unknown reservation fields: {sorted(unknown)}")

        if "date" in changes and changes["date"] is not None:
            changes["date"] = parse_date(changes["date"])
        if "time" in changes and changes["time"] is not None:
            changes["time"] = parse_time(changes["time"])
        if "guests" in changes:
            changes["guests"] = validate_guests(changes["guests"])
        if "payment_method" in changes and changes["payment_method"] is not None:
            changes["payment_method"] = parse_method(changes["payment_method"])

        previous_date = self._draft.date
        draft = replace(self._draft, **changes)
        if draft.date != previous_date:
            self._daily_count = None
            now = self._clock()
            # Picking today drops a time that has already passed.
            if (
                "time" not in changes
                and draft.date == now.date()
                and draft.time is not None
                and draft.time <= now.time()
            ):
                draft = replace(draft, time=None)
        self._draft = draft
        return draft

    async def select_date(self, booking_date: date | str) -> DailyBookingCount:
        self.update(date=booking_date)
        return await self.refresh_daily_count()

    async def refresh_daily_count(self) -> DailyBookingCount:
        if self._draft.date is None:
            raise ValidationError("date is required", field="date")
        self._daily_count = await self._daily_limit_guard.count(self._draft.date, self._session)
        return self._daily_count

    def validate_stage(self, stage: WizardStage) -> None:
        draft = self._draft
        if stage == WizardStage.BOOKING:
            if draft.date is None:
                raise ValidationError("date is required", field="date")
            if draft.time is None:
                raise ValidationError("time is required", field="time")
            validate_booking_slot(draft.date, draft.time, self._clock())
            validate_guests(draft.guests)
            if draft.dining_preference not in _DINING_PREFERENCES:
                raise ValidationError("choose a dining area", field="dining_preference")
        elif stage == WizardStage.CONTACT:
            require_text(draft.name, "name")
            validate_email(draft.email)
            validate_phone(draft.phone)
        elif stage == WizardStage.OCCASION:
            if draft.occasion_type not in _OCCASION_TYPES:
                raise ValidationError("choose an occasion", field="occasion_type")
        elif stage == WizardStage.PAYMENT:
            if draft.payment_method is None:
                raise ValidationError("payment method is required", field="payment_method")
            require_text(draft.payment_reference, "payment_reference")
            if draft.receipt is None:
                raise ReceiptRequiredError(draft.payment_method)

    def can_continue(self) -> bool:
        try:
            self.validate_stage(self._stage)
        except (ValidationError, ReceiptRequiredError):
            return False
        if self._stage == WizardStage.BOOKING:
            return self._daily_count is not None and self._daily_count.allowed and (
                self._daily_count.booking_date == self._draft.date
            )
        return True

    async def advance(self) -> WizardStage:
        if self._stage == WizardStage.PAYMENT:
            raise StageOrderError("already at the last stage; submit instead")
        self.validate_stage(self._stage)
        if self._stage == WizardStage.BOOKING:
            assert self._draft.date is not None
            self._daily_count = await self._daily_limit_guard.check(
                self._draft.date, self._session
            )
        self._stage = WizardStage(self._stage + 1)
        return self._stage

    def back(self) -> WizardStage:
        if self._stage > WizardStage.BOOKING:
            self._stage = WizardStage(self._stage - 1)
        return self._stage

    def reset(self) -> None:
        self._stage = WizardStage.BOOKING
        self._draft = self._seeded_draft()
        self._daily_count = None

    async def submit(self) -> ReservationSubmission:
        if self._stage != WizardStage.PAYMENT:
            raise StageOrderError("complete every stage before submitting")
        if not self._session.is_authenticated:
            self._session.on_unauthorized()
            raise AuthError("Please log in to make a reservation.", status_code=401)
        for stage in WizardStage:
            self.validate_stage(stage)

        draft = self._draft
        assert draft.date is not None and draft.time is not None
        assert draft.payment_method is not None and draft.receipt is not None
        self._daily_count = await self._daily_limit_guard.check(draft.date, self._session)

        fee = self.fee
        request = to_create_reservation_request(
            booking_date=draft.date,
            booking_time=draft.time,
            guests=draft.guests,
            dining_preference=draft.dining_preference,
            name=draft.name.strip(),
            email=draft.email.strip(),
            phone=draft.phone.strip(),
            special_requests=draft.special_requests,
            occasion_type=draft.occasion_type,
            occasion_instructions=draft.occasion_instructions,
            reservation_fee=fee,
            payment_method=draft.payment_method,
            payment_reference=draft.payment_reference.strip(),
        )

        key = action_key("reservation", "create", self._session.actor_key)
        try:
            created = await self._guard.run(
                key, lambda: self._gateway.create_reservation(request, self._session)
            )
        except AuthError:
            raise
        except RemoteApiError as exc:
            logger.warning("reservation_create_failed", extra={"status_code": exc.status_code})
            raise SubmissionFailedError(
                str(exc),
                status_code=exc.status_code,
                retryable=not isinstance(exc, RemoteRejectedError),
            ) from exc

        record_reservation_created(draft.occasion_type)
        logger.info(
            "reservation_created",
            extra={"entity_kind": "reservation", "entity_id": created.reservation_id},
        )

        receipt_error: str | None = None
        try:
            await self._gateway.upload_receipt(created.reservation_id, draft.receipt, self._session)
        except RemoteApiError as exc:
            # The reservation stays; it is left without proof of payment.
            receipt_error = str(exc)
            record_receipt_upload_failed()
            logger.warning(
                "receipt_upload_failed",
                extra={
                    "entity_kind": "reservation",
                    "entity_id": created.reservation_id,
                    "status_code": exc.status_code,
                },
            )

        self.reset()
        return ReservationSubmission(
            reservation_id=created.reservation_id,
            reservation_fee=fee,
            receipt_uploaded=receipt_error is None,
            receipt_error=receipt_error,
        )
