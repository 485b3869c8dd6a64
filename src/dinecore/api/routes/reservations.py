from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, status

from dinecore.api.deps import get_action_guard, get_gateway, session_from_request
from dinecore.application.dto.requests import ReservationSubmitRequest
from dinecore.application.dto.responses import (
    DailyLimitResponse,
    ReservationCreatedResponse,
    ReservationFeeResponse,
)
from dinecore.application.mappers.money_mapper import to_money_response
from dinecore.application.mappers.receipt_mapper import receipt_from_data_url
from dinecore.application.ports.api import ReservationGateway
from dinecore.application.use_cases.action_guard import ActionGuard
from dinecore.application.use_cases.daily_limit import DailyLimitGuard
from dinecore.application.use_cases.reservation_wizard import ReservationWizard, WizardStage
from dinecore.domain.policies.fees import reservation_fee
from dinecore.domain.policies.validators import parse_date, validate_guests
from dinecore.domain.reservation.entities import OccasionType

router = APIRouter()


@router.get("/v1/reservations/fee", response_model=ReservationFeeResponse)
def fee(
    occasion_type: str = Query(default=OccasionType.CASUAL_DINNER.value, alias="occasionType"),
    guests: str = Query(default="2"),
) -> ReservationFeeResponse:
    guest_count = validate_guests(guests)
    return ReservationFeeResponse(
        occasionType=occasion_type,
        guests=guest_count,
        fee=to_money_response(reservation_fee(occasion_type, guest_count)),
    )


@router.get("/v1/reservations/daily-limit", response_model=DailyLimitResponse)
async def daily_limit(
    request: Request,
    booking_date: str = Query(alias="date"),
    gateway: ReservationGateway = Depends(get_gateway),
) -> DailyLimitResponse:
    result = await DailyLimitGuard(gateway).count(
        parse_date(booking_date), session_from_request(request)
    )
    return DailyLimitResponse(
        date=result.booking_date.isoformat(),
        count=result.count,
        limit=result.limit,
        allowed=result.allowed,
    )


@router.post(
    "/v1/reservations",
    response_model=ReservationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reservation(
    request_dto: ReservationSubmitRequest,
    request: Request,
    gateway: ReservationGateway = Depends(get_gateway),
    guard: ActionGuard = Depends(get_action_guard),
) -> ReservationCreatedResponse:
    wizard = ReservationWizard(
        gateway=gateway,
        daily_limit_guard=DailyLimitGuard(gateway),
        session=session_from_request(request),
        guard=guard,
    )
    wizard.update(
        date=request_dto.date,
        time=request_dto.time,
        guests=request_dto.guests,
        dining_preference=request_dto.dining_preference,
        name=request_dto.name,
        email=request_dto.email,
        phone=request_dto.phone,
        occasion_type=request_dto.occasion_type,
        occasion_instructions=request_dto.occasion_instructions,
        special_requests=request_dto.special_requests,
        payment_method=request_dto.payment_method,
        payment_reference=request_dto.payment_reference,
        receipt=receipt_from_data_url(request_dto.receipt_file),
    )
    # A single-shot submission still walks every stage in order.
    while wizard.stage != WizardStage.PAYMENT:
        await wizard.advance()

    submission = await wizard.submit()
    return ReservationCreatedResponse(
        reservationId=submission.reservation_id,
        reservationFee=to_money_response(submission.reservation_fee),
        receiptUploaded=submission.receipt_uploaded,
        receiptError=submission.receipt_error,
    )
