from __future__ import annotations

from pydantic import BaseModel, Field


class MoneyResponse(BaseModel):
    amountCents: int
    amount: float
    currency: str


class PaymentOptionsResponse(BaseModel):
    eligibleMethods: list[str] = Field(default_factory=list)
    selectedMethod: str
    switched: bool = False
    notice: str | None = None
    receiptRequired: bool


class CheckoutResponse(BaseModel):
    orderId: str | None = None
    orderNumber: str
    status: str
    paymentMethod: str
    total: MoneyResponse


class ReservationFeeResponse(BaseModel):
    occasionType: str
    guests: int
    fee: MoneyResponse


class DailyLimitResponse(BaseModel):
    date: str
    count: int
    limit: int
    allowed: bool


class ReservationCreatedResponse(BaseModel):
    reservationId: str
    reservationFee: MoneyResponse
    receiptUploaded: bool
    receiptError: str | None = None


class AllowedTransitionsResponse(BaseModel):
    kind: str
    status: str
    role: str
    allowed: list[str] = Field(default_factory=list)
    terminal: bool


class StatusChangeResponse(BaseModel):
    kind: str
    entityId: str
    previousStatus: str
    status: str
    updatedAt: str | None = None
