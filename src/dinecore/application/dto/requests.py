from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


# Outbound payloads for the remote REST API. Field names are the store's.


class OrderItemPayload(BaseModel):
    name: str
    description: str = ""
    price: float
    quantity: int
    category: str
    is_spicy: bool = False
    is_vegetarian: bool = False
    image_url: str = ""


class CreateOrderRequest(BaseModel):
    items: list[OrderItemPayload] = Field(min_length=1)
    payment_method: str
    delivery_address: str
    delivery_city: str
    delivery_zip_code: str
    customer_name: str
    customer_email: str
    customer_phone: str
    notes: str = ""
    receipt_file: str | None = None


class CreateReservationRequest(BaseModel):
    date: str
    time: str
    guests: int
    dining_preference: str
    name: str
    email: str
    phone: str
    special_requests: str = ""
    occasion_type: str
    occasion_instructions: str = ""
    reservation_fee: float
    payment_method: str
    payment_reference: str


class StatusUpdateRequest(BaseModel):
    status: str


# Inbound bodies accepted by the BFF routes.


class CartItemRequest(CamelBaseModel):
    item_id: str
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)
    description: str = ""
    category: str | None = None
    is_spicy: bool = False
    is_vegetarian: bool = False
    image_url: str = ""


class CheckoutRequest(CamelBaseModel):
    items: list[CartItemRequest] = Field(default_factory=list)
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    zip_code: str = ""
    payment_method: str = "cash"
    notes: str = ""
    delivery_fee: float = Field(default=0, ge=0)
    receipt_file: str | None = None


class PaymentOptionsRequest(CamelBaseModel):
    total: float = Field(ge=0)
    selected_method: str = "cash"


class ReservationSubmitRequest(CamelBaseModel):
    date: str = ""
    time: str = ""
    guests: int | str = 2
    dining_preference: str = "Main Dining"
    name: str = ""
    email: str = ""
    phone: str = ""
    occasion_type: str = "Casual Dinner"
    occasion_instructions: str = ""
    special_requests: str = ""
    payment_method: str | None = None
    payment_reference: str = ""
    receipt_file: str | None = None


class StatusChangeRequest(CamelBaseModel):
    current_status: str
    status: str


class CancelRequest(CamelBaseModel):
    current_status: str
