from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from dinecore.domain.common.ids import OrderId
from dinecore.domain.common.money import Money
from dinecore.domain.lifecycle.states import OrderStatus
from dinecore.domain.policies.payment import PaymentMethod


@dataclass(frozen=True)
class OrderLine:
    name: str
    unit_price: Money
    quantity: int
    category: str | None = None
    is_spicy: bool = False
    is_vegetarian: bool = False
    description: str = ""
    image_url: str = ""

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")

    @property
    def line_total(self) -> Money:
        return self.unit_price.times(self.quantity)


@dataclass(frozen=True)
class DeliveryAddress:
    street: str
    city: str
    zip_code: str


@dataclass(frozen=True)
class CustomerContact:
    name: str
    email: str
    phone: str


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    order_number: str
    status: OrderStatus
    customer: CustomerContact
    address: DeliveryAddress
    lines: list[OrderLine]
    subtotal: Money
    delivery_fee: Money
    total: Money
    payment_method: PaymentMethod
    notes: str | None = None
    receipt_file: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.total.currency != self.subtotal.currency:
            raise ValueError("order total currency must match subtotal currency")
        if self.total != self.subtotal + self.delivery_fee:
            raise ValueError("order total must equal subtotal + delivery fee")
