from __future__ import annotations

from typing import Any

from dinecore.application.dto.requests import CreateOrderRequest, OrderItemPayload
from dinecore.application.mappers.common import dig, parse_datetime
from dinecore.application.mappers.money_mapper import to_wire_amount
from dinecore.application.mappers.receipt_mapper import receipt_to_data_url
from dinecore.domain.cart.entities import DEFAULT_CATEGORY, Cart
from dinecore.domain.common.ids import OrderId
from dinecore.domain.common.money import Money
from dinecore.domain.lifecycle.machine import parse_status
from dinecore.domain.lifecycle.states import EntityKind, OrderStatus
from dinecore.domain.order.entities import CustomerContact, DeliveryAddress, Order, OrderLine
from dinecore.domain.policies.payment import PaymentMethod, ReceiptAttachment, parse_method

FALLBACK_ORDER_NUMBER = "your order"


def to_create_order_request(
    cart: Cart,
    customer: CustomerContact,
    address: DeliveryAddress,
    payment_method: PaymentMethod,
    notes: str | None,
    receipt: ReceiptAttachment | None,
) -> CreateOrderRequest:
    return CreateOrderRequest(
        items=[
            OrderItemPayload(
                name=item.name,
                description=item.description or "",
                price=to_wire_amount(item.unit_price),
                quantity=item.quantity,
                category=item.category or DEFAULT_CATEGORY,
                is_spicy=bool(item.is_spicy),
                is_vegetarian=bool(item.is_vegetarian),
                image_url=item.image_url or "",
            )
            for item in cart.items
        ],
        payment_method=payment_method.value,
        delivery_address=address.street,
        delivery_city=address.city,
        delivery_zip_code=address.zip_code,
        customer_name=customer.name,
        customer_email=customer.email,
        customer_phone=customer.phone,
        notes=notes or "",
        receipt_file=receipt_to_data_url(receipt) if receipt is not None else None,
    )


def order_payload(payload: dict[str, Any]) -> dict[str, Any]:
    for path in (("data", "order"), ("data",), ("order",)):
        candidate = dig(payload, *path)
        if isinstance(candidate, dict) and (
            "order_number" in candidate or "id" in candidate
        ):
            return candidate
    return payload


def extract_order_number(payload: dict[str, Any]) -> str:
    for path in (
        ("data", "order", "order_number"),
        ("data", "order_number"),
        ("order", "order_number"),
        ("order_number",),
    ):
        value = dig(payload, *path)
        if value:
            return str(value)
    return FALLBACK_ORDER_NUMBER


def extract_order_id(payload: dict[str, Any]) -> str | None:
    value = order_payload(payload).get("id")
    return str(value) if value is not None else None


def to_order(payload: dict[str, Any]) -> Order:
    """Build the read-only view of an order exactly as the store reports it."""
    data = order_payload(payload)
    raw_items = data.get("order_items") or data.get("items") or []
    lines = [
        OrderLine(
            name=str(item.get("name", "")),
            unit_price=Money.of(item.get("price", 0)),
            quantity=int(item.get("quantity", 1)),
            category=item.get("category"),
            is_spicy=bool(item.get("is_spicy", False)),
            is_vegetarian=bool(item.get("is_vegetarian", False)),
            description=item.get("description") or "",
            image_url=item.get("image_url") or "",
        )
        for item in raw_items
    ]
    subtotal = Money.of(data.get("subtotal", 0))
    delivery_fee = Money.of(data.get("delivery_fee", 0))
    status = data.get("order_status") or data.get("status") or OrderStatus.PENDING.value
    return Order(
        order_id=OrderId(str(data.get("id", ""))),
        order_number=str(data.get("order_number", "")),
        status=parse_status(EntityKind.ORDER, status),  # type: ignore[arg-type]
        customer=CustomerContact(
            name=data.get("customer_name") or "",
            email=data.get("customer_email") or "",
            phone=data.get("customer_phone") or "",
        ),
        address=DeliveryAddress(
            street=data.get("delivery_address") or "",
            city=data.get("delivery_city") or "",
            zip_code=data.get("delivery_zip_code") or "",
        ),
        lines=lines,
        subtotal=subtotal,
        delivery_fee=delivery_fee,
        total=subtotal + delivery_fee,
        payment_method=parse_method(data.get("payment_method") or PaymentMethod.CASH.value),
        notes=data.get("notes"),
        receipt_file=data.get("receipt_file"),
        created_at=parse_datetime(data.get("created_at")),
        updated_at=parse_datetime(data.get("updated_at")),
    )
