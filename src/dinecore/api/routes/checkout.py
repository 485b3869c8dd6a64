from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from dinecore.api.deps import get_action_guard, get_gateway, session_from_request
from dinecore.application.dto.requests import CheckoutRequest, PaymentOptionsRequest
from dinecore.application.dto.responses import CheckoutResponse, PaymentOptionsResponse
from dinecore.application.mappers.money_mapper import to_money_response
from dinecore.application.mappers.receipt_mapper import receipt_from_data_url
from dinecore.application.ports.api import OrderGateway
from dinecore.application.use_cases.action_guard import ActionGuard
from dinecore.application.use_cases.checkout import CheckoutForm, CheckoutOrchestrator
from dinecore.domain.cart.entities import DEFAULT_CATEGORY, Cart, CartItem
from dinecore.domain.common.ids import MenuItemId
from dinecore.domain.common.money import Money
from dinecore.domain.policies.payment import (
    eligible_methods,
    parse_method,
    reconcile_selection,
    requires_receipt,
)
from dinecore.infrastructure.cart.memory_store import InMemoryCartStore

router = APIRouter()


def _cart_from_request(request_dto: CheckoutRequest) -> Cart:
    items = tuple(
        CartItem(
            item_id=MenuItemId(item.item_id),
            name=item.name,
            unit_price=Money.of(item.price),
            quantity=item.quantity,
            description=item.description,
            category=item.category or DEFAULT_CATEGORY,
            is_spicy=item.is_spicy,
            is_vegetarian=item.is_vegetarian,
            image_url=item.image_url,
        )
        for item in request_dto.items
    )
    return Cart(items=items)


@router.post("/v1/checkout/payment-options", response_model=PaymentOptionsResponse)
def payment_options(request_dto: PaymentOptionsRequest) -> PaymentOptionsResponse:
    total = Money.of(request_dto.total)
    selection = reconcile_selection(parse_method(request_dto.selected_method), total)
    return PaymentOptionsResponse(
        eligibleMethods=[method.value for method in eligible_methods(total)],
        selectedMethod=selection.method.value,
        switched=selection.switched,
        notice=selection.notice,
        receiptRequired=requires_receipt(selection.method),
    )


@router.post(
    "/v1/checkout",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
)
async def checkout(
    request_dto: CheckoutRequest,
    request: Request,
    gateway: OrderGateway = Depends(get_gateway),
    guard: ActionGuard = Depends(get_action_guard),
) -> CheckoutResponse:
    cart_store = InMemoryCartStore(_cart_from_request(request_dto))
    orchestrator = CheckoutOrchestrator(
        order_gateway=gateway,
        cart_store=cart_store,
        guard=guard,
        delivery_fee=Money.of(request_dto.delivery_fee),
    )
    form = CheckoutForm(
        name=request_dto.name,
        email=request_dto.email,
        phone=request_dto.phone,
        address=request_dto.address,
        city=request_dto.city,
        zip_code=request_dto.zip_code,
        payment_method=parse_method(request_dto.payment_method),
        notes=request_dto.notes,
        receipt=receipt_from_data_url(request_dto.receipt_file),
    )
    result = await orchestrator.submit(form, session_from_request(request))
    return CheckoutResponse(
        orderId=result.order_id,
        orderNumber=result.order_number,
        status=result.status.value,
        paymentMethod=result.payment_method.value,
        total=to_money_response(result.total),
    )
