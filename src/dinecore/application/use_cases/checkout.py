from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from dinecore.application.mappers.order_mapper import to_create_order_request
from dinecore.application.mappers.status_mapper import confirmed_status
from dinecore.application.metrics.lifecycle import record_checkout, record_payment_switch
from dinecore.application.ports.api import (
    AuthError,
    OrderGateway,
    RemoteApiError,
    RemoteRejectedError,
)
from dinecore.application.ports.cart_store import CartStore
from dinecore.application.ports.session import SessionContext
from dinecore.application.use_cases.action_guard import ActionGuard, action_key
from dinecore.domain.cart.entities import Cart
from dinecore.domain.common.errors import ValidationError
from dinecore.domain.common.money import Money
from dinecore.domain.lifecycle.states import INITIAL, EntityKind, OrderStatus
from dinecore.domain.order.entities import CustomerContact, DeliveryAddress
from dinecore.domain.policies.payment import (
    PaymentMethod,
    PaymentSelection,
    ReceiptAttachment,
    eligible_methods,
    ensure_eligible,
    ensure_receipt,
    reconcile_selection,
)
from dinecore.domain.policies.validators import validate_email

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "email", "phone", "address")


class EmptyCartError(ValidationError):
    def __init__(self) -> None:
        super().__init__("cart is empty", field="items")


class MissingRequiredFieldError(ValidationError):
    def __init__(self, field: str) -> None:
        super().__init__(f"{field} is required", field=field)


class SubmissionFailedError(Exception):
    """The store did not create the order; the message is the server's when it sent one."""

    def __init__(self, message: str, status_code: int | None = None, retryable: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable
        self.details = {"upstreamStatus": status_code, "retryable": retryable}


@dataclass(frozen=True)
class CheckoutForm:
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    zip_code: str = ""
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str = ""
    receipt: ReceiptAttachment | None = None


@dataclass(frozen=True)
class CheckoutResult:
    order_id: str | None
    order_number: str
    payment_method: PaymentMethod
    total: Money
    status: OrderStatus = OrderStatus.PENDING


class CheckoutOrchestrator:
    def __init__(
        self,
        order_gateway: OrderGateway,
        cart_store: CartStore,
        guard: ActionGuard | None = None,
        delivery_fee: Money | None = None,
    ) -> None:
        self._order_gateway = order_gateway
        self._cart_store = cart_store
        self._guard = guard or ActionGuard()
        self._delivery_fee = delivery_fee or Money.zero()

    def total(self, cart: Cart | None = None) -> Money:
        current = cart if cart is not None else self._cart_store.load()
        return current.subtotal + self._delivery_fee

    def payment_options(self, total: Money) -> list[PaymentMethod]:
        return eligible_methods(total)

    def select_payment_method(self, form: CheckoutForm, method: PaymentMethod) -> CheckoutForm:
        ensure_eligible(method, self.total())
        return replace(form, payment_method=method)

    def refresh_payment_selection(self, form: CheckoutForm) -> tuple[CheckoutForm, PaymentSelection]:
        """Call whenever the cart changes; cash is swapped out once the total passes the threshold."""
        selection = reconcile_selection(form.payment_method, self.total())
        if selection.switched:
            record_payment_switch()
            logger.info(
                "payment_method_switched",
                extra={"from_method": form.payment_method.value, "to_method": selection.method.value},
            )
            form = replace(form, payment_method=selection.method)
        return form, selection

    def validate(self, cart: Cart, form: CheckoutForm) -> None:
        if cart.is_empty:
            raise EmptyCartError()
        for field in REQUIRED_FIELDS:
            value = getattr(form, field)
            if not value or not str(value).strip():
                raise MissingRequiredFieldError(field)
        validate_email(form.email)
        total = self.total(cart)
        ensure_eligible(form.payment_method, total)
        ensure_receipt(form.payment_method, form.receipt)

    async def submit(self, form: CheckoutForm, session: SessionContext) -> CheckoutResult:
        cart = self._cart_store.load()
        self.validate(cart, form)
        if not session.is_authenticated:
            session.on_unauthorized()
            raise AuthError("Please log in to place an order.", status_code=401)
        request = to_create_order_request(
            cart=cart,
            customer=CustomerContact(
                name=form.name.strip(), email=form.email.strip(), phone=form.phone.strip()
            ),
            address=DeliveryAddress(
                street=form.address.strip(), city=form.city.strip(), zip_code=form.zip_code.strip()
            ),
            payment_method=form.payment_method,
            notes=form.notes,
            receipt=form.receipt,
        )

        key = action_key("checkout", session.actor_key)
        try:
            created = await self._guard.run(
                key, lambda: self._order_gateway.create_order(request, session)
            )
        except AuthError:
            record_checkout("unauthorized")
            raise
        except RemoteApiError as exc:
            record_checkout("failed")
            logger.warning(
                "checkout_failed",
                extra={"status_code": exc.status_code, "action": key},
            )
            raise SubmissionFailedError(
                str(exc),
                status_code=exc.status_code,
                retryable=not isinstance(exc, RemoteRejectedError),
            ) from exc

        self._cart_store.save(cart.clear())
        record_checkout("created")
        logger.info(
            "order_created",
            extra={"entity_kind": "order", "entity_id": created.order_id, "action": key},
        )
        return CheckoutResult(
            order_id=created.order_id,
            order_number=created.order_number,
            payment_method=form.payment_method,
            total=self.total(cart),
            status=confirmed_status(EntityKind.ORDER, created.payload, INITIAL[EntityKind.ORDER]),
        )
