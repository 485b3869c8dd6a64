from __future__ import annotations

from dinecore.application.ports.cart_store import CartStore
from dinecore.domain.cart.entities import Cart


class InMemoryCartStore(CartStore):
    def __init__(self, cart: Cart | None = None) -> None:
        self._cart = cart or Cart()

    def load(self) -> Cart:
        return self._cart

    def save(self, cart: Cart) -> None:
        self._cart = cart
