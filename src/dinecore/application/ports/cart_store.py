from __future__ import annotations

from typing import Protocol

from dinecore.domain.cart.entities import Cart


class CartStore(Protocol):
    def load(self) -> Cart: ...

    def save(self, cart: Cart) -> None: ...
