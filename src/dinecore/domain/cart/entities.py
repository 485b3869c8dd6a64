from __future__ import annotations

from dataclasses import dataclass, replace

from dinecore.domain.common.ids import MenuItemId
from dinecore.domain.common.money import Money

DEFAULT_CATEGORY = "Japanese Food"


@dataclass(frozen=True)
class CartItem:
    item_id: MenuItemId
    name: str
    unit_price: Money
    quantity: int = 1
    description: str = ""
    category: str = DEFAULT_CATEGORY
    is_spicy: bool = False
    is_vegetarian: bool = False
    image_url: str = ""

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")
        if not self.name.strip():
            raise ValueError("cart item name must not be empty")

    @property
    def line_total(self) -> Money:
        return self.unit_price.times(self.quantity)


@dataclass(frozen=True)
class Cart:
    items: tuple[CartItem, ...] = ()

    def __post_init__(self) -> None:
        currencies = {item.unit_price.currency for item in self.items}
        if len(currencies) > 1:
            raise ValueError("cart items must share one currency")

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self) -> Money:
        total = Money.zero()
        for item in self.items:
            total = total + item.line_total
        return total

    def find(self, item_id: MenuItemId) -> CartItem | None:
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None

    def add_item(self, item: CartItem) -> Cart:
        existing = self.find(item.item_id)
        if existing is None:
            return Cart(items=self.items + (replace(item, quantity=1),))
        return self.update_quantity(item.item_id, existing.quantity + 1)

    def remove_item(self, item_id: MenuItemId) -> Cart:
        return Cart(items=tuple(item for item in self.items if item.item_id != item_id))

    def update_quantity(self, item_id: MenuItemId, quantity: int) -> Cart:
        if quantity <= 0:
            return self.remove_item(item_id)
        return Cart(
            items=tuple(
                replace(item, quantity=quantity) if item.item_id == item_id else item
                for item in self.items
            )
        )

    def clear(self) -> Cart:
        return Cart()
