"""
Cart Module - Models
=====================
Cart line items with a price snapshot and quantity constraints.
"""

from dataclasses import dataclass
from typing import Optional

from config.settings import MAX_ITEM_QUANTITY


class QuantityAction:
    INCREASE = "increase"
    DECREASE = "decrease"
    SET = "set"

    ALL = (INCREASE, DECREASE, SET)


@dataclass
class CartItem:
    id: int  # Product id (reference, not a copy of the product)
    name: str
    price: int  # snapshot taken when first added
    image: Optional[str] = None
    quantity: int = 1

    @property
    def line_total(self) -> int:
        return self.price * self.quantity

    def __repr__(self):
        return f"<CartItem {self.id} x{self.quantity}>"


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_valid_cart_item(item) -> bool:
    """
    CartItem invariant: int id, non-empty name, int price >= 0,
    int quantity within 1..MAX_ITEM_QUANTITY.
    Works on any object so snapshots from elsewhere can be checked too.
    """
    if item is None:
        return False
    pid = getattr(item, "id", None)
    name = getattr(item, "name", None)
    price = getattr(item, "price", None)
    quantity = getattr(item, "quantity", None)
    return (
        _is_int(pid)
        and isinstance(name, str) and bool(name)
        and _is_int(price) and price >= 0
        and _is_int(quantity) and 1 <= quantity <= MAX_ITEM_QUANTITY
    )
