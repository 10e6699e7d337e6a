"""
Cart Module - Service Layer
==============================
CartStore: the mutable cart of one shopping session. Add, adjust quantity,
remove, count and total. Items keep insertion order; updates never reorder.
"""

import logging
from dataclasses import replace
from typing import Iterator, List, Optional

from config.settings import MAX_ITEM_QUANTITY
from common.exceptions import MalformedCartItemError
from modules.cart.models import CartItem, QuantityAction
from modules.catalog.models import Product, is_valid_product

logger = logging.getLogger("storefront.cart")


class CartStore:

    def __init__(self, max_quantity: int = MAX_ITEM_QUANTITY):
        self.max_quantity = max_quantity
        self._items: List[CartItem] = []

    def __len__(self):
        return len(self._items)

    def __iter__(self) -> Iterator[CartItem]:
        return iter(self.items())

    @property
    def is_empty(self) -> bool:
        return not self._items

    # ==========================================
    # Queries
    # ==========================================

    def get(self, product_id: int) -> Optional[CartItem]:
        for item in self._items:
            if item.id == product_id:
                return item
        return None

    def items(self) -> List[CartItem]:
        """Snapshot copies in insertion order (mutating them does not touch the cart)."""
        return [replace(item) for item in self._items]

    def count(self) -> int:
        """Total number of units (the cart badge)."""
        return sum(item.quantity for item in self._items)

    def total(self) -> int:
        return sum(item.price * item.quantity for item in self._items)

    # ==========================================
    # Mutations
    # ==========================================

    def add(self, product: Product) -> bool:
        """
        Add one unit of `product`. Existing lines get +1 (capped at max_quantity),
        new lines are appended with a price snapshot.
        Raises MalformedCartItemError if the product is not a valid catalog record.
        """
        if not is_valid_product(product):
            logger.warning("Rejected malformed product on add: %r", product)
            raise MalformedCartItemError("Invalid product data")

        existing = self.get(product.id)
        if existing:
            if existing.quantity >= self.max_quantity:
                return False
            existing.quantity += 1
            return True

        self._items.append(CartItem(
            id=product.id,
            name=product.name,
            price=product.price,
            image=product.image,
            quantity=1,
        ))
        return True

    def adjust_quantity(self, product_id: int, action: str, value: Optional[int] = None) -> bool:
        """
        increase: +1 up to max_quantity
        decrease: -1 but never below 1 (use remove() to drop a line)
        set:      replace with `value` if 1 <= value <= max_quantity
        Returns True if the quantity changed.
        """
        item = self.get(product_id)
        if not item:
            return False

        if action == QuantityAction.INCREASE:
            if item.quantity >= self.max_quantity:
                return False
            item.quantity += 1
            return True

        if action == QuantityAction.DECREASE:
            if item.quantity <= 1:
                return False
            item.quantity -= 1
            return True

        if action == QuantityAction.SET:
            if not isinstance(value, int) or isinstance(value, bool):
                return False
            if value < 1 or value > self.max_quantity:
                return False
            changed = item.quantity != value
            item.quantity = value
            return changed

        raise ValueError(f"Unknown quantity action: {action}")

    def remove(self, product_id: int) -> bool:
        before = len(self._items)
        self._items = [item for item in self._items if item.id != product_id]
        return len(self._items) != before

    def clear(self):
        self._items = []
