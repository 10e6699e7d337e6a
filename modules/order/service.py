"""
Order Module - Service Layer
===============================
Compose the outbound order message from customer details and a cart
snapshot, and build the WhatsApp deep link that carries it.

Message layout:

    *New Order*

    *Customer Details*
    Name: ...
    Address: ...
    Phone: ...

    *Order Items*
    <name> x <qty> - Rp <line total>

    *Total: Rp <sum of line totals>*

    *Order Notes*          (only when notes are given)
    ...
"""

import logging
import urllib.parse
from dataclasses import dataclass
from typing import Iterable, List

from config.settings import WHATSAPP_BASE_URL, WHATSAPP_NUMBER
from common.exceptions import CompositionError
from common.helpers import format_rupiah
from modules.cart.models import is_valid_cart_item

logger = logging.getLogger("storefront.order")

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class OrderLine:
    name: str
    quantity: int
    line_total: int


class OrderComposer:

    def summary(self, cart_items: Iterable) -> List[OrderLine]:
        """
        One line per valid cart item, in cart order. Every line total is
        recomputed from price x quantity. Malformed items are logged and skipped.
        """
        lines = []
        for item in cart_items:
            if not is_valid_cart_item(item):
                logger.warning("Invalid cart item skipped in order: %r", item)
                continue
            lines.append(OrderLine(item.name, item.quantity, item.price * item.quantity))
        return lines

    def compose(self, customer, cart_items: Iterable) -> str:
        """
        Build the order text. `customer` carries already-sanitized
        name/address/phone/notes. The total is the sum of the recomputed
        line totals, never a cached cart total.
        Raises CompositionError on unexpected failure.
        """
        try:
            lines = self.summary(cart_items)

            message = "*New Order*\n\n"
            message += "*Customer Details*\n"
            message += f"Name: {customer.name}\n"
            message += f"Address: {customer.address}\n"
            message += f"Phone: {customer.phone}\n\n"
            message += "*Order Items*\n"

            total = 0
            for line in lines:
                message += f"{line.name} x {line.quantity} - {format_rupiah(line.line_total)}\n"
                total += line.line_total

            message += f"\n*Total: {format_rupiah(total)}*"

            notes = getattr(customer, "notes", "") or ""
            if notes.strip():
                message += f"\n\n*Order Notes*\n{notes}"

            return message
        except Exception as e:
            logger.exception("Error creating order message")
            raise CompositionError() from e

    def build_whatsapp_url(self, message: str, number: str = WHATSAPP_NUMBER) -> str:
        """Percent-encode the message into a wa.me deep link."""
        encoded = urllib.parse.quote(message, safe=_URI_COMPONENT_SAFE)
        return f"{WHATSAPP_BASE_URL}/{number}?text={encoded}"


# Singleton
order_composer = OrderComposer()
