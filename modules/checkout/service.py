"""
Checkout Module - Service Layer
=================================
CheckoutController: one checkout attempt from raw form input to the
outbound WhatsApp deep link.

Sequence per attempt:
  1. Rate limit (order_submission key) -> Blocked
  2. Validate every field, collecting all field errors
  3. Re-check the cart (empty / malformed items)
  4. Any failure -> Invalid (cart and form untouched)
  5. Compose message, hand deep link to the transport -> Submitted, clear cart

The cart is only cleared after step 5 fully completes.
"""

import logging
from typing import Callable, Mapping, Optional

from config.settings import (
    ORDER_RATE_LIMIT_KEY, WHATSAPP_NUMBER,
    NAME_MAX_LENGTH, PHONE_MAX_LENGTH, NOTES_MAX_LENGTH,
    ADDRESS_MAX_LENGTH, ADDRESS_MIN_LENGTH,
)
from common.exceptions import (
    CompositionError, EmptyCartError, MalformedCartItemError,
    RateLimitedError, ValidationFailure,
)
from common.security import RateLimiter, ValidationResult, sanitize_and_validate
from modules.cart.models import is_valid_cart_item
from modules.cart.service import CartStore
from modules.checkout.models import (
    CHECKOUT_FIELDS, CheckoutOutcome, CheckoutState, CustomerInfo,
)
from modules.order.service import OrderComposer, order_composer

logger = logging.getLogger("storefront.checkout")

GENERIC_FAILURE_NOTICE = "An error occurred while processing your order. Please try again."


class CheckoutController:

    def __init__(
        self,
        cart: CartStore,
        limiter: RateLimiter,
        composer: OrderComposer = order_composer,
        transport: Optional[Callable[[str], None]] = None,
        whatsapp_number: str = WHATSAPP_NUMBER,
    ):
        self.cart = cart
        self.limiter = limiter
        self.composer = composer
        self.transport = transport
        self.whatsapp_number = whatsapp_number
        self.state = CheckoutState.IDLE

    # ==========================================
    # Field validation
    # ==========================================

    def validate_field(self, field: str, raw) -> ValidationResult:
        """Validate one checkout field (also used for on-blur feedback)."""
        if field == "name":
            return sanitize_and_validate(raw, "name", NAME_MAX_LENGTH)

        if field == "phone":
            return sanitize_and_validate(raw, "phone", PHONE_MAX_LENGTH)

        if field == "address":
            result = sanitize_and_validate(raw, None, ADDRESS_MAX_LENGTH)
            if result.is_valid and len(result.value) < ADDRESS_MIN_LENGTH:
                return ValidationResult(
                    False, result.value,
                    f"Address must be at least {ADDRESS_MIN_LENGTH} characters long",
                )
            return result

        if field == "notes":
            # Optional: only a missing or empty value skips validation
            if raw is None or raw == "":
                return ValidationResult(True, "", None)
            return sanitize_and_validate(raw, None, NOTES_MAX_LENGTH)

        raise ValidationFailure(field, f"Unknown checkout field: {field}")

    # ==========================================
    # Guards
    # ==========================================

    def _guard_rate_limit(self):
        if not self.limiter.is_allowed(ORDER_RATE_LIMIT_KEY):
            raise RateLimitedError()

    def _check_cart(self):
        if self.cart.is_empty:
            raise EmptyCartError()
        invalid = [item for item in self.cart.items() if not is_valid_cart_item(item)]
        if invalid:
            logger.warning("Invalid items found in cart: %r", invalid)
            raise MalformedCartItemError()

    # ==========================================
    # Submit
    # ==========================================

    def submit(self, form: Mapping[str, str]) -> CheckoutOutcome:
        values = {f: form.get(f) or "" for f in CHECKOUT_FIELDS}

        self.state = CheckoutState.VALIDATING
        try:
            self._guard_rate_limit()
        except RateLimitedError as e:
            self.state = CheckoutState.BLOCKED
            return CheckoutOutcome(self.state, notice=e.message, values=values)

        results = {f: self.validate_field(f, form.get(f)) for f in CHECKOUT_FIELDS}
        errors = {f: r.error for f, r in results.items() if not r.is_valid}

        notice = None
        try:
            self._check_cart()
        except (EmptyCartError, MalformedCartItemError) as e:
            errors["cart"] = e.message
            notice = e.message

        if errors:
            self.state = CheckoutState.INVALID
            logger.info(
                "Checkout rejected: %s (%d attempts left)",
                ", ".join(sorted(errors)), self.limiter.remaining(ORDER_RATE_LIMIT_KEY),
            )
            return CheckoutOutcome(self.state, errors=errors, notice=notice, values=values)

        customer = CustomerInfo(
            name=results["name"].value,
            address=results["address"].value,
            phone=results["phone"].value,
            notes=results["notes"].value,
        )

        snapshot = self.cart.items()
        self.state = CheckoutState.COMPOSING
        try:
            message = self.composer.compose(customer, snapshot)
            url = self.composer.build_whatsapp_url(message, self.whatsapp_number)
            if self.transport is not None:
                self.transport(url)
        except CompositionError:
            self.state = CheckoutState.FAILED
            return CheckoutOutcome(self.state, notice=GENERIC_FAILURE_NOTICE, values=values)
        except Exception:
            logger.exception("Order hand-off failed")
            self.state = CheckoutState.FAILED
            return CheckoutOutcome(self.state, notice=GENERIC_FAILURE_NOTICE, values=values)

        self.cart.clear()
        self.state = CheckoutState.SUBMITTED
        logger.info("Order submitted with %d line items", len(snapshot))
        return CheckoutOutcome(self.state, message=message, url=url, customer=customer)
