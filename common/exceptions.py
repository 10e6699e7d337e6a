"""
Warung Storefront - Custom Exceptions
======================================
Business-level exceptions that can be caught and converted to HTTP responses
or checkout outcomes. Field validation never raises: it returns a
ValidationResult (see common.security).
"""


class StorefrontError(Exception):
    """Base exception for all storefront business errors."""
    def __init__(self, message: str = "An unexpected error occurred."):
        self.message = message
        super().__init__(self.message)


class ValidationFailure(StorefrontError):
    """Raised when a single field fails validation outside the checkout form."""
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class RateLimitedError(StorefrontError):
    """Raised when an action exceeded its sliding-window attempt limit."""
    def __init__(self):
        super().__init__("Too many order attempts. Please wait a minute before trying again.")


class EmptyCartError(StorefrontError):
    """Raised when checkout is attempted with no items in the cart."""
    def __init__(self):
        super().__init__("Your cart is empty. Please add items before placing an order.")


class MalformedCartItemError(StorefrontError):
    """Raised when a cart item (or the product it came from) breaks the item invariant."""
    def __init__(self, message: str = "Invalid items found in cart. Please refresh and try again."):
        super().__init__(message)


class CompositionError(StorefrontError):
    """Raised when the outbound order message could not be built or handed off."""
    def __init__(self):
        super().__init__("Failed to create order message")


class InvalidProductError(StorefrontError):
    """Raised when a product identifier is not a valid positive integer."""
    def __init__(self):
        super().__init__("Invalid product selected")


class NotFoundError(StorefrontError):
    """Raised when a requested resource doesn't exist."""
    pass
