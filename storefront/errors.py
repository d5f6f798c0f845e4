"""
Common Error Constants and Exceptions

Centralized error messages so routers and services report the same text.
"""

# Cart errors
ERROR_INVALID_QUANTITY = "quantity must be a positive integer"
ERROR_CART_EMPTY = "Cart is empty"
ERROR_CART_CLOSED = "Cart store is closed"
ERROR_CHECKOUT_IN_PROGRESS = "Checkout already in progress"

# Product errors
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_CATALOG_UNAVAILABLE = "Product catalog unavailable"

# Auth errors
ERROR_LOGIN_FAILED = "Login failed"
ERROR_UNAUTHORIZED = "Unauthorized"


class CartError(ValueError):
    """Base class for cart contract violations."""


class InvalidQuantityError(CartError):
    """Raised when a quantity below 1 (or not an integer) reaches the store."""

    def __init__(self, quantity: object):
        super().__init__(f"{ERROR_INVALID_QUANTITY}, got {quantity!r}")
        self.quantity = quantity


class EmptyCartError(CartError):
    """Raised when checkout is attempted on an empty cart."""

    def __init__(self):
        super().__init__(ERROR_CART_EMPTY)


class CheckoutInProgressError(CartError):
    """Raised when checkout starts while another checkout is still running."""

    def __init__(self):
        super().__init__(ERROR_CHECKOUT_IN_PROGRESS)


class AuthenticationError(Exception):
    """Raised when the remote login endpoint rejects the credentials."""


class CatalogUnavailableError(Exception):
    """Raised when the product API cannot be reached or answers with an error."""
