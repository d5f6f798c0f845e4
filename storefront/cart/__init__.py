"""Cart package: models, snapshot storage, and the cart store."""
from .models import Cart, CartLineItem, CartSummary, ShippingPolicy
from .service import CartAction, CartChangedEvent, CartStore
from .storage import CartSnapshotStorage

__all__ = [
    "Cart",
    "CartAction",
    "CartChangedEvent",
    "CartLineItem",
    "CartSnapshotStorage",
    "CartStore",
    "CartSummary",
    "ShippingPolicy",
]
