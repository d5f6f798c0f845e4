"""Cart store: in-memory cart state with snapshot persistence and change events."""
import threading
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Callable, List, Optional, Tuple

from storefront.db import StorageError
from storefront.errors import ERROR_CART_CLOSED, CartError, InvalidQuantityError
from storefront.logging import get_logger
from storefront.models import Product, ProductId
from .models import Cart, CartLineItem, CartSummary, ShippingPolicy
from .storage import CartSnapshotStorage

logger = get_logger(__name__)


class CartAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    UPDATE_QUANTITY = "update_quantity"
    CLEAR = "clear"


@dataclass(frozen=True)
class CartChangedEvent:
    """Delivered to subscribers after a mutation has been applied and persisted."""
    action: CartAction
    product_id: Optional[ProductId]
    items: Tuple[CartLineItem, ...]
    summary: CartSummary


CartSubscriber = Callable[[CartChangedEvent], None]


class CartStore:
    """
    Owns the cart for the running process.

    Features:
    - At most one line item per product id, quantities always >= 1
    - Snapshot written after every mutation, restored on construction
    - Subscribers notified with a consistent copy of the new state

    Mutations hold a re-entrant lock for the whole apply/persist/notify
    sequence. There is one cart per process; it is not scoped to the
    logged-in user.
    """

    def __init__(self, snapshots: CartSnapshotStorage, policy: Optional[ShippingPolicy] = None):
        self._snapshots = snapshots
        self.policy = policy or ShippingPolicy()
        self._lock = threading.RLock()
        self._subscribers: List[CartSubscriber] = []
        self._closed = False
        self._cart = snapshots.load()

    # ==================== QUERIES ====================

    @property
    def items(self) -> Tuple[CartLineItem, ...]:
        """Copies of the current line items, in cart order."""
        with self._lock:
            return self._cart.copy_items()

    def get_item(self, product_id: ProductId) -> Optional[CartLineItem]:
        with self._lock:
            item = self._cart.find(product_id)
            return replace(item) if item else None

    @property
    def is_empty(self) -> bool:
        with self._lock:
            return self._cart.is_empty

    @property
    def item_count(self) -> int:
        with self._lock:
            return self._cart.item_count

    @property
    def subtotal(self) -> Decimal:
        with self._lock:
            return self._cart.subtotal

    @property
    def shipping_fee(self) -> Decimal:
        return self.policy.fee_for(self.subtotal)

    @property
    def total(self) -> Decimal:
        subtotal = self.subtotal
        return subtotal + self.policy.fee_for(subtotal)

    def summary(self) -> CartSummary:
        with self._lock:
            return self._cart.summarize(self.policy)

    def view(self) -> Tuple[Tuple[CartLineItem, ...], CartSummary]:
        """Item copies and their summary, read under one lock acquisition."""
        with self._lock:
            return self._cart.copy_items(), self._cart.summarize(self.policy)

    # ==================== SUBSCRIPTIONS ====================

    def subscribe(self, callback: CartSubscriber) -> Callable[[], None]:
        """Register a change listener. Returns a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    # ==================== COMMANDS ====================

    def add_to_cart(self, product: Product) -> CartSummary:
        """Add one unit of ``product``; a new line item goes to the end."""
        with self._lock:
            self._ensure_open()
            existing = self._cart.find(product.id)
            if existing:
                existing.quantity += 1
                logger.debug(f"Product {product.id} already in cart, quantity now {existing.quantity}")
            else:
                self._cart.items.append(CartLineItem.from_product(product))
                logger.debug(f"Product {product.id} added to cart")
            return self._commit(CartAction.ADD, product.id)

    def remove_from_cart(self, product_id: ProductId) -> CartSummary:
        """Drop the line item for ``product_id``. Unknown ids are ignored."""
        with self._lock:
            self._ensure_open()
            existing = self._cart.find(product_id)
            if existing is None:
                logger.debug(f"Remove ignored: product {product_id} not in cart")
                return self._cart.summarize(self.policy)
            self._cart.items.remove(existing)
            return self._commit(CartAction.REMOVE, product_id)

    def update_quantity(self, product_id: ProductId, quantity: int) -> CartSummary:
        """
        Set the quantity of an existing line item.

        Quantities below 1 are rejected with InvalidQuantityError; removing an
        item is done with ``remove_from_cart``. Unknown ids are ignored.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidQuantityError(quantity)

        with self._lock:
            self._ensure_open()
            existing = self._cart.find(product_id)
            if existing is None:
                logger.debug(f"Quantity update ignored: product {product_id} not in cart")
                return self._cart.summarize(self.policy)
            existing.quantity = quantity
            return self._commit(CartAction.UPDATE_QUANTITY, product_id)

    def clear_cart(self) -> CartSummary:
        """Empty the cart. Safe to call repeatedly."""
        with self._lock:
            self._ensure_open()
            self._cart.items.clear()
            return self._commit(CartAction.CLEAR, None)

    # ==================== LIFECYCLE ====================

    def close(self) -> None:
        """Detach subscribers and release the storage backend."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._subscribers.clear()
            try:
                self._snapshots.storage.close()
            except StorageError as e:
                logger.warning(f"Failed to close cart storage: {e}")
        logger.info("Cart store closed")

    @property
    def closed(self) -> bool:
        return self._closed

    # ==================== INTERNALS ====================

    def _ensure_open(self) -> None:
        if self._closed:
            raise CartError(ERROR_CART_CLOSED)

    def _commit(self, action: CartAction, product_id: Optional[ProductId]) -> CartSummary:
        """Persist the new state and notify subscribers. Caller holds the lock."""
        try:
            self._snapshots.save(self._cart)
        except StorageError as e:
            # In-memory state stays authoritative; next mutation retries the write
            logger.error(f"Failed to persist cart after {action.value}: {e}", exc_info=True)

        summary = self._cart.summarize(self.policy)
        event = CartChangedEvent(
            action=action,
            product_id=product_id,
            items=self._cart.copy_items(),
            summary=summary,
        )
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Cart subscriber {callback!r} failed: {e}", exc_info=True)
        return summary
