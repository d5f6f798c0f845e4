"""Snapshot persistence for the cart."""
import json
from decimal import InvalidOperation

from storefront.db import LocalStorage, StorageError
from storefront.logging import get_logger
from .models import Cart

logger = get_logger(__name__)


class CartSnapshotStorage:
    """
    Reads and writes the cart snapshot under a single fixed key.

    The snapshot is a JSON list of line items in cart order. Loading never
    raises: a missing, unreadable or damaged snapshot yields an empty cart.
    """

    def __init__(self, storage: LocalStorage, key: str = "cart"):
        self.storage = storage
        self.key = key

    def load(self) -> Cart:
        try:
            raw = self.storage.get(self.key)
        except StorageError as e:
            logger.error(f"Failed to read cart snapshot '{self.key}': {e}", exc_info=True)
            return Cart()

        if raw is None:
            return Cart()

        try:
            cart = Cart.from_list(json.loads(raw))
        except (
            json.JSONDecodeError,
            KeyError,
            TypeError,
            ValueError,
            InvalidOperation,
            RecursionError,
        ) as e:
            logger.warning(f"Corrupted cart snapshot '{self.key}', starting with an empty cart: {e}")
            return Cart()

        logger.info(f"Restored cart with {len(cart.items)} line item(s) from '{self.key}'")
        return cart

    def save(self, cart: Cart) -> None:
        """Overwrite the snapshot. Raises StorageError if the backend fails."""
        self.storage.set(self.key, json.dumps(cart.to_list(), ensure_ascii=False))
