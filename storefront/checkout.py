"""
Simulated checkout.

No payment is taken and no order is stored: the sequence reports progress on
a timer and then empties the cart once.
"""
import asyncio
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Awaitable, Callable, Optional, Union

from storefront.cart import CartStore
from storefront.errors import CheckoutInProgressError, EmptyCartError
from storefront.logging import get_logger

logger = get_logger(__name__)

CHECKOUT_SUCCESS_MESSAGE = "Order placed successfully!"

ProgressCallback = Callable[[int], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class CheckoutReceipt:
    reference: str
    item_count: int
    subtotal: Decimal
    shipping_fee: Decimal
    total: Decimal
    placed_at: str
    message: str = CHECKOUT_SUCCESS_MESSAGE


class CheckoutSimulator:
    """
    Drives the timed checkout sequence for a cart store.

    Progress goes 0, step, 2*step ... 100 with ``step_delay`` seconds between
    reports; one more delay later the cart is cleared. Other mutations are
    not blocked while the sequence runs, but a second checkout on the same
    simulator is refused until the first one finishes.
    """

    def __init__(self, store: CartStore, step_delay: float = 0.5, step_percent: int = 25):
        self.store = store
        self.step_delay = step_delay
        self.step_percent = step_percent
        self._running = False

    async def _report(self, on_progress: Optional[ProgressCallback], progress: int) -> None:
        if on_progress is None:
            return
        result = on_progress(progress)
        if asyncio.iscoroutine(result):
            await result

    async def run(self, on_progress: Optional[ProgressCallback] = None) -> CheckoutReceipt:
        if self._running:
            raise CheckoutInProgressError()
        if self.store.is_empty:
            raise EmptyCartError()

        self._running = True
        try:
            return await self._run(on_progress)
        finally:
            self._running = False

    @property
    def in_progress(self) -> bool:
        return self._running

    async def _run(self, on_progress: Optional[ProgressCallback]) -> CheckoutReceipt:
        summary = self.store.summary()
        reference = secrets.token_hex(4).upper()
        logger.info(f"Checkout {reference} started for {summary.item_count} item(s), total {summary.total}")

        progress = 0
        await self._report(on_progress, progress)
        while progress < 100:
            await asyncio.sleep(self.step_delay)
            progress = min(100, progress + self.step_percent)
            await self._report(on_progress, progress)

        await asyncio.sleep(self.step_delay)
        await asyncio.to_thread(self.store.clear_cart)

        logger.info(f"Checkout {reference} completed")
        return CheckoutReceipt(
            reference=reference,
            item_count=summary.item_count,
            subtotal=summary.subtotal,
            shipping_fee=summary.shipping_fee,
            total=summary.total,
            placed_at=datetime.now(timezone.utc).isoformat(),
        )
