"""
Cart Router

Shopping cart endpoints for the single process-wide cart.
Routes that only touch the store are plain functions so FastAPI runs them in
its threadpool; storage writes never run on the event loop.

Response format:
- Money values carry a 2-digit "amount" string and a "display" string
- Every route except checkout answers with the full cart state
"""
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from storefront.cart import CartStore
from storefront.checkout import CheckoutSimulator
from storefront.config import Settings
from storefront.errors import (
    ERROR_PRODUCT_NOT_FOUND,
    CartError,
    CheckoutInProgressError,
    CatalogUnavailableError,
)
from storefront.logging import get_logger
from storefront.services.catalog import CatalogClient
from storefront.services.money import format_money, round_money
from .deps import (
    get_cart_store,
    get_catalog,
    get_checkout,
    get_settings_dep,
    parse_product_id,
    require_auth,
)
from .models import AddToCartRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"], dependencies=[Depends(require_auth)])


def _money(value, currency: str) -> dict:
    return {"amount": str(round_money(value)), "display": format_money(value, currency)}


def _format_cart_response(store: CartStore, currency: str) -> dict:
    """Build the cart payload from one consistent view of the store."""
    items, summary = store.view()

    return {
        "items": [
            {
                **item.to_dict(),
                "line_total": _money(item.line_total, currency),
            }
            for item in items
        ],
        "line_count": summary.line_count,
        "item_count": summary.item_count,
        "subtotal": _money(summary.subtotal, currency),
        "shipping_fee": _money(summary.shipping_fee, currency),
        "total": _money(summary.total, currency),
        "free_shipping": summary.free_shipping,
        "free_shipping_remaining": _money(summary.free_shipping_remaining, currency),
        "currency": currency,
    }


@router.get("")
def get_cart(
    store: CartStore = Depends(get_cart_store),
    settings: Settings = Depends(get_settings_dep),
):
    return _format_cart_response(store, settings.currency)


@router.post("/add")
async def add_to_cart(
    request: AddToCartRequest,
    store: CartStore = Depends(get_cart_store),
    catalog: CatalogClient = Depends(get_catalog),
    settings: Settings = Depends(get_settings_dep),
):
    """Add one unit of a catalog product to the cart."""
    product_id = parse_product_id(request.product_id)
    try:
        product = await catalog.get_product(product_id)
    except CatalogUnavailableError as e:
        logger.warning(f"Catalog unavailable: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    if product is None:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)

    await run_in_threadpool(store.add_to_cart, product)
    return _format_cart_response(store, settings.currency)


@router.patch("/item")
def update_cart_item(
    request: UpdateCartItemRequest,
    store: CartStore = Depends(get_cart_store),
    settings: Settings = Depends(get_settings_dep),
):
    """Set an item's quantity (must be >= 1)."""
    try:
        store.update_quantity(parse_product_id(request.product_id), request.quantity)
    except CartError as e:
        logger.info(f"Rejected quantity update for {request.product_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return _format_cart_response(store, settings.currency)


@router.delete("/item")
def remove_cart_item(
    product_id: str,
    store: CartStore = Depends(get_cart_store),
    settings: Settings = Depends(get_settings_dep),
):
    store.remove_from_cart(parse_product_id(product_id))
    return _format_cart_response(store, settings.currency)


@router.delete("")
def clear_cart(
    store: CartStore = Depends(get_cart_store),
    settings: Settings = Depends(get_settings_dep),
):
    store.clear_cart()
    return _format_cart_response(store, settings.currency)


@router.post("/checkout")
async def checkout(
    simulator: CheckoutSimulator = Depends(get_checkout),
    settings: Settings = Depends(get_settings_dep),
):
    """Run the simulated checkout and return its receipt."""
    try:
        receipt = await simulator.run()
    except CheckoutInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except CartError as e:
        raise HTTPException(status_code=400, detail=str(e))

    data = asdict(receipt)
    for key in ("subtotal", "shipping_fee", "total"):
        data[key] = _money(data[key], settings.currency)
    return data
