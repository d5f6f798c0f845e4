"""Products Router - catalog listing, filtering and detail."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from storefront.errors import ERROR_PRODUCT_NOT_FOUND, CatalogUnavailableError
from storefront.logging import get_logger
from storefront.services.catalog import CatalogClient, extract_categories, filter_products
from .deps import get_catalog, parse_product_id

logger = get_logger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
async def list_products(
    category: Optional[str] = None,
    q: Optional[str] = None,
    catalog: CatalogClient = Depends(get_catalog),
):
    """Products, optionally narrowed by category and a search query."""
    try:
        products = await catalog.list_products()
    except CatalogUnavailableError as e:
        logger.warning(f"Catalog unavailable: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return {
        "products": [p.model_dump(mode="json") for p in filter_products(products, category, q)],
        "categories": extract_categories(products),
    }


@router.get("/categories")
async def list_categories(catalog: CatalogClient = Depends(get_catalog)):
    try:
        return {"categories": await catalog.list_categories()}
    except CatalogUnavailableError as e:
        logger.warning(f"Catalog unavailable: {e}")
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/{product_id}")
async def get_product(product_id: str, catalog: CatalogClient = Depends(get_catalog)):
    try:
        product = await catalog.get_product(parse_product_id(product_id))
    except CatalogUnavailableError as e:
        logger.warning(f"Catalog unavailable: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    if product is None:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    return product.model_dump(mode="json")
