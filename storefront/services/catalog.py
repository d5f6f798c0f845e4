"""
Catalog Service

Reads products from the Fake Store API and filters them for the product list.
"""
from typing import Iterable, List, Optional

import httpx
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from storefront.errors import ERROR_CATALOG_UNAVAILABLE, CatalogUnavailableError
from storefront.logging import get_logger
from storefront.models import Product, ProductId

logger = get_logger(__name__)


def http_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(httpx.TransportError),
    )


class CatalogClient:
    """
    Product catalog backed by the remote store API.

    The httpx client is owned by the caller (the application lifespan) and
    must already point at the API base URL.
    """

    def __init__(self, http_client: httpx.AsyncClient):
        self.http = http_client

    @http_retry()
    async def _get(self, path: str) -> httpx.Response:
        return await self.http.get(path)

    async def _fetch(self, path: str) -> httpx.Response:
        try:
            return await self._get(path)
        except httpx.HTTPError as e:
            logger.error(f"Catalog request {path} failed: {e}")
            raise CatalogUnavailableError(ERROR_CATALOG_UNAVAILABLE) from e

    async def list_products(self) -> List[Product]:
        response = await self._fetch("/products")
        try:
            response.raise_for_status()
            return [Product.model_validate(entry) for entry in response.json()]
        except (httpx.HTTPStatusError, ValueError, TypeError) as e:
            logger.error(f"Unexpected catalog response for /products: {e}")
            raise CatalogUnavailableError(ERROR_CATALOG_UNAVAILABLE) from e

    async def get_product(self, product_id: ProductId) -> Optional[Product]:
        """
        Fetch one product.

        Returns None on 404 and on an empty body (the API answers unknown ids
        with 200 and no content).
        """
        response = await self._fetch(f"/products/{product_id}")
        if response.status_code == 404 or not response.content.strip():
            return None
        try:
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPStatusError, ValueError) as e:
            logger.error(f"Unexpected catalog response for product {product_id}: {e}")
            raise CatalogUnavailableError(ERROR_CATALOG_UNAVAILABLE) from e
        if not data:
            return None
        try:
            return Product.model_validate(data)
        except ValidationError as e:
            logger.error(f"Malformed product {product_id} from catalog: {e}")
            raise CatalogUnavailableError(ERROR_CATALOG_UNAVAILABLE) from e

    async def list_categories(self) -> List[str]:
        """Distinct categories in the order they first appear."""
        return extract_categories(await self.list_products())


def extract_categories(products: Iterable[Product]) -> List[str]:
    return list(dict.fromkeys(product.category for product in products))


def filter_products(
    products: Iterable[Product],
    category: Optional[str] = None,
    query: Optional[str] = None,
) -> List[Product]:
    """
    Narrow a product list for display.

    ``category`` must match exactly; ``query`` is a case-insensitive
    substring searched in title and description.
    """
    result = list(products)

    if category:
        result = [p for p in result if p.category == category]

    if query:
        needle = query.lower()
        result = [
            p for p in result
            if needle in p.title.lower() or needle in p.description.lower()
        ]

    return result
