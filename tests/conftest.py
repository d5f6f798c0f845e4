"""Pytest configuration and fixtures"""
import json
import os
from decimal import Decimal
from typing import Callable, List

import httpx
import pytest

# Keep tests off the disk and off the clock
os.environ.setdefault("STOREFRONT_STORAGE", "memory")
os.environ.setdefault("CHECKOUT_STEP_DELAY", "0")

from storefront.cart import CartSnapshotStorage, CartStore, ShippingPolicy  # noqa: E402
from storefront.db import MemoryStorage  # noqa: E402
from storefront.models import Product  # noqa: E402

VALID_USERNAME = "mor_2314"
VALID_PASSWORD = "83r5^_"
VALID_TOKEN = "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.test"

CATALOG: List[dict] = [
    {
        "id": 1,
        "title": "Fjallraven - Foldsack No. 1 Backpack",
        "price": 19.99,
        "description": "Your perfect pack for everyday use and walks in the forest.",
        "category": "men's clothing",
        "image": "https://fakestoreapi.com/img/81fPKd-2AYL._AC_SL1500_.jpg",
        "rating": {"rate": 3.9, "count": 120},
    },
    {
        "id": 2,
        "title": "John Hardy Women's Legends Naga Bracelet",
        "price": 60,
        "description": "From our Legends Collection, the Naga was inspired by the mythical water dragon.",
        "category": "jewelery",
        "image": "https://fakestoreapi.com/img/71pWzhdJNwL._AC_UL640_QL65_ML3_.jpg",
        "rating": {"rate": 4.6, "count": 400},
    },
    {
        "id": 3,
        "title": "WD 2TB Elements Portable External Hard Drive",
        "price": 64.0,
        "description": "USB 3.0 and USB 2.0 compatibility, fast data transfers.",
        "category": "electronics",
        "image": "https://fakestoreapi.com/img/61IBBVJvSDL._AC_SY879_.jpg",
        "rating": {"rate": 3.3, "count": 203},
    },
    {
        "id": 4,
        "title": "Mens Casual Slim Fit",
        "price": 15.99,
        "description": "The color could be slightly different between on the screen and in practice.",
        "category": "men's clothing",
        "image": "https://fakestoreapi.com/img/71YXzeOuslL._AC_UY879_.jpg",
        "rating": {"rate": 2.1, "count": 430},
    },
]


def fake_store_api(request: httpx.Request) -> httpx.Response:
    """Minimal stand-in for fakestoreapi.com."""
    path = request.url.path

    if request.method == "GET" and path == "/products":
        return httpx.Response(200, json=CATALOG)

    if request.method == "GET" and path.startswith("/products/"):
        product_id = path.rsplit("/", 1)[1]
        match = next((p for p in CATALOG if str(p["id"]) == product_id), None)
        if match is None:
            # The real API answers unknown ids with an empty 200
            return httpx.Response(200, content=b"")
        return httpx.Response(200, json=match)

    if request.method == "POST" and path == "/auth/login":
        body = json.loads(request.content or b"{}")
        if body.get("username") == VALID_USERNAME and body.get("password") == VALID_PASSWORD:
            return httpx.Response(201, json={"token": VALID_TOKEN})
        return httpx.Response(401, text="username or password is incorrect")

    return httpx.Response(404)


@pytest.fixture
def store_api_transport() -> httpx.MockTransport:
    return httpx.MockTransport(fake_store_api)


@pytest.fixture
def http_client(store_api_transport):
    return httpx.AsyncClient(base_url="https://fakestoreapi.com", transport=store_api_transport)


@pytest.fixture
def make_product() -> Callable[..., Product]:
    """Factory for fully populated products."""
    def _make(product_id=1, price="19.99", **overrides) -> Product:
        data = {
            "id": product_id,
            "title": f"Product {product_id}",
            "price": Decimal(str(price)),
            "category": "electronics",
            "image": f"https://example.com/img/{product_id}.jpg",
            "description": f"Description of product {product_id}",
            "rating": {"rate": 4.1, "count": 259},
        }
        data.update(overrides)
        return Product.model_validate(data)

    return _make


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def cart_store(memory_storage) -> CartStore:
    store = CartStore(CartSnapshotStorage(memory_storage), ShippingPolicy())
    yield store
    store.close()


@pytest.fixture
def catalog_entries() -> List[dict]:
    """Raw product payloads served by the fake store API."""
    return CATALOG


@pytest.fixture
def credentials() -> dict:
    """Credentials the fake store API accepts."""
    return {"username": VALID_USERNAME, "password": VALID_PASSWORD}
