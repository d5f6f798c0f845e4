"""
Shared Dependencies for Routers

Services live on ``app.state``; they are built and torn down by the
application lifespan, never as module-level singletons.
"""
from fastapi import Depends, HTTPException, Request

from storefront.auth import AuthService
from storefront.cart import CartStore
from storefront.checkout import CheckoutSimulator
from storefront.config import Settings
from storefront.errors import ERROR_UNAUTHORIZED
from storefront.models import ProductId
from storefront.services.catalog import CatalogClient


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_cart_store(request: Request) -> CartStore:
    return request.app.state.cart_store


def get_catalog(request: Request) -> CatalogClient:
    return request.app.state.catalog


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth


def get_checkout(request: Request) -> CheckoutSimulator:
    return request.app.state.checkout


def require_auth(auth: AuthService = Depends(get_auth_service)) -> AuthService:
    """Reject the request with 401 unless a login token is stored."""
    if not auth.is_authenticated:
        raise HTTPException(status_code=401, detail=ERROR_UNAUTHORIZED)
    return auth


def parse_product_id(raw: ProductId) -> ProductId:
    """Numeric ids arrive as strings from paths and query strings."""
    if isinstance(raw, str) and raw.isdigit():
        return int(raw)
    return raw
