"""
Storefront - Main FastAPI Application

Single entry point for the auth, catalog and cart API. The lifespan builds
every service once at startup and releases them at shutdown.
"""
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront import __version__
from storefront.auth import AuthService
from storefront.cart import CartSnapshotStorage, CartStore, ShippingPolicy
from storefront.checkout import CheckoutSimulator
from storefront.config import Settings, get_settings
from storefront.db import LocalStorage, get_storage
from storefront.logging import get_logger
from storefront.routers import api_router
from storefront.services.catalog import CatalogClient

logger = get_logger(__name__)


def _build_http_client(settings: Settings, transport: Optional[httpx.AsyncBaseTransport]) -> httpx.AsyncClient:
    """Shared client for the store API with bounded timeouts."""
    return httpx.AsyncClient(
        base_url=settings.store_api_url,
        timeout=httpx.Timeout(settings.http_timeout, connect=5.0),
        limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
        transport=transport,
    )


def create_app(
    settings: Optional[Settings] = None,
    *,
    storage: Optional[LocalStorage] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the application.

    ``storage`` and ``transport`` replace the configured storage backend and
    the network transport of the store API client (used by tests).
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        backend = storage if storage is not None else get_storage(settings)
        http_client = _build_http_client(settings, transport)

        app.state.settings = settings
        app.state.cart_store = CartStore(
            CartSnapshotStorage(backend, key=settings.cart_storage_key),
            ShippingPolicy(settings.free_shipping_threshold, settings.flat_shipping_fee),
        )
        app.state.checkout = CheckoutSimulator(
            app.state.cart_store,
            step_delay=settings.checkout_step_delay,
            step_percent=settings.checkout_step_percent,
        )
        app.state.catalog = CatalogClient(http_client)
        app.state.auth = AuthService(http_client, backend, token_key=settings.auth_token_key)
        logger.info(f"Storefront started (API {settings.store_api_url}, storage {settings.storage_backend})")
        try:
            yield
        finally:
            # Shutdown
            app.state.cart_store.close()
            await http_client.aclose()
            logger.info("Storefront stopped")

    app = FastAPI(
        title="Storefront",
        description="Product catalog, auth gate and persistent shopping cart",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "ok", "service": "storefront"}

    return app


app = create_app()
