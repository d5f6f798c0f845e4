"""HTTP routers for the storefront API."""
from fastapi import APIRouter

from .auth import router as auth_router
from .cart import router as cart_router
from .products import router as products_router

api_router = APIRouter(prefix="/api")
api_router.include_router(auth_router)
api_router.include_router(products_router)
api_router.include_router(cart_router)

__all__ = ["api_router"]
