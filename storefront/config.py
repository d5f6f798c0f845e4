"""Application settings read from environment variables."""
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import Tuple

DEFAULT_STORE_API_URL = "https://fakestoreapi.com"
DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")

STORAGE_BACKENDS = ("file", "redis", "memory")


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.environ.get(name)
    if not raw:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _env_decimal(name: str, default: str) -> Decimal:
    raw = os.environ.get(name, default)
    try:
        value = Decimal(raw.strip())
    except InvalidOperation as e:
        raise ValueError(f"{name} must be a decimal amount, got {raw!r}") from e
    if not value.is_finite():
        raise ValueError(f"{name} must be a finite amount, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the storefront."""
    store_api_url: str = DEFAULT_STORE_API_URL
    storage_backend: str = "file"
    storage_dir: str = ".storefront"
    redis_url: str = ""
    redis_token: str = ""
    cart_storage_key: str = "cart"
    auth_token_key: str = "token"
    free_shipping_threshold: Decimal = Decimal("50.00")
    flat_shipping_fee: Decimal = Decimal("10.00")
    currency: str = "USD"
    checkout_step_delay: float = 0.5
    checkout_step_percent: int = 25
    http_timeout: float = 10.0
    cors_origins: Tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)

    def __post_init__(self):
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unknown storage backend {self.storage_backend!r}, expected one of {STORAGE_BACKENDS}"
            )
        if self.checkout_step_percent <= 0 or self.checkout_step_percent > 100:
            raise ValueError("checkout_step_percent must be between 1 and 100")
        if self.free_shipping_threshold < 0 or self.flat_shipping_fee < 0:
            raise ValueError("Shipping threshold and fee must not be negative")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment, falling back to defaults."""
        return cls(
            store_api_url=os.environ.get("STORE_API_URL", DEFAULT_STORE_API_URL),
            storage_backend=os.environ.get("STOREFRONT_STORAGE", "file").lower(),
            storage_dir=os.environ.get("STOREFRONT_STORAGE_DIR", ".storefront"),
            redis_url=os.environ.get("UPSTASH_REDIS_REST_URL", ""),
            redis_token=os.environ.get("UPSTASH_REDIS_REST_TOKEN", ""),
            cart_storage_key=os.environ.get("CART_STORAGE_KEY", "cart"),
            auth_token_key=os.environ.get("AUTH_TOKEN_KEY", "token"),
            free_shipping_threshold=_env_decimal("FREE_SHIPPING_THRESHOLD", "50.00"),
            flat_shipping_fee=_env_decimal("FLAT_SHIPPING_FEE", "10.00"),
            currency=os.environ.get("CURRENCY", "USD").upper(),
            checkout_step_delay=float(os.environ.get("CHECKOUT_STEP_DELAY", "0.5")),
            checkout_step_percent=int(os.environ.get("CHECKOUT_STEP_PERCENT", "25")),
            http_timeout=float(os.environ.get("HTTP_TIMEOUT", "10.0")),
            cors_origins=_env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings loader."""
    return Settings.from_env()
