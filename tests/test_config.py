"""Tests for environment-driven settings"""
from decimal import Decimal

import pytest

from storefront.config import DEFAULT_CORS_ORIGINS, Settings


def test_defaults(monkeypatch):
    for name in ("STOREFRONT_STORAGE", "CHECKOUT_STEP_DELAY", "CORS_ORIGINS", "FREE_SHIPPING_THRESHOLD"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.storage_backend == "file"
    assert settings.free_shipping_threshold == Decimal("50.00")
    assert settings.flat_shipping_fee == Decimal("10.00")
    assert settings.checkout_step_delay == 0.5
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("STOREFRONT_STORAGE", "Redis")
    monkeypatch.setenv("FREE_SHIPPING_THRESHOLD", "75")
    monkeypatch.setenv("CURRENCY", "eur")
    monkeypatch.setenv("CHECKOUT_STEP_PERCENT", "50")
    monkeypatch.setenv("CORS_ORIGINS", "https://shop.example, ,https://admin.example")

    settings = Settings.from_env()

    assert settings.storage_backend == "redis"
    assert settings.free_shipping_threshold == Decimal("75")
    assert settings.currency == "EUR"
    assert settings.checkout_step_percent == 50
    assert settings.cors_origins == ("https://shop.example", "https://admin.example")


def test_unknown_backend_rejected():
    with pytest.raises(ValueError):
        Settings(storage_backend="sqlite")


@pytest.mark.parametrize("percent", [0, 101])
def test_step_percent_out_of_range(percent):
    with pytest.raises(ValueError):
        Settings(checkout_step_percent=percent)


@pytest.mark.parametrize("raw", ["fifty", "", "NaN", "Infinity"])
def test_unparseable_threshold_rejected(monkeypatch, raw):
    monkeypatch.setenv("FREE_SHIPPING_THRESHOLD", raw)

    with pytest.raises(ValueError, match="FREE_SHIPPING_THRESHOLD"):
        Settings.from_env()


def test_negative_amounts_rejected(monkeypatch):
    monkeypatch.setenv("FLAT_SHIPPING_FEE", "-1")

    with pytest.raises(ValueError):
        Settings.from_env()
    with pytest.raises(ValueError):
        Settings(free_shipping_threshold=Decimal("-0.01"))
