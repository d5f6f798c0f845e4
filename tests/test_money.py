"""Tests for money helpers"""
from decimal import Decimal

import pytest

from storefront.services.money import format_money, multiply, round_money, to_decimal


@pytest.mark.parametrize(
    "value, expected",
    [
        (19.99, Decimal("19.99")),
        ("0.10", Decimal("0.10")),
        (3, Decimal("3")),
        (None, Decimal("0")),
        ("not a number", Decimal("0")),
    ],
)
def test_to_decimal(value, expected):
    assert to_decimal(value) == expected


def test_round_money_half_up():
    assert round_money("0.005") == Decimal("0.01")
    assert round_money("39.984") == Decimal("39.98")


def test_multiply_is_exact():
    assert multiply("19.99", 2) == Decimal("39.98")


def test_format_money():
    assert format_money(Decimal("39.98")) == "$39.98"
    assert format_money(Decimal("1234.5")) == "$1,234.50"
    assert format_money(10, "EUR") == "€10.00"
    assert format_money(Decimal("12"), "XYZ") == "12.00 XYZ"
