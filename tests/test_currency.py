import pytest

from app.models.enums import Currency
from app.utils.currency import convert_currency, make_converter

RATES = {"USD": 1.08, "GBP": 0.85}


def test_same_currency_is_unchanged():
    assert convert_currency(100, "EUR", "EUR", RATES) == 100


def test_empty_source_is_unchanged():
    assert convert_currency(100, None, "EUR", RATES) == 100
    assert convert_currency(100, "", "EUR", RATES) == 100


def test_divides_by_base_to_target_rate():
    assert convert_currency(108, "USD", "EUR", RATES) == pytest.approx(100)


def test_missing_rate_returns_value_unconverted():
    assert convert_currency(100, "CHF", "EUR", RATES) == 100
    assert convert_currency(100, "USD", "EUR", None) == 100


def test_accepts_enum_members():
    assert convert_currency(85, Currency.GBP, Currency.EUR, RATES) == pytest.approx(100)


def test_make_converter_binds_base_and_rates():
    convert = make_converter("EUR", RATES)
    assert convert(216, "USD") == pytest.approx(200)
    assert convert(50) == 50
