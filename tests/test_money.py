"""Tests for price parsing and formatting."""
import pytest

from app.services.money import parse_price_to_cents, format_cents


class TestParsePrice:
    @pytest.mark.parametrize("text,expected", [
        ("499.90", 49990),
        ("499,90", 49990),
        ("R$ 1.234,56", 123456),
        ("1.234,5", 123450),
        ("10", 1000),
        ("0,005", 1),
        ("0.004", 0),
        ("  49,9 ", 4990),
    ])
    def test_parses_common_formats(self, text, expected):
        assert parse_price_to_cents(text) == expected

    def test_integer_means_reais(self):
        assert parse_price_to_cents(150) == 15000

    def test_non_breaking_space_after_currency(self):
        assert parse_price_to_cents("R$ 99,90") == 9990

    @pytest.mark.parametrize("bad", ["", "   ", "abc", "1,2,3", "12a", "R$"])
    def test_rejects_garbage(self, bad):
        with pytest.raises(ValueError):
            parse_price_to_cents(bad)

    @pytest.mark.parametrize("bad", ["-10", -5, "-1,50"])
    def test_rejects_negative(self, bad):
        with pytest.raises(ValueError):
            parse_price_to_cents(bad)

    def test_rejects_none_and_bool(self):
        with pytest.raises(ValueError):
            parse_price_to_cents(None)
        with pytest.raises(ValueError):
            parse_price_to_cents(True)


class TestFormatCents:
    def test_thousands_and_decimals(self):
        assert format_cents(123456) == "R$ 1.234,56"

    def test_small_amount(self):
        assert format_cents(5) == "R$ 0,05"

    def test_large_amount(self):
        assert format_cents(100000000) == "R$ 1.000.000,00"

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            format_cents(-1)


@pytest.mark.parametrize("cents", [0, 1, 99, 100, 999999, 1000000, 10**8 - 1])
def test_formatted_amount_parses_back(cents):
    assert parse_price_to_cents(format_cents(cents)) == cents
