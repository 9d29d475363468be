"""
Price parsing and formatting.

Prices are stored as integer cents. Input arrives as free text typed into
admin and reseller forms ("499.90", "499,90", "R$ 1.234,56") and is
converted with half-up rounding.
"""
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

_AMOUNT_RE = re.compile(r"^\d+(\.\d+)?$")


def parse_price_to_cents(value: Union[str, int, float]) -> int:
    """
    Convert a price typed by a user into integer cents.

    When a comma is present it is the decimal separator and dots are
    thousands separators (pt-BR). Otherwise a dot is the decimal separator.

    Raises ValueError for empty, non-numeric or negative input.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError("Price is required")

    if isinstance(value, int):
        if value < 0:
            raise ValueError("Price cannot be negative")
        return value * 100

    text = str(value).strip().replace("R$", "")
    text = text.replace(" ", "").replace("\u00a0", "")
    if not text:
        raise ValueError("Price is required")
    if text.startswith("-"):
        raise ValueError("Price cannot be negative")

    if "," in text:
        text = text.replace(".", "").replace(",", ".")

    if not _AMOUNT_RE.match(text):
        raise ValueError(f"Invalid price: {value!r}")

    cents = (Decimal(text) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(cents)


def format_cents(cents: int) -> str:
    """Format integer cents as Brazilian currency, e.g. 123456 -> 'R$ 1.234,56'."""
    if cents < 0:
        raise ValueError("Amount cannot be negative")
    reais, centavos = divmod(int(cents), 100)
    return "R$ " + f"{reais:,}".replace(",", ".") + f",{centavos:02d}"
