"""Shared Jinja environment and filters for widget and page templates."""

from __future__ import annotations

import math
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "CAD": "CA$",
    "AUD": "A$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
}


def format_price(
    price: float | None, currency: str | None = None, missing: str = ""
) -> str:
    """Format ``price`` as a whole-unit amount with a currency symbol.

    Examples
    --------
    >>> format_price(1299.5, "USD")
    '$1,300'
    >>> format_price(None, "EUR", missing="N/A")
    'N/A'
    >>> format_price(20, "SEK")
    'SEK 20'
    """
    if price is None:
        return missing
    code = (currency or "USD").upper()
    amount = f"{round(price):,}"
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{code} {amount}"
    return f"{symbol}{amount}"


def star_counts(rating: float | None, out_of: int = 5) -> dict[str, int]:
    """Split ``rating`` into full, half, and empty star counts.

    Examples
    --------
    >>> star_counts(3.6)
    {'full': 3, 'half': 1, 'empty': 1}
    """
    value = max(0.0, min(float(rating or 0), float(out_of)))
    full = math.floor(value)
    half = 1 if value - full >= 0.5 else 0
    return {"full": full, "half": half, "empty": out_of - full - half}


def build_environment(templates_dir: Path | None = None) -> Environment:
    """Return an autoescaping Jinja environment with the shared filters."""
    env = Environment(
        loader=FileSystemLoader(str(templates_dir or TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml", "jinja"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["format_price"] = format_price
    env.filters["star_counts"] = star_counts
    return env


__all__ = [
    "CURRENCY_SYMBOLS",
    "TEMPLATES_DIR",
    "build_environment",
    "format_price",
    "star_counts",
]
