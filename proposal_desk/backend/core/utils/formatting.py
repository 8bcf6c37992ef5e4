"""Display helpers for money and audience sizes."""

from __future__ import annotations

_CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "AED": "AED "}


def format_currency(cents: int | float, currency: str = "USD") -> str:
    """Format an amount in cents as whole currency units, e.g. ``$1,250``."""
    symbol = _CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    amount = cents / 100
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.0f}"


def format_followers(count: int) -> str:
    """Compact follower count: 1.2M, 45K, 999."""
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1_000:
        return f"{count // 1_000}K"
    return str(count)
