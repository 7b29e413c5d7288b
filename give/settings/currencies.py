"""Built-in currencies accepted for donations."""

from __future__ import annotations

from typing import Any


def _currency(
    admin_label: str,
    symbol: str,
    *,
    position: str = "before",
    thousands: str = ",",
    decimal: str = ".",
    decimals: int = 2,
) -> dict[str, Any]:
    return {
        "admin_label": admin_label,
        "symbol": symbol,
        "setting": {
            "currency_position": position,
            "thousands_separator": thousands,
            "decimal_separator": decimal,
            "number_decimals": decimals,
        },
    }


def default_currencies() -> dict[str, dict[str, Any]]:
    """Return a fresh copy of the built-in currency map, keyed by ISO code."""
    return {
        "USD": _currency("US Dollars ($)", "&#36;"),
        "EUR": _currency("Euros (€)", "&euro;", position="after", thousands=".", decimal=","),
        "GBP": _currency("Pounds Sterling (£)", "&pound;"),
        "AUD": _currency("Australian Dollars ($)", "&#36;"),
        "BRL": _currency("Brazilian Real (R$)", "&#82;&#36;", thousands=".", decimal=","),
        "CAD": _currency("Canadian Dollars ($)", "&#36;"),
        "CHF": _currency("Swiss Franc (CHF)", "Fr", thousands="'"),
        "INR": _currency("Indian Rupee (₹)", "&#8377;"),
        "JPY": _currency("Japanese Yen (¥)", "&yen;", decimals=0),
        "MXN": _currency("Mexican Peso ($)", "&#36;"),
        "NZD": _currency("New Zealand Dollars ($)", "&#36;"),
        "SEK": _currency("Swedish Krona (kr)", "&#107;&#114;", position="after", thousands=" ", decimal=","),
        "ZAR": _currency("South African Rand (R)", "&#82;", thousands=" "),
    }


__all__ = ["default_currencies"]
