"""Display formatting and rounding shared by explanations and results."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

_WHOLE_DOLLAR = Decimal("1")


def round_dollars(value: Decimal) -> Decimal:
    """Round to whole dollars, halves away from zero."""
    return value.quantize(_WHOLE_DOLLAR, rounding=ROUND_HALF_UP)


def format_currency(value: Decimal | int) -> str:
    """Format value as whole-dollar currency string like "$18,868"."""
    return f"${Decimal(value):,.0f}"


def format_percentage(value: Decimal, places: int = 1) -> str:
    """Format a fractional rate as a percentage string (0.125 -> "12.5%")."""
    return f"{value * 100:.{places}f}%"
