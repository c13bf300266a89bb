"""Output formatting utilities for the GDP chart.

Provides reusable functions for:
- Formatting GDP amounts for tooltips
- Formatting axis tick labels
- Formatting calendar dates for ``data-date`` attributes
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional


def format_gdp(value: Optional[float], precision: int = 1) -> str:
    """Format a GDP amount (billions of USD) for display.

    Examples:
        format_gdp(243.1) -> "$243.1 Billion"
        format_gdp(18064.7) -> "$18064.7 Billion"
        format_gdp(1234.25) -> "$1234.3 Billion"
        format_gdp(None) -> "-"

    Ties round away from zero on the exact binary value of *value*.
    """
    if value is None:
        return "-"
    rounded = Decimal(value).quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)
    return f"${rounded:f} Billion"


def format_iso_date(day: date) -> str:
    """Format a calendar date as ``YYYY-MM-DD``.

    Years below 1000 are zero-padded so the output always sorts lexically.
    """
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def format_year(day: date) -> str:
    """Format a date as its four-digit year (bottom axis ticks)."""
    return f"{day.year:04d}"


def format_tick(value: float, step: float) -> str:
    """Format a numeric axis tick with thousands separators.

    The number of decimals follows the tick step, so a step of 2000 gives
    "18,000" and a step of 0.5 gives "2.5".

    Examples:
        format_tick(18000, 2000) -> "18,000"
        format_tick(2.5, 0.5) -> "2.5"
    """
    decimals = _step_decimals(step)
    return f"{value:,.{decimals}f}"


def format_tooltip(day: date, value: float) -> str:
    """Tooltip markup for one bar: year on the first line, GDP on the second."""
    return f"Year: {day.year}<br>GDP: {format_gdp(value)}"


def format_px(value: float) -> str:
    """Format a pixel coordinate without trailing zeros ("150", "62.5")."""
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _step_decimals(step: float) -> int:
    """Decimals needed to show multiples of *step* exactly."""
    if step <= 0:
        return 0
    decimals = 0
    scaled = abs(step)
    while decimals < 12 and abs(scaled - round(scaled)) > 1e-9 * max(1.0, scaled):
        scaled *= 10
        decimals += 1
    return decimals


def format_number(value: float) -> str:
    """Print a raw number the way the source JSON would ("243.1", "2000")."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
