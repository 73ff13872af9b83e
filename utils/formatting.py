"""Output formatting utilities for the climate actions tools.

Provides reusable functions for:
- Formatting investment amounts
- Percent-of-total displays with a zero-division guard
- Count and percent strings for KPI cards
"""

from typing import Optional


def format_usd(value: Optional[float], precision: int = 0) -> str:
    """Format a USD investment amount for display.

    Args:
        value: Amount in dollars (can be None)
        precision: Decimal places for amounts under one million

    Returns:
        Formatted string like "$250,000" or "$1.2M"

    Examples:
        format_usd(250000) -> "$250,000"
        format_usd(1_200_000) -> "$1.2M"
        format_usd(None) -> "-"
    """
    if value is None:
        return "-"
    if value >= 1_000_000_000:
        return f"${value / 1_000_000_000:.1f}B"
    if value >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    return f"${value:,.{precision}f}"


def safe_percent(part: float, total: float) -> float:
    """Return ``part`` as a percentage of ``total``.

    An empty total yields 0.0 rather than raising or producing NaN, so a
    dashboard with no matching actions shows "0% of total".

    Examples:
        safe_percent(1, 4) -> 25.0
        safe_percent(0, 0) -> 0.0
    """
    if not total:
        return 0.0
    return part / total * 100.0


def format_percent(value: Optional[float], precision: int = 0) -> str:
    """Format a percentage for display.

    Examples:
        format_percent(42.5, 1) -> "42.5%"
        format_percent(0) -> "0%"
        format_percent(None) -> "-"
    """
    if value is None:
        return "-"
    return f"{value:.{precision}f}%"


def format_share(part: int, total: int) -> str:
    """Format ``part`` as a rounded share of ``total``, e.g. "33% of total"."""
    return f"{format_percent(safe_percent(part, total))} of total"


def format_count(value: Optional[int]) -> str:
    """Format a count with thousands separator.

    Examples:
        format_count(1234) -> "1,234"
        format_count(None) -> "-"
    """
    if value is None:
        return "-"
    return f"{value:,d}"
