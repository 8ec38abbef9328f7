"""Small numeric helpers shared by the metric and analytics code."""

import math


def round_half_away(value: float, places: int = 2) -> float:
    """Round to ``places`` decimals, halves away from zero.

    ``round()`` uses banker's rounding, so 0.125 would become 0.12; ledger
    figures expect 0.13.
    """
    if not math.isfinite(value):
        return value
    scale = 10 ** places
    scaled = abs(value) * scale
    rounded = math.floor(scaled + 0.5) / scale
    return math.copysign(rounded, value) if rounded else 0.0


def trim_decimal(value: float, places: int = 2) -> str:
    """Format with fixed ``places`` then drop trailing zeros and a bare point."""
    text = f"{value:.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def parse_optional_float(value) -> float | None:
    """Return ``value`` as float, or None when missing, empty or unparseable."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None
