"""Small numeric helpers shared by the calculators."""

import math
import statistics


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp ``value`` into [low, high]."""
    return max(low, min(high, value))


def safe_number(value: float | None, default: float = 0.0) -> float:
    """Return ``default`` for None or NaN, otherwise ``value``."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return default
    return value


def ratio(numerator: float, denominator: float, decimals: int = 2) -> float | None:
    """Rounded ``numerator / denominator``, or None when the denominator is 0."""
    if not denominator:
        return None
    return round(numerator / denominator, decimals)


def percentage(part: int, whole: int) -> float | None:
    """``part`` as a percentage of ``whole`` (0-100, 2 decimals)."""
    if not whole:
        return None
    return round(clamp(part / whole * 100), 2)


def std_dev(values: list[float]) -> float | None:
    """Population standard deviation; None for fewer than two values."""
    if len(values) < 2:
        return None
    return statistics.pstdev(values)


def coefficient_of_variation(values: list[float]) -> float | None:
    """stdDev / mean; None when undefined (fewer than two values, mean 0)."""
    deviation = std_dev(values)
    if deviation is None:
        return None
    mean = statistics.fmean(values)
    if mean <= 0:
        return None
    return deviation / mean


def median(values: list[float]) -> float | None:
    if not values:
        return None
    return float(statistics.median(values))
