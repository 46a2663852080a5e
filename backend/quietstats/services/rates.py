"""
Division helpers shared by every rate and average in the engine.
"""
from collections.abc import Iterable


def safe_divide(numerator: float, denominator: float) -> float:
    """Return numerator / denominator, or 0.0 when the denominator is zero."""
    if not denominator:
        return 0.0
    return numerator / denominator


def percentage(part: float, whole: float) -> float:
    return safe_divide(part, whole) * 100.0


def mean(values: Iterable[float]) -> float:
    values = list(values)
    return safe_divide(sum(values), len(values))
