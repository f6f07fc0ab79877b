"""
Statistics Utilities

Shared numeric helpers for hour totals and percentages.

Usage:
    from timetracking.utils.statistics import round_half_up, percentage

    round_half_up(2.675)        # 2.68 (builtin round() gives 2.67)
    percentage(152, 160)        # 95.0
"""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round half away from zero to a fixed number of decimal places.

    The value goes through its shortest repr first, so 2.675 rounds to 2.68
    rather than following its binary approximation down to 2.67.

    Args:
        value: Number to round
        places: Decimal places to keep (default: 2)

    Returns:
        Rounded value as float
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage(numerator: float, denominator: float, places: int = 2) -> float:
    """
    Calculate numerator / denominator as a percentage rounded half-up.

    Args:
        numerator: Part
        denominator: Whole
        places: Decimal places to keep (default: 2)

    Returns:
        Percentage, or 0.0 when denominator is not positive
    """
    if denominator <= 0:
        return 0.0
    return round_half_up(numerator * 100 / denominator, places)
