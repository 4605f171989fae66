"""
Utility functions for safe arithmetic on optional metric values.
"""

from __future__ import annotations

__all__ = ["safe_divide", "safe_rate"]


def safe_divide(
    numerator: int | float | None,
    denominator: int | float | None,
    num_default: float = 0.0,
    den_default: float = 1.0,
) -> float:
    """
    Safely divide two numbers with None handling and zero protection.

    :param numerator: Number to divide, or None to use num_default
    :param denominator: Number to divide by, or None to use den_default
    :param num_default: Default value for numerator if None
    :param den_default: Default value for denominator if None
    :return: Division result with protection against division by zero
    """
    numerator = numerator if numerator is not None else num_default
    denominator = denominator if denominator is not None else den_default

    return numerator / (denominator or 1e-10)


def safe_rate(count: int, seconds: float | None) -> float | None:
    """
    Events per second over a window, or None when the window is empty.

    :param count: Number of events observed in the window
    :param seconds: Window length in seconds, or None if unknown
    :return: Events per second, or None if the window has no positive length
    """
    if seconds is None or seconds <= 0.0:
        return None

    return safe_divide(count, seconds)
