"""
Sentinel Values

Markers returned in place of a number when a formula has no finite answer
(a goal that can never be reached, a debt that never gets paid off, a ratio
with a zero denominator).
"""

import enum
import math
from typing import Union


class Sentinel(str, enum.Enum):
    """Non-numeric formula outcome."""

    UNREACHABLE = "unreachable"
    NEVER = "never"
    UNDEFINED = "undefined"


def is_sentinel(value) -> bool:
    """Return True if value is one of the sentinel markers."""
    return isinstance(value, Sentinel)


def from_float(value: float, sentinel: Sentinel) -> Union[float, Sentinel]:
    """Map NaN or infinite values to a sentinel, pass finite values through."""
    if not math.isfinite(value):
        return sentinel
    return value


def ceil_or(value: float, sentinel: Sentinel) -> Union[int, Sentinel]:
    """Round a month or unit count up, or return sentinel when it is not finite."""
    if not math.isfinite(value):
        return sentinel
    return math.ceil(value)


def display_value(value, decimals: int = 2) -> str:
    """
    Format a formula result for display.

    Non-convergent results render as the infinity sign; undefined ratios
    and NaN render as a dash.
    """
    if value is Sentinel.UNDEFINED:
        return "—"
    if is_sentinel(value):
        return "∞"
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "—"
    if math.isinf(value):
        return "∞"
    return f"{value:,.{decimals}f}"
