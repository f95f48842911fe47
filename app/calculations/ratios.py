"""
Ratio Calculations

Return on investment, debt-to-income and break-even analysis.
"""

from typing import Union
from dataclasses import dataclass

from app.calculations.sentinels import Sentinel, ceil_or


@dataclass(frozen=True)
class BreakEvenResult:
    """Units and revenue needed to cover fixed costs."""

    contribution_per_unit: float
    units: Union[int, Sentinel]
    revenue: Union[float, Sentinel]


def roi(gain: float, cost: float) -> Union[float, Sentinel]:
    """
    Return on investment in percent.

    Args:
        gain: Final value received from the investment
        cost: Amount invested

    Returns:
        ROI percentage, or Sentinel.UNDEFINED when cost is zero
    """
    if cost == 0:
        return Sentinel.UNDEFINED
    return (gain - cost) / cost * 100


def debt_to_income(debt_payments: float, income: float) -> Union[float, Sentinel]:
    """Monthly debt payments as a percentage of monthly income."""
    if income == 0:
        return Sentinel.UNDEFINED
    return debt_payments / income * 100


def break_even(
    fixed_costs: float, price_per_unit: float, variable_cost_per_unit: float
) -> BreakEvenResult:
    """
    Units that must be sold to cover fixed costs.

    Each unit contributes its price less its variable cost. When that
    contribution is zero or negative no volume of sales breaks even.
    """
    contribution = price_per_unit - variable_cost_per_unit

    if contribution <= 0:
        return BreakEvenResult(
            contribution_per_unit=contribution,
            units=Sentinel.UNREACHABLE,
            revenue=Sentinel.UNREACHABLE,
        )

    units = ceil_or(fixed_costs / contribution, Sentinel.UNREACHABLE)
    if isinstance(units, Sentinel):
        return BreakEvenResult(
            contribution_per_unit=contribution, units=units, revenue=units
        )

    return BreakEvenResult(
        contribution_per_unit=contribution,
        units=units,
        revenue=units * price_per_unit,
    )
