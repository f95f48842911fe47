"""
Savings Goal Calculations

Goal-seek for the number of monthly deposits needed to reach a savings
target, using the future value of an ordinary annuity.
"""

import math
from typing import Union
from dataclasses import dataclass

from app.calculations.amortization import compound_growth, is_zero_rate, monthly_rate_from_percent
from app.calculations.sentinels import Sentinel, ceil_or
from app.calculations.series import MonthlySeries

# Upper bound on the number of months simulated for the savings chart
SAVINGS_SERIES_CAP_MONTHS = 240

# Relative slack when deciding whether a balance has reached the goal
GOAL_TOLERANCE = 1e-12


@dataclass(frozen=True)
class SavingsResult:
    """Months needed to reach a goal and the projected balance series."""

    months_required: Union[int, Sentinel]
    series: MonthlySeries

    @property
    def years_required(self) -> Union[float, Sentinel]:
        if isinstance(self.months_required, Sentinel):
            return self.months_required
        return self.months_required / 12


def months_to_goal(
    goal: float, monthly_deposit: float, annual_rate_percent: float
) -> Union[int, Sentinel]:
    """
    Smallest whole number of months of deposits whose future value reaches goal.

    Solves ``deposit * ((1 + r)^m - 1) / r >= goal`` for m in closed form.

    Args:
        goal: Savings target
        monthly_deposit: Deposit made at the end of each month
        annual_rate_percent: Expected annual return in percent

    Returns:
        Number of months, or Sentinel.UNREACHABLE if deposits never reach the goal
    """
    if monthly_deposit <= 0:
        return Sentinel.UNREACHABLE

    if goal <= 0:
        return 0

    monthly_rate = monthly_rate_from_percent(annual_rate_percent)

    if is_zero_rate(monthly_rate):
        return ceil_or(goal / monthly_deposit, Sentinel.UNREACHABLE)

    log_argument = monthly_rate * goal / monthly_deposit
    if log_argument <= -1:
        return Sentinel.UNREACHABLE

    months = ceil_or(
        math.log1p(log_argument) / math.log1p(monthly_rate), Sentinel.UNREACHABLE
    )
    if isinstance(months, Sentinel):
        return months

    # ceil() can land one month off when the goal sits exactly on a month's balance
    def reached(m: int) -> bool:
        return annuity_value(monthly_deposit, monthly_rate, m) >= goal * (1 - GOAL_TOLERANCE)

    if months > 0 and reached(months - 1):
        return months - 1
    if not reached(months):
        return months + 1
    return months


def annuity_value(monthly_deposit: float, monthly_rate: float, months: int) -> float:
    """Balance after months of end-of-month deposits into an empty account."""
    if is_zero_rate(monthly_rate):
        return monthly_deposit * months
    return monthly_deposit * compound_growth(monthly_rate, months) / monthly_rate


def savings_series(
    monthly_deposit: float, annual_rate_percent: float, months: int
) -> MonthlySeries:
    """Balance series for regular deposits starting from an empty account."""
    return MonthlySeries(
        start_balance=0.0,
        monthly_deposit=monthly_deposit,
        monthly_rate=monthly_rate_from_percent(annual_rate_percent),
        months=months,
    )


def calculate_savings_goal(
    goal: float, monthly_deposit: float, annual_rate_percent: float
) -> SavingsResult:
    """
    Goal-seek a savings plan and build its chart series.

    The series covers the months required, capped at
    SAVINGS_SERIES_CAP_MONTHS; an unreachable goal charts the full cap.
    """
    months = months_to_goal(goal, monthly_deposit, annual_rate_percent)

    if isinstance(months, Sentinel):
        series_months = SAVINGS_SERIES_CAP_MONTHS
    else:
        series_months = min(months, SAVINGS_SERIES_CAP_MONTHS)

    return SavingsResult(
        months_required=months,
        series=savings_series(monthly_deposit, annual_rate_percent, series_months),
    )
