"""
Credit Card Payoff Calculations

Number of fixed monthly payments needed to clear a revolving balance.
"""

import math
from typing import Union
from dataclasses import dataclass

from app.calculations.amortization import is_zero_rate, monthly_rate_from_percent
from app.calculations.sentinels import Sentinel, ceil_or


@dataclass(frozen=True)
class PayoffResult:
    """Payoff horizon for a balance."""

    months_to_payoff: Union[int, Sentinel]

    @property
    def is_payable(self) -> bool:
        return not isinstance(self.months_to_payoff, Sentinel)


def months_to_payoff(
    balance: float, annual_rate_percent: float, monthly_payment: float
) -> Union[int, Sentinel]:
    """
    Months of fixed payments needed to clear a balance.

    Args:
        balance: Current balance
        annual_rate_percent: Annual interest rate in percent
        monthly_payment: Fixed payment made each month

    Returns:
        Number of months, or Sentinel.NEVER if the payment does not exceed
        the interest accruing each month
    """
    monthly_rate = monthly_rate_from_percent(annual_rate_percent)
    monthly_interest = balance * monthly_rate

    if monthly_payment <= 0 or monthly_payment <= monthly_interest:
        return Sentinel.NEVER

    if is_zero_rate(monthly_rate):
        return ceil_or(balance / monthly_payment, Sentinel.NEVER)

    months = -math.log1p(-monthly_interest / monthly_payment) / math.log1p(monthly_rate)

    return ceil_or(months, Sentinel.NEVER)


def calculate_payoff(
    balance: float, annual_rate_percent: float, monthly_payment: float
) -> PayoffResult:
    """Payoff horizon wrapped in a result record."""
    return PayoffResult(
        months_to_payoff=months_to_payoff(balance, annual_rate_percent, monthly_payment)
    )
