"""
Growth Projection Calculations

Investment and retirement balance projections with monthly compounding and
fixed monthly contributions, plus the simpler compound interest and
inflation formulas.
"""

from dataclasses import dataclass

from app.calculations.amortization import (
    compound_factor,
    compound_growth,
    is_zero_rate,
    monthly_rate_from_percent,
)
from app.calculations.series import MonthlySeries


@dataclass(frozen=True)
class InvestmentResult:
    """Projected investment balance."""

    final_balance: float
    total_contributed: float
    series: MonthlySeries

    @property
    def total_growth(self) -> float:
        return self.final_balance - self.total_contributed


def growth_series(
    initial: float,
    monthly_contribution: float,
    annual_rate_percent: float,
    term_months: int,
) -> MonthlySeries:
    """Month-by-month balances for months 1 through term_months."""
    return MonthlySeries(
        start_balance=initial,
        monthly_deposit=monthly_contribution,
        monthly_rate=monthly_rate_from_percent(annual_rate_percent),
        months=term_months,
    )


def future_value(
    initial: float,
    monthly_contribution: float,
    annual_rate_percent: float,
    term_months: int,
) -> float:
    """
    Closed-form balance after term_months.

    Equivalent to running the growth series to the end: the initial amount
    compounds for the full term and the contributions form an ordinary
    annuity.
    """
    n = max(0, term_months)
    monthly_rate = monthly_rate_from_percent(annual_rate_percent)

    if is_zero_rate(monthly_rate):
        return initial + monthly_contribution * n

    return initial * compound_factor(monthly_rate, n) + monthly_contribution * (
        compound_growth(monthly_rate, n) / monthly_rate
    )


def calculate_investment(
    initial: float,
    monthly_contribution: float,
    annual_rate_percent: float,
    term_months: int,
) -> InvestmentResult:
    """
    Project an investment with monthly contributions.

    Args:
        initial: Starting balance
        monthly_contribution: Amount added at the end of each month
        annual_rate_percent: Expected annual return in percent
        term_months: Number of months to project

    Returns:
        InvestmentResult with final balance, contributions and series
    """
    series = growth_series(
        initial, monthly_contribution, annual_rate_percent, term_months
    )

    return InvestmentResult(
        final_balance=series.final_balance(),
        total_contributed=initial + monthly_contribution * len(series),
        series=series,
    )


def compound_interest(
    principal: float,
    annual_rate_percent: float,
    periods_per_year: int,
    years: float,
) -> float:
    """Future value of a lump sum compounded periods_per_year times a year."""
    rate_per_period = annual_rate_percent / 100 / max(1, periods_per_year)
    return principal * compound_factor(rate_per_period, max(0, periods_per_year * years))


def purchasing_power(
    amount: float, annual_inflation_percent: float, years: float
) -> float:
    """Today's value of an amount after years of constant inflation."""
    return amount / compound_factor(annual_inflation_percent / 100, max(0, years))
