"""
Salary Tax Estimator

Progressive income tax computed from an ordered bracket table. The default
table is a simplified US-style sample, not a statement of any real tax code.
"""

from typing import Iterable, Optional, Tuple
from dataclasses import dataclass


@dataclass(frozen=True)
class TaxBracket:
    """A marginal rate applied to income up to an upper threshold."""

    threshold: Optional[float]  # Upper bound of the bracket, None for the top bracket
    rate: float  # Marginal rate as decimal (e.g., 0.12 for 12%)


@dataclass(frozen=True)
class TaxResult:
    """Estimated annual tax and resulting monthly take-home pay."""

    annual_gross: float
    annual_tax: float
    monthly_net: float
    effective_rate_percent: float


DEFAULT_TAX_BRACKETS: Tuple[TaxBracket, ...] = (
    TaxBracket(threshold=11000, rate=0.10),
    TaxBracket(threshold=44725, rate=0.12),
    TaxBracket(threshold=95375, rate=0.22),
    TaxBracket(threshold=None, rate=0.24),
)


def validate_brackets(brackets: Iterable[TaxBracket]) -> Tuple[TaxBracket, ...]:
    """
    Check a bracket table and return it as a tuple.

    Raises:
        ValueError: If the table is empty, thresholds are not strictly
            ascending, a rate is negative, or an open-ended bracket is not last
    """
    table = tuple(brackets)
    if not table:
        raise ValueError("At least one tax bracket required")

    previous = 0.0
    for index, bracket in enumerate(table):
        if bracket.rate < 0:
            raise ValueError(f"Negative rate in bracket {index}: {bracket.rate}")
        if bracket.threshold is None:
            if index != len(table) - 1:
                raise ValueError("Only the last tax bracket may be open-ended")
            continue
        if bracket.threshold <= previous:
            raise ValueError(
                f"Bracket thresholds must be ascending: {bracket.threshold} after {previous}"
            )
        previous = bracket.threshold

    return table


def calculate_tax(annual_gross: float, brackets: Iterable[TaxBracket]) -> float:
    """Sum the tax owed on each slice of income falling inside each bracket."""
    tax = 0.0
    lower = 0.0

    for bracket in brackets:
        upper = annual_gross if bracket.threshold is None else bracket.threshold
        if annual_gross <= lower:
            break
        taxable = min(annual_gross, upper) - lower
        if taxable > 0:
            tax += taxable * bracket.rate
        if bracket.threshold is None:
            break
        lower = bracket.threshold

    return tax


def estimate_tax(
    annual_gross: float, brackets: Iterable[TaxBracket] = DEFAULT_TAX_BRACKETS
) -> TaxResult:
    """
    Estimate annual tax and monthly net pay.

    Args:
        annual_gross: Gross annual salary
        brackets: Ordered bracket table (see validate_brackets)

    Returns:
        TaxResult with annual tax, monthly net and effective rate
    """
    tax = calculate_tax(annual_gross, brackets)
    effective = tax / annual_gross * 100 if annual_gross > 0 else 0.0

    return TaxResult(
        annual_gross=annual_gross,
        annual_tax=tax,
        monthly_net=(annual_gross - tax) / 12,
        effective_rate_percent=effective,
    )
