"""
Loan Amortization Calculations

Implements the standard fixed-payment amortization formula and the loan
variants built on it (auto loan, mortgage, student loan). The variants only
differ in how the financed principal is derived and in flat monthly add-ons.

Preconditions: principal and rates are non-negative. Callers are expected to
validate input before calling; the only coercion done here is clamping the
term to at least one month.
"""

import math
from typing import List, Dict, Optional
from datetime import date
from dataclasses import dataclass
from dateutil.relativedelta import relativedelta


@dataclass(frozen=True)
class LoanResult:
    """Monthly payment and totals for an amortizing loan."""

    principal: float
    monthly_payment: float
    total_paid: float
    total_interest: float


@dataclass(frozen=True)
class MortgageResult:
    """Mortgage payment including property tax and insurance add-ons."""

    loan: LoanResult
    monthly_property_tax: float
    monthly_insurance: float
    estimated_monthly: float


def monthly_rate_from_percent(annual_rate_percent: float) -> float:
    """Convert an annual percentage rate (e.g. 5 for 5%) to a monthly decimal rate."""
    return annual_rate_percent / 100 / 12


def is_zero_rate(rate: float) -> bool:
    """True when a periodic rate is too small to change a balance in floating point."""
    return 1 + rate == 1


def compound_factor(rate: float, periods: float) -> float:
    """
    Growth factor (1 + rate) ** periods.

    Returns math.inf instead of raising when the result does not fit in a float.
    """
    try:
        return math.exp(periods * math.log1p(rate))
    except OverflowError:
        return math.inf


def compound_growth(rate: float, periods: float) -> float:
    """
    Growth (1 + rate) ** periods - 1, without cancellation for tiny rates.

    Returns math.inf instead of raising when the result does not fit in a float.
    """
    try:
        return math.expm1(periods * math.log1p(rate))
    except OverflowError:
        return math.inf


def calculate_payment(
    principal: float, annual_rate_percent: float, term_months: int
) -> float:
    """
    Calculate the fixed monthly payment of an amortizing loan.

    Args:
        principal: Loan principal amount
        annual_rate_percent: Annual interest rate in percent (e.g., 5 for 5%)
        term_months: Number of monthly payments (coerced to at least 1)

    Returns:
        Monthly payment amount
    """
    n = max(1, term_months)
    monthly_rate = monthly_rate_from_percent(annual_rate_percent)

    if is_zero_rate(monthly_rate):
        return principal / n

    return principal * monthly_rate / -math.expm1(-n * math.log1p(monthly_rate))


def amortize(
    principal: float, annual_rate_percent: float, term_months: int
) -> LoanResult:
    """
    Calculate payment, total paid and total interest for a loan.

    Args:
        principal: Loan principal amount
        annual_rate_percent: Annual interest rate in percent
        term_months: Loan term in months (coerced to at least 1)

    Returns:
        LoanResult with monthly payment and totals
    """
    n = max(1, term_months)
    payment = calculate_payment(principal, annual_rate_percent, n)
    total_paid = payment * n

    return LoanResult(
        principal=principal,
        monthly_payment=payment,
        total_paid=total_paid,
        total_interest=total_paid - principal,
    )


def auto_loan_principal(
    price: float, trade_in: float = 0.0, down_payment: float = 0.0, fees: float = 0.0
) -> float:
    """Amount financed for a vehicle purchase: price less trade-in and down payment, plus fees."""
    return max(0.0, price - trade_in - down_payment + fees)


def calculate_auto_loan(
    price: float,
    annual_rate_percent: float,
    term_months: int,
    trade_in: float = 0.0,
    down_payment: float = 0.0,
    fees: float = 0.0,
) -> LoanResult:
    """Amortize the financed amount of a vehicle purchase."""
    financed = auto_loan_principal(price, trade_in, down_payment, fees)
    return amortize(financed, annual_rate_percent, term_months)


def calculate_mortgage(
    price: float,
    down_payment: float,
    annual_rate_percent: float,
    term_years: int,
    annual_property_tax: float = 0.0,
    annual_insurance: float = 0.0,
) -> MortgageResult:
    """
    Estimate the monthly cost of a mortgage.

    Property tax and insurance are annual amounts spread evenly over twelve
    months and added on top of the principal and interest payment.
    """
    principal = max(0.0, price - down_payment)
    loan = amortize(principal, annual_rate_percent, term_years * 12)

    monthly_tax = annual_property_tax / 12
    monthly_insurance = annual_insurance / 12

    return MortgageResult(
        loan=loan,
        monthly_property_tax=monthly_tax,
        monthly_insurance=monthly_insurance,
        estimated_monthly=loan.monthly_payment + monthly_tax + monthly_insurance,
    )


def student_loan_principal(
    balance: float, annual_rate_percent: float, grace_months: int
) -> float:
    """Balance after interest accrues (compounded monthly) through the grace period."""
    monthly_rate = monthly_rate_from_percent(annual_rate_percent)
    return balance * compound_factor(monthly_rate, max(0, grace_months))


def calculate_student_loan(
    balance: float,
    annual_rate_percent: float,
    term_months: int,
    grace_months: int = 0,
) -> LoanResult:
    """Amortize a student loan whose balance accrued interest during a grace period."""
    accrued = student_loan_principal(balance, annual_rate_percent, grace_months)
    return amortize(accrued, annual_rate_percent, term_months)


def calculate_remaining_balance(
    principal: float,
    annual_rate_percent: float,
    term_months: int,
    payments_completed: int,
) -> float:
    """Calculate remaining loan balance after N payments."""
    monthly_rate = monthly_rate_from_percent(annual_rate_percent)
    payment = calculate_payment(principal, annual_rate_percent, term_months)

    if is_zero_rate(monthly_rate):
        return max(0.0, principal - payment * payments_completed)

    balance = principal * compound_factor(monthly_rate, payments_completed) - payment * (
        compound_growth(monthly_rate, payments_completed) / monthly_rate
    )

    return max(0.0, balance)


def generate_amortization_schedule(
    principal: float,
    annual_rate_percent: float,
    term_months: int,
    start_date: Optional[date] = None,
) -> List[Dict]:
    """
    Generate a month-by-month amortization schedule.

    Args:
        principal: Loan principal amount
        annual_rate_percent: Annual interest rate in percent
        term_months: Loan term in months (coerced to at least 1)
        start_date: Date of first payment (defaults to today)

    Returns:
        List of amortization rows
    """
    n = max(1, term_months)
    schedule = []
    balance = principal
    monthly_rate = monthly_rate_from_percent(annual_rate_percent)
    payment = calculate_payment(principal, annual_rate_percent, n)

    if start_date is None:
        start_date = date.today()

    for period in range(1, n + 1):
        period_date = start_date + relativedelta(months=period - 1)

        interest = balance * monthly_rate

        if period == n:
            # Last payment absorbs rounding drift
            principal_pmt = balance
        else:
            principal_pmt = min(payment - interest, balance)

        ending_balance = balance - principal_pmt

        schedule.append(
            {
                "period": period,
                "date": period_date.isoformat(),
                "beginning_balance": round(balance, 2),
                "payment": round(principal_pmt + interest, 2),
                "interest": round(interest, 2),
                "principal": round(principal_pmt, 2),
                "ending_balance": round(max(0, ending_balance), 2),
            }
        )

        balance = max(0.0, ending_balance)

        if balance == 0:
            break

    return schedule


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over loan term."""
    return sum(row["interest"] for row in schedule)
