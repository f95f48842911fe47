"""
Financial calculation API endpoints.

These endpoints accept inputs and return calculated results. The presentation
layer calls them whenever an input changes. Request models are the single
place where input is validated; the formulas themselves assume clean input.
"""

import logging
from datetime import date
from typing import List, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from app.calculations import FinanceFormulaLibrary, Sentinel
from app.calculations.budget import BudgetCategory
from app.calculations.sentinels import from_float
from app.api.dependencies import get_library

logger = logging.getLogger(__name__)

router = APIRouter()

# A figure too large for a float is reported as undefined rather than as Infinity
Amount = Union[float, Sentinel]


def _finite(value: float) -> Amount:
    return from_float(value, Sentinel.UNDEFINED)


class CalculatorInput(BaseModel):
    """Base for request models: rejects NaN and infinite numbers."""

    model_config = ConfigDict(allow_inf_nan=False)


class SeriesPointOut(BaseModel):
    """One chart point."""

    month: int
    balance: Amount


# Loans


class LoanInput(CalculatorInput):
    """Input for a generic amortizing loan."""

    principal: float = Field(..., ge=0)
    annual_rate_percent: float = Field(..., ge=0)
    term_months: int = Field(..., ge=1)


class LoanResponse(BaseModel):
    """Monthly payment and totals."""

    principal: Amount
    monthly_payment: Amount
    total_paid: Amount
    total_interest: Amount


def _loan_response(result) -> LoanResponse:
    return LoanResponse(
        principal=_finite(result.principal),
        monthly_payment=_finite(result.monthly_payment),
        total_paid=_finite(result.total_paid),
        total_interest=_finite(result.total_interest),
    )


@router.post("/loan", response_model=LoanResponse)
async def calculate_loan(
    inputs: LoanInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Calculate the monthly payment of a loan."""
    logger.debug(f"Loan calculation: {inputs}")
    result = library.loan(inputs.principal, inputs.annual_rate_percent, inputs.term_months)
    return _loan_response(result)


class AutoLoanInput(CalculatorInput):
    """Input for an auto loan."""

    price: float = Field(..., ge=0)
    trade_in: float = Field(0.0, ge=0)
    down_payment: float = Field(0.0, ge=0)
    fees: float = Field(0.0, ge=0)
    annual_rate_percent: float = Field(..., ge=0)
    term_months: int = Field(..., ge=1)


@router.post("/auto-loan", response_model=LoanResponse)
async def calculate_auto_loan(
    inputs: AutoLoanInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Calculate the monthly payment on the financed amount of a vehicle."""
    logger.debug(f"Auto loan calculation: {inputs}")
    result = library.auto_loan(
        price=inputs.price,
        annual_rate_percent=inputs.annual_rate_percent,
        term_months=inputs.term_months,
        trade_in=inputs.trade_in,
        down_payment=inputs.down_payment,
        fees=inputs.fees,
    )
    return _loan_response(result)


class MortgageInput(CalculatorInput):
    """Input for a mortgage estimate."""

    price: float = Field(..., ge=0)
    down_payment: float = Field(0.0, ge=0)
    annual_rate_percent: float = Field(..., ge=0)
    term_years: int = Field(..., ge=1)
    annual_property_tax: float = Field(0.0, ge=0)
    annual_insurance: float = Field(0.0, ge=0)


class MortgageResponse(BaseModel):
    """Mortgage payment breakdown."""

    loan: LoanResponse
    monthly_property_tax: float
    monthly_insurance: float
    estimated_monthly: Amount


@router.post("/mortgage", response_model=MortgageResponse)
async def calculate_mortgage(
    inputs: MortgageInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Estimate monthly mortgage cost including tax and insurance."""
    logger.debug(f"Mortgage calculation: {inputs}")
    result = library.mortgage(
        price=inputs.price,
        down_payment=inputs.down_payment,
        annual_rate_percent=inputs.annual_rate_percent,
        term_years=inputs.term_years,
        annual_property_tax=inputs.annual_property_tax,
        annual_insurance=inputs.annual_insurance,
    )
    return MortgageResponse(
        loan=_loan_response(result.loan),
        monthly_property_tax=result.monthly_property_tax,
        monthly_insurance=result.monthly_insurance,
        estimated_monthly=_finite(result.estimated_monthly),
    )


class StudentLoanInput(CalculatorInput):
    """Input for a student loan with a grace period."""

    balance: float = Field(..., ge=0)
    annual_rate_percent: float = Field(..., ge=0)
    term_months: int = Field(..., ge=1)
    grace_months: int = Field(0, ge=0)


@router.post("/student-loan", response_model=LoanResponse)
async def calculate_student_loan(
    inputs: StudentLoanInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Calculate repayment after interest accrues through the grace period."""
    logger.debug(f"Student loan calculation: {inputs}")
    result = library.student_loan(
        inputs.balance, inputs.annual_rate_percent, inputs.term_months, inputs.grace_months
    )
    return _loan_response(result)


class AmortizationInput(CalculatorInput):
    """Input for an amortization schedule."""

    principal: float = Field(..., ge=0)
    annual_rate_percent: float = Field(..., ge=0)
    term_months: int = Field(..., ge=1, le=1200)
    start_date: Optional[date] = None
    payments_completed: int = Field(0, ge=0, le=1200)


@router.post("/amortization")
async def calculate_amortization(
    inputs: AmortizationInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Generate loan amortization schedule."""
    schedule = library.amortization_schedule(
        principal=inputs.principal,
        annual_rate_percent=inputs.annual_rate_percent,
        term_months=inputs.term_months,
        start_date=inputs.start_date,
    )

    return {
        "schedule": schedule,
        "total_interest": library.total_interest(schedule),
        "total_principal": sum(row["principal"] for row in schedule),
        "remaining_balance": library.remaining_balance(
            inputs.principal,
            inputs.annual_rate_percent,
            inputs.term_months,
            inputs.payments_completed,
        ),
    }


# Savings and growth


class SavingsInput(CalculatorInput):
    """Input for a savings goal."""

    goal: float = Field(..., ge=0)
    monthly_deposit: float = Field(..., ge=0)
    annual_rate_percent: float = Field(..., ge=0)


class SavingsResponse(BaseModel):
    """Months to goal and chart series."""

    months_required: Union[int, Sentinel]
    years_required: Union[float, Sentinel]
    series: List[SeriesPointOut]


@router.post("/savings", response_model=SavingsResponse)
async def calculate_savings(
    inputs: SavingsInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Estimate how long regular deposits take to reach a goal."""
    result = library.savings_goal(
        inputs.goal, inputs.monthly_deposit, inputs.annual_rate_percent
    )
    if isinstance(result.months_required, Sentinel):
        logger.info(f"Savings goal {inputs.goal} unreachable with deposit {inputs.monthly_deposit}")

    return SavingsResponse(
        months_required=result.months_required,
        years_required=result.years_required,
        series=[
            SeriesPointOut(month=row["month"], balance=_finite(row["balance"]))
            for row in result.series.to_chart_data()
        ],
    )


class InvestmentInput(CalculatorInput):
    """Input for an investment projection."""

    initial: float = Field(..., ge=0)
    monthly_contribution: float = Field(0.0, ge=0)
    annual_rate_percent: float = Field(..., ge=0)
    term_months: int = Field(..., ge=0, le=1200)


class InvestmentResponse(BaseModel):
    """Projected balance and chart series."""

    final_balance: Amount
    total_contributed: Amount
    total_growth: Amount
    series: List[SeriesPointOut]


@router.post("/investment", response_model=InvestmentResponse)
async def calculate_investment(
    inputs: InvestmentInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Project investment growth with monthly contributions."""
    logger.debug(f"Investment calculation: {inputs}")
    result = library.investment(
        inputs.initial,
        inputs.monthly_contribution,
        inputs.annual_rate_percent,
        inputs.term_months,
    )
    return InvestmentResponse(
        final_balance=_finite(result.final_balance),
        total_contributed=_finite(result.total_contributed),
        total_growth=_finite(result.total_growth),
        series=[
            SeriesPointOut(month=row["month"], balance=_finite(row["balance"]))
            for row in result.series.to_chart_data()
        ],
    )


class CompoundInterestInput(CalculatorInput):
    """Input for lump-sum compound interest."""

    principal: float = Field(..., ge=0)
    annual_rate_percent: float = Field(..., ge=0)
    periods_per_year: int = Field(12, ge=1)
    years: float = Field(..., ge=0)


@router.post("/compound-interest")
async def calculate_compound_interest(
    inputs: CompoundInterestInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Future value of a lump sum."""
    future = library.compound_interest(
        inputs.principal, inputs.annual_rate_percent, inputs.periods_per_year, inputs.years
    )
    return {
        "future_value": _finite(future),
        "interest_earned": _finite(future - inputs.principal),
    }


class InflationInput(CalculatorInput):
    """Input for purchasing power after inflation."""

    amount: float = Field(..., ge=0)
    annual_inflation_percent: float = Field(..., ge=0)
    years: float = Field(..., ge=0)


@router.post("/inflation")
async def calculate_inflation(
    inputs: InflationInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Value of an amount in today's money after years of inflation."""
    value = library.purchasing_power(
        inputs.amount, inputs.annual_inflation_percent, inputs.years
    )
    return {"purchasing_power": value, "loss": inputs.amount - value}


# Debt and ratios


class PayoffInput(CalculatorInput):
    """Input for credit card payoff."""

    balance: float = Field(..., gt=0)
    annual_rate_percent: float = Field(..., ge=0)
    monthly_payment: float = Field(..., gt=0)


class PayoffResponse(BaseModel):
    """Payoff horizon."""

    months_to_payoff: Union[int, Sentinel]


@router.post("/payoff", response_model=PayoffResponse)
async def calculate_payoff(
    inputs: PayoffInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Months of fixed payments needed to clear a card balance."""
    result = library.payoff(inputs.balance, inputs.annual_rate_percent, inputs.monthly_payment)
    if not result.is_payable:
        logger.info(
            f"Payment {inputs.monthly_payment} never pays off balance {inputs.balance}"
        )
    return PayoffResponse(months_to_payoff=result.months_to_payoff)


class ROIInput(CalculatorInput):
    """Input for return on investment."""

    gain: float
    cost: float = Field(..., ge=0)


class RatioResponse(BaseModel):
    """Percentage or undefined."""

    percent: Union[float, Sentinel]


@router.post("/roi", response_model=RatioResponse)
async def calculate_roi(
    inputs: ROIInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Return on investment in percent."""
    percent = library.roi(inputs.gain, inputs.cost)
    if not isinstance(percent, Sentinel):
        percent = _finite(percent)
    return RatioResponse(percent=percent)


class DTIInput(CalculatorInput):
    """Input for debt-to-income ratio."""

    monthly_debt: float = Field(..., ge=0)
    monthly_income: float = Field(..., ge=0)


@router.post("/dti", response_model=RatioResponse)
async def calculate_dti(
    inputs: DTIInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Debt payments as a percentage of income."""
    percent = library.debt_to_income(inputs.monthly_debt, inputs.monthly_income)
    if not isinstance(percent, Sentinel):
        percent = _finite(percent)
    return RatioResponse(percent=percent)


class BreakEvenInput(CalculatorInput):
    """Input for break-even analysis."""

    fixed_costs: float = Field(..., ge=0)
    price_per_unit: float = Field(..., ge=0)
    variable_cost_per_unit: float = Field(..., ge=0)


class BreakEvenResponse(BaseModel):
    """Units and revenue to break even."""

    contribution_per_unit: float
    units: Union[int, Sentinel]
    revenue: Amount


@router.post("/break-even", response_model=BreakEvenResponse)
async def calculate_break_even(
    inputs: BreakEvenInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Units and revenue needed to cover fixed costs."""
    result = library.break_even(
        inputs.fixed_costs, inputs.price_per_unit, inputs.variable_cost_per_unit
    )
    return BreakEvenResponse(
        contribution_per_unit=result.contribution_per_unit,
        units=result.units,
        revenue=result.revenue if isinstance(result.revenue, Sentinel) else _finite(result.revenue),
    )


# Table-driven calculators


class TaxInput(CalculatorInput):
    """Input for the salary tax estimator."""

    annual_gross: float = Field(..., ge=0)


class TaxResponse(BaseModel):
    """Estimated tax and take-home pay."""

    annual_gross: float
    annual_tax: float
    monthly_net: float
    effective_rate_percent: float


@router.post("/tax", response_model=TaxResponse)
async def calculate_tax(
    inputs: TaxInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Estimate annual tax from the configured bracket table."""
    result = library.tax(inputs.annual_gross)
    return TaxResponse(
        annual_gross=result.annual_gross,
        annual_tax=result.annual_tax,
        monthly_net=result.monthly_net,
        effective_rate_percent=result.effective_rate_percent,
    )


class CurrencyInput(CalculatorInput):
    """Input for currency conversion."""

    amount: float = Field(..., ge=0)
    from_currency: str = Field("USD", min_length=1)
    to_currency: str = Field("EUR", min_length=1)


class CurrencyResponse(BaseModel):
    """Converted amount."""

    amount: float
    from_currency: str
    to_currency: str
    converted: Amount


@router.post("/currency", response_model=CurrencyResponse)
async def calculate_currency(
    inputs: CurrencyInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Convert between currencies using the configured static rates."""
    rates = library.currency_rates
    for code in (inputs.from_currency, inputs.to_currency):
        if code.upper() not in rates:
            logger.warning(f"Unknown currency {code}, treating it as the base currency")

    return CurrencyResponse(
        amount=inputs.amount,
        from_currency=inputs.from_currency.upper(),
        to_currency=inputs.to_currency.upper(),
        converted=_finite(
            library.convert_currency(inputs.amount, inputs.from_currency, inputs.to_currency)
        ),
    )


@router.get("/currencies")
async def list_currencies(library: FinanceFormulaLibrary = Depends(get_library)):
    """List the configured currency codes and their rates."""
    return {"rates": dict(library.currency_rates)}


class BudgetCategoryInput(CalculatorInput):
    """A spending category."""

    name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)


class BudgetInput(CalculatorInput):
    """Input for the budget planner."""

    categories: List[BudgetCategoryInput]


class BudgetAllocationOut(BaseModel):
    """Category share of the total."""

    name: str
    amount: float
    share_percent: float


class BudgetResponse(BaseModel):
    """Budget total and breakdown."""

    total: Amount
    allocations: List[BudgetAllocationOut]


@router.post("/budget", response_model=BudgetResponse)
async def calculate_budget(
    inputs: BudgetInput, library: FinanceFormulaLibrary = Depends(get_library)
):
    """Total a monthly budget and break it down by category."""
    result = library.budget(
        BudgetCategory(name=c.name, amount=c.amount) for c in inputs.categories
    )
    return BudgetResponse(
        total=_finite(result.total),
        allocations=[
            BudgetAllocationOut(name=a.name, amount=a.amount, share_percent=a.share_percent)
            for a in result.allocations
        ],
    )
