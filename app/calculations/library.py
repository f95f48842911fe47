"""
Finance Formula Library

Single entry point over the calculator formulas. Rate and bracket tables are
supplied when the library is built and are never mutated afterwards, so a
different data source can be swapped in without touching any formula.
"""

from typing import Iterable, List, Mapping, Optional, Union
from datetime import date

from app.calculations import amortization, budget, currency, growth, payoff, ratios, savings, tax
from app.calculations.budget import BudgetCategory
from app.calculations.sentinels import Sentinel
from app.calculations.tax import TaxBracket


class FinanceFormulaLibrary:
    """Stateless calculator facade bound to immutable configuration tables."""

    def __init__(
        self,
        tax_brackets: Optional[Iterable[TaxBracket]] = None,
        currency_rates: Optional[Mapping[str, float]] = None,
    ):
        self._tax_brackets = tax.validate_brackets(
            tax_brackets if tax_brackets is not None else tax.DEFAULT_TAX_BRACKETS
        )
        self._currency_rates = currency.normalize_rates(
            currency_rates if currency_rates is not None else currency.DEFAULT_CURRENCY_RATES
        )

    @property
    def tax_brackets(self):
        return self._tax_brackets

    @property
    def currency_rates(self) -> Mapping[str, float]:
        return self._currency_rates

    # Loans

    def loan(self, principal: float, annual_rate_percent: float, term_months: int):
        return amortization.amortize(principal, annual_rate_percent, term_months)

    def auto_loan(
        self,
        price: float,
        annual_rate_percent: float,
        term_months: int,
        trade_in: float = 0.0,
        down_payment: float = 0.0,
        fees: float = 0.0,
    ):
        return amortization.calculate_auto_loan(
            price, annual_rate_percent, term_months, trade_in, down_payment, fees
        )

    def mortgage(
        self,
        price: float,
        down_payment: float,
        annual_rate_percent: float,
        term_years: int,
        annual_property_tax: float = 0.0,
        annual_insurance: float = 0.0,
    ):
        return amortization.calculate_mortgage(
            price,
            down_payment,
            annual_rate_percent,
            term_years,
            annual_property_tax,
            annual_insurance,
        )

    def student_loan(
        self,
        balance: float,
        annual_rate_percent: float,
        term_months: int,
        grace_months: int = 0,
    ):
        return amortization.calculate_student_loan(
            balance, annual_rate_percent, term_months, grace_months
        )

    def amortization_schedule(
        self,
        principal: float,
        annual_rate_percent: float,
        term_months: int,
        start_date: Optional[date] = None,
    ) -> List[dict]:
        return amortization.generate_amortization_schedule(
            principal, annual_rate_percent, term_months, start_date
        )

    def total_interest(self, schedule: List[dict]) -> float:
        return amortization.calculate_total_interest(schedule)

    def remaining_balance(
        self,
        principal: float,
        annual_rate_percent: float,
        term_months: int,
        payments_completed: int,
    ) -> float:
        return amortization.calculate_remaining_balance(
            principal, annual_rate_percent, term_months, payments_completed
        )

    # Savings and growth

    def savings_goal(self, goal: float, monthly_deposit: float, annual_rate_percent: float):
        return savings.calculate_savings_goal(goal, monthly_deposit, annual_rate_percent)

    def investment(
        self,
        initial: float,
        monthly_contribution: float,
        annual_rate_percent: float,
        term_months: int,
    ):
        return growth.calculate_investment(
            initial, monthly_contribution, annual_rate_percent, term_months
        )

    def future_value(
        self,
        initial: float,
        monthly_contribution: float,
        annual_rate_percent: float,
        term_months: int,
    ) -> float:
        return growth.future_value(
            initial, monthly_contribution, annual_rate_percent, term_months
        )

    def compound_interest(
        self,
        principal: float,
        annual_rate_percent: float,
        periods_per_year: int,
        years: float,
    ) -> float:
        return growth.compound_interest(
            principal, annual_rate_percent, periods_per_year, years
        )

    def purchasing_power(
        self, amount: float, annual_inflation_percent: float, years: float
    ) -> float:
        return growth.purchasing_power(amount, annual_inflation_percent, years)

    # Debt and ratios

    def payoff(self, balance: float, annual_rate_percent: float, monthly_payment: float):
        return payoff.calculate_payoff(balance, annual_rate_percent, monthly_payment)

    def roi(self, gain: float, cost: float) -> Union[float, Sentinel]:
        return ratios.roi(gain, cost)

    def debt_to_income(self, debt_payments: float, income: float) -> Union[float, Sentinel]:
        return ratios.debt_to_income(debt_payments, income)

    def break_even(
        self, fixed_costs: float, price_per_unit: float, variable_cost_per_unit: float
    ):
        return ratios.break_even(fixed_costs, price_per_unit, variable_cost_per_unit)

    # Table-driven calculators

    def tax(self, annual_gross: float):
        return tax.estimate_tax(annual_gross, self._tax_brackets)

    def convert_currency(self, amount: float, from_code: str, to_code: str) -> float:
        return currency.convert_currency(amount, from_code, to_code, self._currency_rates)

    def budget(self, categories: Iterable[BudgetCategory]):
        return budget.summarize_budget(categories)
