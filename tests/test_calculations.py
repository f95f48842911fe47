"""
Tests for financial calculation engine.
"""

import math
import pytest
from datetime import date

from app.calculations import FinanceFormulaLibrary, Sentinel
from app.calculations.amortization import (
    amortize,
    auto_loan_principal,
    calculate_auto_loan,
    calculate_mortgage,
    calculate_payment,
    calculate_remaining_balance,
    calculate_student_loan,
    calculate_total_interest,
    generate_amortization_schedule,
    student_loan_principal,
)
from app.calculations.budget import BudgetCategory, summarize_budget
from app.calculations.currency import convert_currency, normalize_rates
from app.calculations.growth import (
    calculate_investment,
    compound_interest,
    future_value,
    growth_series,
    purchasing_power,
)
from app.calculations.payoff import calculate_payoff, months_to_payoff
from app.calculations.ratios import break_even, debt_to_income, roi
from app.calculations.savings import (
    SAVINGS_SERIES_CAP_MONTHS,
    calculate_savings_goal,
    months_to_goal,
    savings_series,
)
from app.calculations.sentinels import ceil_or, display_value, from_float, is_sentinel
from app.calculations.tax import TaxBracket, calculate_tax, estimate_tax, validate_brackets


def simulate_balance(deposit: float, annual_rate_percent: float, months: int) -> float:
    """Run the deposit recurrence directly, independent of the series class."""
    r = annual_rate_percent / 100 / 12
    balance = 0.0
    for _ in range(months):
        balance = balance * (1 + r) + deposit
    return balance


class TestAmortization:
    """Test loan amortization calculations."""

    @pytest.mark.parametrize(
        "principal,rate,term",
        [(10000, 5, 36), (250000, 6.5, 360), (1200, 0, 12), (0, 4, 60), (5000, 12, 1)],
    )
    def test_totals_are_consistent(self, principal, rate, term):
        """Test total paid is payment times term and interest is the remainder."""
        result = amortize(principal, rate, term)
        assert abs(result.total_paid - result.monthly_payment * term) < 1e-6
        assert abs(result.total_interest - (result.total_paid - principal)) < 1e-6

    def test_zero_rate_is_simple_division(self):
        """Test zero-rate amortization reduces to principal over term."""
        assert amortize(1200, 0, 12).monthly_payment == 100.0

    def test_standard_payment(self):
        """Test 5% over 3 years on 10,000."""
        result = amortize(10000, 5, 3 * 12)
        assert abs(result.monthly_payment - 299.71) < 0.01

    def test_thirty_year_payment(self):
        """Test $1M loan at 5% for 30 years."""
        payment = calculate_payment(1000000, 5, 360)
        assert abs(payment - 5368.22) < 0.01

    def test_term_coerced_to_one_month(self):
        """Test a zero term behaves like a single payment."""
        result = amortize(1200, 0, 0)
        assert result.monthly_payment == 1200.0
        assert result.total_paid == 1200.0

    def test_auto_loan_principal(self):
        """Test financed amount subtracts trade-in and down, adds fees."""
        assert auto_loan_principal(30000, 0, 3000, 500) == 27500
        assert auto_loan_principal(10000, 8000, 5000, 0) == 0.0

    def test_auto_loan_matches_plain_loan(self):
        """Test auto loan is a plain loan on the financed amount."""
        auto = calculate_auto_loan(30000, 4.5, 60, trade_in=0, down_payment=3000, fees=500)
        plain = amortize(27500, 4.5, 60)
        assert auto == plain

    def test_mortgage_add_ons(self):
        """Test tax and insurance are added after the core payment."""
        result = calculate_mortgage(350000, 70000, 4, 30, 3000, 1200)
        core = amortize(280000, 4, 360)
        assert result.loan == core
        assert result.monthly_property_tax == 250.0
        assert result.monthly_insurance == 100.0
        assert abs(result.estimated_monthly - (core.monthly_payment + 350.0)) < 1e-9

    def test_mortgage_down_payment_exceeds_price(self):
        """Test principal never goes negative."""
        result = calculate_mortgage(100000, 150000, 4, 30)
        assert result.loan.principal == 0.0
        assert result.loan.monthly_payment == 0.0

    def test_student_loan_grace_accrual(self):
        """Test interest compounds monthly through the grace period."""
        accrued = student_loan_principal(30000, 5, 6)
        assert abs(accrued - 30000 * (1 + 0.05 / 12) ** 6) < 1e-9
        assert accrued > 30000

    def test_student_loan_without_grace(self):
        """Test zero grace months equals a plain loan."""
        assert calculate_student_loan(30000, 5, 120, 0) == amortize(30000, 5, 120)

    def test_amortization_schedule_length(self):
        """Test amortization schedule has correct number of periods."""
        schedule = generate_amortization_schedule(
            principal=100000,
            annual_rate_percent=6,
            term_months=60,
            start_date=date(2025, 1, 1),
        )
        assert len(schedule) == 60

    def test_amortization_final_balance(self):
        """Test that final balance is zero and principal sums to the loan."""
        schedule = generate_amortization_schedule(
            principal=100000,
            annual_rate_percent=6,
            term_months=60,
            start_date=date(2025, 1, 1),
        )
        assert schedule[-1]["ending_balance"] == 0
        assert abs(sum(row["principal"] for row in schedule) - 100000) < 1

    def test_amortization_schedule_interest_matches_totals(self):
        """Test schedule interest agrees with the closed-form total interest."""
        schedule = generate_amortization_schedule(10000, 5, 36, start_date=date(2025, 1, 1))
        expected = amortize(10000, 5, 36).total_interest
        assert abs(calculate_total_interest(schedule) - expected) < 0.5

    def test_amortization_schedule_dates(self):
        """Test payment dates advance by calendar month."""
        schedule = generate_amortization_schedule(1200, 0, 3, start_date=date(2025, 1, 31))
        assert [row["date"] for row in schedule] == [
            "2025-01-31",
            "2025-02-28",
            "2025-03-31",
        ]

    def test_remaining_balance(self):
        """Test remaining balance at the start and end of the term."""
        assert calculate_remaining_balance(100000, 6, 60, 0) == pytest.approx(100000)
        assert calculate_remaining_balance(100000, 6, 60, 60) == pytest.approx(0, abs=1e-6)
        assert calculate_remaining_balance(1200, 0, 12, 6) == 600.0

    def test_tiny_rate_behaves_like_zero_rate(self):
        """Test a rate too small to register still divides the principal evenly."""
        assert amortize(1200, 1e-14, 12).monthly_payment == pytest.approx(100)
        assert amortize(1200, 1e-10, 12).monthly_payment == pytest.approx(100, rel=1e-9)
        assert calculate_remaining_balance(1200, 1e-10, 12, 6) == pytest.approx(600, rel=1e-9)

    def test_long_grace_period_overflows_to_infinity(self):
        """Test accrual too large for a float is infinite instead of raising."""
        assert student_loan_principal(30000, 5, 10_000_000) == math.inf
        assert calculate_student_loan(30000, 5, 120, 10_000_000).monthly_payment == math.inf


class TestSavings:
    """Test savings goal-seek."""

    def test_zero_rate_months(self):
        """Test zero rate reduces to goal over deposit, rounded up."""
        assert months_to_goal(1200, 100, 0) == 12
        assert months_to_goal(1250, 100, 0) == 13

    def test_no_deposit_is_unreachable(self):
        """Test a zero or negative deposit never reaches the goal."""
        assert months_to_goal(20000, 0, 5) is Sentinel.UNREACHABLE
        assert months_to_goal(20000, -50, 5) is Sentinel.UNREACHABLE

    def test_zero_goal(self):
        """Test an empty goal needs no months."""
        assert months_to_goal(0, 500, 5) == 0

    @pytest.mark.parametrize(
        "goal,deposit,rate",
        [(20000, 500, 5), (100000, 250, 7), (5000, 1000, 3.5), (1000000, 2000, 10)],
    )
    def test_goal_seek_matches_simulation(self, goal, deposit, rate):
        """Test month count is the first month the simulated balance reaches the goal."""
        months = months_to_goal(goal, deposit, rate)
        assert isinstance(months, int)
        assert simulate_balance(deposit, rate, months) >= goal - 1e-6
        assert simulate_balance(deposit, rate, months - 1) < goal

    def test_goal_equal_to_a_month_balance(self):
        """Test a goal landing exactly on a month's balance is reached in that month."""
        goal = simulate_balance(50, 5, 61)
        assert months_to_goal(goal, 50, 5) == 61
        assert months_to_goal(3464.4720759673296, 50, 5) == 61

    def test_tiny_rate(self):
        """Test a near-zero rate gives the zero-rate month count."""
        assert months_to_goal(1200, 100, 1e-14) == 12
        assert months_to_goal(1200, 100, 1e-10) == 12

    def test_series_length_is_capped(self):
        """Test the chart series stops at the cap for long horizons."""
        result = calculate_savings_goal(1000000, 100, 1)
        assert result.months_required > SAVINGS_SERIES_CAP_MONTHS
        assert len(result.series) == SAVINGS_SERIES_CAP_MONTHS
        assert len(list(result.series)) == SAVINGS_SERIES_CAP_MONTHS

    def test_series_covers_months_required(self):
        """Test the series ends at the goal month when under the cap."""
        result = calculate_savings_goal(20000, 500, 5)
        points = list(result.series)
        assert len(points) == result.months_required
        assert points[0].month == 1
        assert points[0].balance == 500
        assert points[-1].balance >= 20000

    def test_unreachable_series_uses_cap(self):
        """Test an unreachable goal still charts the capped horizon."""
        result = calculate_savings_goal(20000, 0, 5)
        assert result.months_required is Sentinel.UNREACHABLE
        assert result.years_required is Sentinel.UNREACHABLE
        assert len(result.series) == SAVINGS_SERIES_CAP_MONTHS

    def test_series_is_restartable(self):
        """Test iterating the series twice gives the same points."""
        series = savings_series(500, 5, 24)
        assert list(series) == list(series)

    def test_years_required(self):
        """Test months are reported as years too."""
        result = calculate_savings_goal(1200, 100, 0)
        assert result.years_required == 1.0


class TestGrowth:
    """Test investment and growth projections."""

    @pytest.mark.parametrize(
        "initial,contribution,rate,term",
        [(5000, 200, 7, 120), (0, 500, 5, 360), (10000, 0, 3, 60), (1000, 100, 0, 24)],
    )
    def test_closed_form_matches_series(self, initial, contribution, rate, term):
        """Test the closed-form future value agrees with the recurrence."""
        series_final = growth_series(initial, contribution, rate, term).final_balance()
        closed = future_value(initial, contribution, rate, term)
        assert closed == pytest.approx(series_final, rel=1e-9)

    def test_zero_term_returns_initial(self):
        """Test a zero-month projection is just the initial amount."""
        result = calculate_investment(5000, 200, 7, 0)
        assert result.final_balance == 5000
        assert len(result.series) == 0
        assert list(result.series) == []

    def test_investment_totals(self):
        """Test total contributed and growth."""
        result = calculate_investment(5000, 200, 7, 120)
        assert result.total_contributed == 5000 + 200 * 120
        assert result.total_growth == pytest.approx(result.final_balance - 29000)
        assert result.total_growth > 0

    def test_zero_rate_growth(self):
        """Test zero rate simply accumulates contributions."""
        result = calculate_investment(1000, 100, 0, 24)
        assert result.final_balance == 3400

    def test_chart_data(self):
        """Test chart rows are rounded balances per month."""
        rows = growth_series(1000, 100, 12, 2).to_chart_data()
        assert rows == [
            {"month": 1, "balance": 1110.0},
            {"month": 2, "balance": 1221.1},
        ]

    def test_compound_interest(self):
        """Test lump-sum compounding."""
        assert compound_interest(1000, 5, 12, 5) == pytest.approx(1283.36, abs=0.01)
        assert compound_interest(1000, 5, 0, 1) == 1000

    def test_tiny_rate_keeps_contributions(self):
        """Test contributions are not lost when the rate is close to zero."""
        assert future_value(0, 100, 1e-14, 12) == pytest.approx(1200)
        assert future_value(0, 100, 1e-10, 12) == pytest.approx(
            growth_series(0, 100, 1e-10, 12).final_balance(), rel=1e-9
        )

    def test_overflow_is_infinite(self):
        """Test growth too large for a float is infinite instead of raising."""
        assert compound_interest(1000, 100, 12, 1000) == math.inf
        assert future_value(1000, 100, 100, 100000) == math.inf
        assert purchasing_power(1000, 100, 100000) == 0.0

    def test_purchasing_power(self):
        """Test inflation erodes value."""
        assert purchasing_power(1000, 3, 10) == pytest.approx(744.09, abs=0.01)
        assert purchasing_power(1000, 3, 0) == 1000


class TestPayoff:
    """Test credit card payoff horizon."""

    def test_finite_payoff(self):
        """Test a payment above monthly interest pays off."""
        assert months_to_payoff(5000, 18, 200) == 32

    def test_payment_below_interest_never_pays_off(self):
        """Test a payment below the 75/month interest never pays off."""
        assert months_to_payoff(5000, 18, 50) is Sentinel.NEVER

    def test_payment_equal_to_interest_never_pays_off(self):
        """Test a payment that only covers interest never pays off."""
        assert months_to_payoff(5000, 18, 75) is Sentinel.NEVER

    def test_zero_payment(self):
        """Test a zero payment never pays off even at zero rate."""
        assert months_to_payoff(5000, 0, 0) is Sentinel.NEVER

    def test_zero_rate(self):
        """Test zero rate reduces to balance over payment."""
        assert months_to_payoff(5000, 0, 200) == 25
        assert months_to_payoff(5000, 0, 300) == 17

    def test_tiny_rate(self):
        """Test a near-zero rate gives the zero-rate month count."""
        assert months_to_payoff(1200, 1e-14, 100) == 12

    def test_result_record(self):
        """Test payoff result wraps the horizon."""
        assert calculate_payoff(5000, 18, 200).is_payable
        assert not calculate_payoff(5000, 18, 50).is_payable

    def test_payoff_matches_simulation(self):
        """Test the balance is cleared in exactly the reported month."""
        months = months_to_payoff(5000, 18, 200)
        balance = 5000.0
        for _ in range(months - 1):
            balance = balance * 1.015 - 200
        assert balance > 0
        assert balance * 1.015 - 200 <= 1e-6


class TestRatios:
    """Test ROI, DTI and break-even."""

    def test_roi(self):
        """Test ROI percentage."""
        assert roi(2000, 10000) == -80.0
        assert roi(12000, 10000) == 20.0

    def test_roi_zero_cost(self):
        """Test zero cost is undefined."""
        assert roi(gain=2000, cost=0) is Sentinel.UNDEFINED

    def test_dti(self):
        """Test debt-to-income percentage."""
        assert debt_to_income(1200, 4000) == 30.0
        assert debt_to_income(1200, 0) is Sentinel.UNDEFINED

    def test_break_even(self):
        """Test units and revenue to break even."""
        result = break_even(5000, 50, 20)
        assert result.units == 167
        assert result.revenue == 8350

    def test_break_even_zero_contribution(self):
        """Test zero contribution per unit never breaks even."""
        result = break_even(fixed_costs=5000, price_per_unit=50, variable_cost_per_unit=50)
        assert result.units is Sentinel.UNREACHABLE
        assert result.revenue is Sentinel.UNREACHABLE

    def test_break_even_tiny_contribution(self):
        """Test a unit count too large for a float is unreachable."""
        result = break_even(1e308, 1e-300, 0)
        assert result.units is Sentinel.UNREACHABLE
        assert result.revenue is Sentinel.UNREACHABLE


class TestTax:
    """Test the bracket tax estimator."""

    @pytest.mark.parametrize(
        "gross,expected",
        [(0, 0.0), (10000, 1000.0), (11000, 1100.0), (60000, 8507.5), (100000, 17400.0)],
    )
    def test_progressive_tax(self, gross, expected):
        """Test tax sums each bracket slice at its marginal rate."""
        assert calculate_tax(gross, validate_brackets(
            [
                TaxBracket(11000, 0.10),
                TaxBracket(44725, 0.12),
                TaxBracket(95375, 0.22),
                TaxBracket(None, 0.24),
            ]
        )) == pytest.approx(expected)

    def test_monthly_net(self):
        """Test monthly net is gross less tax over twelve."""
        result = estimate_tax(60000)
        assert result.annual_tax == pytest.approx(8507.5)
        assert result.monthly_net == pytest.approx((60000 - 8507.5) / 12)
        assert result.effective_rate_percent == pytest.approx(8507.5 / 600)

    def test_zero_income(self):
        """Test zero income owes nothing."""
        result = estimate_tax(0)
        assert result.annual_tax == 0
        assert result.effective_rate_percent == 0.0

    def test_capped_table(self):
        """Test income above a closed table's last threshold is untaxed."""
        brackets = validate_brackets([TaxBracket(10000, 0.1)])
        assert calculate_tax(50000, brackets) == pytest.approx(1000.0)

    def test_invalid_tables(self):
        """Test malformed bracket tables are rejected."""
        with pytest.raises(ValueError):
            validate_brackets([])
        with pytest.raises(ValueError):
            validate_brackets([TaxBracket(20000, 0.1), TaxBracket(10000, 0.2)])
        with pytest.raises(ValueError):
            validate_brackets([TaxBracket(None, 0.1), TaxBracket(10000, 0.2)])
        with pytest.raises(ValueError):
            validate_brackets([TaxBracket(10000, -0.1)])


class TestCurrency:
    """Test static-rate currency conversion."""

    def test_convert(self):
        """Test conversion through the base currency."""
        assert convert_currency(100, "USD", "EUR") == pytest.approx(92.0)
        assert convert_currency(92, "EUR", "USD") == pytest.approx(100.0)

    @pytest.mark.parametrize("source,target", [("JPY", "GBP"), ("CAD", "EUR"), ("USD", "JPY")])
    def test_round_trip(self, source, target):
        """Test converting there and back returns the original amount."""
        there = convert_currency(1234.56, source, target)
        assert convert_currency(there, target, source) == pytest.approx(1234.56)

    def test_unknown_code_defaults_to_base(self):
        """Test unknown currencies are treated as the base currency."""
        assert convert_currency(100, "XYZ", "EUR") == pytest.approx(92.0)
        assert convert_currency(100, "USD", "XYZ") == pytest.approx(100.0)

    def test_codes_are_case_insensitive(self):
        """Test lower-case codes resolve."""
        assert convert_currency(100, "usd", "eur") == pytest.approx(92.0)

    @pytest.mark.parametrize("rate", [0, -0.5, float("nan"), float("inf")])
    def test_non_positive_rates_rejected(self, rate):
        """Test a rate table with an unusable rate is refused."""
        with pytest.raises(ValueError):
            normalize_rates({"USD": 1.0, "EUR": rate})


class TestBudget:
    """Test the budget planner."""

    def test_summary(self):
        """Test total and category shares."""
        result = summarize_budget(
            [
                BudgetCategory("Rent/Mortgage", 1200),
                BudgetCategory("Food", 400),
                BudgetCategory("Transport", 150),
            ]
        )
        assert result.total == 1750
        assert [a.name for a in result.allocations] == ["Rent/Mortgage", "Food", "Transport"]
        assert sum(a.share_percent for a in result.allocations) == pytest.approx(100.0)
        assert result.allocations[1].share_percent == pytest.approx(400 / 1750 * 100)

    def test_empty_budget(self):
        """Test an empty or all-zero budget has zero shares."""
        assert summarize_budget([]).total == 0
        result = summarize_budget([BudgetCategory("Food", 0)])
        assert result.allocations[0].share_percent == 0.0


class TestSentinels:
    """Test sentinel helpers."""

    def test_sentinels_are_strings(self):
        """Test sentinels compare equal to their display names."""
        assert Sentinel.NEVER == "never"
        assert Sentinel.UNREACHABLE.value == "unreachable"
        assert is_sentinel(Sentinel.UNDEFINED)
        assert not is_sentinel(12.5)

    def test_from_float(self):
        """Test non-finite values become sentinels."""
        assert from_float(math.inf, Sentinel.NEVER) is Sentinel.NEVER
        assert from_float(math.nan, Sentinel.UNDEFINED) is Sentinel.UNDEFINED
        assert from_float(3.5, Sentinel.NEVER) == 3.5

    def test_ceil_or(self):
        """Test counts round up and non-finite counts become sentinels."""
        assert ceil_or(12.2, Sentinel.NEVER) == 13
        assert ceil_or(12.0, Sentinel.NEVER) == 12
        assert ceil_or(math.inf, Sentinel.NEVER) is Sentinel.NEVER
        assert ceil_or(math.nan, Sentinel.UNREACHABLE) is Sentinel.UNREACHABLE

    def test_display_value(self):
        """Test formatting for the presentation layer."""
        assert display_value(Sentinel.NEVER) == "∞"
        assert display_value(Sentinel.UNDEFINED) == "—"
        assert display_value(math.nan) == "—"
        assert display_value(167) == "167"
        assert display_value(8350.0) == "8,350.00"


class TestFormulaLibrary:
    """Test the configured formula facade."""

    def test_defaults(self, library):
        """Test default tables are loaded."""
        assert library.currency_rates["EUR"] == 0.92
        assert len(library.tax_brackets) == 4

    def test_injected_tables(self):
        """Test custom tables replace the defaults without changing formulas."""
        library = FinanceFormulaLibrary(
            tax_brackets=[TaxBracket(None, 0.5)],
            currency_rates={"usd": 1, "chf": 0.9},
        )
        assert library.tax(1000).annual_tax == 500
        assert library.convert_currency(100, "USD", "CHF") == pytest.approx(90.0)

    def test_tables_are_read_only(self, library):
        """Test configuration cannot be mutated through the library."""
        with pytest.raises(TypeError):
            library.currency_rates["USD"] = 2.0
        assert isinstance(library.tax_brackets, tuple)

    def test_malformed_brackets_rejected(self):
        """Test construction fails fast on a bad bracket table."""
        with pytest.raises(ValueError):
            FinanceFormulaLibrary(tax_brackets=[TaxBracket(None, 0.1), TaxBracket(5, 0.2)])

    def test_invalid_currency_rates_rejected(self):
        """Test construction fails fast on a zero or negative exchange rate."""
        with pytest.raises(ValueError):
            FinanceFormulaLibrary(currency_rates={"USD": 1, "EUR": -1})
        with pytest.raises(ValueError):
            FinanceFormulaLibrary(currency_rates={"USD": 0})

    def test_idempotent(self, library):
        """Test identical calls give identical results."""
        assert library.loan(10000, 5, 36) == library.loan(10000, 5, 36)
        assert library.savings_goal(20000, 500, 5) == library.savings_goal(20000, 500, 5)
        assert library.investment(5000, 200, 7, 120) == library.investment(5000, 200, 7, 120)
        assert library.payoff(5000, 18, 200) == library.payoff(5000, 18, 200)
        assert library.break_even(5000, 50, 20) == library.break_even(5000, 50, 20)
        assert library.tax(60000) == library.tax(60000)

    def test_delegation(self, library):
        """Test facade methods match the module functions."""
        assert library.mortgage(350000, 70000, 4, 30, 3000, 1200) == calculate_mortgage(
            350000, 70000, 4, 30, 3000, 1200
        )
        assert library.future_value(5000, 200, 7, 120) == future_value(5000, 200, 7, 120)
        assert library.roi(2000, 10000) == -80.0
        assert library.debt_to_income(1200, 4000) == 30.0
        assert library.budget([BudgetCategory("Food", 100)]).total == 100
        schedule = library.amortization_schedule(12000, 6, 12)
        assert library.total_interest(schedule) == calculate_total_interest(schedule)
        assert library.remaining_balance(100000, 6, 60, 24) == calculate_remaining_balance(
            100000, 6, 60, 24
        )
