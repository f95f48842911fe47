"""
Monthly Balance Series

Lazy month-by-month simulation of a balance that compounds monthly and
receives a fixed deposit at the end of each month. Used for the savings and
investment charts.
"""

from typing import Iterator, List, Dict, NamedTuple


class SeriesPoint(NamedTuple):
    """Balance at the end of a given month."""

    month: int
    balance: float


class MonthlySeries:
    """
    Bounded, restartable sequence of (month, balance) points.

    Each iteration re-runs the recurrence
    ``balance = balance * (1 + monthly_rate) + deposit`` from the starting
    balance, yielding months 1 through ``months``. Nothing is cached, so the
    series can be iterated any number of times.
    """

    def __init__(
        self,
        start_balance: float,
        monthly_deposit: float,
        monthly_rate: float,
        months: int,
    ):
        self.start_balance = start_balance
        self.monthly_deposit = monthly_deposit
        self.monthly_rate = monthly_rate
        self.months = max(0, months)

    def __iter__(self) -> Iterator[SeriesPoint]:
        balance = self.start_balance
        for month in range(1, self.months + 1):
            balance = balance * (1 + self.monthly_rate) + self.monthly_deposit
            yield SeriesPoint(month, balance)

    def __len__(self) -> int:
        return self.months

    def __eq__(self, other) -> bool:
        if not isinstance(other, MonthlySeries):
            return NotImplemented
        return (
            self.start_balance == other.start_balance
            and self.monthly_deposit == other.monthly_deposit
            and self.monthly_rate == other.monthly_rate
            and self.months == other.months
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"MonthlySeries(start_balance={self.start_balance!r}, "
            f"monthly_deposit={self.monthly_deposit!r}, "
            f"monthly_rate={self.monthly_rate!r}, months={self.months!r})"
        )

    def final_balance(self) -> float:
        """Balance after the last month (the start balance for an empty series)."""
        balance = self.start_balance
        for point in self:
            balance = point.balance
        return balance

    def to_chart_data(self, decimals: int = 2) -> List[Dict]:
        """Materialize the series as chart rows with rounded balances."""
        return [
            {"month": point.month, "balance": round(point.balance, decimals)}
            for point in self
        ]
