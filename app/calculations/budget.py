"""
Budget Planner Calculations

Totals a list of spending categories and reports each category's share.
"""

from typing import Iterable, List
from dataclasses import dataclass


@dataclass(frozen=True)
class BudgetCategory:
    """A named monthly spending line."""

    name: str
    amount: float


@dataclass(frozen=True)
class BudgetAllocation:
    """A category with its share of the total budget."""

    name: str
    amount: float
    share_percent: float


@dataclass(frozen=True)
class BudgetResult:
    """Budget total and per-category breakdown."""

    total: float
    allocations: List[BudgetAllocation]


def summarize_budget(categories: Iterable[BudgetCategory]) -> BudgetResult:
    """Total the categories and compute each one's percentage of the total."""
    items = list(categories)
    total = sum(item.amount for item in items)

    allocations = [
        BudgetAllocation(
            name=item.name,
            amount=item.amount,
            share_percent=item.amount / total * 100 if total else 0.0,
        )
        for item in items
    ]

    return BudgetResult(total=total, allocations=allocations)
