"""
Financial Calculation Engine

Pure formula functions behind the personal finance calculators.
No function here performs I/O or keeps state between calls.
"""

from app.calculations import amortization, savings, growth, payoff, ratios, tax, currency, budget
from app.calculations.library import FinanceFormulaLibrary
from app.calculations.sentinels import Sentinel

__all__ = [
    "amortization",
    "savings",
    "growth",
    "payoff",
    "ratios",
    "tax",
    "currency",
    "budget",
    "FinanceFormulaLibrary",
    "Sentinel",
]
