"""
Shared API dependencies.
"""

import logging
from functools import lru_cache

from app.calculations import FinanceFormulaLibrary
from app.calculations.tax import TaxBracket
from app.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_library() -> FinanceFormulaLibrary:
    """
    Build the formula library from configured rate and bracket tables.

    Raises:
        ValueError: If the configured tax bracket table is malformed
    """
    settings = get_settings()
    library = FinanceFormulaLibrary(
        tax_brackets=[
            TaxBracket(threshold=b.threshold, rate=b.rate) for b in settings.tax_brackets
        ],
        currency_rates=settings.currency_rates,
    )
    logger.info(
        f"Formula library ready: {len(library.tax_brackets)} tax brackets, "
        f"{len(library.currency_rates)} currencies"
    )
    return library
