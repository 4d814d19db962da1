"""Category split arithmetic.

No rounding happens here; amounts are rounded only when displayed or exported.
"""

from decimal import Decimal
from typing import Union

from models.expense import Expense

Percent = Union[int, Decimal]


def split_price(full_price: Decimal, match_percent: Percent) -> Decimal:
    """Return the part of full_price attributed to a category.

    Callers pass the primary match for the primary share and
    secondary_percent(match) for the secondary share.
    """
    return full_price * Decimal(match_percent) / Decimal(100)


def secondary_percent(match_percent: Percent) -> Percent:
    return 100 - match_percent


def primary_split(expense: Expense) -> Decimal:
    return split_price(expense.full_price, expense.category_match)


def secondary_split(expense: Expense) -> Decimal:
    """Secondary share; zero when no secondary category is set."""
    if not expense.secondary_category:
        return Decimal("0")
    return split_price(expense.full_price, secondary_percent(expense.category_match))
