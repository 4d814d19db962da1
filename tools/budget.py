"""Budget aggregation over expense lists.

Every function here is a pure reduction. Callers filter the lists by date
first (tools.filters.filter_by_date); recurring totals are the exception and
always use the unfiltered expenses.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Sequence

from models.category import CATEGORIES
from models.expense import Expense
from models.ledger import Ledger
from models.salary_period import SalaryPeriod
from models.settings import PERIOD, ReportFilter
from tools.filters import filter_by_date, find_period
from tools.splits import secondary_percent, split_price


class SpendBasis(str, Enum):
    """Which expenses count as spent in the monthly total.

    ALL also counts unsorted expenses, since not yet categorised money is
    still spent. SORTED counts categorised expenses only.
    """

    ALL = "all"
    SORTED = "sorted"


def category_items(expenses: Sequence[Expense], category: str) -> List[Expense]:
    """Get expenses attributed to a category as primary or secondary."""
    return [
        e
        for e in expenses
        if e.primary_category == category or e.secondary_category == category
    ]


def category_total(expenses: Sequence[Expense], category: str) -> Decimal:
    """Sum the shares of each expense attributed to a category.

    The primary category receives category_match percent of the price, the
    secondary category the remaining percent.
    """
    total = Decimal("0")
    for expense in expenses:
        if expense.primary_category == category:
            total += split_price(expense.full_price, expense.category_match)
        elif expense.secondary_category == category:
            total += split_price(
                expense.full_price, secondary_percent(expense.category_match)
            )
    return total


def category_totals(expenses: Sequence[Expense]) -> Dict[str, Decimal]:
    return {category: category_total(expenses, category) for category in CATEGORIES}


def monthly_total(
    expenses: Sequence[Expense],
    unsorted: Sequence[Expense] = (),
    spend_basis: SpendBasis = SpendBasis.ALL,
) -> Decimal:
    """Total spent in the (already filtered) window.

    Args:
        expenses: Filtered sorted expenses.
        unsorted: Filtered unsorted expenses.
        spend_basis: Whether unsorted expenses count as spent.

    Returns:
        Sum of full prices.
    """
    total = sum((e.full_price for e in expenses), Decimal("0"))
    if SpendBasis(spend_basis) == SpendBasis.ALL:
        total += sum((e.full_price for e in unsorted), Decimal("0"))
    return total


def recurring_items(expenses: Sequence[Expense]) -> List[Expense]:
    return [e for e in expenses if e.is_recurring]


def recurring_total(expenses: Sequence[Expense]) -> Decimal:
    """Sum of recurring expenses. Pass the unfiltered list."""
    return sum((e.full_price for e in recurring_items(expenses)), Decimal("0"))


def effective_monthly_budget(
    default_budget: Decimal,
    report_filter: ReportFilter,
    periods: Sequence[SalaryPeriod],
) -> Decimal:
    """Budget in force for the active filter.

    A selected salary period with its own budget overrides the default.
    """
    if report_filter.mode == PERIOD:
        period = find_period(periods, report_filter.period_id)
        if period is not None and period.monthly_budget is not None:
            return period.monthly_budget
    return default_budget


def remaining_budget(budget: Decimal, spent: Decimal) -> Decimal:
    return budget - spent


def remaining_after_recurring(
    budget: Decimal, spent: Decimal, recurring: Decimal
) -> Decimal:
    return remaining_budget(budget, spent) - recurring


@dataclass
class BudgetSummary:
    budget: Decimal
    monthly_total: Decimal
    recurring_total: Decimal
    remaining_budget: Decimal
    remaining_after_recurring: Decimal
    category_totals: Dict[str, Decimal]
    expense_count: int
    unsorted_count: int


def summarize(
    ledger: Ledger,
    spend_basis: SpendBasis = SpendBasis.ALL,
    report_filter: Optional[ReportFilter] = None,
    today: Optional[date] = None,
) -> BudgetSummary:
    """Compute the dashboard numbers for a ledger.

    Args:
        ledger: Records of the signed-in user.
        spend_basis: Whether unsorted expenses count toward the monthly total.
        report_filter: Filter to apply; defaults to the ledger's saved filter.
        today: End date of an open period. Defaults to date.today().

    Returns:
        BudgetSummary for the selected window.
    """
    report_filter = report_filter or ledger.settings.report_filter

    expenses = filter_by_date(ledger.expenses, report_filter, ledger.periods, today)
    unsorted = filter_by_date(ledger.unsorted, report_filter, ledger.periods, today)

    budget = effective_monthly_budget(
        ledger.settings.monthly_budget, report_filter, ledger.periods
    )
    spent = monthly_total(expenses, unsorted, spend_basis)
    recurring = recurring_total(ledger.expenses)

    return BudgetSummary(
        budget=budget,
        monthly_total=spent,
        recurring_total=recurring,
        remaining_budget=remaining_budget(budget, spent),
        remaining_after_recurring=remaining_after_recurring(budget, spent, recurring),
        category_totals=category_totals(expenses),
        expense_count=len(expenses),
        unsorted_count=len(unsorted),
    )
