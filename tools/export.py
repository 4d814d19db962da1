"""CSV export of expenses with their computed category splits."""

import csv
from datetime import date
from typing import List, Sequence, TextIO

from models.expense import Expense
from tools.splits import primary_split, secondary_split

EXPORT_HEADERS = [
    "Date",
    "Name",
    "Primary Category",
    "Category Match %",
    "Secondary Category",
    "Full Price",
    "Primary Split",
    "Secondary Split",
    "Is Recurring",
    "Cart Name",
]


def expense_to_row(expense: Expense) -> List[str]:
    return [
        expense.date.isoformat(),
        expense.name,
        expense.primary_category,
        str(expense.category_match),
        expense.secondary_category or "",
        str(expense.full_price),
        f"{primary_split(expense):.2f}",
        f"{secondary_split(expense):.2f}",
        "Yes" if expense.is_recurring else "No",
        expense.cart_name or "",
    ]


def write_csv(expenses: Sequence[Expense], output: TextIO) -> int:
    """Write expenses as CSV, one row per expense.

    Args:
        expenses: Expenses to export, usually already filtered by date.
        output: Text stream opened with newline="".

    Returns:
        Number of data rows written.
    """
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for expense in expenses:
        writer.writerow(expense_to_row(expense))
    return len(expenses)


def default_export_filename(today: date) -> str:
    return f"financial_data_{today.isoformat()}.csv"
