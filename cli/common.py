"""Helpers shared by the CLI commands."""

import argparse
import sys
from datetime import date
from decimal import Decimal

from pydantic import ValidationError

from models.expense import Expense
from models.ledger import Ledger
from models.settings import MONTH, ReportFilter
from tools.filters import find_period
from logger import get_logger

logger = get_logger()


def format_currency(amount: Decimal) -> str:
    """Format an amount as whole forints, e.g. "12 345 Ft"."""
    return f"{amount:,.0f}".replace(",", " ") + " Ft"


def parse_date(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', use YYYY-MM-DD")


def parse_month(value: str) -> ReportFilter:
    """argparse type for YYYY-MM months."""
    try:
        year, month = value.split("-")
        return ReportFilter.for_month(int(year), int(month))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid month '{value}', use YYYY-MM")


def add_filter_arguments(parser) -> None:
    """Add --month/--period/--all options overriding the saved filter."""
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--month", type=parse_month, help="Only show this month (YYYY-MM)"
    )
    group.add_argument("--period", help="Only show this salary period (ID)")
    group.add_argument(
        "--all", action="store_true", help="Ignore the saved filter"
    )


def resolve_filter(args, ledger: Ledger) -> ReportFilter:
    """Get the filter for this invocation, falling back to the saved one."""
    if getattr(args, "all", False):
        return ReportFilter()
    if getattr(args, "month", None) is not None:
        return args.month
    if getattr(args, "period", None):
        return ReportFilter.for_period(args.period)
    return ledger.settings.report_filter


def describe_filter(report_filter: ReportFilter, ledger: Ledger) -> str:
    if report_filter.mode == MONTH:
        if report_filter.month is None:
            return "All time"
        return f"{report_filter.month:%Y %B}"

    period = find_period(ledger.periods, report_filter.period_id)
    if period is None:
        return "All time (no matching period)"
    end = period.end_date.isoformat() if period.end_date else "now"
    return f"{period.name} ({period.start_date.isoformat()} - {end})"


def log_validation_errors(error: ValidationError) -> None:
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "input"
        logger.error(f"Invalid {location}: {detail['msg']}")


def build_form(form_class, **fields):
    """Validate user input, exiting with the validation messages on failure."""
    try:
        return form_class(**fields)
    except ValidationError as e:
        log_validation_errors(e)
        sys.exit(1)


def describe_split(expense: Expense) -> str:
    if not expense.primary_category:
        return "unsorted"
    if expense.secondary_category:
        return (
            f"{expense.primary_category} {expense.category_match}% / "
            f"{expense.secondary_category} {expense.secondary_percentage}%"
        )
    if expense.category_match < 100:
        return f"{expense.primary_category} {expense.category_match}%"
    return expense.primary_category


def log_expense(expense: Expense) -> None:
    flags = []
    if expense.is_recurring:
        flags.append("recurring")
    if expense.cart_name:
        flags.append(f"cart: {expense.cart_name}")
    suffix = f" [{', '.join(flags)}]" if flags else ""

    logger.info(
        f"{expense.date.isoformat()}  {format_currency(expense.full_price):>14}  "
        f"{expense.name} ({describe_split(expense)}){suffix}"
    )
    logger.info(f"    ID: {expense.id}")
