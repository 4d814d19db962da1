#!/usr/bin/env python3

import sys

from cli.common import (
    add_filter_arguments,
    build_form,
    describe_filter,
    format_currency,
    parse_month,
    resolve_filter,
)
from models.category import CATEGORIES
from models.forms import BudgetForm
from models.settings import ReportFilter
from tools.budget import SpendBasis, summarize
from tools.filters import find_period
from logger import get_logger

logger = get_logger()


def cmd_show(args, services):
    """Show the budget summary for the active filter."""
    ledger = services.load_ledger()
    report_filter = resolve_filter(args, ledger)
    summary = summarize(ledger, SpendBasis(services.config.spend_basis), report_filter)

    logger.info(f"\nBudget - {describe_filter(report_filter, ledger)}")
    logger.info("=" * 60)
    logger.info(f"{'Monthly budget:':<32}{format_currency(summary.budget):>16}")
    logger.info(f"{'Spent:':<32}{format_currency(summary.monthly_total):>16}")
    logger.info(f"{'Remaining:':<32}{format_currency(summary.remaining_budget):>16}")
    logger.info(f"{'Recurring:':<32}{format_currency(summary.recurring_total):>16}")
    logger.info(
        f"{'Remaining after recurring:':<32}"
        f"{format_currency(summary.remaining_after_recurring):>16}"
    )

    logger.info("\nBy category:")
    logger.info("-" * 60)
    for category in CATEGORIES:
        logger.info(f"{category:<32}{format_currency(summary.category_totals[category]):>16}")

    logger.info(
        f"\n{summary.expense_count} sorted expense(s), "
        f"{summary.unsorted_count} waiting to be sorted"
    )
    if summary.remaining_budget < 0:
        logger.warning("Over budget!")


def cmd_set(args, services):
    """Set the budget of whatever the active filter shows."""
    ledger = services.load_ledger()
    form = build_form(BudgetForm, monthly_budget=args.amount)

    services.periods.set_active_budget(ledger, form)
    logger.info(
        f"✓ Budget for {describe_filter(ledger.settings.report_filter, ledger)} "
        f"set to {format_currency(form.monthly_budget)}"
    )


def cmd_filter(args, services):
    """Change the saved report filter."""
    ledger = services.load_ledger()

    if args.clear:
        report_filter = ReportFilter()
    elif args.month is not None:
        report_filter = args.month
    elif args.period:
        if find_period(ledger.periods, args.period) is None:
            logger.error(f"Salary period with ID '{args.period}' not found.")
            sys.exit(1)
        report_filter = ReportFilter.for_period(args.period)
    else:
        logger.info(f"Active filter: {describe_filter(ledger.settings.report_filter, ledger)}")
        return

    services.settings.set_filter(ledger, report_filter)
    logger.info(f"✓ Filter set to {describe_filter(report_filter, ledger)}")


def setup_parser(subparsers):
    """Setup budget subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "budget",
        help="Budget summary and settings",
        description="Show spending against the budget and choose the report window",
    )

    budget_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available budget commands",
        dest="subcommand",
        required=True,
    )

    # budget show
    show_parser = budget_subparsers.add_parser("show", help="Show the budget summary")
    add_filter_arguments(show_parser)
    show_parser.set_defaults(func=cmd_show)

    # budget set
    set_parser = budget_subparsers.add_parser(
        "set", help="Set the monthly budget for the active filter"
    )
    set_parser.add_argument("amount", help="Monthly budget")
    set_parser.set_defaults(func=cmd_set)

    # budget filter
    filter_parser = budget_subparsers.add_parser(
        "filter", help="Show or change the saved report filter"
    )
    group = filter_parser.add_mutually_exclusive_group()
    group.add_argument("--month", type=parse_month, help="Month (YYYY-MM)")
    group.add_argument("--period", help="Salary period ID")
    group.add_argument("--clear", action="store_true", help="Show all time")
    filter_parser.set_defaults(func=cmd_filter)
