#!/usr/bin/env python3

import sys
from datetime import date

from cli.common import build_form, format_currency, parse_date
from errors import NotFoundError
from models.forms import BudgetForm
from models.settings import PERIOD
from logger import get_logger

logger = get_logger()


def cmd_create(args, services):
    """Start a new salary period and select it."""
    ledger = services.load_ledger()
    period = services.periods.create(ledger, args.start)
    logger.info(f"✓ Started '{period.name}' (ID: {period.id})")
    logger.info(f"  Budget: {format_currency(period.monthly_budget)}")


def cmd_list(args, services):
    """List salary periods, newest first."""
    ledger = services.load_ledger()

    if not ledger.periods:
        logger.info("No salary periods found.")
        return

    report_filter = ledger.settings.report_filter
    selected = report_filter.period_id if report_filter.mode == PERIOD else None

    logger.info(f"\nSalary periods ({len(ledger.periods)}):")
    logger.info("=" * 80)
    for period in sorted(ledger.periods, key=lambda p: p.start_date, reverse=True):
        end = period.end_date.isoformat() if period.end_date else "open"
        marker = "*" if period.id == selected else " "
        budget = format_currency(period.monthly_budget) if period.monthly_budget else "-"
        logger.info(
            f"{marker} {period.start_date.isoformat()} - {end:<10}  {budget:>14}  {period.name}"
        )
        logger.info(f"    ID: {period.id}")


def cmd_budget(args, services):
    """Set the budget of one salary period."""
    ledger = services.load_ledger()
    form = build_form(BudgetForm, monthly_budget=args.amount)

    try:
        period = services.periods.set_budget(ledger, args.period_id, form)
    except NotFoundError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"✓ Budget of '{period.name}' set to {format_currency(period.monthly_budget)}")


def setup_parser(subparsers):
    """Setup periods subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "periods",
        help="Manage salary periods",
        description="Start salary periods and set their budgets",
    )

    periods_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available period commands",
        dest="subcommand",
        required=True,
    )

    # periods create
    create_parser = periods_subparsers.add_parser(
        "create", help="Start a new period, closing the open one"
    )
    create_parser.add_argument(
        "--start",
        type=parse_date,
        default=date.today(),
        help="First day of the period (YYYY-MM-DD, default: today)",
    )
    create_parser.set_defaults(func=cmd_create)

    # periods list
    list_parser = periods_subparsers.add_parser("list", help="List periods")
    list_parser.set_defaults(func=cmd_list)

    # periods budget
    budget_parser = periods_subparsers.add_parser(
        "budget", help="Set a period's monthly budget"
    )
    budget_parser.add_argument("period_id", help="ID of the period")
    budget_parser.add_argument("amount", help="Monthly budget")
    budget_parser.set_defaults(func=cmd_budget)
