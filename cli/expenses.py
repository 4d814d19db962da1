#!/usr/bin/env python3

import sys
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from cli.common import (
    add_filter_arguments,
    build_form,
    describe_filter,
    log_expense,
    log_validation_errors,
    parse_date,
    resolve_filter,
)
from models.category import CATEGORIES
from models.forms import ExpenseForm, SortForm
from tools.budget import category_items
from tools.export import default_export_filename, write_csv
from tools.filters import filter_by_date
from logger import get_logger

logger = get_logger()


def cmd_add(args, services):
    """Add an expense; without --category it goes to the unsorted box."""
    ledger = services.load_ledger()
    form = build_form(
        ExpenseForm,
        name=args.name,
        full_price=args.price,
        date=args.date,
        primary_category=args.category or "",
        category_match=args.match,
        secondary_category=args.secondary or "",
        is_recurring=args.recurring,
    )

    expense = services.expenses.add(ledger, form)

    where = "expenses" if expense.is_sorted else "the unsorted box"
    logger.info(f"✓ Added '{expense.name}' to {where}")
    log_expense(expense)


def cmd_list(args, services):
    """List expenses for the active filter."""
    ledger = services.load_ledger()
    report_filter = resolve_filter(args, ledger)

    if args.unsorted:
        records = ledger.unsorted
        title = "Unsorted expenses"
    elif args.recurring:
        # Recurring expenses are listed regardless of the date filter
        records = [e for e in ledger.expenses if e.is_recurring]
        title = "Recurring expenses"
    else:
        records = ledger.expenses
        title = "Expenses"

    if not args.recurring:
        records = filter_by_date(records, report_filter, ledger.periods)
    if args.category:
        records = category_items(records, args.category)
        title = f"{title} in {args.category}"

    logger.info(f"\n{title} - {describe_filter(report_filter, ledger)}")
    logger.info("=" * 80)
    if not records:
        logger.info("No expenses found.")
        return

    for expense in records:
        log_expense(expense)
    logger.info("-" * 80)
    logger.info(f"Total: {len(records)} expense(s)")


def cmd_edit(args, services):
    """Edit a sorted expense; omitted options keep their current value."""
    ledger = services.load_ledger()
    current = ledger.find_expense(args.expense_id)
    if current is None:
        logger.error(f"Expense with ID '{args.expense_id}' not found.")
        sys.exit(1)

    form = build_form(
        ExpenseForm,
        name=args.name if args.name is not None else current.name,
        full_price=args.price if args.price is not None else current.full_price,
        date=args.date or current.date,
        primary_category=args.category or current.primary_category,
        category_match=args.match if args.match is not None else current.category_match,
        secondary_category=(
            args.secondary if args.secondary is not None else current.secondary_category
        ),
        is_recurring=(
            args.recurring if args.recurring is not None else current.is_recurring
        ),
    )

    expense = services.expenses.update(ledger, args.expense_id, form)
    logger.info("✓ Expense updated")
    log_expense(expense)


def cmd_delete(args, services):
    """Delete a sorted or unsorted expense."""
    ledger = services.load_ledger()
    if ledger.find_unsorted(args.expense_id):
        deleted = services.expenses.delete_unsorted(ledger, args.expense_id)
    else:
        deleted = services.expenses.delete(ledger, args.expense_id)

    if not deleted:
        logger.error(f"Expense with ID '{args.expense_id}' not found.")
        sys.exit(1)
    logger.info("✓ Expense deleted")


def cmd_sort(args, services):
    """Sort one unsorted expense into a category."""
    ledger = services.load_ledger()
    form = build_form(
        SortForm,
        primary_category=args.category,
        category_match=args.match,
        secondary_category=args.secondary or "",
    )

    outcome = services.expenses.sort(ledger, args.expense_id, form)
    logger.info("✓ Expense sorted")
    log_expense(outcome.expense)


def cmd_triage(args, services):
    """Walk through unsorted expenses one after another."""
    ledger = services.load_ledger()
    if not ledger.unsorted:
        logger.info("Nothing to sort.")
        return

    print("\nCategories:")
    for number, category in enumerate(CATEGORIES, start=1):
        print(f"  {number}. {category}")
    print("Press Enter to skip an item, 'q' to stop.")

    current = ledger.unsorted[0]
    skipped = set()
    sorted_count = 0
    while current is not None:
        print("\n" + "-" * 80)
        log_expense(current)

        choice = input("Category number: ").strip().lower()
        if choice == "q":
            break
        if not choice:
            skipped.add(current.id)
            current = next((e for e in ledger.unsorted if e.id not in skipped), None)
            continue
        if not choice.isdigit() or not 1 <= int(choice) <= len(CATEGORIES):
            logger.error(f"Pick a number between 1 and {len(CATEGORIES)}.")
            continue
        primary = CATEGORIES[int(choice) - 1]

        match = input("Category match % (Enter for 100): ").strip() or "100"
        secondary = ""
        if match != "100":
            secondary_choice = input("Secondary category number (optional): ").strip()
            if secondary_choice.isdigit() and 1 <= int(secondary_choice) <= len(CATEGORIES):
                secondary = CATEGORIES[int(secondary_choice) - 1]

        try:
            form = SortForm(
                primary_category=primary,
                category_match=match,
                secondary_category=secondary,
            )
        except ValidationError as e:
            log_validation_errors(e)
            continue
        outcome = services.expenses.sort(ledger, current.id, form, move_to_next=True)
        sorted_count += 1
        logger.info(f"✓ Sorted into {outcome.expense.primary_category}")

        current = outcome.next_unsorted
        if current is not None and current.id in skipped:
            current = next((e for e in ledger.unsorted if e.id not in skipped), None)

    logger.info(f"\nSorted {sorted_count} expense(s); {len(ledger.unsorted)} left.")


def cmd_export(args, services):
    """Export filtered expenses to CSV."""
    ledger = services.load_ledger()
    report_filter = resolve_filter(args, ledger)
    expenses = filter_by_date(ledger.expenses, report_filter, ledger.periods)

    if args.output:
        output_path = Path(args.output)
    else:
        output_path = services.config.export_dir / default_export_filename(date.today())
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        count = write_csv(expenses, f)

    logger.info(f"Exported {count} expense(s) ({describe_filter(report_filter, ledger)})")
    logger.info(f"✓ Written to: {output_path}")


def _add_split_arguments(parser, required_category: bool = False):
    parser.add_argument(
        "--category",
        required=required_category,
        choices=CATEGORIES,
        help="Primary category",
    )
    parser.add_argument(
        "--match",
        type=int,
        default=None if not required_category else 100,
        help="Percent of the price belonging to the primary category",
    )
    parser.add_argument(
        "--secondary", choices=CATEGORIES, help="Category receiving the remainder"
    )


def setup_parser(subparsers):
    """Setup expenses subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "expenses",
        help="Manage expenses",
        description="Add, list, sort and export expenses",
    )

    expenses_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available expense commands",
        dest="subcommand",
        required=True,
    )

    # expenses add
    add_parser = expenses_subparsers.add_parser("add", help="Add an expense")
    add_parser.add_argument("name", help="What was bought")
    add_parser.add_argument("price", help="Full price")
    add_parser.add_argument(
        "--date", type=parse_date, default=date.today(), help="Purchase date (YYYY-MM-DD)"
    )
    _add_split_arguments(add_parser)
    add_parser.add_argument(
        "--recurring", action="store_true", help="Monthly recurring expense"
    )
    add_parser.set_defaults(func=cmd_add, match=100)

    # expenses list
    list_parser = expenses_subparsers.add_parser("list", help="List expenses")
    list_parser.add_argument("--category", choices=CATEGORIES, help="Only this category")
    kind = list_parser.add_mutually_exclusive_group()
    kind.add_argument("--unsorted", action="store_true", help="List unsorted expenses")
    kind.add_argument(
        "--recurring", action="store_true", help="List recurring expenses"
    )
    add_filter_arguments(list_parser)
    list_parser.set_defaults(func=cmd_list)

    # expenses edit
    edit_parser = expenses_subparsers.add_parser("edit", help="Edit a sorted expense")
    edit_parser.add_argument("expense_id", help="ID of the expense")
    edit_parser.add_argument("--name")
    edit_parser.add_argument("--price")
    edit_parser.add_argument("--date", type=parse_date)
    _add_split_arguments(edit_parser)
    recurring = edit_parser.add_mutually_exclusive_group()
    recurring.add_argument("--recurring", dest="recurring", action="store_true")
    recurring.add_argument("--not-recurring", dest="recurring", action="store_false")
    edit_parser.set_defaults(func=cmd_edit, recurring=None)

    # expenses delete
    delete_parser = expenses_subparsers.add_parser("delete", help="Delete an expense")
    delete_parser.add_argument("expense_id", help="ID of the expense")
    delete_parser.set_defaults(func=cmd_delete)

    # expenses sort
    sort_parser = expenses_subparsers.add_parser(
        "sort", help="Sort an unsorted expense into a category"
    )
    sort_parser.add_argument("expense_id", help="ID of the unsorted expense")
    _add_split_arguments(sort_parser, required_category=True)
    sort_parser.set_defaults(func=cmd_sort)

    # expenses triage
    triage_parser = expenses_subparsers.add_parser(
        "triage", help="Sort unsorted expenses interactively, one after another"
    )
    triage_parser.set_defaults(func=cmd_triage)

    # expenses export
    export_parser = expenses_subparsers.add_parser("export", help="Export to CSV")
    export_parser.add_argument(
        "-o", "--output", help="Output file (default: export_dir/financial_data_DATE.csv)"
    )
    add_filter_arguments(export_parser)
    export_parser.set_defaults(func=cmd_export)
