#!/usr/bin/env python3

import argparse
import sys
from datetime import date

from cli.common import build_form, format_currency, parse_date
from errors import NotFoundError
from models.category import CATEGORIES
from models.forms import CartForm, CartItemForm, SortForm
from logger import get_logger

logger = get_logger()


def parse_item(value: str) -> dict:
    """argparse type for NAME:PRICE line items."""
    name, sep, price = value.rpartition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Invalid item '{value}', use NAME:PRICE")
    return {"name": name, "price": price.strip()}


def _log_cart(cart):
    difference = cart.total_price - cart.items_total
    logger.info(
        f"{cart.date.isoformat()}  {format_currency(cart.total_price):>14}  {cart.name}"
    )
    logger.info(f"    ID: {cart.id}")
    sorted_count = len([i for i in cart.items if i.is_sorted])
    logger.info(f"    Items: {len(cart.items)} ({sorted_count} sorted)")
    if difference:
        logger.info(f"    Not itemized: {format_currency(difference)}")


def cmd_create(args, services):
    """Create a shopping cart."""
    ledger = services.load_ledger()
    form = build_form(
        CartForm,
        name=args.name,
        total_price=args.total,
        date=args.date,
        items=args.items or [],
    )

    cart = services.carts.create(ledger, form)
    logger.info(f"✓ Created cart '{cart.name}'")
    _log_cart(cart)


def cmd_list(args, services):
    """List all shopping carts."""
    ledger = services.load_ledger()

    if not ledger.carts:
        logger.info("No carts found.")
        return

    logger.info(f"\nShopping carts ({len(ledger.carts)}):")
    logger.info("=" * 80)
    for cart in ledger.carts:
        _log_cart(cart)


def cmd_show(args, services):
    """Show a cart with its line items."""
    ledger = services.load_ledger()
    cart = ledger.find_cart(args.cart_id)
    if cart is None:
        logger.error(f"Cart with ID '{args.cart_id}' not found.")
        sys.exit(1)

    _log_cart(cart)
    logger.info("-" * 80)
    for item in cart.items:
        status = item.primary_category if item.is_sorted else "unsorted"
        logger.info(f"  {format_currency(item.price):>14}  {item.name} ({status})")
        logger.info(f"      Item ID: {item.id}")


def cmd_sort_item(args, services):
    """Sort a cart line item into an expense."""
    ledger = services.load_ledger()
    form = build_form(
        SortForm,
        primary_category=args.category,
        category_match=args.match,
        secondary_category=args.secondary or "",
    )

    try:
        expense = services.carts.sort_item(ledger, args.cart_id, args.item_id, form)
    except (NotFoundError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"✓ '{expense.name}' sorted into {expense.primary_category}")


def cmd_edit_item(args, services):
    """Change a line item's name or price."""
    ledger = services.load_ledger()
    cart = ledger.find_cart(args.cart_id)
    item = cart.find_item(args.item_id) if cart else None
    if item is None:
        logger.error(f"Item '{args.item_id}' not found in cart '{args.cart_id}'.")
        sys.exit(1)

    form = build_form(
        CartItemForm,
        name=args.name if args.name is not None else item.name,
        price=args.price if args.price is not None else item.price,
    )
    updated = services.carts.update_item(ledger, args.cart_id, args.item_id, form)
    logger.info(f"✓ Item updated: {updated.name} {format_currency(updated.price)}")


def cmd_delete_item(args, services):
    """Remove a line item from a cart."""
    ledger = services.load_ledger()
    try:
        deleted = services.carts.delete_item(ledger, args.cart_id, args.item_id)
    except NotFoundError as e:
        logger.error(str(e))
        sys.exit(1)

    if not deleted:
        logger.error(f"Item '{args.item_id}' not found in cart '{args.cart_id}'.")
        sys.exit(1)
    logger.info("✓ Item deleted")


def setup_parser(subparsers):
    """Setup carts subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "carts",
        help="Manage shopping carts",
        description="Record shopping carts and sort their line items",
    )

    carts_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available cart commands",
        dest="subcommand",
        required=True,
    )

    # carts create
    create_parser = carts_subparsers.add_parser("create", help="Create a cart")
    create_parser.add_argument("name", help="Cart name, e.g. the shop")
    create_parser.add_argument("total", help="Total price paid")
    create_parser.add_argument(
        "--date", type=parse_date, default=date.today(), help="Purchase date (YYYY-MM-DD)"
    )
    create_parser.add_argument(
        "--item",
        dest="items",
        action="append",
        type=parse_item,
        help="Line item as NAME:PRICE (repeatable)",
    )
    create_parser.set_defaults(func=cmd_create)

    # carts list
    list_parser = carts_subparsers.add_parser("list", help="List carts")
    list_parser.set_defaults(func=cmd_list)

    # carts show
    show_parser = carts_subparsers.add_parser("show", help="Show a cart's items")
    show_parser.add_argument("cart_id", help="ID of the cart")
    show_parser.set_defaults(func=cmd_show)

    # carts sort-item
    sort_parser = carts_subparsers.add_parser(
        "sort-item", help="Sort a line item into an expense"
    )
    sort_parser.add_argument("cart_id", help="ID of the cart")
    sort_parser.add_argument("item_id", help="ID of the line item")
    sort_parser.add_argument("--category", required=True, choices=CATEGORIES)
    sort_parser.add_argument("--match", type=int, default=100)
    sort_parser.add_argument("--secondary", choices=CATEGORIES)
    sort_parser.set_defaults(func=cmd_sort_item)

    # carts edit-item
    edit_parser = carts_subparsers.add_parser("edit-item", help="Edit a line item")
    edit_parser.add_argument("cart_id", help="ID of the cart")
    edit_parser.add_argument("item_id", help="ID of the line item")
    edit_parser.add_argument("--name")
    edit_parser.add_argument("--price")
    edit_parser.set_defaults(func=cmd_edit_item)

    # carts delete-item
    delete_parser = carts_subparsers.add_parser(
        "delete-item", help="Remove a line item"
    )
    delete_parser.add_argument("cart_id", help="ID of the cart")
    delete_parser.add_argument("item_id", help="ID of the line item")
    delete_parser.set_defaults(func=cmd_delete_item)
