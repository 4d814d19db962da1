#!/usr/bin/env python3
"""
Kassza CLI - Personal budget tracking from the command line.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    auth      Register, sign in and sign out
    expenses  Add, sort and export expenses
    carts     Shopping carts and their line items
    periods   Salary periods
    budget    Budget summary, budget and report filter
    migrate   Database migrations

Examples:
    python -m cli migrate apply
    python -m cli auth register me@example.com
    python -m cli expenses add "Groceries" 12500 --category "Essential Maintenance"
    python -m cli expenses triage
    python -m cli periods create --start 2024-01-10
    python -m cli budget show
"""

import sys
import argparse
from cli import auth, budget, carts, expenses, migrate, periods
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="kassza",
        description="Kassza - Personal budget tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Create subparsers for each command
    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    # Register each command's subparser
    auth.setup_parser(subparsers)
    expenses.setup_parser(subparsers)
    carts.setup_parser(subparsers)
    periods.setup_parser(subparsers)
    budget.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    # Parse arguments and execute
    args = parser.parse_args()

    # Call the appropriate handler function
    if hasattr(args, "func"):
        try:
            # Load configuration
            config = load_config()

            # Set up logging
            setup_logging(config)

            if args.command == "migrate":
                # Migrate commands need db_manager for raw database operations
                args.func(args, DatabaseManager(config))
            else:
                args.func(args, Services(config))
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
