#!/usr/bin/env python3
"""
Spendwise CLI - Command-line interface for budgets, goals and spending reports.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    users        Manage users and email preferences
    categories   Manage categories
    transactions Record and list transactions
    budgets      Manage budgets and check their status
    goals        Manage savings goals
    reports      Spending analytics and scheduled reports
    migrate      Database migrations

Examples:
    python -m cli migrate apply
    python -m cli categories seed
    python -m cli transactions add --user-id 1 --type expense --amount 300 --category-id 1
    python -m cli budgets status --user-id 1 3
    python -m cli reports summary --user-id 1 --period last_month
"""

import sys
import argparse
from cli import users, categories, transactions, budgets, goals, reports, migrate
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Spendwise - Budget tracking and spending analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    users.setup_parser(subparsers)
    categories.setup_parser(subparsers)
    transactions.setup_parser(subparsers)
    budgets.setup_parser(subparsers)
    goals.setup_parser(subparsers)
    reports.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
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
