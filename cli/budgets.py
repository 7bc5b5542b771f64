#!/usr/bin/env python3

import sys
from datetime import date
from models.budget import BUDGET_PERIODS
from notifications import get_dispatcher
from logger import get_logger

logger = get_logger()


def _print_status(status, currency):
    logger.info(
        f"{status.budget_id:>4}  {status.name:<28} "
        f"{currency}{status.total_spent:>10,.2f} / {currency}{status.amount:>10,.2f}  "
        f"{status.percentage_used:>6.2f}%  remaining {currency}{status.remaining:,.2f}"
    )


def cmd_create(args, services):
    """Create a budget."""
    budget = services.budgets.create(
        args.user_id,
        args.name,
        args.amount,
        args.period,
        date.fromisoformat(args.start_date),
        end_date=date.fromisoformat(args.end_date) if args.end_date else None,
        category_id=args.category_id,
        notifications_enabled=not args.no_alerts,
    )
    logger.info(f"✓ Budget created successfully with ID: {budget.id}")


def cmd_list(args, services):
    """List a user's budgets with their current consumption."""
    statuses = services.tracking.list_budgets_with_status(args.user_id)

    if not statuses:
        logger.info("No budgets found.")
        return

    logger.info("\nBudgets:")
    logger.info("=" * 100)
    for status in statuses:
        _print_status(status, services.config.currency_symbol)

    logger.info(f"\nTotal budgets: {len(statuses)}")


def cmd_status(args, services):
    """Show the consumption of one budget."""
    status = services.tracking.evaluate_budget(args.user_id, args.budget_id)
    _print_status(status, services.config.currency_symbol)


def cmd_check(args, services):
    """Run the threshold check for one budget and deliver any new alert."""
    dispatcher = get_dispatcher(services.config, services.db_manager)
    decision = services.tracking.notify_budget_breach(
        args.user_id, args.budget_id, dispatcher
    )

    if decision.fire_100:
        logger.warning("Budget exceeded: 100% alert triggered.")
    elif decision.fire_80:
        logger.warning("Budget at 80%: warning alert triggered.")
    else:
        logger.info("No new alerts.")


def cmd_delete(args, services):
    """Delete one of a user's budgets."""
    if services.budgets.delete(args.user_id, args.budget_id):
        logger.info(f"✓ Budget {args.budget_id} deleted.")
    else:
        logger.error(f"Budget with ID {args.budget_id} not found.")
        sys.exit(1)


def setup_parser(subparsers):
    """Setup budgets subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "budgets",
        help="Manage budgets",
        description="Create budgets and check how much of them has been spent",
    )

    budgets_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available budget commands",
        dest="subcommand",
        required=True,
    )

    create_parser = budgets_subparsers.add_parser("create", help="Create a budget")
    create_parser.add_argument("name", help="Budget name")
    create_parser.add_argument("--user-id", type=int, required=True)
    create_parser.add_argument("--amount", required=True, help="Spending limit")
    create_parser.add_argument("--period", required=True, choices=BUDGET_PERIODS)
    create_parser.add_argument(
        "--start-date", required=True, help="Anchor day (YYYY-MM-DD)"
    )
    create_parser.add_argument("--end-date", help="Last day of a custom budget")
    create_parser.add_argument(
        "--category-id", type=int, help="Expense category (default: all expenses)"
    )
    create_parser.add_argument(
        "--no-alerts", action="store_true", help="Disable threshold alerts"
    )
    create_parser.set_defaults(func=cmd_create)

    list_parser = budgets_subparsers.add_parser(
        "list", help="List budgets with their status"
    )
    list_parser.add_argument("--user-id", type=int, required=True)
    list_parser.set_defaults(func=cmd_list)

    for name, func, help_text in (
        ("status", cmd_status, "Show one budget's status"),
        ("check", cmd_check, "Check thresholds and send alerts"),
        ("delete", cmd_delete, "Delete a budget"),
    ):
        sub = budgets_subparsers.add_parser(name, help=help_text)
        sub.add_argument("budget_id", type=int)
        sub.add_argument("--user-id", type=int, required=True)
        sub.set_defaults(func=func)
