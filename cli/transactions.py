#!/usr/bin/env python3

from datetime import datetime
from dateutil import parser as date_parser
from models.transaction import Transaction
from notifications import get_dispatcher
from logger import get_logger

logger = get_logger()


def _parse_when(value, services) -> datetime:
    """Parse a CLI date; naive values are taken in the configured timezone."""
    tz = services.config.tzinfo
    if value is None:
        return datetime.now(tz)
    parsed = date_parser.parse(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def cmd_add(args, services):
    """Record a transaction and run budget alerts for expenses."""
    transaction = services.transactions.create(
        Transaction(
            id=None,
            user_id=args.user_id,
            type=args.type,
            amount=args.amount,
            category_id=args.category_id,
            date=_parse_when(args.date, services),
            source_destination=args.source,
            notes=args.notes,
        )
    )
    logger.info(f"✓ Transaction recorded with ID: {transaction.id}")

    dispatcher = get_dispatcher(services.config, services.db_manager)
    for decision in services.tracking.notify_breaches_for_transaction(
        transaction, dispatcher
    ):
        if decision.fire_100:
            logger.warning("A budget has been exceeded (100%).")
        elif decision.fire_80:
            logger.warning("A budget has reached 80%.")


def cmd_list(args, services):
    """List a user's transactions for a period."""
    date_range = services.tracking.resolve_period(args.period, args.start, args.end)
    transactions = services.transactions.find_by_filter(
        args.user_id,
        date_range.start,
        date_range.end,
        type=args.type,
        category_id=args.category_id,
        limit=args.limit,
    )

    if not transactions:
        logger.info("No transactions found.")
        return

    tz = services.config.tzinfo
    currency = services.config.currency_symbol
    logger.info(f"\nTransactions {date_range.start.date()} to {date_range.end.date()}:")
    logger.info("=" * 80)
    for t in transactions:
        logger.info(
            f"{t.id:>6}  {t.date.astimezone(tz).strftime('%Y-%m-%d %H:%M')}  "
            f"{t.type:<8} {currency}{t.amount:>12,.2f}  "
            f"cat {t.category_id:<4} {t.source_destination or ''}"
        )
    logger.info(f"\nTotal transactions: {len(transactions)}")


def cmd_delete(args, services):
    """Delete one of a user's transactions."""
    if services.transactions.delete(args.user_id, args.transaction_id):
        logger.info(f"✓ Transaction {args.transaction_id} deleted.")
    else:
        logger.error(f"Transaction with ID {args.transaction_id} not found.")


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Record and list transactions",
        description="Record income and expenses, and list them by period",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    add_parser = transactions_subparsers.add_parser("add", help="Record a transaction")
    add_parser.add_argument("--user-id", type=int, required=True)
    add_parser.add_argument("--type", required=True, choices=["income", "expense"])
    add_parser.add_argument("--amount", required=True, help="Positive amount")
    add_parser.add_argument("--category-id", type=int, required=True)
    add_parser.add_argument("--date", help="When it happened (default: now)")
    add_parser.add_argument("--source", help="Payee or payer")
    add_parser.add_argument("--notes")
    add_parser.set_defaults(func=cmd_add)

    list_parser = transactions_subparsers.add_parser(
        "list", help="List transactions for a period"
    )
    list_parser.add_argument("--user-id", type=int, required=True)
    list_parser.add_argument(
        "--period",
        default="month",
        help="today, week, month, last_month, year or custom",
    )
    list_parser.add_argument("--start", help="Custom period start (YYYY-MM-DD)")
    list_parser.add_argument("--end", help="Custom period end (YYYY-MM-DD)")
    list_parser.add_argument("--type", choices=["income", "expense"])
    list_parser.add_argument("--category-id", type=int)
    list_parser.add_argument("--limit", type=int)
    list_parser.set_defaults(func=cmd_list)

    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete a transaction"
    )
    delete_parser.add_argument("transaction_id", type=int)
    delete_parser.add_argument("--user-id", type=int, required=True)
    delete_parser.set_defaults(func=cmd_delete)
