#!/usr/bin/env python3

import sys
from datetime import datetime
from models.category import EXPENSE
from notifications import get_dispatcher
from tools import aggregation, reports
from logger import get_logger

logger = get_logger()


def _resolve(args, services):
    return services.tracking.resolve_period(args.period, args.start, args.end)


def cmd_summary(args, services):
    """Income, expense and balance for a period."""
    date_range = _resolve(args, services)
    summary = reports.dashboard_summary(services, args.user_id, date_range)
    currency = services.config.currency_symbol

    logger.info(f"\nSummary {date_range.start.date()} to {date_range.end.date()}:")
    logger.info("=" * 60)
    logger.info(f"Income:  {currency}{summary.total_income:>14,.2f}")
    logger.info(f"Expense: {currency}{summary.total_expense:>14,.2f}")
    logger.info(f"Balance: {currency}{summary.balance:>14,.2f}")


def cmd_categories(args, services):
    """Top categories for a period."""
    date_range = _resolve(args, services)
    breakdown = aggregation.breakdown_by_category(
        services,
        args.user_id,
        args.type,
        date_range,
        limit=args.limit or services.config.category_limit,
    )

    if not breakdown:
        logger.info("No transactions found.")
        return

    currency = services.config.currency_symbol
    logger.info(f"\nTop {args.type} categories:")
    logger.info("=" * 60)
    for item in breakdown:
        logger.info(f"{item.category_name:<28} {currency}{item.total:>14,.2f}")


def cmd_trends(args, services):
    """Totals per day, month or year."""
    date_range = _resolve(args, services)
    if args.balance:
        buckets = aggregation.balance_by_granularity(
            services, args.user_id, date_range, args.granularity
        )
    else:
        buckets = aggregation.bucket_by_granularity(
            services, args.user_id, date_range, args.granularity, type=args.type
        )
    if args.fill:
        buckets = aggregation.fill_missing_buckets(
            buckets, date_range, args.granularity
        )

    if not buckets:
        logger.info("No transactions found.")
        return

    currency = services.config.currency_symbol
    for bucket in buckets:
        logger.info(f"{bucket.key:<12} {currency}{bucket.total:>14,.2f}")


def cmd_savings(args, services):
    """Savings and expense ratios for a period."""
    date_range = _resolve(args, services)
    ratio = reports.savings_ratio(services, args.user_id, date_range)

    logger.info(f"Savings: {services.config.currency_symbol}{ratio.savings:,.2f}")
    logger.info(f"Savings ratio: {ratio.savings_ratio}%")
    logger.info(f"Expense ratio: {ratio.expense_ratio}%")


def cmd_send(args, services):
    """Send the scheduled daily or monthly reports to opted-in users."""
    dispatcher = get_dispatcher(services.config, services.db_manager)
    if dispatcher is None:
        logger.error("Notifications are disabled; set [notifications] dispatcher.")
        sys.exit(1)

    now = datetime.now(services.config.tzinfo)
    if args.kind == "daily":
        sent = reports.run_daily_reports(services, dispatcher, now)
    else:
        sent = reports.run_monthly_reports(services, dispatcher, now)

    logger.info(f"✓ Sent {sent} {args.kind} report(s)")


def _add_period_arguments(parser):
    parser.add_argument("--user-id", type=int, required=True)
    parser.add_argument(
        "--period",
        default="month",
        help="today, week, month, last_month, year or custom",
    )
    parser.add_argument("--start", help="Custom period start (YYYY-MM-DD)")
    parser.add_argument("--end", help="Custom period end (YYYY-MM-DD)")


def setup_parser(subparsers):
    """Setup reports subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "reports",
        help="Spending analytics and scheduled reports",
        description="Summaries, category breakdowns, trends and email reports",
    )

    reports_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available report commands",
        dest="subcommand",
        required=True,
    )

    summary_parser = reports_subparsers.add_parser(
        "summary", help="Income, expense and balance"
    )
    _add_period_arguments(summary_parser)
    summary_parser.set_defaults(func=cmd_summary)

    categories_parser = reports_subparsers.add_parser(
        "categories", help="Top categories"
    )
    _add_period_arguments(categories_parser)
    categories_parser.add_argument(
        "--type", default=EXPENSE, choices=["income", "expense"]
    )
    categories_parser.add_argument("--limit", type=int)
    categories_parser.set_defaults(func=cmd_categories)

    trends_parser = reports_subparsers.add_parser("trends", help="Totals over time")
    _add_period_arguments(trends_parser)
    trends_parser.add_argument(
        "--granularity",
        default=aggregation.DAILY,
        choices=[aggregation.DAILY, aggregation.MONTHLY, aggregation.YEARLY],
    )
    trends_parser.add_argument("--type", choices=["income", "expense"])
    trends_parser.add_argument(
        "--balance", action="store_true", help="Show income minus expense"
    )
    trends_parser.add_argument(
        "--fill", action="store_true", help="Include empty days, months or years"
    )
    trends_parser.set_defaults(func=cmd_trends)

    savings_parser = reports_subparsers.add_parser(
        "savings", help="Savings and expense ratios"
    )
    _add_period_arguments(savings_parser)
    savings_parser.set_defaults(func=cmd_savings)

    send_parser = reports_subparsers.add_parser(
        "send", help="Send scheduled email reports"
    )
    send_parser.add_argument("kind", choices=["daily", "monthly"])
    send_parser.set_defaults(func=cmd_send)
