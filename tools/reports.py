"""Report data for dashboards and scheduled email reports."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from decimal import Decimal
from typing import List
from dateutil.relativedelta import relativedelta
from models.category import EXPENSE, INCOME
from models.user import User
from notifications.builders import daily_report_request, monthly_report_request
from tools.aggregation import CategoryTotal, breakdown_by_category, sum_by_filter
from tools.amounts import round_money
from tools.periods import DateRange, end_of_day, local_date, start_of_day
from logger import get_logger

logger = get_logger()

# A single category above this share of monthly spending gets a suggestion.
DOMINANT_CATEGORY_SHARE = Decimal("0.3")


@dataclass(frozen=True)
class DashboardSummary:
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    date_range: DateRange


@dataclass(frozen=True)
class SavingsRatio:
    total_income: Decimal
    total_expense: Decimal
    savings: Decimal
    savings_ratio: Decimal
    expense_ratio: Decimal
    date_range: DateRange


@dataclass(frozen=True)
class DailyReport:
    report_date: date
    total_spent: Decimal
    expenses_by_category: List[CategoryTotal]


@dataclass(frozen=True)
class MonthlyReport:
    month_name: str
    year: int
    total_income: Decimal
    total_expense: Decimal
    net_savings: Decimal
    top_categories: List[CategoryTotal]
    suggestions: List[str]


def dashboard_summary(services, user_id: int, date_range: DateRange) -> DashboardSummary:
    """Income, expense and balance over a range."""
    total_income = sum_by_filter(services, user_id, date_range, type=INCOME)
    total_expense = sum_by_filter(services, user_id, date_range, type=EXPENSE)

    return DashboardSummary(
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
        date_range=date_range,
    )


def savings_ratio(services, user_id: int, date_range: DateRange) -> SavingsRatio:
    """Savings and expenses as percentages of income.

    Without income, the savings ratio is 0 and the expense ratio is 100 if
    anything was spent, 0 otherwise. Ratios are not clamped: overspending
    gives a negative savings ratio and an expense ratio above 100.
    """
    summary = dashboard_summary(services, user_id, date_range)
    income = summary.total_income
    expense = summary.total_expense

    if income > 0:
        savings_pct = round_money(Decimal(100) * summary.balance / income)
        expense_pct = round_money(Decimal(100) * expense / income)
    else:
        savings_pct = Decimal("0.00")
        expense_pct = Decimal("100.00") if expense > 0 else Decimal("0.00")

    return SavingsRatio(
        total_income=income,
        total_expense=expense,
        savings=summary.balance,
        savings_ratio=savings_pct,
        expense_ratio=expense_pct,
        date_range=date_range,
    )


def build_daily_report(services, user: User, now: datetime, tz: tzinfo) -> DailyReport:
    """Expenses for the calendar day before now, in the given zone."""
    report_date = local_date(now, tz) - timedelta(days=1)
    date_range = DateRange(start_of_day(report_date, tz), end_of_day(report_date, tz))

    expenses = breakdown_by_category(services, user.id, EXPENSE, date_range, limit=None)

    return DailyReport(
        report_date=report_date,
        total_spent=sum((item.total for item in expenses), Decimal("0")),
        expenses_by_category=expenses,
    )


def build_monthly_report(
    services,
    user: User,
    now: datetime,
    tz: tzinfo,
    top: int = 5,
    currency: str = "₹",
) -> MonthlyReport:
    """Overview of the calendar month before now, with savings suggestions."""
    first_of_this_month = local_date(now, tz).replace(day=1)
    first_day = first_of_this_month - relativedelta(months=1)
    last_day = first_of_this_month - timedelta(days=1)
    date_range = DateRange(start_of_day(first_day, tz), end_of_day(last_day, tz))

    summary = dashboard_summary(services, user.id, date_range)
    top_categories = breakdown_by_category(
        services, user.id, EXPENSE, date_range, limit=top
    )

    suggestions = []
    if summary.total_expense > summary.total_income:
        suggestions.append(
            "You spent more than you earned last month. "
            "Try to identify areas to cut back."
        )
    if (
        top_categories
        and top_categories[0].total > summary.total_expense * DOMINANT_CATEGORY_SHARE
    ):
        suggestions.append(
            f'Your spending on "{top_categories[0].category_name}" was significant. '
            "See if there are ways to optimize it."
        )
    if summary.balance > 0:
        suggestions.append(
            f"Great job saving {currency}{round_money(summary.balance)}! "
            "Consider allocating some of it towards your financial goals."
        )

    return MonthlyReport(
        month_name=first_day.strftime("%B"),
        year=first_day.year,
        total_income=summary.total_income,
        total_expense=summary.total_expense,
        net_savings=summary.balance,
        top_categories=top_categories,
        suggestions=suggestions,
    )


def run_daily_reports(services, dispatcher, now: datetime) -> int:
    """Send yesterday's expense report to every opted-in user.

    Users are processed one at a time. A failure for one user is logged and
    the run continues with the next.

    Returns:
        Number of reports dispatched.
    """
    tz = services.config.tzinfo
    users = services.users.find_report_recipients("daily_report")
    logger.info(f"Daily report run for {len(users)} user(s)")

    sent = 0
    for user in users:
        try:
            report = build_daily_report(services, user, now, tz)
            dispatcher.dispatch(
                daily_report_request(user, report, services.config.currency_symbol)
            )
            sent += 1
        except Exception as e:
            logger.error(f"Failed to send daily report to {user.email}: {e}")

    logger.info(f"Daily report run finished: {sent}/{len(users)} sent")
    return sent


def run_monthly_reports(services, dispatcher, now: datetime) -> int:
    """Send last month's overview to every opted-in user.

    Returns:
        Number of reports dispatched.
    """
    config = services.config
    tz = config.tzinfo
    users = services.users.find_report_recipients("monthly_report")
    logger.info(f"Monthly overview run for {len(users)} user(s)")

    sent = 0
    for user in users:
        try:
            report = build_monthly_report(
                services,
                user,
                now,
                tz,
                top=config.top_categories,
                currency=config.currency_symbol,
            )
            dispatcher.dispatch(
                monthly_report_request(user, report, config.currency_symbol)
            )
            sent += 1
        except Exception as e:
            logger.error(f"Failed to send monthly overview to {user.email}: {e}")

    logger.info(f"Monthly overview run finished: {sent}/{len(users)} sent")
    return sent
