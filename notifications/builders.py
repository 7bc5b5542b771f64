"""Build notification requests from tracking results."""

from decimal import Decimal
from typing import List
from models.budget import Budget, BudgetStatus
from models.goal import Goal
from models.user import User
from notifications.dispatchers.base import (
    BUDGET_ALERT,
    DAILY_REPORT,
    GOAL_ACHIEVED,
    MONTHLY_REPORT,
    NotificationRequest,
)
from notifications.templates.loader import TemplateManager
from tools.amounts import round_money

_templates = TemplateManager()


def _money(value: Decimal) -> str:
    return f"{round_money(value):,.2f}"


def _category_lines(items, currency: str, empty: str) -> str:
    if not items:
        return empty
    return "\n".join(
        f"- {item.category_name}: {currency}{_money(item.total)}" for item in items
    )


def _request(kind: str, user: User, template: str, variables: dict, payload: dict):
    rendered = _templates.render(template, {"user_name": user.name or "User", **variables})
    return NotificationRequest(
        kind=kind,
        user_id=user.id,
        recipient=user.email,
        subject=rendered["subject"],
        body=rendered["body"],
        payload={**payload, "template_version": rendered["version"]},
    )


def budget_alert_request(
    user: User, budget: Budget, status: BudgetStatus, threshold: int, currency: str
) -> NotificationRequest:
    """Alert that a budget crossed the 80% or 100% threshold."""
    return _request(
        BUDGET_ALERT,
        user,
        "budget_alert",
        {
            "currency": currency,
            "threshold": threshold,
            "budget_name": budget.name or "Budget",
            "budget_amount": _money(status.amount),
            "total_spent": _money(status.total_spent),
            "percentage_used": status.percentage_used,
            "remaining": _money(status.remaining),
        },
        {
            "budget_id": budget.id,
            "threshold": threshold,
            "total_spent": status.total_spent,
            "percentage_used": status.percentage_used,
        },
    )


def goal_achieved_request(user: User, goal: Goal, currency: str) -> NotificationRequest:
    """One-time celebration when a goal is reached."""
    return _request(
        GOAL_ACHIEVED,
        user,
        "goal_achieved",
        {
            "currency": currency,
            "goal_name": goal.name,
            "current_amount": _money(goal.current_amount),
            "target_amount": _money(goal.target_amount),
        },
        {"goal_id": goal.id, "current_amount": goal.current_amount},
    )


def daily_report_request(user: User, report, currency: str) -> NotificationRequest:
    """Daily expense report built by tools.reports.build_daily_report."""
    report_date = report.report_date.strftime("%B %d, %Y")
    return _request(
        DAILY_REPORT,
        user,
        "daily_report",
        {
            "currency": currency,
            "report_date": report_date,
            "total_spent": _money(report.total_spent),
            "category_lines": _category_lines(
                report.expenses_by_category, currency, "No expenses recorded."
            ),
        },
        {
            "report_date": report.report_date.isoformat(),
            "total_spent": report.total_spent,
        },
    )


def monthly_report_request(user: User, report, currency: str) -> NotificationRequest:
    """Monthly overview built by tools.reports.build_monthly_report."""
    suggestions: List[str] = report.suggestions
    return _request(
        MONTHLY_REPORT,
        user,
        "monthly_report",
        {
            "currency": currency,
            "month_name": report.month_name,
            "year": report.year,
            "total_income": _money(report.total_income),
            "total_expense": _money(report.total_expense),
            "net_savings": _money(report.net_savings),
            "category_lines": _category_lines(
                report.top_categories, currency, "No spending data for this month."
            ),
            "suggestion_lines": "\n".join(f"* {s}" for s in suggestions),
        },
        {
            "month": f"{report.year}-{report.month_name}",
            "total_income": report.total_income,
            "total_expense": report.total_expense,
            "net_savings": report.net_savings,
        },
    )
