"""Budget model and the values derived from it."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

MONTHLY = "monthly"
YEARLY = "yearly"
CUSTOM = "custom"
BUDGET_PERIODS = (MONTHLY, YEARLY, CUSTOM)


@dataclass(frozen=True)
class BreachState:
    """Which alert thresholds have already been notified for a budget."""

    notified_at_80: bool = False
    notified_at_100: bool = False


@dataclass
class Budget:
    """A recurring spending limit anchored at start_date.

    The budget is a template: the concrete date range it covers is derived
    on every evaluation from period and start_date, never stored.

    Attributes:
        id: Unique identifier (auto-generated).
        user_id: Owning user.
        name: Display name, e.g. "Monthly Food Budget".
        category_id: Expense category, or None for a global budget over all expenses.
        amount: Spending limit, always positive.
        period: 'monthly', 'yearly' or 'custom'.
        start_date: Anchor day of the budget.
        end_date: Last day of a custom budget; None otherwise.
        notifications_enabled: Whether threshold alerts are delivered.
        notified_at_80: 80% alert already sent.
        notified_at_100: 100% alert already sent.
        version: Optimistic concurrency counter.
    """

    id: int
    user_id: int
    name: str
    category_id: Optional[int]
    amount: Decimal
    period: str
    start_date: date
    end_date: Optional[date] = None
    notifications_enabled: bool = True
    notified_at_80: bool = False
    notified_at_100: bool = False
    version: int = 1

    @property
    def is_global(self) -> bool:
        return self.category_id is None

    @property
    def breach_state(self) -> BreachState:
        return BreachState(
            notified_at_80=self.notified_at_80,
            notified_at_100=self.notified_at_100,
        )


@dataclass(frozen=True)
class BudgetStatus:
    """Consumption of a budget's current instance. Computed on read."""

    budget_id: int
    name: str
    amount: Decimal
    total_spent: Decimal
    percentage_used: Decimal  # clamped to [0, 100]
    remaining: Decimal  # negative when overspent
