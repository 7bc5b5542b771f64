"""Budget evaluation.

A budget is a template anchored at its start date. Its date range is
derived here on every evaluation; only the single instance that starts at
the anchor exists (no rolling forward into later months or years).
"""

from datetime import timedelta, tzinfo
from dateutil.relativedelta import relativedelta
from errors import DivisionInvariantError, InvalidPeriodError
from models.budget import Budget, BudgetStatus, MONTHLY, YEARLY, CUSTOM
from models.category import EXPENSE
from tools.aggregation import sum_by_filter
from tools.amounts import percentage
from tools.periods import DateRange, end_of_day, start_of_day


def current_instance_range(budget: Budget, tz: tzinfo) -> DateRange:
    """Date range covered by a budget.

    - monthly: anchor day to the last day of the anchor's month
    - yearly: anchor day to the day before the first of the anchor's month
      one year later
    - custom: anchor day to end_date

    Args:
        budget: Budget to resolve.
        tz: Zone for day boundaries.

    Raises:
        InvalidPeriodError: If a custom budget has no end date, or the
            period is unknown.
    """
    first_day = budget.start_date

    if budget.period == MONTHLY:
        last_day = first_day + relativedelta(day=31)
    elif budget.period == YEARLY:
        last_day = first_day + relativedelta(years=1, day=1) - timedelta(days=1)
    elif budget.period == CUSTOM:
        if budget.end_date is None:
            raise InvalidPeriodError(f"Custom budget {budget.id} has no end date")
        last_day = budget.end_date
    else:
        raise InvalidPeriodError(f"Unknown budget period: {budget.period}")

    return DateRange(start_of_day(first_day, tz), end_of_day(last_day, tz))


def evaluate(services, budget: Budget, tz: tzinfo) -> BudgetStatus:
    """Compute how much of a budget's current instance has been spent.

    Args:
        services: Services container with transaction service.
        budget: Budget to evaluate.
        tz: Zone for day boundaries.

    Returns:
        BudgetStatus with percentage_used clamped to [0, 100] and
        remaining allowed to go negative.

    Raises:
        DivisionInvariantError: If the budget amount is not positive.
    """
    if budget.amount <= 0:
        raise DivisionInvariantError(
            f"Budget {budget.id} has non-positive amount {budget.amount}"
        )

    date_range = current_instance_range(budget, tz)
    total_spent = sum_by_filter(
        services,
        budget.user_id,
        date_range,
        type=EXPENSE,
        category_id=budget.category_id,
    )

    return BudgetStatus(
        budget_id=budget.id,
        name=budget.name,
        amount=budget.amount,
        total_spent=total_spent,
        percentage_used=percentage(total_spent, budget.amount),
        remaining=budget.amount - total_spent,
    )
