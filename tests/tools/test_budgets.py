"""Tests for budget evaluation."""

from datetime import date
from decimal import Decimal

import pytest
from dateutil import tz

from errors import DivisionInvariantError, InvalidPeriodError
from models.budget import Budget
from tools.budgets import current_instance_range, evaluate
from tests.helpers import record, utc

UTC = tz.UTC


def make_budget(period="monthly", start=date(2024, 3, 1), end=None, amount="1000", category_id=None):
    return Budget(
        id=1,
        user_id=1,
        name="Budget",
        category_id=category_id,
        amount=Decimal(amount),
        period=period,
        start_date=start,
        end_date=end,
    )


class TestCurrentInstanceRange:
    """Tests for current_instance_range."""

    def test_monthly_runs_to_end_of_anchor_month(self):
        result = current_instance_range(make_budget(start=date(2024, 2, 10)), UTC)

        assert result.start == utc(2024, 2, 10)
        assert result.end == utc(2024, 2, 29, 23, 59, 59, 999000)

    def test_yearly_runs_to_day_before_anchor_month_next_year(self):
        result = current_instance_range(
            make_budget(period="yearly", start=date(2024, 4, 1)), UTC
        )

        assert result.start == utc(2024, 4, 1)
        assert result.end == utc(2025, 3, 31, 23, 59, 59, 999000)

    def test_custom_uses_end_date(self):
        result = current_instance_range(
            make_budget(period="custom", start=date(2024, 3, 5), end=date(2024, 3, 9)),
            UTC,
        )

        assert result.start == utc(2024, 3, 5)
        assert result.end == utc(2024, 3, 9, 23, 59, 59, 999000)

    def test_custom_without_end_date(self):
        with pytest.raises(InvalidPeriodError):
            current_instance_range(make_budget(period="custom"), UTC)

    def test_unknown_period(self):
        with pytest.raises(InvalidPeriodError):
            current_instance_range(make_budget(period="weekly"), UTC)


class TestEvaluate:
    """Tests for evaluate."""

    def test_category_budget(self, services, user, food):
        budget = services.budgets.create(
            user.id, "Food", 1000, "monthly", date(2024, 3, 1), category_id=food.id
        )
        record(services, user.id, food, 300, utc(2024, 3, 4, 13))
        record(services, user.id, food, 250, utc(2024, 3, 12, 19))

        status = evaluate(services, budget, UTC)

        assert status.total_spent == Decimal("550")
        assert status.percentage_used == Decimal("55.0")
        assert status.remaining == Decimal("450")

    def test_category_budget_ignores_other_categories(self, services, user, food):
        travel = services.categories.create("Travel", "expense")
        budget = services.budgets.create(
            user.id, "Food", 1000, "monthly", date(2024, 3, 1), category_id=food.id
        )
        record(services, user.id, travel, 800, utc(2024, 3, 4))

        assert evaluate(services, budget, UTC).total_spent == Decimal("0")

    def test_global_budget_counts_all_expenses(self, services, user, food, salary):
        travel = services.categories.create("Travel", "expense")
        budget = services.budgets.create(user.id, "All", 1000, "monthly", date(2024, 3, 1))
        record(services, user.id, food, 100, utc(2024, 3, 4))
        record(services, user.id, travel, 200, utc(2024, 3, 5))
        record(services, user.id, salary, 5000, utc(2024, 3, 5))

        assert evaluate(services, budget, UTC).total_spent == Decimal("300")

    def test_outside_instance_is_ignored(self, services, user, food):
        budget = services.budgets.create(
            user.id, "Food", 1000, "monthly", date(2024, 3, 10), category_id=food.id
        )
        record(services, user.id, food, 100, utc(2024, 3, 9, 23, 59))
        record(services, user.id, food, 100, utc(2024, 4, 1))

        assert evaluate(services, budget, UTC).total_spent == Decimal("0")

    def test_overspending_clamps_percentage(self, services, user, food):
        budget = services.budgets.create(
            user.id, "Food", 500, "monthly", date(2024, 3, 1), category_id=food.id
        )
        record(services, user.id, food, 750, utc(2024, 3, 4))

        status = evaluate(services, budget, UTC)

        assert status.percentage_used == Decimal("100")
        assert status.remaining == Decimal("-250")

    def test_evaluation_is_idempotent(self, services, user, food):
        budget = services.budgets.create(
            user.id, "Food", 1000, "monthly", date(2024, 3, 1), category_id=food.id
        )
        record(services, user.id, food, 123.45, utc(2024, 3, 4))

        assert evaluate(services, budget, UTC) == evaluate(services, budget, UTC)

    def test_adding_expense_never_decreases_percentage(self, services, user, food):
        budget = services.budgets.create(
            user.id, "Food", 1000, "monthly", date(2024, 3, 1), category_id=food.id
        )
        previous = evaluate(services, budget, UTC).percentage_used

        for day, amount in [(2, 100), (5, "0.01"), (9, 600), (20, 500), (31, 10)]:
            record(services, user.id, food, amount, utc(2024, 3, day))
            current = evaluate(services, budget, UTC).percentage_used
            assert current >= previous
            previous = current

    def test_non_positive_amount(self, services):
        with pytest.raises(DivisionInvariantError):
            evaluate(services, make_budget(amount="0"), UTC)
