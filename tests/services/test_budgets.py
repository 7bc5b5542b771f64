"""Tests for BudgetService."""

from datetime import date
from decimal import Decimal

import pytest

from errors import (
    ConcurrentModificationError,
    InvalidAmountError,
    InvalidCategoryError,
    InvalidPeriodError,
    NotFoundError,
)
from models.budget import BreachState


class TestBudgetService:
    """Tests for BudgetService."""

    def test_create_and_find(self, services, user, food):
        budget = services.budgets.create(
            user.id, "Food", "1000", "monthly", date(2024, 3, 1), category_id=food.id
        )

        found = services.budgets.find(budget.id)

        assert found == budget
        assert found.amount == Decimal("1000")
        assert found.version == 1
        assert found.breach_state == BreachState()
        assert not found.is_global

    def test_end_date_is_dropped_for_recurring_budgets(self, services, user):
        budget = services.budgets.create(
            user.id, "All", 500, "monthly", date(2024, 3, 1), end_date=date(2024, 3, 10)
        )

        assert budget.end_date is None
        assert budget.is_global

    @pytest.mark.parametrize("amount", [0, -100, "NaN", "lots"])
    def test_rejects_invalid_amount(self, services, user, amount):
        with pytest.raises(InvalidAmountError):
            services.budgets.create(user.id, "Bad", amount, "monthly", date(2024, 3, 1))

    def test_rejects_unknown_period(self, services, user):
        with pytest.raises(InvalidPeriodError):
            services.budgets.create(user.id, "Bad", 100, "weekly", date(2024, 3, 1))

    def test_custom_requires_valid_end_date(self, services, user):
        with pytest.raises(InvalidPeriodError):
            services.budgets.create(user.id, "Trip", 100, "custom", date(2024, 3, 1))

        with pytest.raises(InvalidPeriodError):
            services.budgets.create(
                user.id, "Trip", 100, "custom", date(2024, 3, 10), end_date=date(2024, 3, 1)
            )

    def test_rejects_income_category(self, services, user, salary):
        with pytest.raises(InvalidCategoryError):
            services.budgets.create(
                user.id, "Bad", 100, "monthly", date(2024, 3, 1), category_id=salary.id
            )

    def test_rejects_other_users_category(self, services, user):
        other = services.users.create("Ravi", "ravi@example.com")
        private = services.categories.create("Pets", "expense", user_id=other.id)

        with pytest.raises(NotFoundError):
            services.budgets.create(
                user.id, "Pets", 100, "monthly", date(2024, 3, 1), category_id=private.id
            )

    def test_get_owned(self, services, user):
        other = services.users.create("Ravi", "ravi@example.com")
        budget = services.budgets.create(user.id, "All", 500, "monthly", date(2024, 3, 1))

        assert services.budgets.get_owned(user.id, budget.id) == budget
        with pytest.raises(NotFoundError, match="Budget with ID"):
            services.budgets.get_owned(other.id, budget.id)
        with pytest.raises(NotFoundError):
            services.budgets.get_owned(user.id, 999)

    def test_find_by_user_newest_anchor_first(self, services, user, food):
        older = services.budgets.create(user.id, "Jan", 100, "monthly", date(2024, 1, 1))
        newer = services.budgets.create(
            user.id, "Year", 100, "yearly", date(2024, 4, 1), category_id=food.id
        )

        assert [b.id for b in services.budgets.find_by_user(user.id)] == [newer.id, older.id]
        assert [b.id for b in services.budgets.find_by_user(user.id, period="monthly")] == [
            older.id
        ]
        assert [
            b.id for b in services.budgets.find_by_user(user.id, category_id=food.id)
        ] == [newer.id]

    def test_find_covering_expense(self, services, user, food):
        travel = services.categories.create("Travel", "expense")
        overall = services.budgets.create(user.id, "All", 100, "monthly", date(2024, 3, 1))
        food_budget = services.budgets.create(
            user.id, "Food", 100, "monthly", date(2024, 3, 1), category_id=food.id
        )
        services.budgets.create(
            user.id, "Travel", 100, "monthly", date(2024, 3, 1), category_id=travel.id
        )
        services.budgets.create(
            user.id, "Later", 100, "monthly", date(2024, 4, 1), category_id=food.id
        )

        covering = services.budgets.find_covering_expense(user.id, food.id, date(2024, 3, 15))

        assert [b.id for b in covering] == [overall.id, food_budget.id]

    def test_update_bumps_version(self, services, user):
        budget = services.budgets.create(user.id, "All", 500, "monthly", date(2024, 3, 1))

        updated = services.budgets.update(user.id, budget.id, name="Everything", amount="750")

        assert updated.version == 2
        assert services.budgets.find(budget.id) == updated
        assert updated.amount == Decimal("750")

    def test_update_rejects_unknown_fields(self, services, user):
        budget = services.budgets.create(user.id, "All", 500, "monthly", date(2024, 3, 1))

        with pytest.raises(ValueError):
            services.budgets.update(user.id, budget.id, user_id=2)

    def test_moving_the_instance_resets_alert_state(self, services, user):
        budget = services.budgets.create(user.id, "All", 500, "monthly", date(2024, 3, 1))
        budget = services.budgets.save_breach_state(
            budget, BreachState(notified_at_80=True, notified_at_100=True)
        )

        renamed = services.budgets.update(user.id, budget.id, name="Renamed")
        moved = services.budgets.update(user.id, budget.id, start_date=date(2024, 4, 1))

        assert renamed.breach_state == BreachState(notified_at_80=True, notified_at_100=True)
        assert moved.breach_state == BreachState()

    @pytest.mark.parametrize("field", ["amount", "category_id"])
    def test_changing_what_is_measured_resets_alert_state(self, services, user, food, field):
        budget = services.budgets.create(user.id, "All", 500, "monthly", date(2024, 3, 1))
        budget = services.budgets.save_breach_state(budget, BreachState(notified_at_80=True))
        changes = {"amount": 2000, "category_id": food.id}

        updated = services.budgets.update(user.id, budget.id, **{field: changes[field]})

        assert updated.breach_state == BreachState()
        assert services.budgets.find(budget.id).breach_state == BreachState()

    def test_stale_write_is_rejected(self, services, user):
        budget = services.budgets.create(user.id, "All", 500, "monthly", date(2024, 3, 1))
        services.budgets.save_breach_state(budget, BreachState(notified_at_80=True))

        with pytest.raises(ConcurrentModificationError):
            services.budgets.save_breach_state(budget, BreachState(notified_at_100=True))

        assert services.budgets.find(budget.id).breach_state == BreachState(notified_at_80=True)

    def test_delete_requires_owner(self, services, user):
        other = services.users.create("Ravi", "ravi@example.com")
        budget = services.budgets.create(user.id, "All", 500, "monthly", date(2024, 3, 1))

        assert not services.budgets.delete(other.id, budget.id)
        assert services.budgets.delete(user.id, budget.id)
        assert services.budgets.find(budget.id) is None
