"""Tests for TransactionService."""

from datetime import datetime
from decimal import Decimal

import pytest

from errors import InvalidAmountError, InvalidCategoryError, NotFoundError
from models.transaction import Transaction
from tests.helpers import record, utc


def expense(user_id, category_id, amount="10", when=None):
    return Transaction(
        id=None,
        user_id=user_id,
        type="expense",
        amount=amount,
        category_id=category_id,
        date=when or utc(2024, 3, 15, 10),
    )


class TestTransactionService:
    """Tests for TransactionService."""

    def test_create_and_find(self, services, user, food):
        created = record(
            services, user.id, food, "5.75", utc(2024, 3, 15, 10, 30, 15, 250000),
            source_destination="Starbucks", notes="coffee",
        )

        found = services.transactions.find(created.id)

        assert found == created
        assert found.amount == Decimal("5.75")
        assert found.date == utc(2024, 3, 15, 10, 30, 15, 250000)
        assert found.source_destination == "Starbucks"

    @pytest.mark.parametrize("amount", [0, -5, "abc", "NaN"])
    def test_rejects_invalid_amount(self, services, user, food, amount):
        with pytest.raises(InvalidAmountError):
            services.transactions.create(expense(user.id, food.id, amount))

    def test_rejects_category_of_other_type(self, services, user, salary):
        with pytest.raises(InvalidCategoryError):
            services.transactions.create(expense(user.id, salary.id))

    def test_rejects_unknown_type(self, services, user, food):
        transaction = expense(user.id, food.id)
        transaction.type = "transfer"

        with pytest.raises(InvalidCategoryError):
            services.transactions.create(transaction)

    def test_rejects_missing_category(self, services, user):
        with pytest.raises(NotFoundError):
            services.transactions.create(expense(user.id, 999))

    def test_rejects_other_users_category(self, services, user):
        other = services.users.create("Ravi", "ravi@example.com")
        private = services.categories.create("Pets", "expense", user_id=other.id)

        with pytest.raises(NotFoundError):
            services.transactions.create(expense(user.id, private.id))

    def test_rejects_naive_date(self, services, user, food):
        with pytest.raises(ValueError):
            services.transactions.create(
                expense(user.id, food.id, when=datetime(2024, 3, 15, 10))
            )

    def test_find_by_filter_newest_first(self, services, user, food, salary):
        first = record(services, user.id, food, 10, utc(2024, 3, 1))
        second = record(services, user.id, salary, 20, utc(2024, 3, 2))
        third = record(services, user.id, food, 30, utc(2024, 3, 3))

        everything = services.transactions.find_by_filter(user.id)
        expenses = services.transactions.find_by_filter(user.id, type="expense")
        latest = services.transactions.find_by_filter(user.id, limit=1)
        ranged = services.transactions.find_by_filter(
            user.id, utc(2024, 3, 2), utc(2024, 3, 2, 23, 59)
        )

        assert [t.id for t in everything] == [third.id, second.id, first.id]
        assert [t.id for t in expenses] == [third.id, first.id]
        assert [t.id for t in latest] == [third.id]
        assert [t.id for t in ranged] == [second.id]

    def test_sum_by_category(self, services, user, food):
        travel = services.categories.create("Travel", "expense")
        record(services, user.id, food, 10, utc(2024, 3, 1))
        record(services, user.id, food, "2.5", utc(2024, 3, 2))
        record(services, user.id, travel, 7, utc(2024, 3, 3))

        totals = services.transactions.sum_by_category(
            user.id, utc(2024, 3, 1), utc(2024, 3, 31), type="expense"
        )

        assert totals == {food.id: Decimal("12.5"), travel.id: Decimal("7")}

    def test_delete_requires_owner(self, services, user, food):
        other = services.users.create("Ravi", "ravi@example.com")
        created = record(services, user.id, food, 10, utc(2024, 3, 1))

        assert not services.transactions.delete(other.id, created.id)
        assert services.transactions.delete(user.id, created.id)
        assert services.transactions.find(created.id) is None
