"""Tests for CategoryService."""

import sqlite3

import pytest

from errors import InvalidCategoryError


class TestCategoryService:
    """Tests for CategoryService."""

    def test_create_predefined(self, services):
        category = services.categories.create("Food", "expense", color="#FF6384")

        assert category.id is not None
        assert category.is_predefined
        assert services.categories.find(category.id) == category

    def test_create_rejects_unknown_type(self, services):
        with pytest.raises(InvalidCategoryError):
            services.categories.create("Food", "transfer")

    def test_find_all_includes_own_and_predefined(self, services, user):
        other = services.users.create("Ravi", "ravi@example.com")
        services.categories.create("Food", "expense")
        services.categories.create("Salary", "income")
        services.categories.create("Pets", "expense", user_id=user.id)
        services.categories.create("Hobby", "expense", user_id=other.id)

        names = [c.name for c in services.categories.find_all(user.id)]

        assert names == ["Food", "Pets", "Salary"]
        assert [c.name for c in services.categories.find_all()] == ["Food", "Salary"]

    def test_same_name_allowed_for_different_types_and_owners(self, services, user):
        services.categories.create("Gifts", "expense")
        services.categories.create("Gifts", "income")
        services.categories.create("Gifts", "expense", user_id=user.id)

        with pytest.raises(sqlite3.IntegrityError):
            services.categories.create("Gifts", "expense")

    def test_find_by_name(self, services, user):
        predefined = services.categories.create("Food", "expense")
        own = services.categories.create("Food", "expense", user_id=user.id)

        assert services.categories.find_by_name("Food", "expense") == predefined
        assert services.categories.find_by_name("Food", "expense", user.id) == own
        assert services.categories.find_by_name("Food", "income") is None

    def test_find_many_skips_missing(self, services):
        food = services.categories.create("Food", "expense")

        assert services.categories.find_many([food.id, 999]) == [food]
        assert services.categories.find_many([]) == []

    def test_visibility(self, services, user):
        other = services.users.create("Ravi", "ravi@example.com")
        own = services.categories.create("Pets", "expense", user_id=user.id)

        assert own.is_visible_to(user.id)
        assert not own.is_visible_to(other.id)

    def test_delete(self, services):
        category = services.categories.create("Food", "expense")

        assert services.categories.delete(category.id)
        assert services.categories.find(category.id) is None
        assert not services.categories.delete(category.id)
