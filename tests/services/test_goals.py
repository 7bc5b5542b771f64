"""Tests for GoalService."""

from datetime import date
from decimal import Decimal

import pytest

from errors import ConcurrentModificationError, InvalidAmountError
from tools.goals import apply_contribution


class TestGoalService:
    """Tests for GoalService."""

    def test_create_and_find(self, services, user):
        goal = services.goals.create(
            user.id, "Laptop", "80000", deadline=date(2024, 12, 31), description="M3"
        )

        found = services.goals.find(goal.id)

        assert found == goal
        assert found.current_amount == Decimal("0")
        assert not found.is_achieved
        assert found.deadline == date(2024, 12, 31)

    def test_create_already_achieved(self, services, user):
        goal = services.goals.create(user.id, "Bike", 1000, current_amount=1000)

        assert goal.is_achieved

    @pytest.mark.parametrize("target", [0, -1, "abc"])
    def test_rejects_invalid_target(self, services, user, target):
        with pytest.raises(InvalidAmountError):
            services.goals.create(user.id, "Bad", target)

    def test_rejects_negative_current_amount(self, services, user):
        with pytest.raises(InvalidAmountError):
            services.goals.create(user.id, "Bad", 100, current_amount=-5)

    def test_find_by_user(self, services, user):
        open_goal = services.goals.create(user.id, "Laptop", 1000)
        done = services.goals.create(user.id, "Bike", 100, current_amount=100)

        assert [g.id for g in services.goals.find_by_user(user.id)] == [done.id, open_goal.id]
        assert [g.id for g in services.goals.find_by_user(user.id, is_achieved=False)] == [
            open_goal.id
        ]

    def test_apply_changes_rederives_achievement(self, services, user):
        goal = services.goals.create(user.id, "Laptop", 1000, current_amount=600)

        result = services.goals.apply_changes(goal, target_amount=500)

        assert result.just_achieved
        assert result.goal.target_amount == Decimal("500")
        assert not services.goals.find(goal.id).is_achieved

    def test_apply_changes_rejects_saved_amount(self, services, user):
        goal = services.goals.create(user.id, "Laptop", 1000)

        with pytest.raises(ValueError):
            services.goals.apply_changes(goal, current_amount=1000)

    def test_apply_changes_rejects_invalid_target(self, services, user):
        goal = services.goals.create(user.id, "Laptop", 1000)

        with pytest.raises(InvalidAmountError):
            services.goals.apply_changes(goal, target_amount=0)

    def test_concurrent_progress_updates(self, services, user):
        """Two devices read the same version; the second write loses."""
        goal = services.goals.create(user.id, "Laptop", 1000)
        phone = apply_contribution(goal, 300).goal
        laptop = apply_contribution(goal, 500).goal

        services.goals.save(goal, phone)

        with pytest.raises(ConcurrentModificationError):
            services.goals.save(goal, laptop)

        assert services.goals.find(goal.id).current_amount == Decimal("300")

    def test_delete_requires_owner(self, services, user):
        other = services.users.create("Ravi", "ravi@example.com")
        goal = services.goals.create(user.id, "Laptop", 1000)

        assert not services.goals.delete(other.id, goal.id)
        assert services.goals.delete(user.id, goal.id)
        assert services.goals.find(goal.id) is None
