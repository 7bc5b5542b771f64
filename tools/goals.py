"""Savings goal progress tracking."""

import dataclasses
from dataclasses import dataclass
from decimal import Decimal
from models.goal import Goal
from tools.amounts import parse_amount, percentage


@dataclass(frozen=True)
class ContributionResult:
    """Outcome of a progress update.

    Attributes:
        goal: The goal with the new amount and recomputed achievement.
        just_achieved: True only when this update moved the goal from
            not achieved to achieved.
    """

    goal: Goal
    just_achieved: bool


def recompute_achievement(goal: Goal) -> Goal:
    """Return the goal with is_achieved derived from its amounts."""
    return dataclasses.replace(
        goal, is_achieved=goal.current_amount >= goal.target_amount
    )


def apply_contribution(goal: Goal, new_current_amount) -> ContributionResult:
    """Set a goal's saved amount and detect the achievement transition.

    The goal passed in is not modified.

    Args:
        goal: Goal as currently persisted.
        new_current_amount: New total saved so far (not an increment).

    Returns:
        ContributionResult with the updated goal.

    Raises:
        InvalidAmountError: If the amount is not a finite number or is negative.
    """
    amount = parse_amount(new_current_amount, allow_zero=True)
    updated = recompute_achievement(dataclasses.replace(goal, current_amount=amount))

    return ContributionResult(
        goal=updated,
        just_achieved=updated.is_achieved and not goal.is_achieved,
    )


def progress_percentage(goal: Goal) -> Decimal:
    """Share of the target saved, clamped to [0, 100]; 0 for a non-positive target."""
    if goal.target_amount <= 0:
        return Decimal("0")
    return percentage(goal.current_amount, goal.target_amount)
