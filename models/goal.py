"""Savings goal model."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Goal:
    """A savings target.

    Goals are immutable values: progress updates produce a new Goal, which
    the caller persists.

    Attributes:
        id: Unique identifier (auto-generated).
        user_id: Owning user.
        name: Display name.
        target_amount: Amount to reach, always positive.
        current_amount: Amount saved so far, never negative.
        deadline: Optional target day.
        description: Optional free text.
        is_achieved: current_amount >= target_amount.
        version: Optimistic concurrency counter.
    """

    id: int
    user_id: int
    name: str
    target_amount: Decimal
    current_amount: Decimal = Decimal("0")
    deadline: Optional[date] = None
    description: Optional[str] = None
    is_achieved: bool = False
    version: int = 1
