"""Category model for transaction categorization."""

from dataclasses import dataclass
from typing import Optional

INCOME = "income"
EXPENSE = "expense"
CATEGORY_TYPES = (INCOME, EXPENSE)


@dataclass
class Category:
    """Represents a transaction category.

    Attributes:
        id: Unique identifier (auto-generated).
        user_id: Owning user, or None for a predefined category.
        name: Category name (unique per owner and type).
        type: 'income' or 'expense'.
        color: Hex color used by charts.
    """

    id: int
    user_id: Optional[int]
    name: str
    type: str
    color: str = "#CCCCCC"

    @property
    def is_predefined(self) -> bool:
        return self.user_id is None

    def is_visible_to(self, user_id: int) -> bool:
        """Whether a user may attach this category to their records."""
        return self.user_id is None or self.user_id == user_id
