"""Category service for database operations."""

from typing import List, Optional
from errors import InvalidCategoryError
from models.category import Category, CATEGORY_TYPES

_CATEGORY_SELECT_FIELDS = "id, user_id, name, type, color"


class CategoryService:
    """Service for managing predefined and user-defined categories."""

    def __init__(self, db_manager):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self, user_id: Optional[int] = None) -> List[Category]:
        """Get the categories visible to a user.

        Args:
            user_id: If given, predefined categories plus the user's own.
                     If None, only predefined categories.

        Returns:
            List of Category objects, ordered by type then name.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_CATEGORY_SELECT_FIELDS}
                FROM categories
                WHERE user_id IS NULL OR user_id = ?
                ORDER BY type, name
                """,
                (user_id,),
            )
            return [self._row_to_category(row) for row in cursor.fetchall()]

    def find(self, category_id: int) -> Optional[Category]:
        """Get a single category by ID.

        Returns:
            Category object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories WHERE id = ?",
                (category_id,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_category(row)
            return None

    def find_many(self, category_ids: List[int]) -> List[Category]:
        """Get several categories in one query. Missing IDs are skipped."""
        if not category_ids:
            return []

        placeholders = ", ".join(["?"] * len(category_ids))
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_CATEGORY_SELECT_FIELDS}
                FROM categories
                WHERE id IN ({placeholders})
                """,
                list(category_ids),
            )
            return [self._row_to_category(row) for row in cursor.fetchall()]

    def find_by_name(
        self, name: str, category_type: str, user_id: Optional[int] = None
    ) -> Optional[Category]:
        """Get a category by name and type for an owner (None = predefined)."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_CATEGORY_SELECT_FIELDS}
                FROM categories
                WHERE name = ? AND type = ? AND user_id IS ?
                """,
                (name, category_type, user_id),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_category(row)
            return None

    def create(
        self,
        name: str,
        category_type: str,
        user_id: Optional[int] = None,
        color: str = "#CCCCCC",
    ) -> Category:
        """Create a new category.

        Args:
            name: Category name (unique per owner and type).
            category_type: 'income' or 'expense'.
            user_id: Owning user, or None for a predefined category.
            color: Hex color for charts.

        Returns:
            The created Category object with id populated.

        Raises:
            InvalidCategoryError: If the type is unknown.
            sqlite3.IntegrityError: If the name is already taken for this owner and type.
        """
        if category_type not in CATEGORY_TYPES:
            raise InvalidCategoryError(f"Unknown category type: {category_type}")

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "INSERT INTO categories (user_id, name, type, color) VALUES (?, ?, ?, ?)",
                (user_id, name, category_type, color),
            )
            conn.commit()

            return Category(
                id=cursor.lastrowid,
                user_id=user_id,
                name=name,
                type=category_type,
                color=color,
            )

    def delete(self, category_id: int) -> bool:
        """Delete a category by ID.

        Returns:
            True if category was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            conn.commit()
            return cursor.rowcount > 0

    def _row_to_category(self, row: tuple) -> Category:
        return Category(
            id=row[0], user_id=row[1], name=row[2], type=row[3], color=row[4]
        )
