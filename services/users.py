"""User service for database operations."""

from typing import List, Optional
from models.user import User

_USER_SELECT_FIELDS = (
    "id, name, email, daily_report, monthly_report, budget_alerts"
)


class UserService:
    """Service for managing users and their email preferences."""

    def __init__(self, db_manager):
        """Initialize the user service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def create(
        self,
        name: str,
        email: Optional[str] = None,
        *,
        daily_report: bool = True,
        monthly_report: bool = True,
        budget_alerts: bool = True,
    ) -> User:
        """Create a new user.

        Returns:
            The created User object with id populated.

        Raises:
            sqlite3.IntegrityError: If the email is already registered.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO users (name, email, daily_report, monthly_report, budget_alerts)
                VALUES (?, ?, ?, ?, ?)
                """,
                (name, email, daily_report, monthly_report, budget_alerts),
            )
            conn.commit()

            return User(
                id=cursor.lastrowid,
                name=name,
                email=email,
                daily_report=daily_report,
                monthly_report=monthly_report,
                budget_alerts=budget_alerts,
            )

    def find(self, user_id: int) -> Optional[User]:
        """Get a single user by ID.

        Returns:
            User object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_USER_SELECT_FIELDS} FROM users WHERE id = ?",
                (user_id,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_user(row)
            return None

    def find_all(self) -> List[User]:
        """Get all users, ordered by id."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(f"SELECT {_USER_SELECT_FIELDS} FROM users ORDER BY id")
            return [self._row_to_user(row) for row in cursor.fetchall()]

    def find_report_recipients(self, preference: str) -> List[User]:
        """Get users with an email address who opted in to a report.

        Args:
            preference: 'daily_report', 'monthly_report' or 'budget_alerts'.

        Raises:
            ValueError: If the preference name is unknown.
        """
        if preference not in ("daily_report", "monthly_report", "budget_alerts"):
            raise ValueError(f"Unknown email preference: {preference}")

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_USER_SELECT_FIELDS}
                FROM users
                WHERE {preference} = 1 AND email IS NOT NULL AND email != ''
                ORDER BY id
                """
            )
            return [self._row_to_user(row) for row in cursor.fetchall()]

    def update_preferences(self, user_id: int, **preferences: bool) -> bool:
        """Update one or more email preferences.

        Returns:
            True if the user was updated, False if not found.

        Raises:
            ValueError: If an unknown preference is given.
        """
        supported = {"daily_report", "monthly_report", "budget_alerts"}
        invalid = set(preferences) - supported
        if invalid:
            raise ValueError(f"Unsupported preferences: {invalid}")
        if not preferences:
            return False

        set_clause = ", ".join(f"{name} = ?" for name in preferences)
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"UPDATE users SET {set_clause} WHERE id = ?",
                (*preferences.values(), user_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def _row_to_user(self, row: tuple) -> User:
        return User(
            id=row[0],
            name=row[1],
            email=row[2],
            daily_report=bool(row[3]),
            monthly_report=bool(row[4]),
            budget_alerts=bool(row[5]),
        )
