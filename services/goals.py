"""Goal service for database operations."""

import dataclasses
from datetime import date
from decimal import Decimal
from typing import List, Optional
from errors import ConcurrentModificationError, NotFoundError
from models.goal import Goal
from tools.amounts import parse_amount
from tools.goals import ContributionResult, recompute_achievement
from logger import get_logger

logger = get_logger()

_GOAL_SELECT_FIELDS = """id, user_id, name, target_amount, current_amount, deadline,
       description, is_achieved, version"""


class GoalService:
    """Service for managing savings goals."""

    def __init__(self, db_manager):
        """Initialize the goal service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def create(
        self,
        user_id: int,
        name: str,
        target_amount,
        current_amount=0,
        deadline: Optional[date] = None,
        description: Optional[str] = None,
    ) -> Goal:
        """Validate and create a goal.

        Returns:
            The created Goal with id populated and is_achieved derived.

        Raises:
            InvalidAmountError: If the target is not positive or the current
                amount is negative or not finite.
        """
        goal = recompute_achievement(
            Goal(
                id=0,
                user_id=user_id,
                name=name,
                target_amount=parse_amount(target_amount),
                current_amount=parse_amount(current_amount, allow_zero=True),
                deadline=deadline,
                description=description,
            )
        )

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO goals (user_id, name, target_amount, current_amount,
                                   deadline, description, is_achieved)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    goal.user_id,
                    goal.name,
                    float(goal.target_amount),
                    float(goal.current_amount),
                    goal.deadline.isoformat() if goal.deadline else None,
                    goal.description,
                    goal.is_achieved,
                ),
            )
            conn.commit()

            return dataclasses.replace(goal, id=cursor.lastrowid)

    def find(self, goal_id: int) -> Optional[Goal]:
        """Get a single goal by ID.

        Returns:
            Goal object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_GOAL_SELECT_FIELDS} FROM goals WHERE id = ?",
                (goal_id,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_goal(row)
            return None

    def get_owned(self, user_id: int, goal_id: int) -> Goal:
        """Get a goal that must exist and belong to the user.

        Raises:
            NotFoundError: If missing or owned by another user.
        """
        goal = self.find(goal_id)
        if goal is None or goal.user_id != user_id:
            raise NotFoundError("Goal", goal_id)
        return goal

    def find_by_user(
        self, user_id: int, *, is_achieved: Optional[bool] = None
    ) -> List[Goal]:
        """Get a user's goals, newest first, optionally filtered by achievement."""
        query = f"SELECT {_GOAL_SELECT_FIELDS} FROM goals WHERE user_id = ?"
        params = [user_id]

        if is_achieved is not None:
            query += " AND is_achieved = ?"
            params.append(is_achieved)

        query += " ORDER BY id DESC"

        with self.db_manager.connect() as conn:
            cursor = conn.execute(query, params)
            return [self._row_to_goal(row) for row in cursor.fetchall()]

    def apply_changes(self, goal: Goal, **changes) -> ContributionResult:
        """Apply detail changes to a goal without persisting them.

        Supported fields: name, target_amount, deadline, description. The
        saved amount only moves through contributions.

        Returns:
            ContributionResult flagging a goal achieved by a lowered target.

        Raises:
            ValueError: If unsupported fields are given.
            InvalidAmountError: If the target is invalid.
        """
        supported = {"name", "target_amount", "deadline", "description"}
        invalid = set(changes) - supported
        if invalid:
            raise ValueError(f"Unsupported field names: {invalid}")

        if "target_amount" in changes:
            changes["target_amount"] = parse_amount(changes["target_amount"])

        updated = recompute_achievement(dataclasses.replace(goal, **changes))
        return ContributionResult(
            goal=updated,
            just_achieved=updated.is_achieved and not goal.is_achieved,
        )

    def save(self, original: Goal, updated: Goal) -> Goal:
        """Write a goal guarded by the version it was read at.

        Args:
            original: The goal as read from the store.
            updated: The new values to persist.

        Returns:
            The persisted goal with its version bumped.

        Raises:
            ConcurrentModificationError: If another writer saved first.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                UPDATE goals
                SET name = ?, target_amount = ?, current_amount = ?, deadline = ?,
                    description = ?, is_achieved = ?, version = version + 1
                WHERE id = ? AND version = ?
                """,
                (
                    updated.name,
                    float(updated.target_amount),
                    float(updated.current_amount),
                    updated.deadline.isoformat() if updated.deadline else None,
                    updated.description,
                    updated.is_achieved,
                    original.id,
                    original.version,
                ),
            )
            conn.commit()

            if cursor.rowcount == 0:
                logger.warning(
                    f"Goal {original.id} changed since version {original.version}"
                )
                raise ConcurrentModificationError("Goal", original.id, original.version)

        return dataclasses.replace(updated, version=original.version + 1)

    def delete(self, user_id: int, goal_id: int) -> bool:
        """Delete one of a user's goals.

        Returns:
            True if deleted, False if not found or owned by someone else.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM goals WHERE id = ? AND user_id = ?",
                (goal_id, user_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def _row_to_goal(self, row: tuple) -> Goal:
        return Goal(
            id=row[0],
            user_id=row[1],
            name=row[2],
            target_amount=Decimal(str(row[3])),
            current_amount=Decimal(str(row[4])),
            deadline=date.fromisoformat(row[5]) if row[5] else None,
            description=row[6],
            is_achieved=bool(row[7]),
            version=row[8],
        )
