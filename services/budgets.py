"""Budget service for database operations."""

import dataclasses
from datetime import date
from decimal import Decimal
from typing import List, Optional
from errors import (
    ConcurrentModificationError,
    InvalidCategoryError,
    InvalidPeriodError,
    NotFoundError,
)
from models.budget import Budget, BreachState, BUDGET_PERIODS, CUSTOM
from models.category import EXPENSE
from tools.amounts import parse_amount
from logger import get_logger

logger = get_logger()

_BUDGET_SELECT_FIELDS = """id, user_id, name, category_id, amount, period, start_date,
       end_date, notifications_enabled, notified_at_80, notified_at_100, version"""

# Changing any of these changes what the alert thresholds are measured
# against, so they start over.
_ALERT_RESET_FIELDS = {"amount", "category_id", "period", "start_date", "end_date"}


class BudgetService:
    """Service for managing budgets."""

    def __init__(self, db_manager, categories):
        """Initialize the budget service.

        Args:
            db_manager: Database manager instance for database operations.
            categories: CategoryService used to validate budget categories.
        """
        self.db_manager = db_manager
        self.categories = categories

    def create(
        self,
        user_id: int,
        name: str,
        amount,
        period: str,
        start_date: date,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        notifications_enabled: bool = True,
    ) -> Budget:
        """Validate and create a budget.

        Args:
            user_id: Owning user.
            name: Display name.
            amount: Spending limit; must be a finite number > 0.
            period: 'monthly', 'yearly' or 'custom'.
            start_date: Anchor day.
            end_date: Required for custom budgets, ignored otherwise.
            category_id: Expense category, or None for a global budget.
            notifications_enabled: Whether threshold alerts are delivered.

        Returns:
            The created Budget with id populated.

        Raises:
            InvalidAmountError: If amount is not positive and finite.
            InvalidPeriodError: If period is unknown or a custom range is invalid.
            InvalidCategoryError: If the category is not an expense category.
            NotFoundError: If the category does not exist or is not visible to the user.
        """
        budget = Budget(
            id=0,
            user_id=user_id,
            name=name,
            category_id=category_id,
            amount=parse_amount(amount),
            period=period,
            start_date=start_date,
            end_date=end_date if period == CUSTOM else None,
            notifications_enabled=notifications_enabled,
        )
        self._validate(budget)

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO budgets (user_id, name, category_id, amount, period,
                                     start_date, end_date, notifications_enabled)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    budget.user_id,
                    budget.name,
                    budget.category_id,
                    float(budget.amount),
                    budget.period,
                    budget.start_date.isoformat(),
                    budget.end_date.isoformat() if budget.end_date else None,
                    budget.notifications_enabled,
                ),
            )
            conn.commit()

            return dataclasses.replace(budget, id=cursor.lastrowid)

    def find(self, budget_id: int) -> Optional[Budget]:
        """Get a single budget by ID.

        Returns:
            Budget object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_BUDGET_SELECT_FIELDS} FROM budgets WHERE id = ?",
                (budget_id,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_budget(row)
            return None

    def get_owned(self, user_id: int, budget_id: int) -> Budget:
        """Get a budget that must exist and belong to the user.

        Raises:
            NotFoundError: If missing or owned by another user.
        """
        budget = self.find(budget_id)
        if budget is None or budget.user_id != user_id:
            raise NotFoundError("Budget", budget_id)
        return budget

    def find_by_user(
        self,
        user_id: int,
        *,
        period: Optional[str] = None,
        category_id: Optional[int] = None,
    ) -> List[Budget]:
        """Get a user's budgets, newest anchor first.

        Args:
            user_id: Owning user.
            period: Optional period filter.
            category_id: Optional category filter.
        """
        query = f"SELECT {_BUDGET_SELECT_FIELDS} FROM budgets WHERE user_id = ?"
        params = [user_id]

        if period is not None:
            query += " AND period = ?"
            params.append(period)

        if category_id is not None:
            query += " AND category_id = ?"
            params.append(category_id)

        query += " ORDER BY start_date DESC, id"

        with self.db_manager.connect() as conn:
            cursor = conn.execute(query, params)
            return [self._row_to_budget(row) for row in cursor.fetchall()]

    def find_covering_expense(
        self, user_id: int, category_id: int, day: date
    ) -> List[Budget]:
        """Get budgets that could count an expense: global ones and those for its category.

        Only the anchor is compared here; callers still check the instance range.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_BUDGET_SELECT_FIELDS}
                FROM budgets
                WHERE user_id = ?
                  AND (category_id = ? OR category_id IS NULL)
                  AND start_date <= ?
                ORDER BY id
                """,
                (user_id, category_id, day.isoformat()),
            )
            return [self._row_to_budget(row) for row in cursor.fetchall()]

    def update(self, user_id: int, budget_id: int, **changes) -> Budget:
        """Update budget fields.

        Supported fields: name, amount, period, start_date, end_date,
        category_id, notifications_enabled. Changing the amount, the category
        or the instance (period or dates) clears its alert state.

        Raises:
            ValueError: If unsupported fields are given.
            NotFoundError: If the budget is missing or owned by another user.
            ConcurrentModificationError: If the budget changed since it was read.
        """
        supported = {
            "name",
            "amount",
            "period",
            "start_date",
            "end_date",
            "category_id",
            "notifications_enabled",
        }
        invalid = set(changes) - supported
        if invalid:
            raise ValueError(f"Unsupported field names: {invalid}")

        budget = self.get_owned(user_id, budget_id)
        if "amount" in changes:
            changes["amount"] = parse_amount(changes["amount"])

        updated = dataclasses.replace(budget, **changes)
        if updated.period != CUSTOM:
            updated = dataclasses.replace(updated, end_date=None)
        if _ALERT_RESET_FIELDS & set(changes):
            updated = dataclasses.replace(
                updated, notified_at_80=False, notified_at_100=False
            )
        self._validate(updated)

        return self._write(budget, updated)

    def save_breach_state(self, budget: Budget, state: BreachState) -> Budget:
        """Persist alert state returned by the breach detector.

        Raises:
            ConcurrentModificationError: If the budget changed since it was read.
        """
        updated = dataclasses.replace(
            budget,
            notified_at_80=state.notified_at_80,
            notified_at_100=state.notified_at_100,
        )
        return self._write(budget, updated)

    def delete(self, user_id: int, budget_id: int) -> bool:
        """Delete one of a user's budgets.

        Returns:
            True if deleted, False if not found or owned by someone else.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM budgets WHERE id = ? AND user_id = ?",
                (budget_id, user_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def _write(self, original: Budget, updated: Budget) -> Budget:
        """Write all mutable fields guarded by the version read earlier."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                UPDATE budgets
                SET name = ?, category_id = ?, amount = ?, period = ?,
                    start_date = ?, end_date = ?, notifications_enabled = ?,
                    notified_at_80 = ?, notified_at_100 = ?, version = version + 1
                WHERE id = ? AND version = ?
                """,
                (
                    updated.name,
                    updated.category_id,
                    float(updated.amount),
                    updated.period,
                    updated.start_date.isoformat(),
                    updated.end_date.isoformat() if updated.end_date else None,
                    updated.notifications_enabled,
                    updated.notified_at_80,
                    updated.notified_at_100,
                    original.id,
                    original.version,
                ),
            )
            conn.commit()

            if cursor.rowcount == 0:
                logger.warning(
                    f"Budget {original.id} changed since version {original.version}"
                )
                raise ConcurrentModificationError(
                    "Budget", original.id, original.version
                )

        return dataclasses.replace(updated, version=original.version + 1)

    def _validate(self, budget: Budget) -> None:
        if budget.period not in BUDGET_PERIODS:
            raise InvalidPeriodError(f"Unknown budget period: {budget.period}")

        if budget.period == CUSTOM:
            if budget.end_date is None:
                raise InvalidPeriodError("Custom budgets require an end date")
            if budget.end_date < budget.start_date:
                raise InvalidPeriodError("End date must be on or after start date")

        if budget.category_id is not None:
            category = self.categories.find(budget.category_id)
            if category is None or not category.is_visible_to(budget.user_id):
                raise NotFoundError("Category", budget.category_id)
            if category.type != EXPENSE:
                raise InvalidCategoryError(
                    f"Budgets track expenses; '{category.name}' is an income category"
                )

    def _row_to_budget(self, row: tuple) -> Budget:
        return Budget(
            id=row[0],
            user_id=row[1],
            name=row[2],
            category_id=row[3],
            amount=Decimal(str(row[4])),
            period=row[5],
            start_date=date.fromisoformat(row[6]),
            end_date=date.fromisoformat(row[7]) if row[7] else None,
            notifications_enabled=bool(row[8]),
            notified_at_80=bool(row[9]),
            notified_at_100=bool(row[10]),
            version=row[11],
        )
