"""Transaction service for database operations.

Besides CRUD this is the store side of the spending aggregator: it answers
filtered lookups and sums over a user's transactions.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from errors import InvalidCategoryError, NotFoundError
from models.category import CATEGORY_TYPES
from models.transaction import Transaction, format_timestamp, parse_timestamp
from tools.amounts import parse_amount

# SQL Query Constants
_TRANSACTION_SELECT_FIELDS = """id, user_id, type, amount, category_id, date,
       source_destination, notes"""

_TRANSACTION_INSERT_FIELDS = """user_id, type, amount, category_id, date,
    source_destination, notes"""

# Automatically generate placeholders from field count
_TRANSACTION_INSERT_PLACEHOLDERS = (
    f"({', '.join(['?'] * len(_TRANSACTION_INSERT_FIELDS.split(',')))})"
)


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db_manager, categories):
        """Initialize the transaction service.

        Args:
            db_manager: Database manager instance for database operations.
            categories: CategoryService used to check category/type consistency.
        """
        self.db_manager = db_manager
        self.categories = categories

    def create(self, transaction: Transaction) -> Transaction:
        """Validate and insert a single transaction.

        Args:
            transaction: Transaction object to insert (id is ignored).

        Returns:
            A copy of the transaction with id populated and amount normalized.

        Raises:
            InvalidAmountError: If the amount is not a finite positive number.
            InvalidCategoryError: If the type is unknown or the category does
                not match the transaction type.
            NotFoundError: If the category does not exist or belongs to another user.
            ValueError: If the date is naive.
        """
        amount = parse_amount(transaction.amount)
        self._check_category(transaction.user_id, transaction.type, transaction.category_id)

        row = transaction.to_dict()
        row["amount"] = float(amount)

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                INSERT INTO transactions ({_TRANSACTION_INSERT_FIELDS})
                VALUES {_TRANSACTION_INSERT_PLACEHOLDERS}
                """,
                (
                    row["user_id"],
                    row["type"],
                    row["amount"],
                    row["category_id"],
                    row["date"],
                    row["source_destination"],
                    row["notes"],
                ),
            )
            conn.commit()

            return Transaction(
                id=cursor.lastrowid,
                user_id=transaction.user_id,
                type=transaction.type,
                amount=amount,
                category_id=transaction.category_id,
                date=transaction.date,
                source_destination=transaction.source_destination,
                notes=transaction.notes,
            )

    def find(self, transaction_id: int) -> Optional[Transaction]:
        """Get a single transaction by ID.

        Returns:
            Transaction object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_TRANSACTION_SELECT_FIELDS}
                FROM transactions
                WHERE id = ?
                """,
                (transaction_id,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_transaction(row)
            return None

    def delete(self, user_id: int, transaction_id: int) -> bool:
        """Delete one of a user's transactions.

        Returns:
            True if deleted, False if not found or owned by someone else.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE id = ? AND user_id = ?",
                (transaction_id, user_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def find_by_filter(
        self,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        *,
        type: Optional[str] = None,
        category_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Transaction]:
        """Get a user's transactions matching all given filters.

        Args:
            user_id: Owner of the transactions.
            start: Inclusive lower bound (aware datetime).
            end: Inclusive upper bound (aware datetime).
            type: 'income' or 'expense'; None for both.
            category_id: Restrict to one category; None for all.
            limit: Maximum number of rows.

        Returns:
            List of Transaction objects ordered by date (newest first).
        """
        where, params = self._build_filter(user_id, start, end, type, category_id)
        query = f"""
            SELECT {_TRANSACTION_SELECT_FIELDS}
            FROM transactions
            WHERE {where}
            ORDER BY date DESC, id DESC
        """
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        with self.db_manager.connect() as conn:
            cursor = conn.execute(query, params)
            return [self._row_to_transaction(row) for row in cursor.fetchall()]

    def sum_amounts(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
        *,
        type: Optional[str] = None,
        category_id: Optional[int] = None,
    ) -> Decimal:
        """Sum amounts of a user's transactions matching all given filters.

        Amounts are summed as Decimals so totals carry no float drift.

        Returns:
            The total, Decimal("0") when nothing matches.
        """
        where, params = self._build_filter(user_id, start, end, type, category_id)

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT amount FROM transactions WHERE {where}", params
            )
            return sum(
                (Decimal(str(row[0])) for row in cursor.fetchall()), Decimal("0")
            )

    def sum_by_category(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
        *,
        type: Optional[str] = None,
    ) -> Dict[int, Decimal]:
        """Sum amounts grouped by category.

        Returns:
            Dictionary mapping category_id to total; empty when nothing matches.
        """
        where, params = self._build_filter(user_id, start, end, type, None)

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT category_id, amount FROM transactions WHERE {where}",
                params,
            )
            totals: Dict[int, Decimal] = {}
            for category_id, amount in cursor.fetchall():
                totals[category_id] = totals.get(category_id, Decimal("0")) + Decimal(
                    str(amount)
                )
            return totals

    def _build_filter(self, user_id, start, end, type, category_id):
        clauses = ["user_id = ?"]
        params = [user_id]

        if start is not None:
            clauses.append("date >= ?")
            params.append(format_timestamp(start))

        if end is not None:
            clauses.append("date <= ?")
            params.append(format_timestamp(end))

        if type is not None:
            clauses.append("type = ?")
            params.append(type)

        if category_id is not None:
            clauses.append("category_id = ?")
            params.append(category_id)

        return " AND ".join(clauses), params

    def _check_category(self, user_id: int, transaction_type: str, category_id: int):
        if transaction_type not in CATEGORY_TYPES:
            raise InvalidCategoryError(f"Unknown transaction type: {transaction_type}")

        category = self.categories.find(category_id)
        if category is None or not category.is_visible_to(user_id):
            raise NotFoundError("Category", category_id)

        if category.type != transaction_type:
            raise InvalidCategoryError(
                f"Category '{category.name}' is an {category.type} category, "
                f"not {transaction_type}"
            )

    def _row_to_transaction(self, row: tuple) -> Transaction:
        """Convert a database row to a Transaction object."""
        return Transaction(
            id=row[0],
            user_id=row[1],
            type=row[2],
            amount=Decimal(str(row[3])),
            category_id=row[4],
            date=parse_timestamp(row[5]),
            source_destination=row[6],
            notes=row[7],
        )
