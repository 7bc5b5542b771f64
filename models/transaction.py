from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

# Stored timestamps are UTC with millisecond precision so that lexical
# comparison in SQL matches chronological order.
_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


def format_timestamp(value: datetime) -> str:
    """Convert an aware datetime to the stored UTC string form.

    Raises:
        ValueError: If the datetime is naive.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"Timestamp must be timezone-aware: {value!r}")
    utc_value = value.astimezone(timezone.utc)
    return (
        f"{utc_value.strftime(_TIMESTAMP_FORMAT)}"
        f".{utc_value.microsecond // 1000:03d}"
    )


def parse_timestamp(value: str) -> datetime:
    """Parse a stored UTC string back into an aware datetime."""
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


@dataclass
class Transaction:
    id: Optional[int]
    user_id: int
    type: str  # 'income' or 'expense'
    amount: Decimal  # always positive
    category_id: int
    date: datetime  # timezone-aware
    source_destination: Optional[str] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert transaction to dictionary for database storage."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "type": self.type,
            "amount": float(self.amount),
            "category_id": self.category_id,
            "date": format_timestamp(self.date),
            "source_destination": self.source_destination,
            "notes": self.notes,
        }
