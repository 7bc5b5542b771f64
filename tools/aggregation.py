"""Spending aggregation over a user's transactions.

All functions take the services container and read through the
transaction store; none of them write.
"""

from dataclasses import dataclass
from datetime import tzinfo
from decimal import Decimal
from typing import Dict, List, Optional
from dateutil.relativedelta import relativedelta
from models.category import EXPENSE, INCOME
from tools.periods import DateRange, local_date

DAILY = "daily"
MONTHLY = "monthly"
YEARLY = "yearly"

_BUCKET_FORMATS = {
    DAILY: "%Y-%m-%d",
    MONTHLY: "%Y-%m",
    YEARLY: "%Y",
}

_BUCKET_STEPS = {
    DAILY: relativedelta(days=1),
    MONTHLY: relativedelta(months=1),
    YEARLY: relativedelta(years=1),
}

UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class CategoryTotal:
    category_id: int
    category_name: str
    color: Optional[str]
    total: Decimal


@dataclass(frozen=True)
class Bucket:
    key: str  # YYYY-MM-DD, YYYY-MM or YYYY
    total: Decimal


def sum_by_filter(
    services,
    user_id: int,
    date_range: DateRange,
    type: Optional[str] = None,
    category_id: Optional[int] = None,
) -> Decimal:
    """Total amount of a user's transactions matching all given filters.

    Args:
        services: Services container with transaction service.
        user_id: Owner of the transactions.
        date_range: Inclusive range to sum over.
        type: 'income' or 'expense'; None for both.
        category_id: One category; None means every category.

    Returns:
        The total, Decimal("0") when nothing matches.
    """
    return services.transactions.sum_amounts(
        user_id,
        date_range.start,
        date_range.end,
        type=type,
        category_id=category_id,
    )


def breakdown_by_category(
    services,
    user_id: int,
    type: str,
    date_range: DateRange,
    limit: Optional[int] = 7,
) -> List[CategoryTotal]:
    """Per-category totals, largest first.

    Args:
        services: Services container with transaction and category services.
        user_id: Owner of the transactions.
        type: 'income' or 'expense'.
        date_range: Inclusive range to sum over.
        limit: Maximum number of categories returned; None for all.

    Returns:
        CategoryTotal list sorted by total descending (ties by name).

    Raises:
        ValueError: If limit is less than 1.
    """
    if limit is not None and limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    totals = services.transactions.sum_by_category(
        user_id, date_range.start, date_range.end, type=type
    )
    if not totals:
        return []

    categories = {c.id: c for c in services.categories.find_many(list(totals))}

    breakdown = []
    for category_id, total in totals.items():
        category = categories.get(category_id)
        breakdown.append(
            CategoryTotal(
                category_id=category_id,
                category_name=category.name if category else UNCATEGORIZED,
                color=category.color if category else None,
                total=total,
            )
        )

    breakdown.sort(key=lambda item: (-item.total, item.category_name))
    return breakdown[:limit]


def _bucket_format(granularity: str) -> str:
    if granularity not in _BUCKET_FORMATS:
        raise ValueError(
            f"Invalid granularity: {granularity}. "
            f"Choose from {', '.join(_BUCKET_FORMATS)}."
        )
    return _BUCKET_FORMATS[granularity]


def _bucket_totals(
    services,
    user_id: int,
    date_range: DateRange,
    granularity: str,
    type: Optional[str],
    tz: Optional[tzinfo],
) -> Dict[str, Dict[str, Decimal]]:
    """Totals keyed by bucket, then by transaction type."""
    key_format = _bucket_format(granularity)
    zone = tz or services.config.tzinfo

    transactions = services.transactions.find_by_filter(
        user_id, date_range.start, date_range.end, type=type
    )

    buckets: Dict[str, Dict[str, Decimal]] = {}
    for transaction in transactions:
        key = local_date(transaction.date, zone).strftime(key_format)
        by_type = buckets.setdefault(key, {})
        by_type[transaction.type] = (
            by_type.get(transaction.type, Decimal("0")) + transaction.amount
        )

    return buckets


def bucket_by_granularity(
    services,
    user_id: int,
    date_range: DateRange,
    granularity: str,
    type: Optional[str] = None,
    tz: Optional[tzinfo] = None,
) -> List[Bucket]:
    """Totals per day, month or year, oldest first.

    Only buckets containing transactions are returned. Callers that chart a
    continuous series use fill_missing_buckets.

    Args:
        services: Services container.
        user_id: Owner of the transactions.
        date_range: Inclusive range to sum over.
        granularity: 'daily', 'monthly' or 'yearly'.
        type: 'income' or 'expense'; None for both.
        tz: Zone that decides which day a transaction falls on.
            Defaults to the configured zone.

    Raises:
        ValueError: If granularity is unknown.
    """
    buckets = _bucket_totals(services, user_id, date_range, granularity, type, tz)

    return [
        Bucket(key=key, total=sum(by_type.values(), Decimal("0")))
        for key, by_type in sorted(buckets.items())
    ]


def balance_by_granularity(
    services,
    user_id: int,
    date_range: DateRange,
    granularity: str,
    tz: Optional[tzinfo] = None,
) -> List[Bucket]:
    """Income minus expense per bucket, oldest first."""
    buckets = _bucket_totals(services, user_id, date_range, granularity, None, tz)

    return [
        Bucket(
            key=key,
            total=by_type.get(INCOME, Decimal("0")) - by_type.get(EXPENSE, Decimal("0")),
        )
        for key, by_type in sorted(buckets.items())
    ]


def fill_missing_buckets(
    buckets: List[Bucket],
    date_range: DateRange,
    granularity: str,
    tz: Optional[tzinfo] = None,
) -> List[Bucket]:
    """Add zero buckets for every step of the range that has no data.

    Args:
        buckets: Sparse series from bucket_by_granularity.
        date_range: Range the series was computed over.
        granularity: Granularity the series was computed with.
        tz: Zone of the bucket keys. Defaults to the range's own zone.
    """
    key_format = _bucket_format(granularity)
    zone = tz or date_range.start.tzinfo
    existing = {bucket.key: bucket.total for bucket in buckets}

    current = local_date(date_range.start, zone)
    last = local_date(date_range.end, zone)
    if granularity == MONTHLY:
        current = current.replace(day=1)
    elif granularity == YEARLY:
        current = current.replace(month=1, day=1)

    filled = []
    while current <= last:
        key = current.strftime(key_format)
        filled.append(Bucket(key=key, total=existing.get(key, Decimal("0"))))
        current = current + _BUCKET_STEPS[granularity]

    return filled

