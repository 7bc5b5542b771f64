"""Reporting period resolution.

Turns a symbolic period token into a concrete, timezone-aware date range.
"now" is always passed in explicitly; nothing in this module reads the
wall clock.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional, Union
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta
from errors import InvalidPeriodError
from logger import get_logger

logger = get_logger()

TODAY = "today"
WEEK = "week"
MONTH = "month"
LAST_MONTH = "last_month"
YEAR = "year"
CUSTOM = "custom"
PERIOD_TOKENS = (TODAY, WEEK, MONTH, LAST_MONTH, YEAR, CUSTOM)

# End of day is the last millisecond, matching stored timestamp precision.
END_OF_DAY = time(23, 59, 59, 999000)

DateLike = Union[date, datetime, str]


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of instants."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


def start_of_day(day: date, zone: tzinfo) -> datetime:
    """First instant of a calendar day in the given zone."""
    return datetime.combine(day, time.min, tzinfo=zone)


def end_of_day(day: date, zone: tzinfo) -> datetime:
    """Last instant of a calendar day in the given zone."""
    return datetime.combine(day, END_OF_DAY, tzinfo=zone)


def local_date(moment: datetime, zone: tzinfo) -> date:
    """Calendar day of an instant as seen in the given zone."""
    return moment.astimezone(zone).date()


def _require_aware(now: datetime) -> None:
    if now.tzinfo is None or now.utcoffset() is None:
        raise ValueError("now must be a timezone-aware datetime")


def _coerce_day(value: DateLike, zone: tzinfo, label: str) -> date:
    """Reduce a custom bound to the calendar day it names in the zone."""
    if isinstance(value, str):
        try:
            value = date_parser.isoparse(value)
        except ValueError as e:
            raise InvalidPeriodError(f"Invalid {label} date: {value!r}") from e

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return local_date(value, zone)

    if isinstance(value, date):
        return value

    raise InvalidPeriodError(f"Invalid {label} date: {value!r}")


def resolve_period(
    token: Optional[str],
    now: datetime,
    custom_start: Optional[DateLike] = None,
    custom_end: Optional[DateLike] = None,
    tz: Optional[tzinfo] = None,
) -> DateRange:
    """Resolve a period token into a concrete date range.

    Every token except 'last_month' and 'custom' ends at the end of today
    (elapsed-so-far semantics). Unknown tokens fall back to 'month'.

    Args:
        token: One of 'today', 'week', 'month', 'last_month', 'year', 'custom'.
        now: Reference instant; must be timezone-aware.
        custom_start: First day of a custom range (date, datetime or ISO string).
        custom_end: Last day of a custom range, included in full.
        tz: Zone for day boundaries. Defaults to now's own zone.

    Returns:
        DateRange with both bounds in the resolution zone.

    Raises:
        InvalidPeriodError: If a custom range is missing a bound, unparseable,
            or ends before it starts.
        ValueError: If now is naive.
    """
    _require_aware(now)
    zone = tz or now.tzinfo
    today = local_date(now, zone)

    if token == CUSTOM:
        if custom_start is None or custom_end is None:
            raise InvalidPeriodError(
                "Custom period requires both a start and an end date"
            )
        first_day = _coerce_day(custom_start, zone, "start")
        last_day = _coerce_day(custom_end, zone, "end")
        if first_day > last_day:
            raise InvalidPeriodError(
                f"Custom period starts after it ends: {first_day} > {last_day}"
            )
        return DateRange(start_of_day(first_day, zone), end_of_day(last_day, zone))

    if token == LAST_MONTH:
        first_of_this_month = today.replace(day=1)
        first_of_last_month = first_of_this_month - relativedelta(months=1)
        last_of_last_month = first_of_this_month - timedelta(days=1)
        return DateRange(
            start_of_day(first_of_last_month, zone),
            end_of_day(last_of_last_month, zone),
        )

    if token == TODAY:
        first_day = today
    elif token == WEEK:
        first_day = today - timedelta(days=today.weekday())
    elif token == YEAR:
        first_day = today.replace(month=1, day=1)
    else:
        if token != MONTH:
            logger.debug(f"Unknown period token {token!r}, using month")
        first_day = today.replace(day=1)

    return DateRange(start_of_day(first_day, zone), end_of_day(today, zone))
