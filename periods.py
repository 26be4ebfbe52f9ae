# periods.py
"""Resolve a period keyword or an explicit date pair into a UTC range.

All datetimes handled here are naive and expressed in UTC, matching how
they are stored in the database.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from dateutil.parser import isoparse

from errors import ValidationError

START_OF_DAY = time(0, 0, 0, 0)
END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def __contains__(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 date or datetime; naive input is taken as UTC."""

    try:
        return to_naive_utc(isoparse(value.strip()))
    except (ValueError, OverflowError, AttributeError):
        raise ValidationError(f"Invalid date: {value!r}")


def parse_calendar_date(value: str) -> date:
    return parse_instant(value).date()


def day_range(day: date) -> DateRange:
    return DateRange(datetime.combine(day, START_OF_DAY), datetime.combine(day, END_OF_DAY))


def resolve_period(
    period: Optional[str] = None,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Optional[DateRange]:
    """Return the inclusive range for the request, or None for all-time.

    An explicit ``from``/``to`` pair wins over the keyword. Open-ended
    keywords (week, month, year) run up to the end of the current day.
    """
    now = to_naive_utc(now) if now is not None else utcnow()
    today = now.date()

    if from_date and to_date:
        start = parse_calendar_date(from_date)
        end = parse_calendar_date(to_date)
        if start > end:
            raise ValidationError("'from' must not be after 'to'")
        return DateRange(day_range(start).start, day_range(end).end)

    end_of_today = day_range(today).end
    if period == "day":
        return day_range(today)
    if period == "week":
        # weekday(): Monday == 0
        monday = today - timedelta(days=today.weekday())
        return DateRange(datetime.combine(monday, START_OF_DAY), end_of_today)
    if period == "month":
        return DateRange(datetime.combine(today.replace(day=1), START_OF_DAY), end_of_today)
    if period == "year":
        return DateRange(datetime.combine(date(today.year, 1, 1), START_OF_DAY), end_of_today)
    return None


def isoformat_z(moment: datetime) -> str:
    """Render ``2024-03-15T23:59:59.999Z``."""

    moment = to_naive_utc(moment)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
