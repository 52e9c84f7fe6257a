"""Calendar bucketing and reporting windows.

Every date is handled in UTC. Aware datetimes are converted to UTC before
their date is taken; naive datetimes are assumed to already be UTC.

Week numbers follow ISO-8601: weeks start on Monday and week 1 is the week
containing the year's first Thursday. A date is shifted to the Thursday of
its week and the week number is counted from January 1 of that Thursday's
year, so 2021-01-01 is week 53 and 2024-12-31 is week 1.
"""

from __future__ import annotations

import datetime as dt
import enum
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Union

DateLike = Union[dt.date, dt.datetime, str]


class Window(str, enum.Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


@dataclass(frozen=True)
class Bucket:
    week: int
    month: int
    year: int
    # Year of the week's Thursday; differs from ``year`` around New Year
    week_year: int


def to_utc_date(value: DateLike) -> dt.date:
    """Normalise a date, datetime or ``YYYY-MM-DD`` string to a UTC date."""
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(dt.timezone.utc)
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) > 10:
            # Full ISO timestamp ("2024-03-01T00:00:00.000Z")
            return to_utc_date(dt.datetime.fromisoformat(text.replace("Z", "+00:00")))
        return dt.date.fromisoformat(text)
    raise TypeError(f"Cannot bucket {type(value).__name__!r}")


def utc_today() -> dt.date:
    return dt.datetime.now(dt.timezone.utc).date()


@lru_cache(maxsize=4096)
def _bucket_date(day: dt.date) -> Bucket:
    # Monday=1 .. Sunday=7
    thursday = day + dt.timedelta(days=4 - day.isoweekday())
    year_start = dt.date(thursday.year, 1, 1)
    week = math.ceil(((thursday - year_start).days + 1) / 7)
    return Bucket(week=week, month=day.month, year=day.year, week_year=thursday.year)


def bucket(value: DateLike) -> Bucket:
    """Map a calendar date to its ISO week, month and year."""
    return _bucket_date(to_utc_date(value))


@dataclass(frozen=True)
class Period:
    """Reference period an entry is matched against."""

    window: Window
    reference: dt.date

    @property
    def reference_bucket(self) -> Bucket:
        return bucket(self.reference)

    def contains(self, entry_date: DateLike) -> bool:
        if self.window is Window.ALL:
            return True
        ref = self.reference_bucket
        other = bucket(entry_date)
        if self.window is Window.WEEK:
            return (other.week, other.week_year) == (ref.week, ref.week_year)
        if self.window is Window.MONTH:
            return (other.month, other.year) == (ref.month, ref.year)
        return other.year == ref.year

    def label(self) -> str:
        ref = self.reference_bucket
        if self.window is Window.WEEK:
            return f"Week {ref.week}, {ref.week_year}"
        if self.window is Window.MONTH:
            return self.reference.strftime("%B %Y")
        if self.window is Window.YEAR:
            return str(ref.year)
        return "All time"
