"""
Submission pipeline: turn a filled-in form into a stored entry.

Checks run in order and each has its own error:

1. the session must have passed the access gate  -> NotAuthorized
2. the consultant must be on the roster          -> UnknownConsultant

Neither failure touches the store. Count fields never fail: anything that
is not a non-negative number becomes 0. The entry only reaches the local
feed after the store accepted it, so a failed write leaves the dashboard
exactly as it was.
"""

from __future__ import annotations

import datetime as dt
import logging
import math
import re
import uuid
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from ..exceptions import NotAuthorized, UnknownConsultant
from ..schemas import COUNT_FIELDS, Entry
from .feed import EntryFeed
from .gate import GateState
from .periods import DateLike, bucket, to_utc_date, utc_today

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

# Largest value an SQLite INTEGER column holds
MAX_COUNT = 2**63 - 1


@dataclass(frozen=True)
class SubmissionResult:
    entry: Entry
    # True when the entry records at least one placement (UI celebration)
    celebrate: bool


def coerce_count(value: Any) -> int:
    """Best-effort conversion of a form value to a non-negative integer.

    Values above ``MAX_COUNT`` (what SQLite can store) count as malformed.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value if 0 <= value <= MAX_COUNT else 0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0
        try:
            # Exact for long digit strings, where float would round
            number = int(value)
        except ValueError:
            pass
        else:
            return coerce_count(number)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or math.isinf(number) or number < 0 or number > MAX_COUNT:
        return 0
    return int(number)


def make_entry_id(consultant: str, created_at: dt.datetime) -> str:
    millis = int(created_at.timestamp() * 1000)
    suffix = uuid.uuid4().hex[:6]
    return f"entry-{millis}-{_WHITESPACE.sub('', consultant)}-{suffix}"


def build_entry(
    consultant: str,
    entry_date: Optional[DateLike],
    form: Mapping[str, Any],
    now: Optional[dt.datetime] = None,
) -> Entry:
    """Normalise form values into the persisted entry shape."""
    created_at = now or dt.datetime.now(dt.timezone.utc)
    day = to_utc_date(entry_date) if entry_date else utc_today()
    b = bucket(day)
    counts = {field: coerce_count(form.get(field)) for field in COUNT_FIELDS}
    return Entry(
        id=make_entry_id(consultant, created_at),
        name=consultant,
        date=day,
        week=b.week,
        month=b.month,
        year=b.year,
        created_at=created_at,
        **counts,
    )


def submit(
    gate: GateState,
    consultant: str,
    entry_date: Optional[DateLike],
    form: Mapping[str, Any],
    *,
    roster: Sequence[str],
    store,
    feed: Optional[EntryFeed] = None,
    now: Optional[dt.datetime] = None,
) -> SubmissionResult:
    """Validate, persist and locally reflect one entry.

    Raises NotAuthorized, UnknownConsultant, or the store's
    PersistenceError. On success the entry is merged into ``feed``.
    """
    if gate is not GateState.UNLOCKED:
        raise NotAuthorized()
    if consultant not in roster:
        raise UnknownConsultant(f"Unknown consultant: {consultant!r}")

    entry = build_entry(consultant, entry_date, form, now=now)
    store.append(entry)
    if feed is not None:
        feed.merge([entry])

    logger.info(
        f"[submission] {entry.id} saved for {entry.date.isoformat()} "
        f"(placements={entry.placements})"
    )
    return SubmissionResult(entry=entry, celebrate=entry.placements > 0)
