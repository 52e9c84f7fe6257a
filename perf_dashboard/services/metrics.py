"""Metrics computation functions for the dashboard.

Each function works on an in-memory list of entries and returns the values
the page renders: per-consultant totals, the team total and the leaderboard.

Important principles
- Totals cover the full roster: consultants without entries appear with zeros.
- Entries for names outside the roster are ignored (renamed or removed people).
- Window matching recomputes the bucket from each entry's date.
- Everything here is pure and recomputed per request; nothing is cached.
"""

from __future__ import annotations

import datetime as dt
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..schemas import COUNT_FIELDS, Aggregate, DashboardData, Entry, RankingEntry
from .periods import Period, Window

MEDALS = ("gold", "silver", "bronze")


def filter_entries(
    entries: Iterable[Entry],
    period: Period,
    consultant: Optional[str] = None,
) -> List[Entry]:
    """Entries inside ``period``, optionally for a single consultant."""
    result = [e for e in entries if period.contains(e.date)]
    if consultant is not None:
        result = [e for e in result if e.name == consultant]
    return result


def compute_aggregates(
    entries: Iterable[Entry],
    roster: Sequence[str],
    window: Window = Window.WEEK,
    reference: Optional[dt.date] = None,
    consultant: Optional[str] = None,
) -> Tuple[List[Aggregate], Aggregate]:
    """Return per-consultant totals (roster order) and the grand total.

    ``reference`` picks the week/month/year to report on and is required
    unless ``window`` is ``Window.ALL``.
    """
    window = Window(window)
    if reference is None and window is not Window.ALL:
        raise ValueError(f"A reference date is required for the {window.value!r} window")
    period = Period(window, reference or dt.date.min)

    base: Dict[str, Dict[str, int]] = {name: dict.fromkeys(COUNT_FIELDS, 0) for name in roster}
    for e in filter_entries(entries, period, consultant):
        counts = base.get(e.name)
        if counts is None:
            continue
        for field in COUNT_FIELDS:
            counts[field] += getattr(e, field) or 0

    per_consultant = [Aggregate(name=name, **counts) for name, counts in base.items()]
    return per_consultant, compute_total(per_consultant)


def compute_total(per_consultant: Iterable[Aggregate]) -> Aggregate:
    totals = dict.fromkeys(COUNT_FIELDS, 0)
    for agg in per_consultant:
        for field in COUNT_FIELDS:
            totals[field] += getattr(agg, field)
    return Aggregate(name="total", **totals)


def compute_ranking(per_consultant: Sequence[Aggregate]) -> List[Aggregate]:
    """Order consultants by placements, then intakes, then interviews.

    ``sorted`` is stable, so full ties keep the roster order of the input.
    """
    return sorted(per_consultant, key=lambda a: (-a.placements, -a.intakes, -a.interviews))


def leaderboard_rows(ranking: Sequence[Aggregate]) -> List[RankingEntry]:
    rows = []
    for idx, agg in enumerate(ranking):
        rows.append(
            RankingEntry(
                position=idx + 1,
                medal=MEDALS[idx] if idx < len(MEDALS) else "",
                name=agg.name,
                placements=agg.placements,
                intakes=agg.intakes,
                interviews=agg.interviews,
                prospects=agg.prospects,
            )
        )
    return rows


def chart_series(per_consultant: Sequence[Aggregate], field: str) -> Dict[str, List]:
    """Labels/values arrays for one bar chart (avoids per-field Jinja loops)."""
    if field not in COUNT_FIELDS:
        raise ValueError(f"Unknown count field {field!r}")
    return {
        "labels": [a.name for a in per_consultant],
        "values": [getattr(a, field) for a in per_consultant],
    }


def build_dashboard_data(
    entries: Sequence[Entry],
    roster: Sequence[str],
    window: Window,
    reference: dt.date,
    consultant: Optional[str] = None,
    status: str = "live",
    load_error: Optional[str] = None,
) -> DashboardData:
    """Everything the page shows for one window/consultant selection."""
    window = Window(window)
    per_consultant, total = compute_aggregates(entries, roster, window, reference, consultant)
    return DashboardData(
        window=window.value,
        reference_date=reference,
        period_label=Period(window, reference).label(),
        consultant=consultant,
        roster=list(roster),
        per_consultant=per_consultant,
        total=total,
        ranking=leaderboard_rows(compute_ranking(per_consultant)),
        status=status,
        load_error=load_error,
        entry_count=len(entries),
    )
