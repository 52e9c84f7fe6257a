"""
Pydantic schema definitions for entries and dashboard responses.

These schemas define the shape of data exchanged with the store and
returned by API endpoints. ``Entry`` is the persisted record; ``Aggregate``
and ``DashboardData`` are what the page renders.
"""

import datetime as dt
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

COUNT_FIELDS = ("intakes", "interviews", "placements", "prospects")

# Labels used by the page and the spreadsheet export
COUNT_LABELS = {
    "intakes": "Candidate intakes",
    "interviews": "Client interviews",
    "placements": "Placements",
    "prospects": "New business meetings",
}


class Entry(BaseModel):
    """One submitted activity record.

    ``week``/``month``/``year`` are derived from ``date`` when the entry is
    written. ``created_at`` orders entries for display and is never used
    for bucketing. Serialised with ``createdAt`` as the key.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    date: dt.date
    week: int
    month: int
    year: int
    intakes: int = Field(default=0, ge=0)
    interviews: int = Field(default=0, ge=0)
    placements: int = Field(default=0, ge=0)
    prospects: int = Field(default=0, ge=0)
    created_at: dt.datetime = Field(alias="createdAt")


# Raw form values: anything the browser or an API client sends. Coerced to
# non-negative integers by the submission pipeline.
RawCount = Optional[Union[int, float, str]]


class EntryForm(BaseModel):
    consultant: str
    date: Optional[dt.date] = None
    intakes: RawCount = 0
    interviews: RawCount = 0
    placements: RawCount = 0
    prospects: RawCount = 0


class Aggregate(BaseModel):
    """Summed counts for one consultant (or the whole team) in a window."""

    name: str
    intakes: int = 0
    interviews: int = 0
    placements: int = 0
    prospects: int = 0


class RankingEntry(BaseModel):
    position: int
    medal: str
    name: str
    placements: int
    intakes: int
    interviews: int
    prospects: int


class SubmissionResponse(BaseModel):
    entry: Entry
    celebrate: bool


class DashboardData(BaseModel):
    window: str
    reference_date: dt.date
    period_label: str
    consultant: Optional[str] = None
    roster: List[str]
    per_consultant: List[Aggregate]
    total: Aggregate
    ranking: List[RankingEntry]
    status: str
    load_error: Optional[str] = None
    entry_count: int


class ConfigResponse(BaseModel):
    title: str
    consultants: List[str]
    poll_seconds: int
