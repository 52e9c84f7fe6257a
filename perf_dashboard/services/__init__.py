"""Convenience imports for services."""

from .periods import Bucket, Period, Window, bucket  # noqa: F401
from .metrics import (
    build_dashboard_data,
    compute_aggregates,
    compute_ranking,
    compute_total,
)  # noqa: F401
from .feed import EntryFeed  # noqa: F401
from .gate import GateState  # noqa: F401
from .submission import SubmissionResult, coerce_count, submit  # noqa: F401
