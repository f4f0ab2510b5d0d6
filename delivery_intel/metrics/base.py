"""
Shared metric types, rating tables and time helpers.
"""

import math
import operator
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, NamedTuple

from delivery_intel.models import ActivityData, Rating


class RatingTable(NamedTuple):
    """Ordered (threshold, rating) breakpoints evaluated top-down."""

    breakpoints: list[tuple[float, Rating]]
    compare: Callable[[float, float], bool]
    fallback: Rating = Rating.LOW

    def rate(self, value: float | None) -> Rating:
        if value is None:
            return Rating.NOT_AVAILABLE
        for threshold, rating in self.breakpoints:
            if self.compare(value, threshold):
                return rating
        return self.fallback


# Thresholds follow the DORA State of DevOps benchmarks.

# deployments per week: multiple per day / weekly / monthly
DEPLOYMENT_FREQUENCY_TABLE = RatingTable(
    breakpoints=[(7, Rating.ELITE), (1, Rating.HIGH), (0.25, Rating.MEDIUM)],
    compare=operator.ge,
)

# median hours: one day / one week / one month
LEAD_TIME_TABLE = RatingTable(
    breakpoints=[(24, Rating.ELITE), (168, Rating.HIGH), (720, Rating.MEDIUM)],
    compare=operator.lt,
)

# failed percentage of completed runs
CHANGE_FAILURE_RATE_TABLE = RatingTable(
    breakpoints=[(5, Rating.ELITE), (10, Rating.HIGH), (15, Rating.MEDIUM)],
    compare=operator.le,
)

# median hours from failure to next success
MTTR_TABLE = RatingTable(
    breakpoints=[(1, Rating.ELITE), (24, Rating.HIGH), (168, Rating.MEDIUM)],
    compare=operator.lt,
)


class MetricSpec(NamedTuple):
    """Specification for a DORA metric check."""

    name: str
    field: str  # DORAMetrics field populated by this check
    checker: Callable[[ActivityData], Any]


def median(values: list[float]) -> float:
    """Median of ``values``; 0 for an empty list."""
    if not values:
        return 0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 1:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like JavaScript's Math.round (halves go up)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def hours_between(start: datetime, end: datetime) -> int:
    """Whole hours elapsed from ``start`` to ``end``, truncated toward zero."""
    return math.trunc((as_utc(end) - as_utc(start)).total_seconds() / 3600)


def _week_start(day: date) -> date:
    # Calendar weeks start on Sunday
    return day - timedelta(days=(day.weekday() + 1) % 7)


def calendar_weeks_between(first: datetime, second: datetime) -> int:
    """Number of calendar-week boundaries between two timestamps."""
    first_week = _week_start(as_utc(first).date())
    second_week = _week_start(as_utc(second).date())
    return abs((second_week - first_week).days) // 7
