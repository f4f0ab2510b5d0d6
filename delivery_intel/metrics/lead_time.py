"""Lead time for changes metric."""

from delivery_intel.metrics.base import (
    LEAD_TIME_TABLE,
    MetricSpec,
    hours_between,
    median,
    round_half_up,
)
from delivery_intel.models import ActivityData, LeadTime, Rating


def check_lead_time(activity: ActivityData) -> LeadTime:
    """
    Evaluates Lead Time for Changes - median hours from PR open to merge.

    Rating (median hours):
    - < 24: Elite
    - < 168: High (within a week)
    - < 720: Medium (within a month)
    - otherwise: Low
    - no merged PRs: N/A
    """
    durations = [
        hours_between(pr.created_at, pr.merged_at)
        for pr in activity.pull_requests
        if pr.merged_at is not None
    ]
    if not durations:
        return LeadTime(0.0, Rating.NOT_AVAILABLE)

    median_hours = median(durations)
    return LeadTime(
        median_hours=round_half_up(median_hours, 1),
        rating=LEAD_TIME_TABLE.rate(median_hours),
    )


METRIC = MetricSpec(
    name="Lead Time for Changes",
    field="lead_time",
    checker=check_lead_time,
)
