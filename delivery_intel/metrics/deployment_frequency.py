"""Deployment frequency metric."""

from datetime import datetime, timezone

from delivery_intel.metrics.base import (
    DEPLOYMENT_FREQUENCY_TABLE,
    MetricSpec,
    as_utc,
    calendar_weeks_between,
    round_half_up,
)
from delivery_intel.models import (
    ActivityData,
    DeploymentFrequency,
    DeploymentSource,
    Rating,
)

# Minimum number of formal deployments needed before the fallback is skipped.
MIN_FORMAL_DEPLOYMENTS = 2


def _select_timestamps(
    activity: ActivityData,
) -> tuple[DeploymentSource, list[datetime]]:
    """Pick the deployment timestamps and the source they came from."""
    deployments = [record.created_at for record in activity.deployments]
    if len(deployments) >= MIN_FORMAL_DEPLOYMENTS:
        return DeploymentSource.FORMAL, deployments

    merged = [pr.merged_at for pr in activity.pull_requests if pr.merged_at]
    return DeploymentSource.FALLBACK, merged


def deployments_per_week(timestamps: list[datetime]) -> float:
    """Events per calendar week spanned by the oldest and newest timestamp."""
    if not timestamps:
        return 0.0
    oldest = min(timestamps, key=as_utc)
    newest = max(timestamps, key=as_utc)
    weeks = calendar_weeks_between(oldest, newest)
    return round_half_up(len(timestamps) / max(1, weeks), 2)


def check_deployment_frequency(activity: ActivityData) -> DeploymentFrequency:
    """
    Evaluates Deployment Frequency - how often changes reach production.

    Formal deployment records are used when at least two exist. Otherwise
    merged pull requests stand in for deployments and the result is tagged
    with the fallback source.

    Rating (per week):
    - >= 7: Elite (multiple per day)
    - >= 1: High (at least weekly)
    - >= 0.25: Medium (at least monthly)
    - otherwise: Low (including fewer than two events)
    """
    source, timestamps = _select_timestamps(activity)

    if len(timestamps) < 2:
        return DeploymentFrequency(0.0, Rating.LOW, source)

    per_week = deployments_per_week(timestamps)
    return DeploymentFrequency(
        deployments_per_week=per_week,
        rating=DEPLOYMENT_FREQUENCY_TABLE.rate(per_week),
        source=source,
    )


def daily_deployment_counts(
    activity: ActivityData, now: datetime | None = None
) -> list[int]:
    """
    Bucket deployment events into per-day counts for the last 7 days.

    Uses the same source as ``check_deployment_frequency``.

    Returns:
        Seven counts; index 0 is six days ago and index 6 is today.
    """
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    buckets = [0] * 7

    _source, timestamps = _select_timestamps(activity)
    if len(timestamps) < 2:
        return buckets

    for moment in timestamps:
        diff_days = int((now - as_utc(moment)).total_seconds() // 86400)
        if 0 <= diff_days < 7:
            buckets[6 - diff_days] += 1
    return buckets


METRIC = MetricSpec(
    name="Deployment Frequency",
    field="deployment_frequency",
    checker=check_deployment_frequency,
)
