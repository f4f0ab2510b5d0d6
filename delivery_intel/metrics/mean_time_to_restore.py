"""Mean time to restore metric."""

from delivery_intel.metrics.base import (
    MTTR_TABLE,
    MetricSpec,
    as_utc,
    hours_between,
    median,
    round_half_up,
)
from delivery_intel.models import ActivityData, MeanTimeToRestore, Rating


def check_mean_time_to_restore(activity: ActivityData) -> MeanTimeToRestore:
    """
    Evaluates Mean Time to Restore - median hours between a failed run and
    the next successful run on the same branch.

    Completed runs are walked oldest first. Every failure is its own sample,
    so consecutive failures restored by one success each contribute a gap.
    Failures never followed by a same-branch success are ignored.

    Rating (median hours):
    - < 1: Elite
    - < 24: High
    - < 168: Medium
    - otherwise: Low
    - no restored failures: N/A
    """
    completed = sorted(
        (run for run in activity.pipeline_runs if run.status == "completed"),
        key=lambda run: as_utc(run.created_at),
    )

    restore_hours: list[int] = []
    for index, run in enumerate(completed):
        if run.conclusion != "failure":
            continue
        for later in completed[index + 1 :]:
            if later.conclusion == "success" and later.branch == run.branch:
                restore_hours.append(hours_between(run.created_at, later.created_at))
                break

    if not restore_hours:
        return MeanTimeToRestore(None, Rating.NOT_AVAILABLE)

    median_hours = median(restore_hours)
    return MeanTimeToRestore(
        median_hours=round_half_up(median_hours, 1),
        rating=MTTR_TABLE.rate(median_hours),
    )


METRIC = MetricSpec(
    name="Mean Time to Restore",
    field="mean_time_to_restore",
    checker=check_mean_time_to_restore,
)
