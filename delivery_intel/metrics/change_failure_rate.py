"""Change failure rate metric."""

from delivery_intel.metrics.base import (
    CHANGE_FAILURE_RATE_TABLE,
    MetricSpec,
    round_half_up,
)
from delivery_intel.models import ActivityData, ChangeFailureRate, Rating


def check_change_failure_rate(activity: ActivityData) -> ChangeFailureRate:
    """
    Evaluates Change Failure Rate - share of completed pipeline runs that
    concluded in failure. Queued and in-progress runs are ignored.

    Rating (percentage):
    - <= 5: Elite
    - <= 10: High
    - <= 15: Medium
    - otherwise: Low
    - no completed runs: N/A
    """
    completed = [run for run in activity.pipeline_runs if run.status == "completed"]
    if not completed:
        return ChangeFailureRate(0.0, 0, 0, Rating.NOT_AVAILABLE)

    failed = sum(1 for run in completed if run.conclusion == "failure")
    percentage = failed / len(completed) * 100

    return ChangeFailureRate(
        percentage=round_half_up(percentage, 1),
        failed_runs=failed,
        total_runs=len(completed),
        rating=CHANGE_FAILURE_RATE_TABLE.rate(percentage),
    )


METRIC = MetricSpec(
    name="Change Failure Rate",
    field="change_failure_rate",
    checker=check_change_failure_rate,
)
