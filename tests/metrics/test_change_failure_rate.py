"""Tests for the change failure rate metric."""

from datetime import datetime, timedelta, timezone

from delivery_intel.metrics.change_failure_rate import check_change_failure_rate
from delivery_intel.models import ActivityData, PipelineRun, Rating

NOW = datetime(2024, 6, 12, 12, 0, tzinfo=timezone.utc)


def _runs(
    successes: int, failures: int, status: str = "completed"
) -> list[PipelineRun]:
    conclusions = ["success"] * successes + ["failure"] * failures
    return [
        PipelineRun(status, conclusion, NOW - timedelta(hours=i), "main")
        for i, conclusion in enumerate(conclusions)
    ]


class TestChangeFailureRate:
    """Test change failure rate calculation."""

    def test_all_successful(self):
        """Twenty successful runs are a 0% failure rate."""
        result = check_change_failure_rate(ActivityData(pipeline_runs=_runs(20, 0)))
        assert result.percentage == 0
        assert result.failed_runs == 0
        assert result.total_runs == 20
        assert result.rating == Rating.ELITE

    def test_no_completed_runs(self):
        activity = ActivityData(pipeline_runs=_runs(0, 3, status="in_progress"))
        result = check_change_failure_rate(activity)
        assert result.rating == Rating.NOT_AVAILABLE
        assert result.total_runs == 0

    def test_in_progress_runs_are_excluded(self):
        runs = _runs(9, 1) + [
            PipelineRun("in_progress", None, NOW, "main"),
            PipelineRun("queued", None, NOW, "main"),
        ]
        result = check_change_failure_rate(ActivityData(pipeline_runs=runs))
        assert result.total_runs == 10
        assert result.percentage == 10
        assert result.rating == Rating.HIGH

    def test_medium_boundary(self):
        result = check_change_failure_rate(ActivityData(pipeline_runs=_runs(17, 3)))
        assert result.percentage == 15
        assert result.rating == Rating.MEDIUM

    def test_low_rating(self):
        result = check_change_failure_rate(ActivityData(pipeline_runs=_runs(8, 2)))
        assert result.percentage == 20
        assert result.rating == Rating.LOW

    def test_rounds_to_one_decimal(self):
        result = check_change_failure_rate(ActivityData(pipeline_runs=_runs(2, 1)))
        assert result.percentage == 33.3

    def test_other_conclusions_are_not_failures(self):
        runs = _runs(4, 0) + [PipelineRun("completed", "cancelled", NOW, "main")]
        result = check_change_failure_rate(ActivityData(pipeline_runs=runs))
        assert result.failed_runs == 0
        assert result.total_runs == 5

    def test_percentage_rounds_half_up(self):
        """One failure in sixteen runs is 6.25%, shown as 6.3."""
        result = check_change_failure_rate(ActivityData(pipeline_runs=_runs(15, 1)))
        assert result.percentage == 6.3
        assert result.rating == Rating.HIGH
