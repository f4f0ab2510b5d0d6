"""Tests for the mean time to restore metric."""

from datetime import datetime, timedelta, timezone

from delivery_intel.metrics.mean_time_to_restore import check_mean_time_to_restore
from delivery_intel.models import ActivityData, PipelineRun, Rating

START = datetime(2024, 6, 10, 8, 0, tzinfo=timezone.utc)


def _run(conclusion: str, hours: float, branch: str = "main", status: str = "completed"):
    return PipelineRun(status, conclusion, START + timedelta(hours=hours), branch)


class TestMeanTimeToRestore:
    """Test failure-to-recovery pairing."""

    def test_no_failures(self):
        activity = ActivityData(pipeline_runs=[_run("success", 0), _run("success", 1)])
        result = check_mean_time_to_restore(activity)
        assert result.rating == Rating.NOT_AVAILABLE
        assert result.median_hours is None

    def test_failure_restored_on_same_branch(self):
        activity = ActivityData(pipeline_runs=[_run("failure", 0), _run("success", 2)])
        result = check_mean_time_to_restore(activity)
        assert result.median_hours == 2
        assert result.rating == Rating.HIGH

    def test_success_on_other_branch_does_not_restore(self):
        activity = ActivityData(
            pipeline_runs=[_run("failure", 0, "feature"), _run("success", 1, "main")]
        )
        assert check_mean_time_to_restore(activity).rating == Rating.NOT_AVAILABLE

    def test_each_failure_is_a_sample(self):
        """Two failures restored by the same success give gaps of 3h and 1h."""
        activity = ActivityData(
            pipeline_runs=[_run("failure", 0), _run("failure", 2), _run("success", 3)]
        )
        assert check_mean_time_to_restore(activity).median_hours == 2

    def test_runs_are_sorted_chronologically(self):
        runs = [_run("success", 5), _run("failure", 4), _run("success", 1)]
        result = check_mean_time_to_restore(ActivityData(pipeline_runs=runs))
        assert result.median_hours == 1

    def test_incomplete_runs_are_ignored(self):
        runs = [
            _run("failure", 0),
            _run("success", 1, status="in_progress"),
            _run("success", 30),
        ]
        result = check_mean_time_to_restore(ActivityData(pipeline_runs=runs))
        assert result.median_hours == 30
        assert result.rating == Rating.MEDIUM

    def test_elite_restore(self):
        runs = [_run("failure", 0), _run("success", 0.5)]
        result = check_mean_time_to_restore(ActivityData(pipeline_runs=runs))
        assert result.median_hours == 0
        assert result.rating == Rating.ELITE

    def test_unrestored_failure_contributes_nothing(self):
        runs = [_run("failure", 0), _run("success", 200), _run("failure", 300)]
        result = check_mean_time_to_restore(ActivityData(pipeline_runs=runs))
        assert result.median_hours == 200
        assert result.rating == Rating.LOW

    def test_partial_hours_are_truncated(self):
        """A 1h50m recovery counts as one hour."""
        runs = [_run("failure", 0), _run("success", 1 + 50 / 60)]
        result = check_mean_time_to_restore(ActivityData(pipeline_runs=runs))
        assert result.median_hours == 1
        assert result.rating == Rating.HIGH
