"""Tests for the lead time for changes metric."""

from datetime import datetime, timedelta, timezone

from delivery_intel.metrics.lead_time import check_lead_time
from delivery_intel.models import ActivityData, PullRequestRecord, Rating

NOW = datetime(2024, 6, 12, 12, 0, tzinfo=timezone.utc)


def _prs(*hours: float) -> list[PullRequestRecord]:
    return [PullRequestRecord(NOW - timedelta(hours=h), NOW) for h in hours]


class TestLeadTime:
    """Test lead time median and rating."""

    def test_no_merged_prs(self):
        result = check_lead_time(ActivityData())
        assert result.rating == Rating.NOT_AVAILABLE
        assert result.median_hours == 0

    def test_open_prs_are_ignored(self):
        activity = ActivityData(pull_requests=[PullRequestRecord(NOW)])
        assert check_lead_time(activity).rating == Rating.NOT_AVAILABLE

    def test_elite_lead_time(self):
        result = check_lead_time(ActivityData(pull_requests=_prs(10, 20, 30)))
        assert result.median_hours == 20
        assert result.rating == Rating.ELITE

    def test_even_count_averages_middle(self):
        result = check_lead_time(ActivityData(pull_requests=_prs(10, 30, 50, 500)))
        assert result.median_hours == 40
        assert result.rating == Rating.HIGH

    def test_median_resists_outliers(self):
        result = check_lead_time(ActivityData(pull_requests=_prs(2, 3, 4, 5000)))
        assert result.median_hours == 3.5
        assert result.rating == Rating.ELITE

    def test_medium_lead_time(self):
        result = check_lead_time(ActivityData(pull_requests=_prs(200, 300, 400)))
        assert result.rating == Rating.MEDIUM

    def test_low_lead_time(self):
        result = check_lead_time(ActivityData(pull_requests=_prs(1000, 1200)))
        assert result.median_hours == 1100
        assert result.rating == Rating.LOW

    def test_partial_hours_are_truncated(self):
        result = check_lead_time(ActivityData(pull_requests=_prs(1.9)))
        assert result.median_hours == 1

    def test_truncation_at_elite_boundary(self):
        """23.5h and 24.6h count as 23h and 24h, a median of 23.5h."""
        result = check_lead_time(ActivityData(pull_requests=_prs(23.5, 24.6)))
        assert result.median_hours == 23.5
        assert result.rating == Rating.ELITE
