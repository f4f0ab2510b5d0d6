"""
Tests for the analysis report cache.
"""

import gzip
import json
from datetime import datetime, timedelta, timezone

from delivery_intel.cache import (
    ANALYSIS_VERSION,
    _get_cache_path,
    clear_cache,
    is_cache_valid,
    load_cached_analysis,
    save_cached_analysis,
)
from delivery_intel.models import (
    AnalysisResult,
    ChangeFailureRate,
    DeploymentFrequency,
    DeploymentSource,
    DORAMetrics,
    LeadTime,
    MeanTimeToRestore,
    Rating,
    RepoIdentifier,
    Severity,
    Suggestion,
    SuggestionCategory,
    SuggestionSeverity,
    VulnerabilityRecord,
)

REPO = RepoIdentifier("octo", "widgets")


def _result(repo: RepoIdentifier = REPO) -> AnalysisResult:
    return AnalysisResult(
        repo=repo,
        fetched_at="2024-06-12T12:00:00+00:00",
        dora_metrics=DORAMetrics(
            deployment_frequency=DeploymentFrequency(
                2.0, Rating.HIGH, DeploymentSource.FALLBACK
            ),
            lead_time=LeadTime(3.5, Rating.ELITE),
            change_failure_rate=ChangeFailureRate(10.0, 2, 20, Rating.HIGH),
            mean_time_to_restore=MeanTimeToRestore(None, Rating.NOT_AVAILABLE),
        ),
        vulnerabilities=[
            VulnerabilityRecord(
                "flask", "2.3.0", "GHSA-1", "summary", Severity.HIGH, ["CVE-1"], "2.3.2"
            )
        ],
        suggestions=[
            Suggestion(
                SuggestionCategory.SECURITY,
                SuggestionSeverity.MEDIUM,
                "1 High-Severity Vulnerability Found",
                "High-severity issues in: flask.",
                ["Update flask to 2.3.2 (fixes GHSA-1)"],
            )
        ],
        overall_score=77,
        daily_deployments=[0, 1, 0, 0, 2, 0, 1],
    )


def _entry(fetched_at: datetime, ttl: int = 300, version: str = ANALYSIS_VERSION):
    return {
        "analysis_version": version,
        "cache_metadata": {"fetched_at": fetched_at.isoformat(), "ttl_seconds": ttl},
    }


class TestCacheValidity:
    """Test TTL and version checks."""

    def test_fresh_entry(self):
        assert is_cache_valid(_entry(datetime.now(timezone.utc)))

    def test_expired_entry(self):
        old = datetime.now(timezone.utc) - timedelta(seconds=600)
        assert not is_cache_valid(_entry(old, ttl=300))

    def test_version_mismatch(self):
        assert not is_cache_valid(_entry(datetime.now(timezone.utc), version="0.1"))

    def test_missing_metadata(self):
        assert not is_cache_valid({"analysis_version": ANALYSIS_VERSION})

    def test_invalid_timestamp(self):
        entry = {
            "analysis_version": ANALYSIS_VERSION,
            "cache_metadata": {"fetched_at": "yesterday"},
        }
        assert not is_cache_valid(entry)


class TestCacheStorage:
    """Test saving, loading and clearing reports."""

    def test_save_then_load(self, isolated_config):
        result = _result()
        save_cached_analysis(result)
        assert load_cached_analysis(REPO) == result

    def test_missing_entry(self, isolated_config):
        assert load_cached_analysis(REPO) is None

    def test_corrupted_file_is_a_miss(self, isolated_config):
        path = _get_cache_path(REPO)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"not gzip at all")
        assert load_cached_analysis(REPO) is None

    def test_expired_file_is_a_miss(self, isolated_config):
        save_cached_analysis(_result())
        path = _get_cache_path(REPO)
        with gzip.open(path, "rt", encoding="utf-8") as f:
            entry = json.load(f)
        entry["cache_metadata"]["fetched_at"] = (
            datetime.now(timezone.utc) - timedelta(days=1)
        ).isoformat()
        with gzip.open(path, "wt", encoding="utf-8") as f:
            json.dump(entry, f)

        assert load_cached_analysis(REPO) is None

    def test_clear_single_and_all(self, isolated_config):
        other = RepoIdentifier("octo", "gadgets")
        save_cached_analysis(_result())
        save_cached_analysis(_result(other))

        assert clear_cache(REPO) == 1
        assert load_cached_analysis(REPO) is None
        assert load_cached_analysis(other) is not None
        assert clear_cache() == 1
        assert clear_cache() == 0
