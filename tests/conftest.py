"""
Shared fixtures for Delivery Intel tests.
"""

from datetime import datetime, timezone

import pytest

from delivery_intel.models import (
    DeploymentRecord,
    PipelineRun,
    PullRequestRecord,
    RepoIdentifier,
)
from delivery_intel.vcs.base import BaseVCSProvider

# Wednesday, 12 June 2024
NOW = datetime(2024, 6, 12, 12, 0, tzinfo=timezone.utc)


class FakeProvider(BaseVCSProvider):
    """In-memory provider returning canned activity and manifests."""

    def __init__(
        self,
        manifests: dict[str, str] | None = None,
        pull_requests: list[PullRequestRecord] | None = None,
        deployments: list[DeploymentRecord] | None = None,
        pipeline_runs: list[PipelineRun] | None = None,
        manifest_errors: dict[str, Exception] | None = None,
        activity_error: Exception | None = None,
    ):
        self.manifests = manifests or {}
        self.pull_requests = pull_requests or []
        self.deployments = deployments or []
        self.pipeline_runs = pipeline_runs or []
        self.manifest_errors = manifest_errors or {}
        self.activity_error = activity_error
        self.requested_manifests: list[str] = []

    async def fetch_manifest_file(self, repo: RepoIdentifier, path: str) -> str | None:
        self.requested_manifests.append(path)
        if path in self.manifest_errors:
            raise self.manifest_errors[path]
        return self.manifests.get(path)

    async def fetch_merged_pull_requests(
        self, repo: RepoIdentifier
    ) -> list[PullRequestRecord]:
        if self.activity_error is not None:
            raise self.activity_error
        return self.pull_requests

    async def fetch_deployment_records(
        self, repo: RepoIdentifier
    ) -> list[DeploymentRecord]:
        return self.deployments

    async def fetch_pipeline_runs(self, repo: RepoIdentifier) -> list[PipelineRun]:
        return self.pipeline_runs


@pytest.fixture
def repo() -> RepoIdentifier:
    return RepoIdentifier("octo", "widgets")


@pytest.fixture
def fake_provider():
    """Factory for FakeProvider instances."""
    return FakeProvider


@pytest.fixture
def isolated_config(monkeypatch, tmp_path):
    """Point configuration and cache at a temporary directory."""
    import delivery_intel.config

    monkeypatch.setattr(delivery_intel.config, "PROJECT_ROOT", tmp_path)
    monkeypatch.setattr(delivery_intel.config, "_CACHE_DIR", tmp_path / "cache")
    monkeypatch.setattr(delivery_intel.config, "_CACHE_TTL", None)
    monkeypatch.setattr(delivery_intel.config, "_BATCH_SIZE", None)
    monkeypatch.delenv("DELIVERY_INTEL_CACHE_DIR", raising=False)
    monkeypatch.delenv("DELIVERY_INTEL_CACHE_TTL", raising=False)
    monkeypatch.delenv("DELIVERY_INTEL_BATCH_SIZE", raising=False)
    yield tmp_path
