"""
Base VCS provider interface.

A provider is the only component that talks to a source-control platform.
It returns normalized activity records; the analysis pipeline never sees raw
API payloads.
"""

from abc import ABC, abstractmethod

from delivery_intel.models import (
    DeploymentRecord,
    PipelineRun,
    PullRequestRecord,
    RepoIdentifier,
)


class RateLimitError(RuntimeError):
    """Raised when the platform refuses requests because the quota is exhausted.

    Deliberately not an ``httpx.HTTPError`` so per-item error absorption in
    the pipeline never swallows it.
    """

    def __init__(self, message: str, reset_at: int | None = None):
        super().__init__(message)
        self.reset_at = reset_at


class BaseVCSProvider(ABC):
    """Abstract base class for VCS providers."""

    @abstractmethod
    async def fetch_manifest_file(self, repo: RepoIdentifier, path: str) -> str | None:
        """
        Fetch a file from the repository root.

        Returns:
            Decoded file content, or None if the file does not exist.
        """

    @abstractmethod
    async def fetch_merged_pull_requests(
        self, repo: RepoIdentifier
    ) -> list[PullRequestRecord]:
        """Fetch recently merged pull requests."""

    @abstractmethod
    async def fetch_deployment_records(
        self, repo: RepoIdentifier
    ) -> list[DeploymentRecord]:
        """Fetch formal deployment records."""

    @abstractmethod
    async def fetch_pipeline_runs(self, repo: RepoIdentifier) -> list[PipelineRun]:
        """Fetch recent CI/CD pipeline runs."""
