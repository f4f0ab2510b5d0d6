"""
GitHub VCS provider implementation for Delivery Intel.

Uses the GitHub REST API to fetch deployments, pull requests, workflow runs
and manifest files, and normalizes them into activity records.
"""

import base64
import binascii
import os
from datetime import datetime
from typing import Any

import httpx
from dotenv import load_dotenv

from delivery_intel.http_client import _get_async_http_client
from delivery_intel.models import (
    DeploymentRecord,
    PipelineRun,
    PullRequestRecord,
    RepoIdentifier,
)
from delivery_intel.vcs.base import BaseVCSProvider, RateLimitError

# Load environment variables
load_dotenv()

# GitHub API endpoint
GITHUB_REST_API = "https://api.github.com"

# Sample sizes per request
REST_SAMPLE_LIMITS = {
    "deployments": 50,
    "closed_prs": 50,
    "workflow_runs": 100,
}


def _parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp as returned by GitHub."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None


class GitHubProvider(BaseVCSProvider):
    """GitHub VCS provider using the REST API."""

    def __init__(self, token: str | None = None):
        """
        Initialize GitHub provider.

        Args:
            token: GitHub Personal Access Token. If not provided, reads from
                   GITHUB_TOKEN environment variable. Without a token the
                   provider runs unauthenticated (60 requests/hour, public
                   repositories only).
        """
        self.token = token or os.getenv("GITHUB_TOKEN") or None

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _get(
        self, path: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        """
        Execute a GET request against the REST API.

        Raises:
            RateLimitError: If the rate limit is exhausted
            httpx.HTTPStatusError: For any other non-2xx response except 404,
                which is returned to the caller
        """
        client = await _get_async_http_client()
        response = await client.get(
            f"{GITHUB_REST_API}{path}",
            params=params,
            headers=self._headers(),
            timeout=30,
        )

        if response.status_code == 429 or (
            response.status_code == 403
            and response.headers.get("x-ratelimit-remaining") == "0"
        ):
            reset = response.headers.get("x-ratelimit-reset")
            raise RateLimitError(
                "GitHub API rate limit exceeded. Wait a few minutes or provide a "
                "personal access token with higher limits.",
                reset_at=int(reset) if reset and reset.isdigit() else None,
            )

        if response.status_code != 404:
            response.raise_for_status()
        return response

    async def fetch_manifest_file(self, repo: RepoIdentifier, path: str) -> str | None:
        """Fetch and decode a file from the default branch."""
        response = await self._get(f"/repos/{repo.owner}/{repo.name}/contents/{path}")
        if response.status_code == 404:
            return None

        data = response.json()
        if not isinstance(data, dict) or not isinstance(data.get("content"), str):
            return None

        try:
            return base64.b64decode(data["content"]).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return None

    async def fetch_merged_pull_requests(
        self, repo: RepoIdentifier
    ) -> list[PullRequestRecord]:
        """Fetch recently closed PRs and keep the merged ones."""
        response = await self._get(
            f"/repos/{repo.owner}/{repo.name}/pulls",
            params={
                "state": "closed",
                "sort": "updated",
                "direction": "desc",
                "per_page": REST_SAMPLE_LIMITS["closed_prs"],
            },
        )
        if response.status_code == 404:
            raise ValueError(f"Repository {repo.slug} not found or is inaccessible.")

        pull_requests: list[PullRequestRecord] = []
        for node in response.json():
            created_at = _parse_timestamp(node.get("created_at"))
            merged_at = _parse_timestamp(node.get("merged_at"))
            if created_at is None or merged_at is None:
                continue
            pull_requests.append(PullRequestRecord(created_at, merged_at))
        return pull_requests

    async def fetch_deployment_records(
        self, repo: RepoIdentifier
    ) -> list[DeploymentRecord]:
        """Fetch formal deployments created through the Deployments API."""
        response = await self._get(
            f"/repos/{repo.owner}/{repo.name}/deployments",
            params={"per_page": REST_SAMPLE_LIMITS["deployments"]},
        )
        if response.status_code == 404:
            return []

        deployments: list[DeploymentRecord] = []
        for node in response.json():
            created_at = _parse_timestamp(node.get("created_at"))
            if created_at is not None:
                deployments.append(DeploymentRecord(created_at))
        return deployments

    async def fetch_pipeline_runs(self, repo: RepoIdentifier) -> list[PipelineRun]:
        """Fetch recent GitHub Actions workflow runs."""
        response = await self._get(
            f"/repos/{repo.owner}/{repo.name}/actions/runs",
            params={"per_page": REST_SAMPLE_LIMITS["workflow_runs"]},
        )
        if response.status_code == 404:
            return []

        runs: list[PipelineRun] = []
        for node in response.json().get("workflow_runs", []):
            created_at = _parse_timestamp(node.get("created_at"))
            if created_at is None:
                continue
            runs.append(
                PipelineRun(
                    status=node.get("status") or "",
                    conclusion=node.get("conclusion"),
                    created_at=created_at,
                    branch=node.get("head_branch"),
                )
            )
        return runs
