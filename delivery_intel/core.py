"""
Core analysis pipeline for Delivery Intel.
"""

import asyncio
from datetime import datetime, timezone

from rich.console import Console

from delivery_intel.http_client import close_async_http_client
from delivery_intel.metrics import compute_dora_metrics, fetch_activity
from delivery_intel.metrics.deployment_frequency import daily_deployment_counts
from delivery_intel.models import AnalysisResult, RepoIdentifier
from delivery_intel.repository import parse_repository
from delivery_intel.risk import compute_risk_score
from delivery_intel.scoring import compute_overall_score
from delivery_intel.suggestions import generate_suggestions
from delivery_intel.vcs import get_vcs_provider
from delivery_intel.vcs.base import BaseVCSProvider
from delivery_intel.vulnerabilities import VulnerabilityQuery, scan_vulnerabilities

console = Console(stderr=True)

__all__ = ["analyze", "analyze_sync", "compute_risk_score"]


async def analyze(
    repo: RepoIdentifier | str,
    token: str | None = None,
    provider: BaseVCSProvider | None = None,
    vulnerability_query: VulnerabilityQuery | None = None,
) -> AnalysisResult:
    """
    Performs a full delivery-performance analysis of a repository.

    Activity fetching and the vulnerability scan run concurrently; their
    results feed the suggestion and scoring engines.

    Args:
        repo: Repository identifier, "owner/name" slug or GitHub URL.
        token: Optional GitHub token (ignored when ``provider`` is given).
        provider: VCS provider to use instead of the GitHub default.
        vulnerability_query: Vulnerability lookup to use instead of OSV.dev.

    Returns:
        AnalysisResult with metrics, vulnerabilities, suggestions and score.

    Raises:
        ValueError: If the repository identifier is invalid or not found
        RateLimitError: If the platform rate limit is exhausted
        httpx.HTTPStatusError: If the platform API returns an error
    """
    if isinstance(repo, str):
        repo = parse_repository(repo)
    if provider is None:
        provider = get_vcs_provider("github", token=token)

    console.print(f"[dim]Analyzing {repo.slug}...[/dim]")

    activity, vulnerabilities = await asyncio.gather(
        fetch_activity(provider, repo),
        scan_vulnerabilities(provider, repo, query=vulnerability_query),
    )

    dora = compute_dora_metrics(activity)
    return AnalysisResult(
        repo=repo,
        fetched_at=datetime.now(timezone.utc).isoformat(),
        dora_metrics=dora,
        vulnerabilities=vulnerabilities,
        suggestions=generate_suggestions(dora, vulnerabilities),
        overall_score=compute_overall_score(dora, vulnerabilities),
        daily_deployments=daily_deployment_counts(activity),
    )


def analyze_sync(
    repo: RepoIdentifier | str,
    token: str | None = None,
    provider: BaseVCSProvider | None = None,
    vulnerability_query: VulnerabilityQuery | None = None,
) -> AnalysisResult:
    """Run ``analyze`` from synchronous code."""

    async def _run() -> AnalysisResult:
        try:
            return await analyze(repo, token, provider, vulnerability_query)
        finally:
            # The shared client is bound to this event loop
            await close_async_http_client()

    return asyncio.run(_run())
