"""
DORA metric checks and the registry that loads them.
"""

import asyncio
from importlib import import_module

from delivery_intel.metrics.base import MetricSpec
from delivery_intel.models import ActivityData, DORAMetrics, RepoIdentifier
from delivery_intel.vcs.base import BaseVCSProvider

__all__ = [
    "MetricSpec",
    "compute_dora_metrics",
    "fetch_activity",
    "load_metric_specs",
]

_BUILTIN_MODULES = [
    "delivery_intel.metrics.deployment_frequency",
    "delivery_intel.metrics.lead_time",
    "delivery_intel.metrics.change_failure_rate",
    "delivery_intel.metrics.mean_time_to_restore",
]


def _load_builtin_metric_specs() -> list[MetricSpec]:
    specs: list[MetricSpec] = []
    for module_path in _BUILTIN_MODULES:
        module = import_module(module_path)
        spec = getattr(module, "METRIC", None)
        if isinstance(spec, MetricSpec):
            specs.append(spec)
    return specs


def load_metric_specs() -> list[MetricSpec]:
    """Load builtin metric specs, keeping the first spec per field."""
    specs: list[MetricSpec] = []
    seen: set[str] = set()
    for spec in _load_builtin_metric_specs():
        if spec.field in seen:
            continue
        seen.add(spec.field)
        specs.append(spec)
    return specs


def compute_dora_metrics(activity: ActivityData) -> DORAMetrics:
    """
    Run every metric check over the same activity snapshot.

    The checks are pure; fetching happens in ``fetch_activity``.
    """
    values = {spec.field: spec.checker(activity) for spec in load_metric_specs()}
    return DORAMetrics(**values)


async def fetch_activity(
    provider: BaseVCSProvider, repo: RepoIdentifier
) -> ActivityData:
    """
    Fetch merged PRs, deployments and pipeline runs concurrently.

    Errors from the provider (rate limits, HTTP failures) propagate.
    """
    pull_requests, deployments, pipeline_runs = await asyncio.gather(
        provider.fetch_merged_pull_requests(repo),
        provider.fetch_deployment_records(repo),
        provider.fetch_pipeline_runs(repo),
    )
    return ActivityData(
        pull_requests=pull_requests,
        deployments=deployments,
        pipeline_runs=pipeline_runs,
    )
