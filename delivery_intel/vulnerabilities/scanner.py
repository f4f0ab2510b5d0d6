"""
Dependency vulnerability scanning.

Fetches the well-known manifest files of a repository, parses them and
queries OSV.dev for every declared dependency. Lookups are best-effort: a
manifest that cannot be fetched or a dependency whose query fails simply
contributes nothing.
"""

import asyncio
from typing import Any, Awaitable, Callable

import httpx
from rich.console import Console

from delivery_intel.config import get_batch_size
from delivery_intel.dependency_parsers import MANIFEST_FILES, parse_manifest
from delivery_intel.models import DependencyRecord, RepoIdentifier, VulnerabilityRecord
from delivery_intel.vcs.base import BaseVCSProvider
from delivery_intel.vulnerabilities.classifier import classify_vulnerability

console = Console(stderr=True)

VulnerabilityQuery = Callable[[str, str, str], Awaitable[list[dict[str, Any]]]]


async def _fetch_manifest(
    provider: BaseVCSProvider, repo: RepoIdentifier, path: str
) -> str | None:
    try:
        return await provider.fetch_manifest_file(repo, path)
    except httpx.HTTPError as e:
        console.print(f"[dim]Note: Could not fetch {path} for {repo.slug}: {e}[/dim]")
        return None


async def collect_dependencies(
    provider: BaseVCSProvider, repo: RepoIdentifier
) -> list[DependencyRecord]:
    """Fetch and parse all well-known manifests of ``repo``."""
    contents = await asyncio.gather(
        *(_fetch_manifest(provider, repo, path) for path in MANIFEST_FILES)
    )

    dependencies: list[DependencyRecord] = []
    for path, text in zip(MANIFEST_FILES, contents):
        dependencies.extend(parse_manifest(path, text))
    return dependencies


def _batched(
    dependencies: list[DependencyRecord], batch_size: int
) -> list[list[DependencyRecord]]:
    return [
        dependencies[i : i + batch_size]
        for i in range(0, len(dependencies), batch_size)
    ]


async def scan_dependencies(
    dependencies: list[DependencyRecord],
    query: VulnerabilityQuery,
    batch_size: int = 10,
) -> list[VulnerabilityRecord]:
    """
    Query the vulnerability database for each dependency and classify results.

    Dependencies are queried concurrently in batches of ``batch_size`` to bound
    the number of simultaneous outbound requests.

    Args:
        dependencies: Parsed dependency records.
        query: Coroutine function ``(ecosystem, name, version) -> raw records``.
        batch_size: Maximum concurrent queries per batch.

    Returns:
        Classified vulnerability records (one per dependency x matching entry).
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}.")

    vulnerabilities: list[VulnerabilityRecord] = []

    for batch in _batched(dependencies, batch_size):
        results = await asyncio.gather(
            *(
                query(dep.ecosystem.value, dep.name, dep.version)
                for dep in batch
            ),
            return_exceptions=True,
        )

        for dep, result in zip(batch, results):
            if isinstance(result, BaseException):
                console.print(
                    f"[dim]Note: Vulnerability lookup failed for {dep.name}: {result}[/dim]"
                )
                continue
            for raw in result or []:
                vulnerabilities.append(classify_vulnerability(raw, dep))

    return vulnerabilities


async def scan_vulnerabilities(
    provider: BaseVCSProvider,
    repo: RepoIdentifier,
    query: VulnerabilityQuery | None = None,
    batch_size: int | None = None,
) -> list[VulnerabilityRecord]:
    """
    Scan a repository's dependency manifests for known vulnerabilities.

    Args:
        provider: VCS provider used to read manifest files.
        repo: Repository to scan.
        query: Vulnerability lookup coroutine (defaults to OSV.dev).
        batch_size: Dependencies per batch (defaults to configuration).

    Returns:
        Flat list of vulnerabilities; empty when no manifests are found.
    """
    if query is None:
        from delivery_intel.osv import query_osv

        query = query_osv

    dependencies = await collect_dependencies(provider, repo)
    if not dependencies:
        return []

    return await scan_dependencies(
        dependencies, query, batch_size or get_batch_size()
    )
