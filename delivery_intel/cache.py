"""
Cache management for Delivery Intel.

Stores finished analysis reports locally so repeated runs against the same
repository within the TTL skip the GitHub and OSV.dev round trips.
"""

import gzip
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from delivery_intel.config import get_cache_dir, get_cache_ttl
from delivery_intel.models import AnalysisResult, RepoIdentifier, to_dict

# Bump when the shape of cached reports changes.
ANALYSIS_VERSION = "1.0"


def _get_cache_path(repo: RepoIdentifier) -> Path:
    """Get the cache file path for a repository."""
    return get_cache_dir() / f"{repo.owner}__{repo.name}.json.gz".lower()


def is_cache_valid(
    entry: dict[str, Any], expected_version: str = ANALYSIS_VERSION
) -> bool:
    """
    Check if a cache entry is still valid based on TTL and data version.

    Args:
        entry: Cache entry dict with cache_metadata and analysis_version.
        expected_version: Expected analysis_version string.

    Returns:
        True if cache is valid (within TTL and version matches), False otherwise.
    """
    if entry.get("analysis_version") != expected_version:
        return False

    metadata = entry.get("cache_metadata")
    if not metadata or "fetched_at" not in metadata:
        return False

    try:
        fetched_at = datetime.fromisoformat(metadata["fetched_at"])
        ttl_seconds = metadata.get("ttl_seconds", get_cache_ttl())

        if fetched_at.tzinfo is None:
            fetched_at = fetched_at.replace(tzinfo=timezone.utc)

        age_seconds = (datetime.now(timezone.utc) - fetched_at).total_seconds()
        return age_seconds < ttl_seconds
    except (ValueError, TypeError):
        return False


def load_cached_analysis(repo: RepoIdentifier) -> AnalysisResult | None:
    """
    Load a cached report for a repository.

    Returns:
        The cached AnalysisResult, or None when missing, expired, from an
        older analysis version, or corrupted.
    """
    cache_path = _get_cache_path(repo)
    if not cache_path.exists():
        return None

    try:
        with gzip.open(cache_path, "rt", encoding="utf-8") as f:
            entry = json.load(f)
    except (json.JSONDecodeError, OSError, EOFError):
        # Corrupted cache
        return None

    if not isinstance(entry, dict) or not is_cache_valid(entry):
        return None

    try:
        return AnalysisResult.from_dict(entry["result"])
    except (KeyError, TypeError, ValueError):
        return None


def save_cached_analysis(result: AnalysisResult) -> None:
    """Save a report, replacing any previous entry for the repository."""
    cache_dir = get_cache_dir()
    cache_dir.mkdir(parents=True, exist_ok=True)

    entry = {
        "analysis_version": ANALYSIS_VERSION,
        "cache_metadata": {
            "fetched_at": datetime.now(timezone.utc).isoformat(),
            "ttl_seconds": get_cache_ttl(),
            "source": "github",
        },
        "result": to_dict(result),
    }

    with gzip.open(_get_cache_path(result.repo), "wt", encoding="utf-8") as f:
        json.dump(entry, f, indent=2, ensure_ascii=False, sort_keys=True)


def clear_cache(repo: RepoIdentifier | None = None) -> int:
    """
    Clear cache for one or all repositories.

    Args:
        repo: Specific repository to clear, or None to clear all.

    Returns:
        Number of cache files cleared.
    """
    cache_dir = get_cache_dir()
    if not cache_dir.exists():
        return 0

    if repo is not None:
        cache_path = _get_cache_path(repo)
        if cache_path.exists():
            cache_path.unlink()
            return 1
        return 0

    cleared = 0
    for cache_file in cache_dir.glob("*.json.gz"):
        cache_file.unlink()
        cleared += 1
    return cleared
