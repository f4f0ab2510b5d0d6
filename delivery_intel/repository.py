"""
Repository reference parsing.
"""

import re

from delivery_intel.models import RepoIdentifier

_SEGMENT = r"[A-Za-z0-9_.-]+"
_URL_PATTERN = re.compile(rf"github\.com/({_SEGMENT})/({_SEGMENT})")
_SLUG_PATTERN = re.compile(rf"^({_SEGMENT})/({_SEGMENT})$")


def parse_repository(value: str) -> RepoIdentifier:
    """
    Parse an ``owner/name`` slug or a GitHub URL into a RepoIdentifier.

    Args:
        value: Slug (``psf/requests``) or URL (``https://github.com/psf/requests``).

    Returns:
        The parsed RepoIdentifier.

    Raises:
        ValueError: If the value is neither a valid slug nor a GitHub URL.
    """
    cleaned = value.strip()
    if cleaned.endswith(".git"):
        cleaned = cleaned[: -len(".git")]

    match = _URL_PATTERN.search(cleaned) or _SLUG_PATTERN.match(cleaned)
    if match is None:
        raise ValueError(
            f'Invalid repository: "{value}". Use "owner/repo" or a GitHub URL.'
        )

    return RepoIdentifier(owner=match.group(1), name=match.group(2))
