"""
Dependency manifest parsers.

Each parser module exposes a ``PARSER`` spec. Parsers never raise: a missing
or unreadable manifest is the same as a manifest with no dependencies.
"""

from delivery_intel.dependency_parsers import go, javascript, python
from delivery_intel.dependency_parsers.base import DependencyParserSpec
from delivery_intel.models import DependencyRecord

__all__ = [
    "DependencyParserSpec",
    "MANIFEST_FILES",
    "get_parser",
    "parse_manifest",
]

_PARSERS: list[DependencyParserSpec] = [
    javascript.PARSER,
    python.PARSER,
    go.PARSER,
]

# Well-known manifest filenames fetched from the repository root, in order.
MANIFEST_FILES: list[str] = ["package.json", "requirements.txt", "go.mod"]


def get_parser(filename: str) -> DependencyParserSpec | None:
    """Return the parser spec handling ``filename``, if any."""
    for spec in _PARSERS:
        if filename in spec.manifest_names:
            return spec
    return None


def parse_manifest(filename: str, text: str | None) -> list[DependencyRecord]:
    """
    Parse manifest text using the parser registered for its filename.

    Args:
        filename: Manifest filename (e.g. ``package.json``).
        text: Raw manifest content, or None if the file is absent.

    Returns:
        Dependencies declared in the manifest (empty on any problem).
    """
    if not text:
        return []
    spec = get_parser(filename)
    if spec is None:
        return []
    return spec.parse(text)
