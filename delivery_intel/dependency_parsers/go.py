"""go.mod dependency parser."""

import re

from delivery_intel.dependency_parsers.base import DependencyParserSpec
from delivery_intel.models import DependencyRecord, Ecosystem

PARSER = DependencyParserSpec(
    manifest_names={"go.mod"},
    parse=lambda text: parse_go_mod(text),
)

_REQUIRE_BLOCK = re.compile(r"require\s*\(([\s\S]*?)\)")


def parse_go_mod(text: str) -> list[DependencyRecord]:
    """Parse the ``require ( ... )`` block of go.mod.

    Only the first block is read. Single-line ``require`` directives outside
    the block are not considered.
    """
    block = _REQUIRE_BLOCK.search(text)
    if block is None:
        return []

    dependencies: list[DependencyRecord] = []
    for line in block.group(1).splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("//"):
            continue

        parts = stripped.split()
        if len(parts) < 2:
            continue

        version = parts[1][1:] if parts[1].startswith("v") else parts[1]
        dependencies.append(
            DependencyRecord(name=parts[0], version=version, ecosystem=Ecosystem.GO)
        )

    return dependencies
