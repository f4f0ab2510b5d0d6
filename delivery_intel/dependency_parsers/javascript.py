"""npm package.json dependency parser."""

import json
import re

from delivery_intel.dependency_parsers.base import DependencyParserSpec
from delivery_intel.models import DependencyRecord, Ecosystem

PARSER = DependencyParserSpec(
    manifest_names={"package.json"},
    parse=lambda text: parse_package_json(text),
)

_RANGE_PREFIX = re.compile(r"^[\^~>=<]+")


def parse_package_json(text: str) -> list[DependencyRecord]:
    """
    Parse package.json and extract runtime and dev dependencies.

    Range operators (``^``, ``~``, ``>=``, ``<``, ``>``) are stripped so only
    the bare version remains. Malformed JSON yields an empty list.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return []

    if not isinstance(data, dict):
        return []

    dependencies: list[DependencyRecord] = []
    for section in ("dependencies", "devDependencies"):
        entries = data.get(section)
        if not isinstance(entries, dict):
            continue
        for name, spec in entries.items():
            if not isinstance(spec, str):
                continue
            dependencies.append(
                DependencyRecord(
                    name=name,
                    version=_RANGE_PREFIX.sub("", spec),
                    ecosystem=Ecosystem.NPM,
                )
            )

    return dependencies
