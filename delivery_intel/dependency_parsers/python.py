"""requirements.txt dependency parser."""

import re

from delivery_intel.dependency_parsers.base import DependencyParserSpec
from delivery_intel.models import DependencyRecord, Ecosystem

PARSER = DependencyParserSpec(
    manifest_names={"requirements.txt"},
    parse=lambda text: parse_requirements_txt(text),
)

# name, one or more comparison characters, then a dotted numeric version
_REQUIREMENT_LINE = re.compile(r"^([A-Za-z0-9_.-]+)\s*[=><~!]+\s*([0-9.]+)")


def parse_requirements_txt(text: str) -> list[DependencyRecord]:
    """Parse requirements.txt lines of the form ``name<op>version``.

    Blank lines, comments and lines without a pinned version are skipped.
    """
    dependencies: list[DependencyRecord] = []

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        match = _REQUIREMENT_LINE.match(stripped)
        if match:
            dependencies.append(
                DependencyRecord(
                    name=match.group(1),
                    version=match.group(2),
                    ecosystem=Ecosystem.PYPI,
                )
            )

    return dependencies
