"""Shared dependency parser types."""

from typing import Callable, NamedTuple

from delivery_intel.models import DependencyRecord


class DependencyParserSpec(NamedTuple):
    """Specification for a manifest parser."""

    manifest_names: set[str]
    parse: Callable[[str], list[DependencyRecord]]
