"""Dependency vulnerability classification and scanning."""

from delivery_intel.vulnerabilities.classifier import (
    classify_severity,
    classify_vulnerability,
    extract_fixed_version,
)
from delivery_intel.vulnerabilities.scanner import (
    VulnerabilityQuery,
    collect_dependencies,
    scan_dependencies,
    scan_vulnerabilities,
)

__all__ = [
    "VulnerabilityQuery",
    "classify_severity",
    "classify_vulnerability",
    "extract_fixed_version",
    "collect_dependencies",
    "scan_dependencies",
    "scan_vulnerabilities",
]
