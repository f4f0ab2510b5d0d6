"""Classification of raw OSV vulnerability records."""

import re
from typing import Any

from delivery_intel.models import DependencyRecord, Severity, VulnerabilityRecord

# Ordered CVSS breakpoints, evaluated top-down. Anything below the last one is LOW.
SEVERITY_THRESHOLDS: list[tuple[float, Severity]] = [
    (9.0, Severity.CRITICAL),
    (7.0, Severity.HIGH),
    (4.0, Severity.MEDIUM),
]

# Leading decimal number of a score string, e.g. "7.5" or "9.8 (vendor)"
_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def classify_severity(severity_entries: list[dict[str, Any]] | None) -> Severity:
    """
    Map the first CVSS score of a vulnerability to a severity tier.

    Args:
        severity_entries: OSV ``severity`` array (``[{"type", "score"}, ...]``).

    Returns:
        Severity tier; UNKNOWN when no score is present. Scores without a
        leading number (such as CVSS vector strings) fall through to LOW.
    """
    if not severity_entries:
        return Severity.UNKNOWN

    entry = severity_entries[0]
    score = entry.get("score") if isinstance(entry, dict) else None
    match = _LEADING_NUMBER.match(str(score)) if score is not None else None
    if match is None:
        return Severity.LOW
    cvss = float(match.group())

    for threshold, severity in SEVERITY_THRESHOLDS:
        if cvss >= threshold:
            return severity
    return Severity.LOW


def extract_fixed_version(
    affected: list[dict[str, Any]] | None, dependency: DependencyRecord
) -> str | None:
    """
    Return the first ``fixed`` event for the dependency's package entry.

    Only the first affected entry matching both name and ecosystem is read,
    and within it the first fixed event in declaration order wins.
    """
    if not affected:
        return None

    ecosystem = getattr(dependency.ecosystem, "value", dependency.ecosystem)
    entry = next(
        (
            item
            for item in affected
            if item.get("package", {}).get("name") == dependency.name
            and item.get("package", {}).get("ecosystem") == ecosystem
        ),
        None,
    )
    if entry is None:
        return None

    for version_range in entry.get("ranges") or []:
        for event in version_range.get("events") or []:
            fixed = event.get("fixed")
            if fixed:
                return fixed
    return None


def classify_vulnerability(
    raw: dict[str, Any], dependency: DependencyRecord
) -> VulnerabilityRecord:
    """Build a VulnerabilityRecord from one OSV entry for ``dependency``."""
    return VulnerabilityRecord(
        package_name=dependency.name,
        current_version=dependency.version,
        vuln_id=raw.get("id", "UNKNOWN"),
        summary=raw.get("summary") or "No description available.",
        severity=classify_severity(raw.get("severity")),
        aliases=list(raw.get("aliases") or []),
        fixed_version=extract_fixed_version(raw.get("affected"), dependency),
    )
