"""
Heuristic improvement suggestions derived from DORA metrics and
vulnerability scan results.
"""

from delivery_intel.models import (
    DeploymentSource,
    DORAMetrics,
    Rating,
    Severity,
    Suggestion,
    SuggestionCategory,
    SuggestionSeverity,
    VulnerabilityRecord,
)

SEVERITY_ORDER = {
    SuggestionSeverity.HIGH: 0,
    SuggestionSeverity.MEDIUM: 1,
    SuggestionSeverity.LOW: 2,
}


def _pluralize_vulnerability(count: int) -> str:
    return "Vulnerability" if count == 1 else "Vulnerabilities"


def _unique_packages(vulnerabilities: list[VulnerabilityRecord]) -> list[str]:
    # dict preserves first-seen order
    return list(dict.fromkeys(v.package_name for v in vulnerabilities))


def _fix_actions(vulnerabilities: list[VulnerabilityRecord]) -> list[str]:
    return [
        f"Update {v.package_name} to {v.fixed_version} (fixes {v.vuln_id})"
        for v in vulnerabilities
        if v.fixed_version
    ]


def _failure_rate_suggestions(dora: DORAMetrics) -> list[Suggestion]:
    percentage = dora.change_failure_rate.percentage
    if percentage > 15:
        return [
            Suggestion(
                category=SuggestionCategory.RELIABILITY,
                severity=SuggestionSeverity.HIGH,
                title="High Pipeline Failure Rate",
                description=(
                    f"Your CI/CD pipeline has a {percentage}% failure rate, which is "
                    "above the recommended 15% threshold. This suggests code is being "
                    "merged without sufficient validation."
                ),
                action_items=[
                    "Enable Branch Protection Rules requiring passing status checks "
                    "before merging.",
                    "Add a required code review step (at least 1 approving review).",
                    "Implement pre-merge CI checks: lint, type-check, and unit tests.",
                    "Consider adding a staging environment for integration testing.",
                ],
            )
        ]
    if percentage > 10:
        return [
            Suggestion(
                category=SuggestionCategory.RELIABILITY,
                severity=SuggestionSeverity.MEDIUM,
                title="Moderate Pipeline Failure Rate",
                description=(
                    f"Your failure rate is {percentage}%. While not critical, "
                    "there's room for improvement."
                ),
                action_items=[
                    "Review recent failures for common patterns (flaky tests, "
                    "environment issues).",
                    "Add retry logic for known flaky integration tests.",
                    "Consider caching dependencies to reduce timeout-related failures.",
                ],
            )
        ]
    return []


def _lead_time_suggestions(dora: DORAMetrics) -> list[Suggestion]:
    hours = dora.lead_time.median_hours
    if hours > 168:
        return [
            Suggestion(
                category=SuggestionCategory.PERFORMANCE,
                severity=SuggestionSeverity.HIGH,
                title="Slow Lead Time for Changes",
                description=(
                    f"Median lead time is {hours} hours ({hours / 24:.1f} days). "
                    "Changes take too long to reach production."
                ),
                action_items=[
                    "Break features into smaller, atomic pull requests "
                    "(<400 lines of diff).",
                    'Adopt "Ship / Show / Ask" PR methodology to reduce review '
                    "bottlenecks.",
                    "Set up CODEOWNERS to automatically route reviews to the right "
                    "people.",
                    "Consider trunk-based development with feature flags.",
                ],
            )
        ]
    if hours > 48:
        return [
            Suggestion(
                category=SuggestionCategory.PERFORMANCE,
                severity=SuggestionSeverity.MEDIUM,
                title="PRs Are Sitting Too Long",
                description=(
                    f"Median lead time is {hours} hours. PRs may be waiting for review."
                ),
                action_items=[
                    "Set a team SLA for PR reviews (e.g., < 4 hours for first review).",
                    "Use GitHub's auto-assign feature to distribute review load.",
                    "Pair program on complex changes instead of async review.",
                ],
            )
        ]
    return []


def _deployment_suggestions(dora: DORAMetrics) -> list[Suggestion]:
    frequency = dora.deployment_frequency
    fallback = frequency.source == DeploymentSource.FALLBACK
    suggestions: list[Suggestion] = []

    if frequency.rating in (Rating.LOW, Rating.NOT_AVAILABLE):
        description = f"Only {frequency.deployments_per_week} deployments per week."
        if fallback:
            description += (
                " (Measured via merged PRs, no formal Deployments API usage "
                "detected.)"
            )
        suggestions.append(
            Suggestion(
                category=SuggestionCategory.PERFORMANCE,
                severity=SuggestionSeverity.MEDIUM,
                title="Low Deployment Frequency",
                description=description,
                action_items=[
                    "Set up continuous deployment for your default branch.",
                    "Adopt feature flags to decouple deployment from release.",
                    "Reduce batch sizes and deploy smaller changes more frequently.",
                    "Automate your release process with GitHub Actions or similar.",
                ],
            )
        )

    if fallback:
        suggestions.append(
            Suggestion(
                category=SuggestionCategory.PERFORMANCE,
                severity=SuggestionSeverity.LOW,
                title="No Formal Deployment Tracking",
                description=(
                    "This repository doesn't use the GitHub Deployments API. "
                    "Metrics are estimated from merged pull requests."
                ),
                action_items=[
                    "Configure your CI/CD to create GitHub Deployments via the API.",
                    "This enables more accurate Lead Time and Deployment Frequency "
                    "calculations.",
                    "See: https://docs.github.com/en/rest/deployments",
                ],
            )
        )
    return suggestions


def _security_suggestions(
    vulnerabilities: list[VulnerabilityRecord],
) -> list[Suggestion]:
    if not vulnerabilities:
        return [
            Suggestion(
                category=SuggestionCategory.SECURITY,
                severity=SuggestionSeverity.LOW,
                title="No Known Vulnerabilities",
                description=(
                    "OSV.dev scan found no known vulnerabilities in your dependency "
                    "manifests. Keep dependencies up to date to maintain this."
                ),
                action_items=[
                    "Enable Dependabot or Renovate for automated dependency updates.",
                    "Run periodic security audits as part of CI.",
                ],
            )
        ]

    critical = [v for v in vulnerabilities if v.severity == Severity.CRITICAL]
    high = [v for v in vulnerabilities if v.severity == Severity.HIGH]
    suggestions: list[Suggestion] = []

    if critical:
        suggestions.append(
            Suggestion(
                category=SuggestionCategory.SECURITY,
                severity=SuggestionSeverity.HIGH,
                title=(
                    f"{len(critical)} Critical "
                    f"{_pluralize_vulnerability(len(critical))} Found"
                ),
                description=(
                    "Critical vulnerabilities in: "
                    f"{', '.join(_unique_packages(critical))}. These have known "
                    "CVEs and should be patched immediately."
                ),
                action_items=[
                    *_fix_actions(critical),
                    "Run `npm audit fix` (or equivalent) to auto-patch where possible.",
                    "Review the full vulnerability details and assess impact.",
                ],
            )
        )

    if high:
        suggestions.append(
            Suggestion(
                category=SuggestionCategory.SECURITY,
                severity=SuggestionSeverity.MEDIUM,
                title=(
                    f"{len(high)} High-Severity "
                    f"{_pluralize_vulnerability(len(high))} Found"
                ),
                description=(
                    f"High-severity issues in: {', '.join(_unique_packages(high))}."
                ),
                action_items=[
                    *_fix_actions(high),
                    "Schedule these patches for your next sprint.",
                ],
            )
        )
    return suggestions


def generate_suggestions(
    dora: DORAMetrics, vulnerabilities: list[VulnerabilityRecord]
) -> list[Suggestion]:
    """
    Build improvement suggestions for a repository.

    Every rule is evaluated; the result is ordered high, medium, low while
    keeping rule order within a severity.
    """
    suggestions = [
        *_failure_rate_suggestions(dora),
        *_lead_time_suggestions(dora),
        *_deployment_suggestions(dora),
        *_security_suggestions(vulnerabilities),
    ]
    return sorted(suggestions, key=lambda s: SEVERITY_ORDER[s.severity])
