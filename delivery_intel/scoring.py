"""
Overall 0-100 delivery health score.
"""

from delivery_intel.metrics.base import round_half_up
from delivery_intel.models import DORAMetrics, Rating, Severity, VulnerabilityRecord

# N/A is neutral, not punitive
RATING_SCORES = {
    Rating.ELITE: 100,
    Rating.HIGH: 75,
    Rating.MEDIUM: 50,
    Rating.LOW: 25,
    Rating.NOT_AVAILABLE: 50,
}

SEVERITY_PENALTIES = {
    Severity.CRITICAL: 5,
    Severity.HIGH: 2,
    Severity.MEDIUM: 1,
}


def compute_dora_score(dora: DORAMetrics) -> float:
    """
    Average rating score of deployment frequency, lead time and change
    failure rate. Mean time to restore does not take part.
    """
    ratings = [
        dora.deployment_frequency.rating,
        dora.lead_time.rating,
        dora.change_failure_rate.rating,
    ]
    return sum(RATING_SCORES[rating] for rating in ratings) / len(ratings)


def compute_vulnerability_penalty(vulnerabilities: list[VulnerabilityRecord]) -> int:
    """Sum of per-vulnerability penalties; low and unknown cost nothing."""
    return sum(SEVERITY_PENALTIES.get(v.severity, 0) for v in vulnerabilities)


def compute_overall_score(
    dora: DORAMetrics, vulnerabilities: list[VulnerabilityRecord]
) -> int:
    """
    Combine DORA ratings and vulnerability penalties into one score.

    Returns:
        Integer in [0, 100].
    """
    raw = compute_dora_score(dora) - compute_vulnerability_penalty(vulnerabilities)
    return int(max(0, min(100, round_half_up(raw))))
