"""
Delivery (burnout) risk score.

Correlates PR cycle time and pipeline failure rate, optionally amplified by
negative team sentiment:

    risk = (cycle_time_delta * 0.6 + failure_rate_delta * 0.4)
           * sentiment_multiplier * 100
"""

from delivery_intel.metrics.base import round_half_up
from delivery_intel.models import DORAMetrics, RiskBreakdown, RiskLevel

# Elite benchmarks and normalization caps
ELITE_LEAD_TIME_HOURS = 24
MAX_LEAD_TIME_HOURS = 720
ELITE_FAILURE_RATE_PCT = 5
MAX_FAILURE_RATE_PCT = 100

CYCLE_TIME_WEIGHT = 0.6
FAILURE_RATE_WEIGHT = 0.4
SENTIMENT_NEGATIVE_FACTOR = 0.5

RISK_LEVEL_THRESHOLDS = [
    (75, RiskLevel.CRITICAL),
    (50, RiskLevel.HIGH),
    (25, RiskLevel.MODERATE),
]


def normalize_delta(actual: float, elite_benchmark: float, max_cap: float) -> float:
    """
    Map a metric onto [0, 1]: 0 at or better than the elite benchmark,
    1 at or beyond the cap, linear in between.
    """
    if actual <= elite_benchmark:
        return 0.0
    delta = (actual - elite_benchmark) / (max_cap - elite_benchmark)
    return min(max(delta, 0.0), 1.0)


def compute_sentiment_multiplier(sentiment_negative_ratio: float | None) -> float:
    """1.0 without sentiment data, up to 1.5 for fully negative sentiment."""
    if sentiment_negative_ratio is None:
        return 1.0
    ratio = min(max(sentiment_negative_ratio, 0.0), 1.0)
    return 1.0 + ratio * SENTIMENT_NEGATIVE_FACTOR


def classify_risk_level(score: float) -> RiskLevel:
    for threshold, level in RISK_LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return RiskLevel.LOW


def summarize_risk(
    level: RiskLevel,
    score: int,
    cycle_time_delta: float,
    failure_rate_delta: float,
    sentiment_multiplier: float,
) -> str:
    """Pick the human-readable summary sentences for a risk result."""
    parts: list[str] = []

    if level == RiskLevel.LOW:
        parts.append(f"Delivery risk is low ({score}/100).")
        parts.append(
            "Team velocity and pipeline stability are within healthy thresholds."
        )
    elif level == RiskLevel.MODERATE:
        parts.append(f"Delivery risk is moderate ({score}/100).")
        if cycle_time_delta > 0.3:
            parts.append("Cycle times are above the elite benchmark.")
        if failure_rate_delta > 0.3:
            parts.append("Failure rate is trending upward.")
    elif level == RiskLevel.HIGH:
        parts.append(f"Delivery risk is high ({score}/100).")
        if cycle_time_delta > 0.5:
            parts.append("PRs are taking significantly longer to merge.")
        if failure_rate_delta > 0.5:
            parts.append("Pipeline failures are impacting velocity.")
    else:
        parts.append(f"Delivery risk is critical ({score}/100).")
        parts.append(
            "Immediate intervention recommended, the team may be approaching "
            "burnout."
        )

    if sentiment_multiplier > 1.0:
        parts.append("Negative team sentiment is amplifying the risk signal.")

    return " ".join(parts)


def compute_risk_score(
    dora: DORAMetrics, sentiment_negative_ratio: float | None = None
) -> RiskBreakdown:
    """
    Compute the delivery risk breakdown for a set of DORA metrics.

    Args:
        dora: Computed DORA metrics. Only lead time and change failure rate
            are used.
        sentiment_negative_ratio: Optional share of negative team sentiment
            in [0, 1]. Values outside the range are clamped.

    Returns:
        RiskBreakdown with deltas, multiplier, score, level and summary.
    """
    cycle_time_delta = normalize_delta(
        dora.lead_time.median_hours, ELITE_LEAD_TIME_HOURS, MAX_LEAD_TIME_HOURS
    )
    failure_rate_delta = normalize_delta(
        dora.change_failure_rate.percentage,
        ELITE_FAILURE_RATE_PCT,
        MAX_FAILURE_RATE_PCT,
    )
    sentiment_multiplier = compute_sentiment_multiplier(sentiment_negative_ratio)

    raw = (
        cycle_time_delta * CYCLE_TIME_WEIGHT
        + failure_rate_delta * FAILURE_RATE_WEIGHT
    ) * sentiment_multiplier
    score = int(min(100, max(0, round_half_up(raw * 100))))
    level = classify_risk_level(score)

    return RiskBreakdown(
        cycle_time_delta=round_half_up(cycle_time_delta, 4),
        failure_rate_delta=round_half_up(failure_rate_delta, 4),
        sentiment_multiplier=round_half_up(sentiment_multiplier, 2),
        score=score,
        level=level,
        summary=summarize_risk(
            level, score, cycle_time_delta, failure_rate_delta, sentiment_multiplier
        ),
    )
