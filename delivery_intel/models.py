"""
Shared data structures for Delivery Intel.

Every record is an immutable NamedTuple so results can be passed between
concurrent tasks without copying. Enumerations subclass ``str`` so they
serialise as their plain values.
"""

from datetime import datetime
from enum import Enum
from typing import Any, NamedTuple

# --- Repository ---


class RepoIdentifier(NamedTuple):
    """A GitHub repository reference."""

    owner: str
    name: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def url(self) -> str:
        return f"https://github.com/{self.owner}/{self.name}"


# --- Dependencies & Vulnerabilities ---


class Ecosystem(str, Enum):
    """Package ecosystems understood by the manifest parsers.

    Values use the spelling expected by the OSV.dev API.
    """

    NPM = "npm"
    PYPI = "PyPI"
    GO = "Go"


class DependencyRecord(NamedTuple):
    """A single declared dependency from a manifest file."""

    name: str
    version: str
    ecosystem: Ecosystem


class Severity(str, Enum):
    """Vulnerability severity tier."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


class VulnerabilityRecord(NamedTuple):
    """A known vulnerability affecting one declared dependency."""

    package_name: str
    current_version: str
    vuln_id: str
    summary: str
    severity: Severity
    aliases: list[str]
    fixed_version: str | None = None


# --- Activity records (normalized collaborator output) ---


class PullRequestRecord(NamedTuple):
    """A pull request against the default branch."""

    created_at: datetime
    merged_at: datetime | None = None


class DeploymentRecord(NamedTuple):
    """A formal deployment record."""

    created_at: datetime


class PipelineRun(NamedTuple):
    """A CI/CD pipeline (workflow) run."""

    status: str
    conclusion: str | None
    created_at: datetime
    branch: str | None = None


class ActivityData(NamedTuple):
    """Raw activity history for one analysis run."""

    pull_requests: list[PullRequestRecord] = []
    deployments: list[DeploymentRecord] = []
    pipeline_runs: list[PipelineRun] = []


# --- DORA metrics ---


class Rating(str, Enum):
    """Benchmark rating of a delivery metric.

    NOT_AVAILABLE means there was not enough data to rate the metric, which is
    different from LOW (data present, poor result).
    """

    ELITE = "Elite"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    NOT_AVAILABLE = "N/A"


class DeploymentSource(str, Enum):
    """Which data source produced the deployment frequency."""

    FORMAL = "formal-deployment-api"
    FALLBACK = "merged-pr-fallback"


class DeploymentFrequency(NamedTuple):
    deployments_per_week: float
    rating: Rating
    source: DeploymentSource


class LeadTime(NamedTuple):
    median_hours: float
    rating: Rating


class ChangeFailureRate(NamedTuple):
    percentage: float
    failed_runs: int
    total_runs: int
    rating: Rating


class MeanTimeToRestore(NamedTuple):
    median_hours: float | None
    rating: Rating


class DORAMetrics(NamedTuple):
    """The four DORA delivery metrics."""

    deployment_frequency: DeploymentFrequency
    lead_time: LeadTime
    change_failure_rate: ChangeFailureRate
    mean_time_to_restore: MeanTimeToRestore

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DORAMetrics":
        df = data["deployment_frequency"]
        lt = data["lead_time"]
        cfr = data["change_failure_rate"]
        mttr = data["mean_time_to_restore"]
        return cls(
            deployment_frequency=DeploymentFrequency(
                deployments_per_week=df["deployments_per_week"],
                rating=Rating(df["rating"]),
                source=DeploymentSource(df["source"]),
            ),
            lead_time=LeadTime(lt["median_hours"], Rating(lt["rating"])),
            change_failure_rate=ChangeFailureRate(
                percentage=cfr["percentage"],
                failed_runs=cfr["failed_runs"],
                total_runs=cfr["total_runs"],
                rating=Rating(cfr["rating"]),
            ),
            mean_time_to_restore=MeanTimeToRestore(
                mttr["median_hours"], Rating(mttr["rating"])
            ),
        )


# --- Suggestions ---


class SuggestionCategory(str, Enum):
    PERFORMANCE = "performance"
    RELIABILITY = "reliability"
    SECURITY = "security"


class SuggestionSeverity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Suggestion(NamedTuple):
    """An improvement recommendation."""

    category: SuggestionCategory
    severity: SuggestionSeverity
    title: str
    description: str
    action_items: list[str]


# --- Results ---


class AnalysisResult(NamedTuple):
    """The delivery-performance report for one repository."""

    repo: RepoIdentifier
    fetched_at: str
    dora_metrics: DORAMetrics
    vulnerabilities: list[VulnerabilityRecord]
    suggestions: list[Suggestion]
    overall_score: int
    daily_deployments: list[int]  # index 0 = six days ago, index 6 = today

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalysisResult":
        """Rebuild a result from the output of ``to_dict``."""
        return cls(
            repo=RepoIdentifier(data["repo"]["owner"], data["repo"]["name"]),
            fetched_at=data["fetched_at"],
            dora_metrics=DORAMetrics.from_dict(data["dora_metrics"]),
            vulnerabilities=[
                VulnerabilityRecord(
                    package_name=v["package_name"],
                    current_version=v["current_version"],
                    vuln_id=v["vuln_id"],
                    summary=v["summary"],
                    severity=Severity(v["severity"]),
                    aliases=list(v.get("aliases", [])),
                    fixed_version=v.get("fixed_version"),
                )
                for v in data.get("vulnerabilities", [])
            ],
            suggestions=[
                Suggestion(
                    category=SuggestionCategory(s["category"]),
                    severity=SuggestionSeverity(s["severity"]),
                    title=s["title"],
                    description=s["description"],
                    action_items=list(s.get("action_items", [])),
                )
                for s in data.get("suggestions", [])
            ],
            overall_score=data["overall_score"],
            daily_deployments=list(data.get("daily_deployments", [0] * 7)),
        )


class RiskLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class RiskBreakdown(NamedTuple):
    """Burnout risk score and the deltas it was computed from."""

    cycle_time_delta: float  # 0-1
    failure_rate_delta: float  # 0-1
    sentiment_multiplier: float  # 1.0-1.5
    score: int  # 0-100
    level: RiskLevel
    summary: str


# --- Serialization ---


def to_dict(value: Any) -> Any:
    """Convert a record tree into JSON-compatible data."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, "_asdict"):
        return {key: to_dict(item) for key, item in value._asdict().items()}
    if isinstance(value, dict):
        return {key: to_dict(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dict(item) for item in value]
    return value
