"""
Command-line interface for Delivery Intel.
"""

import json
import os
import subprocess
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.table import Table

from delivery_intel.cache import clear_cache, load_cached_analysis, save_cached_analysis
from delivery_intel.config import (
    is_cache_enabled,
    set_cache_dir,
    set_cache_ttl,
    set_verify_ssl,
)
from delivery_intel.core import analyze_sync
from delivery_intel.models import (
    AnalysisResult,
    DeploymentSource,
    Rating,
    RiskBreakdown,
    RiskLevel,
    Severity,
    SuggestionSeverity,
    to_dict,
)
from delivery_intel.repository import parse_repository
from delivery_intel.risk import compute_risk_score
from delivery_intel.vcs import RateLimitError

# --- Typer App ---
app = typer.Typer(help="Software delivery intelligence for GitHub repositories.")
console = Console()

# Scores below this threshold exit with code 2
FAILING_SCORE = 25

RATING_COLORS = {
    Rating.ELITE: "green",
    Rating.HIGH: "cyan",
    Rating.MEDIUM: "yellow",
    Rating.LOW: "red",
    Rating.NOT_AVAILABLE: "dim",
}

SEVERITY_COLORS = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "green",
    Severity.UNKNOWN: "dim",
}

SUGGESTION_ICONS = {
    SuggestionSeverity.HIGH: "[red]●[/red]",
    SuggestionSeverity.MEDIUM: "[yellow]●[/yellow]",
    SuggestionSeverity.LOW: "[green]●[/green]",
}

RISK_COLORS = {
    RiskLevel.LOW: "green",
    RiskLevel.MODERATE: "yellow",
    RiskLevel.HIGH: "red",
    RiskLevel.CRITICAL: "bold red",
}

# --- Helper Functions ---


def _token_from_gh_cli() -> str | None:
    """Read a token from the GitHub CLI keychain, if available."""
    try:
        completed = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
            check=True,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    return completed.stdout.strip() or None


def resolve_token(explicit_token: str | None) -> tuple[str, str] | None:
    """
    Resolve a GitHub token and describe where it came from.

    Priority:
    1. --token flag
    2. GITHUB_TOKEN environment variable
    3. gh auth token (GitHub CLI)

    Returns:
        (token, source) tuple, or None for unauthenticated mode.
    """
    if explicit_token:
        return explicit_token, "--token flag"
    env_token = os.getenv("GITHUB_TOKEN")
    if env_token:
        return env_token, "GITHUB_TOKEN env var"
    gh_token = _token_from_gh_cli()
    if gh_token:
        return gh_token, "GitHub CLI (gh auth token)"
    return None


def _rating(rating: Rating) -> str:
    color = RATING_COLORS[rating]
    return f"[{color}]{rating.value}[/{color}]"


def display_result(result: AnalysisResult, risk: RiskBreakdown | None = None) -> None:
    """Display an analysis report with rich tables."""
    dora = result.dora_metrics

    score_color = "green"
    if result.overall_score < 50:
        score_color = "red"
    elif result.overall_score < 80:
        score_color = "yellow"

    console.print(
        f"\n[bold cyan]{result.repo.slug}[/bold cyan]  "
        f"Overall score: [{score_color}]{result.overall_score}/100[/{score_color}]"
    )
    console.print(f"[dim]{result.repo.url}[/dim]")

    table = Table(title="DORA Metrics")
    table.add_column("Metric", justify="left", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right")
    table.add_column("Rating", justify="center")
    table.add_column("Notes", justify="left")

    frequency = dora.deployment_frequency
    source_note = (
        "estimated from merged PRs"
        if frequency.source == DeploymentSource.FALLBACK
        else "Deployments API"
    )
    table.add_row(
        "Deployment Frequency",
        f"{frequency.deployments_per_week}/week",
        _rating(frequency.rating),
        source_note,
    )
    table.add_row(
        "Lead Time for Changes",
        f"{dora.lead_time.median_hours}h",
        _rating(dora.lead_time.rating),
        "median, PR opened to merged",
    )
    cfr = dora.change_failure_rate
    table.add_row(
        "Change Failure Rate",
        f"{cfr.percentage}%",
        _rating(cfr.rating),
        f"{cfr.failed_runs}/{cfr.total_runs} completed runs failed",
    )
    mttr = dora.mean_time_to_restore
    table.add_row(
        "Mean Time to Restore",
        "-" if mttr.median_hours is None else f"{mttr.median_hours}h",
        _rating(mttr.rating),
        "median, failure to next success",
    )
    console.print(table)

    daily = " ".join(str(count) for count in result.daily_deployments)
    console.print(f"[dim]Deployments, last 7 days (oldest first): {daily}[/dim]")

    if result.vulnerabilities:
        vuln_table = Table(title=f"Vulnerabilities ({len(result.vulnerabilities)})")
        vuln_table.add_column("Package", style="cyan", no_wrap=True)
        vuln_table.add_column("Version")
        vuln_table.add_column("ID")
        vuln_table.add_column("Severity", justify="center")
        vuln_table.add_column("Fixed In")
        for vuln in result.vulnerabilities:
            color = SEVERITY_COLORS[vuln.severity]
            vuln_table.add_row(
                vuln.package_name,
                vuln.current_version,
                vuln.vuln_id,
                f"[{color}]{vuln.severity.value}[/{color}]",
                vuln.fixed_version or "-",
            )
        console.print(vuln_table)
    else:
        console.print("[green]No known vulnerabilities found.[/green]")

    if result.suggestions:
        console.print("\n[bold cyan]Suggestions[/bold cyan]")
        for suggestion in result.suggestions:
            console.print(
                f"{SUGGESTION_ICONS[suggestion.severity]} [bold]{suggestion.title}[/bold] "
                f"[dim]({suggestion.category.value})[/dim]"
            )
            console.print(f"   {suggestion.description}")
            for item in suggestion.action_items:
                console.print(f"   • {item}")

    if risk is not None:
        color = RISK_COLORS[risk.level]
        console.print(
            f"\n[bold cyan]Burnout Risk[/bold cyan]  "
            f"[{color}]{risk.score}/100 ({risk.level.value})[/{color}]"
        )
        console.print(
            f"[dim]cycle time delta {risk.cycle_time_delta}, "
            f"failure rate delta {risk.failure_rate_delta}, "
            f"sentiment x{risk.sentiment_multiplier}[/dim]"
        )
        console.print(f"   {risk.summary}")


def _build_report(result: AnalysisResult, risk: RiskBreakdown | None) -> str:
    report = to_dict(result)
    if risk is not None:
        report["risk_score"] = to_dict(risk)
    return json.dumps(report, indent=2, ensure_ascii=False)


# --- Commands ---


@app.command()
def analyze(
    repo: str = typer.Argument(
        ...,
        help="Repository to analyze: 'owner/repo' or a GitHub URL.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output raw JSON instead of the formatted report.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the JSON report to a file.",
    ),
    token: str | None = typer.Option(
        None,
        "--token",
        help="GitHub token (prefer GITHUB_TOKEN or 'gh auth login').",
    ),
    risk: bool = typer.Option(
        False,
        "--risk",
        help="Include the burnout risk score.",
    ),
    sentiment: float | None = typer.Option(
        None,
        "--sentiment",
        help="Negative team sentiment ratio (0-1) applied to the risk score.",
    ),
    cache_dir: Path | None = typer.Option(
        None,
        "--cache-dir",
        help="Cache directory path (default: ~/.cache/delivery-intel).",
    ),
    cache_ttl: int | None = typer.Option(
        None,
        "--cache-ttl",
        help="Cache TTL in seconds (default: 300).",
    ),
    no_cache: bool = typer.Option(
        False,
        "--no-cache",
        help="Ignore cached reports and fetch fresh data.",
    ),
    insecure: bool = typer.Option(
        False,
        "--insecure",
        help="Disable SSL certificate verification for HTTPS requests.",
    ),
):
    """Analyze DORA metrics and dependency vulnerabilities of a repository."""
    set_verify_ssl(not insecure)
    if cache_dir:
        set_cache_dir(cache_dir)
    if cache_ttl:
        set_cache_ttl(cache_ttl)

    try:
        repo_id = parse_repository(repo)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from None

    resolved = resolve_token(token)
    if not json_output:
        if resolved:
            console.print(f"[dim]Auth: {resolved[1]}[/dim]")
        else:
            console.print(
                "[yellow]⚠️  No token, using unauthenticated mode "
                "(60 req/hr, public repos only)[/yellow]"
            )
            console.print("[dim]Tip: run 'gh auth login' for 5,000 req/hr.[/dim]")

    use_cache = not no_cache and is_cache_enabled()
    result = load_cached_analysis(repo_id) if use_cache else None
    if result is not None:
        if not json_output:
            console.print(f"[dim]Loaded {repo_id.slug} from cache.[/dim]")
    else:
        try:
            result = analyze_sync(repo_id, token=resolved[0] if resolved else None)
        except (ValueError, RateLimitError, httpx.HTTPError) as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(code=1) from None
        if use_cache:
            save_cached_analysis(result)

    risk_breakdown = None
    if risk or sentiment is not None:
        risk_breakdown = compute_risk_score(result.dora_metrics, sentiment)

    if json_output or output:
        report = _build_report(result, risk_breakdown)
        if output:
            output.write_text(report, encoding="utf-8")
            if not json_output:
                console.print(f"[green]✓[/green] Report saved to [bold]{output}[/bold]")
        if json_output:
            typer.echo(report)
    else:
        display_result(result, risk_breakdown)

    if result.overall_score < FAILING_SCORE:
        raise typer.Exit(code=2)


@app.command("clear-cache")
def clear_cache_command(
    repo: str | None = typer.Argument(
        None,
        help="Repository whose cached report to clear, or omit for all.",
    ),
):
    """Clear cached analysis reports."""
    try:
        repo_id = parse_repository(repo) if repo else None
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from None

    cleared = clear_cache(repo_id)
    console.print(f"[green]✨ Cleared {cleared} cache file(s).[/green]")


if __name__ == "__main__":
    app()
