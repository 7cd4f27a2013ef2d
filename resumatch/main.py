"""Command-line front end for resumatch."""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .config import Settings
from .cv_parser import extract_text
from .errors import UnsupportedFormat
from .evaluator_agent import filter_good_matches
from .llm import create_gateway
from .models import ScoredMatch, StructuredProfile
from .pipeline import run_matching
from .search_provider import DEFAULT_LOCATION, get_providers

console = Console()

MAX_SKILLS_SHOWN = 5
MAX_REASONS_SHOWN = 3


def configure_logging(level: str) -> None:
    # getLevelName maps a known name to its number and anything else to a string.
    resolved = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=resolved if isinstance(resolved, int) else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(message)s",
    )


def display_profile(profile: StructuredProfile, degraded: bool = False) -> None:
    """Display the extracted keyword summary."""
    parts = []

    if profile.summary:
        parts.append(f"[italic]{profile.summary}[/italic]")
        parts.append("")

    parts.append(f"[bold]Experience:[/bold] {profile.experience_level}")
    parts.append(f"[bold]Roles:[/bold] {', '.join(profile.roles) or '-'}")
    parts.append(f"[bold]Skills:[/bold] {', '.join(profile.skills) or '-'}")
    parts.append(f"[bold]Tech Stack:[/bold] {', '.join(profile.tech_stack) or '-'}")
    if profile.keywords:
        parts.append(f"[bold]Keywords:[/bold] {', '.join(profile.keywords)}")
    if degraded:
        parts.append("")
        parts.append("[yellow]AI extraction unavailable, matching will rely on keywords only.[/yellow]")

    console.print(Panel("\n".join(parts), title="📋 Candidate Profile", border_style="blue"))
    console.print()


def _score_markup(match: ScoredMatch) -> str:
    score = match.relevance_score
    text = f"{score:.0f}" + ("*" if match.degraded else "")
    if score >= 80:
        return f"[bold green]{text}[/bold green]"
    if score >= 60:
        return f"[yellow]{text}[/yellow]"
    return f"[red]{text}[/red]"


def display_results(matches: list[ScoredMatch], min_score: float, top: int) -> None:
    """Display ranked matches in a table, then details for the best few."""
    shown = filter_good_matches(matches, min_score)[:top]

    if not shown:
        console.print(f"[yellow]No jobs found with score >= {min_score:.0f}.[/yellow]")
        return

    table = Table(title=f"🎯 Job Matches (Score >= {min_score:.0f})", show_header=True, header_style="bold magenta")
    table.add_column("Score", justify="center", style="cyan", width=7)
    table.add_column("Title", style="white", max_width=35)
    table.add_column("Company", style="green", max_width=20)
    table.add_column("Location", style="yellow", max_width=18)
    table.add_column("Salary", max_width=24)
    table.add_column("Skills", style="dim", max_width=40)

    for match in shown:
        job = match.job
        table.add_row(
            _score_markup(match),
            job.title[:35],
            job.company[:20],
            job.location[:18],
            job.salary_range,
            ", ".join(job.required_skills[:MAX_SKILLS_SHOWN]),
        )

    console.print(table)
    if any(m.degraded for m in shown):
        console.print("[dim]* keyword-based score (AI scoring unavailable for this listing)[/dim]")
    console.print()

    console.print("[bold]📝 Top Match Details:[/bold]")
    for i, match in enumerate(shown[:3], 1):
        job = match.job
        console.print(f"\n[bold cyan]{i}. {job.title}[/bold cyan] at [green]{job.company}[/green]")
        console.print(f"   Score: {match.relevance_score:.0f}/100")
        console.print(f"   Experience: {job.experience} · {job.employment_type}")
        for reason in match.match_reasons[:MAX_REASONS_SHOWN]:
            console.print(f"   • {reason}")
        if job.url:
            console.print(f"   Link: {job.url}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the resumatch CLI."""
    parser = argparse.ArgumentParser(
        description="resumatch: match a resume against live job listings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  resumatch resume.pdf
  resumatch resume.docx --location Bangalore
  resumatch resume.pdf --min-score 60 --top 10
        """,
    )
    parser.add_argument("cv_path", type=Path, help="Path to your resume (supported: .pdf, .docx, .md, .txt)")
    parser.add_argument("--location", "-l", type=str, default=DEFAULT_LOCATION, help="Target job location")
    parser.add_argument("--min-score", "-s", type=float, default=0, help="Minimum match score to display")
    parser.add_argument("--top", "-n", type=int, default=20, help="Maximum number of matches to display")
    args = parser.parse_args(argv)

    load_dotenv()
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    console.print()
    console.print(Panel.fit("[bold blue]resumatch[/bold blue]\n[dim]AI-assisted job matching[/dim]", border_style="blue"))
    console.print()

    try:
        cv_text = extract_text(args.cv_path)
    except (FileNotFoundError, UnsupportedFormat) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    gateway = create_gateway(settings)
    providers = get_providers(settings)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("Analyzing resume and fetching jobs...", total=None)

            def update_progress(current: int, total: int) -> None:
                progress.update(task, description=f"Scoring job {current}/{total}...", completed=current, total=total)

            report = run_matching(
                cv_text,
                gateway,
                providers,
                location=args.location,
                max_workers=settings.max_workers,
                progress_callback=update_progress,
            )
            progress.update(task, description=f"[green]✓[/green] Scored {len(report.matches)} jobs")
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        return 130

    display_profile(report.profile, report.profile_degraded)

    if not report.matches:
        console.print("[yellow]No jobs found. Check your job-source API keys or try another location.[/yellow]")
        return 0

    display_results(report.matches, args.min_score, args.top)
    return 0


def cli() -> None:
    """CLI entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
