"""
Command-line interface for the course-loading engine.

Usage:
    python -m courseload check snapshot.json --faculty F001
    python -m courseload rank snapshot.json --top 5
    python -m courseload stats snapshot.json
    python -m courseload audit snapshot.json
    python -m courseload validate snapshot.json
    python -m courseload generate sample.json --size small --seed 1
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .conflicts import ConflictDetector, InvalidCandidateError, audit_schedule
from .data.generator import (
    GeneratorConfig,
    generate_large_snapshot,
    generate_sample_snapshot,
    generate_small_snapshot,
    get_generation_stats,
    save_generated_snapshot,
)
from .data.loader import build_snapshot, load_json, load_snapshot
from .data.models import CandidateAssignment, ScheduleSnapshot
from .output.schema import (
    ConflictVerdictOutput,
    create_audit_report,
    create_load_report,
    create_ranking_output,
)
from .scoring import FacultySuitabilityScorer, ScoringConfig
from .stats import compute_load_stats
from .timeblocks import is_placeholder

# Create Typer app
app = typer.Typer(
    name="courseload",
    help="Faculty assignment conflict detection and suitability ranking.",
    add_completion=False,
)

# Rich console for pretty output
console = Console()
err_console = Console(stderr=True)


# =============================================================================
# Helper Functions
# =============================================================================

def configure_logging(verbose: bool) -> None:
    """Route library logging through rich; DEBUG when verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def load_input(input_path: Path) -> ScheduleSnapshot:
    """Load and validate a snapshot."""
    if not input_path.exists():
        console.print(f"[red]Error:[/red] Input file not found: {input_path}")
        raise typer.Exit(code=1)

    try:
        return load_snapshot(input_path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error loading input:[/red] {e}")
        raise typer.Exit(code=1)


def require_candidate(snapshot: ScheduleSnapshot, faculty_id: Optional[str] = None) -> CandidateAssignment:
    """The snapshot's candidate, optionally re-proposed for another faculty member."""
    candidate = snapshot.candidate
    if candidate is None:
        console.print("[red]Error:[/red] Snapshot has no 'candidate' to evaluate")
        raise typer.Exit(code=1)
    if faculty_id:
        faculty = snapshot.get_faculty(faculty_id)
        if faculty is None:
            console.print(f"[red]Error:[/red] Faculty '{faculty_id}' not found")
            raise typer.Exit(code=1)
        candidate = candidate.with_faculty(faculty)
    return candidate


def load_config(config_path: Optional[Path]) -> Optional[ScoringConfig]:
    """Load scoring overrides from a JSON file."""
    if config_path is None:
        return None
    try:
        return ScoringConfig.from_dict(load_json(config_path))
    except (OSError, ValueError, AttributeError) as e:
        console.print(f"[red]Error loading config:[/red] {e}")
        raise typer.Exit(code=1)


def period_records(snapshot: ScheduleSnapshot, candidate: Optional[CandidateAssignment] = None):
    """Records of the school year and term under evaluation."""
    if candidate is not None:
        return snapshot.records_for_period(
            candidate.school_year or snapshot.school_year,
            candidate.term or snapshot.semester,
        )
    return snapshot.records_for_period()


# =============================================================================
# Commands
# =============================================================================

@app.command()
def check(
    input_file: Path = typer.Argument(
        ...,
        help="Snapshot JSON with records, faculties and a candidate",
    ),
    faculty: Optional[str] = typer.Option(
        None,
        "--faculty", "-f",
        help="Evaluate the candidate for this faculty ID instead",
    ),
    exclude: Optional[str] = typer.Option(
        None,
        "--exclude", "-x",
        help="Record ID being edited (ignored during the check)",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the verdict as JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable debug logging",
    ),
) -> None:
    """
    Check a candidate assignment for conflicts.

    Exits with code 1 when the candidate conflicts.

    Example:
        python -m courseload check snapshot.json --faculty F001
    """
    configure_logging(verbose)
    snapshot = load_input(input_file)
    candidate = require_candidate(snapshot, faculty)

    try:
        verdict = ConflictDetector(period_records(snapshot, candidate)).evaluate(candidate, exclude_id=exclude)
    except InvalidCandidateError as e:
        console.print(f"[red]Invalid candidate:[/red] {e}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(ConflictVerdictOutput.from_verdict(verdict).to_json())
    else:
        _print_verdict(candidate, verdict)

    if verdict.conflict:
        raise typer.Exit(code=1)


def _print_verdict(candidate: CandidateAssignment, verdict) -> None:
    if verdict.conflict:
        status = Text(f"CONFLICT: {verdict.reason}", style="bold red")
    else:
        status = Text("NO CONFLICT", style="bold green")
    console.print(Panel(status, title="Conflict Check", subtitle=str(candidate)))

    if verdict.details:
        table = Table(title="Conflicting Records")
        table.add_column("Reason", style="red")
        table.add_column("ID", style="dim")
        table.add_column("Course", style="cyan")
        table.add_column("Section")
        table.add_column("Term")
        table.add_column("Day")
        table.add_column("Time")
        table.add_column("Faculty")
        for d in verdict.details:
            r = d.item
            table.add_row(
                d.reason, r.id or "-", r.course_code, r.section, r.term,
                r.day or "-", r.time or "-", r.faculty_name or r.faculty_id or "-",
            )
        console.print(table)

    for warning in verdict.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")


@app.command()
def rank(
    input_file: Path = typer.Argument(
        ...,
        help="Snapshot JSON with records, faculties and a candidate",
    ),
    top: Optional[int] = typer.Option(
        None,
        "--top", "-n",
        help="Show only the best N faculty",
        min=1,
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="JSON file with scoring overrides (weights, constants, penalties)",
    ),
    eligible: bool = typer.Option(
        False,
        "--eligible",
        help="Leave out faculty who would be double-booked or duplicate a course in the block",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the ranking as JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable debug logging",
    ),
) -> None:
    """
    Rank faculty by suitability for the snapshot's candidate offering.

    Example:
        python -m courseload rank snapshot.json --top 5
    """
    configure_logging(verbose)
    config = load_config(config_file)
    snapshot = load_input(input_file)
    candidate = require_candidate(snapshot)

    baseline = (config or ScoringConfig()).constants.load_baseline
    current = period_records(snapshot, candidate)
    stats = compute_load_stats(snapshot.faculties, current, baseline)
    scorer = FacultySuitabilityScorer(snapshot.faculties, snapshot.records, stats=stats, config=config)
    try:
        ranked = scorer.rank(
            candidate,
            attendance=snapshot.attendance,
            grades=snapshot.grades,
            limit=top,
            eligible_only=eligible,
            conflict_records=current,
        )
    except InvalidCandidateError as e:
        console.print(f"[red]Invalid candidate:[/red] {e}")
        raise typer.Exit(code=1)
    output = create_ranking_output(candidate, ranked)

    if as_json:
        console.print_json(output.to_json())
        return

    table = Table(title=f"Faculty ranking for {candidate.course_code} {candidate.course_title}".strip())
    table.add_column("#", justify="right", style="dim")
    table.add_column("Faculty", style="cyan")
    table.add_column("Score", justify="right", style="bold")
    for name in ("dept", "degree", "time", "load", "match"):
        table.add_column(name.title(), justify="right")
    for entry in output.scores:
        table.add_row(
            str(entry.rank),
            entry.name or entry.faculty_id,
            f"{entry.score:.2f}",
            f"{entry.parts.dept:.2f}",
            f"{entry.parts.degree:.2f}",
            f"{entry.parts.time:.2f}",
            f"{entry.parts.load:.2f}",
            f"{entry.parts.match:.2f}",
        )
    console.print(table)


@app.command()
def stats(
    input_file: Path = typer.Argument(
        ...,
        help="Snapshot JSON with records and faculties",
    ),
    school_year: Optional[str] = typer.Option(
        None,
        "--school-year", "-y",
        help="School year to count (defaults to the snapshot's)",
    ),
    semester: Optional[str] = typer.Option(
        None,
        "--semester", "-s",
        help="Term to count (defaults to the snapshot's)",
    ),
    baseline: float = typer.Option(
        24.0,
        "--baseline", "-b",
        help="Nominal full load in units",
        min=1,
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print load stats as JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable debug logging",
    ),
) -> None:
    """
    Show deduplicated teaching load per faculty.

    Example:
        python -m courseload stats snapshot.json --semester 1st
    """
    configure_logging(verbose)
    snapshot = load_input(input_file)
    records = snapshot.records_for_period(school_year, semester)
    load = compute_load_stats(snapshot.faculties, records, baseline)
    report = create_load_report(snapshot.faculties, load, baseline)

    if as_json:
        console.print_json(report.to_json())
        return

    table = Table(title=f"Teaching load (baseline {baseline:g} units)")
    table.add_column("ID", style="dim")
    table.add_column("Faculty", style="cyan")
    table.add_column("Load", justify="right")
    table.add_column("Release", justify="right")
    table.add_column("Overload", justify="right")
    table.add_column("Courses", justify="right")
    for row in report.faculty:
        overload_style = "red" if row.overload > 0 else "green"
        table.add_row(
            row.faculty_id,
            row.name,
            f"{row.load:g}",
            f"{row.release:g}",
            f"[{overload_style}]{row.overload:g}[/{overload_style}]",
            str(row.course_count),
        )
    console.print(table)


@app.command()
def audit(
    input_file: Path = typer.Argument(
        ...,
        help="Snapshot JSON with records",
    ),
    all_periods: bool = typer.Option(
        False,
        "--all",
        help="Audit every record instead of the snapshot's school year",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the audit report as JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable debug logging",
    ),
) -> None:
    """
    List every conflict group in an existing schedule.

    Example:
        python -m courseload audit snapshot.json
    """
    configure_logging(verbose)
    snapshot = load_input(input_file)
    records = snapshot.records if all_periods else snapshot.records_for_period(semester="")
    report = create_audit_report(audit_schedule(records))

    if as_json:
        console.print_json(report.to_json())
        return

    if not report.groups:
        console.print(Panel(Text("No conflicts found", style="bold green"), title="Schedule Audit"))
        return

    summary = Table(title="Schedule Audit", show_header=False, box=None)
    summary.add_column("Reason", style="cyan")
    summary.add_column("Groups", style="white", justify="right")
    for reason, count in report.by_reason.items():
        summary.add_row(reason, str(count))
    console.print(summary)

    for group in report.groups:
        table = Table(title=group.reason, title_style="bold red")
        table.add_column("ID", style="dim")
        table.add_column("Faculty", style="cyan")
        table.add_column("Course")
        table.add_column("Section")
        table.add_column("Term")
        table.add_column("Day")
        table.add_column("Time")
        for item in group.items:
            table.add_row(
                item.id or "-", item.faculty_name or item.faculty_id or "-", item.course_code,
                item.section, item.term, item.day, item.time,
            )
        console.print(table)


@app.command()
def validate(
    input_file: Path = typer.Argument(
        ...,
        help="Path to snapshot JSON file to validate",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Show detailed validation results",
    ),
) -> None:
    """
    Validate a snapshot file.

    Checks for:
    - Valid JSON structure
    - Snapshot shape and field types
    - Records that reference unknown faculty or carry unparseable times

    Example:
        python -m courseload validate snapshot.json
    """
    configure_logging(verbose)
    console.print(f"\n[bold]Validating:[/bold] {input_file}\n")

    if not input_file.exists():
        console.print(f"[red]Error:[/red] File not found: {input_file}")
        raise typer.Exit(code=1)

    # Step 1: JSON parsing
    console.print("[cyan]1. Checking JSON syntax...[/cyan]")
    try:
        raw_data = load_json(input_file)
        console.print("   [green]JSON syntax is valid[/green]")
    except json.JSONDecodeError as e:
        console.print(f"   [red]Invalid JSON:[/red] {e}")
        raise typer.Exit(code=1)

    # Step 2: Schema validation
    console.print("[cyan]2. Validating snapshot structure...[/cyan]")
    try:
        snapshot = build_snapshot(raw_data)
        console.print("   [green]Schema validation passed[/green]")
    except ValueError as e:
        console.print("   [red]Schema validation failed:[/red]")
        for line in str(e).split("\n"):
            console.print(f"   {line}")
        raise typer.Exit(code=1)

    # Step 3: Consistency
    console.print("[cyan]3. Checking record consistency...[/cyan]")
    warnings = []
    known = {f.id for f in snapshot.faculties}
    for record in snapshot.records:
        label = record.id or str(record)
        if record.faculty_id and record.faculty_id not in known:
            warnings.append(f"Record {label} references unknown faculty: {record.faculty_id}")
        if record.time_range is None and not is_placeholder(record.time):
            warnings.append(f"Record {label} has an unparseable time: '{record.time}'")
        if not record.course_code or not record.section:
            warnings.append(f"Record {label} lacks a course code or section and is left out of load counts")

    if warnings:
        console.print("   [yellow]Warnings found:[/yellow]")
        shown = warnings if verbose else warnings[:10]
        for w in shown:
            console.print(f"   - {w}")
        if len(shown) < len(warnings):
            console.print(f"   ... and {len(warnings) - len(shown)} more (use --verbose)")
    else:
        console.print("   [green]No consistency issues[/green]")

    # Summary
    console.print("\n[bold]Summary:[/bold]")
    table = Table(show_header=False, box=None)
    table.add_column("Entity", style="cyan")
    table.add_column("Count", style="white")
    for key, value in snapshot.summary().items():
        table.add_row(key.replace("_", " ").capitalize(), str(value))
    console.print(table)

    console.print("\n[green]Validation complete.[/green]\n")


@app.command()
def generate(
    output: Path = typer.Argument(
        ...,
        help="Path to write the generated snapshot JSON",
    ),
    size: str = typer.Option(
        "medium",
        "--size",
        help="Snapshot size: small, medium or large",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Random seed for reproducible output",
    ),
) -> None:
    """
    Generate a sample snapshot for demos and testing.

    Example:
        python -m courseload generate sample.json --size small --seed 1
    """
    if size == "small":
        snapshot = generate_small_snapshot(seed=seed)
    elif size == "medium":
        snapshot = generate_sample_snapshot(GeneratorConfig(seed=seed))
    elif size == "large":
        snapshot = generate_large_snapshot(seed=seed)
    else:
        console.print(f"[red]Error:[/red] Unknown size '{size}' (choose small, medium or large)")
        raise typer.Exit(code=1)
    save_generated_snapshot(snapshot, output)

    info = get_generation_stats(snapshot)
    console.print(
        f"[green]Generated:[/green] {info['records']} records, "
        f"{info['faculties']} faculty, {info['sections']} sections"
    )
    console.print(f"[green]Saved to:[/green] {output}")


# =============================================================================
# Main Entry Point
# =============================================================================

def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
