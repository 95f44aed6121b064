"""Command-line interface for leadmetrics."""

from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from leadmetrics import Extractor, ExtractorConfig, __version__
from leadmetrics.config import LogFormat
from leadmetrics.core.exporter import load_snapshots, save_many_json, to_json
from leadmetrics.core.validator import validate_snapshot
from leadmetrics.exceptions import SnapshotFileError
from leadmetrics.models.result import ExtractionSuccess

app = typer.Typer(
    name="leadmetrics",
    help="Instagram profile extraction and lead scoring",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"leadmetrics version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """leadmetrics - Instagram profile extraction and lead scoring."""
    pass


def _load(snapshot_file: Path) -> list[dict]:
    try:
        return load_snapshots(snapshot_file)
    except SnapshotFileError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e


def _parse_as_of(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise typer.BadParameter(f"not an ISO 8601 timestamp: {value}") from e


@app.command()
def extract(
    snapshot_file: Path = typer.Argument(..., help="JSON file with one snapshot or a list"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output directory for JSON files"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Print output JSON only, no tables"
    ),
    as_of: Optional[str] = typer.Option(
        None, "--as-of", help="Reference time (ISO 8601), defaults to each snapshot's scrapedAt"
    ),
):
    """Extract metrics and scores from profile snapshots."""
    reference = _parse_as_of(as_of)
    snapshots = _load(snapshot_file)

    config = ExtractorConfig(
        log_format=LogFormat.JSON if quiet else LogFormat.CONSOLE,
        log_level="WARNING" if quiet else "INFO",
    )
    outputs = Extractor(config).extract_many(snapshots, as_of=reference)

    for result in outputs:
        if quiet:
            typer.echo(to_json(result))
        elif isinstance(result, ExtractionSuccess):
            _print_result(result)
        else:
            console.print(
                f"[red]✗[/red] @{result.metadata.username}: "
                f"{result.error.code} - {result.error.message}"
            )

    if output:
        for filepath in save_many_json(outputs, output):
            if not quiet:
                console.print(f"[dim]Saved to {filepath}[/dim]")

    if not quiet:
        success_count = sum(1 for o in outputs if o.success)
        console.print(f"\n[bold]Extracted {success_count}/{len(outputs)} profiles[/bold]")


@app.command()
def validate(
    snapshot_file: Path = typer.Argument(..., help="JSON file with one snapshot or a list"),
):
    """Show data availability flags and warnings without scoring."""
    for snapshot in _load(snapshot_file):
        result, profile = validate_snapshot(snapshot)
        username = profile.username if profile else snapshot.get("username", "unknown")

        if not result.is_valid:
            for error in result.errors:
                console.print(f"[red]✗[/red] @{username}: {error.code} - {error.message}")
            continue

        table = Table(title=f"@{username}", show_header=False)
        table.add_column("Flag", style="dim")
        table.add_column("Value")
        for name, value in result.flags.model_dump().items():
            table.add_row(name, "[green]✓[/green]" if value else "[red]✗[/red]")
        console.print(table)

        for warning in result.warnings:
            console.print(f"  [yellow]![/yellow] {warning.code}: {warning.message}")


def _print_result(output: ExtractionSuccess):
    """Print scores, gaps and completeness for one profile."""
    data = output.data
    record = data.extracted_data
    scores = data.scores

    table = Table(title=f"@{record.username}", show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("Followers", f"{record.followers_count:,}")
    table.add_row("Audience", record.audience_scale)
    table.add_row("Lead tier", record.lead_tier)
    table.add_row("Opportunity", f"{scores.opportunity_score:.2f}")
    table.add_row("Engagement health", f"{scores.engagement_health:.2f}")
    table.add_row("Content sophistication", f"{scores.content_sophistication:.2f}")
    table.add_row("Account maturity", f"{scores.account_maturity:.2f}")
    table.add_row("Fake follower risk", f"{scores.fake_follower_risk:.2f}")

    gaps = [name for name, flagged in data.gaps.model_dump().items() if flagged]
    table.add_row("Gaps", ", ".join(gaps) or "-")
    table.add_row("Completeness", f"{data.metadata.data_completeness:.1f}%")

    console.print(table)

    if record.fake_follower_warning:
        console.print(f"  [dim]{record.fake_follower_warning}[/dim]")
    if data.metadata.low_confidence_warning:
        console.print(
            f"  [yellow]Only {data.metadata.sample_post_count} posts sampled - low confidence[/yellow]"
        )


if __name__ == "__main__":
    app()
