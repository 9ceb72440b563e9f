"""
CLI for Disaster Data Platform.

Usage:
    disasterdata ingest FILE      # Normalize an EMDAT export
    disasterdata summary FILE     # Aggregate by type, year or country
    disasterdata filter FILE ...  # List matching events
    disasterdata geocode ...      # Resolve a location against the gazetteer
    disasterdata db init          # Initialize the database
    disasterdata db status        # Check database connection and stats
"""

from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from disaster_data import __version__
from disaster_data.config import DisasterType, settings
from disaster_data.core.export import ExportConfig, EventExporter, ExportFormat
from disaster_data.core.filters import FilterOptions, filter_events
from disaster_data.core.models import Coordinates, DisasterEvent
from disaster_data.core.normalizer import RecordNormalizer
from disaster_data.exceptions import DisasterDataError
from disaster_data.ingestion import IngestionResult, load_file
from disaster_data.logging_utils import configure_logging

# Initialize Typer app
app = typer.Typer(
    name="disasterdata",
    help="Disaster Data Platform - EMDAT normalization and geocoding",
    add_completion=False,
)

# Sub-commands
db_app = typer.Typer(help="Database management commands")
app.add_typer(db_app, name="db")

console = Console()


class SummaryKey(str, Enum):
    TYPE = "type"
    YEAR = "year"
    COUNTRY = "country"


DatabaseUrlOption = Annotated[
    Optional[str],
    typer.Option("--database-url", help="Store database URL (default: DISASTER_DATA_DATABASE_URL)"),
]


# =============================================================================
# VERSION CALLBACK
# =============================================================================


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        rprint(f"[bold blue]Disaster Data Platform[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", "-l", help="DEBUG, INFO, WARNING or ERROR"),
    ] = None,
) -> None:
    """Disaster Data Platform - Normalize and explore EMDAT disaster records."""
    configure_logging(log_level or settings.log_level)


# =============================================================================
# HELPERS
# =============================================================================


def _ingest(
    path: Path,
    natural_only: bool | None = None,
    quote_aware: bool | None = None,
) -> IngestionResult:
    """Run ingestion, turning package errors into a clean exit."""
    try:
        normalizer = RecordNormalizer.from_settings(natural_disasters_only=natural_only)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task(f"Normalizing {path.name}...", total=None)
            result = load_file(path, normalizer=normalizer, quote_aware=quote_aware)
            progress.update(task, completed=True)
    except DisasterDataError as e:
        rprint(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    return result


def _events_table(events: list[DisasterEvent], title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Date")
    table.add_column("Country")
    table.add_column("Deaths", justify="right")
    table.add_column("Severity", justify="right", style="yellow")
    table.add_column("Located by", style="dim")

    for event in events:
        table.add_row(
            event.id,
            event.name,
            event.type.value,
            event.start_date.strftime("%Y-%m-%d"),
            event.location.country,
            f"{event.impact.deaths:,}",
            str(event.impact.severity_level),
            event.fallback_level.value,
        )
    return table


def _split(values: list[str] | None) -> list[str]:
    """Accept both repeated options and comma-separated values."""
    items: list[str] = []
    for value in values or []:
        items.extend(v.strip() for v in value.split(",") if v.strip())
    return items


# =============================================================================
# INGESTION COMMANDS
# =============================================================================


@app.command("ingest")
def ingest(
    file: Annotated[Path, typer.Argument(help="EMDAT export (.csv or .xlsx)")],
    natural_only: Annotated[
        Optional[bool],
        typer.Option("--natural-only/--all-types", help="Keep only natural hazards"),
    ] = None,
    quote_aware: Annotated[
        Optional[bool],
        typer.Option("--quote-aware/--naive-split", help="CSV tokenization mode"),
    ] = None,
    store: Annotated[
        bool,
        typer.Option("--store", help="Replace the stored batch with this file"),
    ] = False,
    database_url: DatabaseUrlOption = None,
    export: Annotated[
        Optional[ExportFormat],
        typer.Option("--export", "-e", help="Export format"),
    ] = None,
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Export directory"),
    ] = None,
) -> None:
    """
    Normalize an EMDAT export.

    Examples:
        disasterdata ingest emdat.csv
        disasterdata ingest emdat.xlsx --natural-only --store
        disasterdata ingest emdat.csv --export json -o exports/
    """
    result = _ingest(file, natural_only=natural_only, quote_aware=quote_aware)

    rprint(f"\n[green]Ingestion completed![/green] ({result.source})")
    rprint(f"  Records processed: {result.records_processed:,}")
    rprint(f"  Events loaded:     {result.records_loaded:,}")
    rprint(f"  Records rejected:  {result.records_failed:,}")
    for error in result.errors[:5]:
        rprint(f"  [yellow]{escape(error)}[/yellow]")
    if result.duration_seconds is not None:
        rprint(f"  Duration: {result.duration_seconds:.1f}s")

    levels: dict[str, int] = {}
    for event in result.events:
        levels[event.fallback_level.value] = levels.get(event.fallback_level.value, 0) + 1

    table = Table(title="Located by")
    table.add_column("Level", style="cyan")
    table.add_column("Events", justify="right", style="green")
    for level, count in levels.items():
        table.add_row(level, f"{count:,}")
    console.print(table)

    if store:
        from disaster_data.db.connection import init_db, session_scope
        from disaster_data.db.store import replace_events

        init_db(database_url)
        with session_scope(database_url) as session:
            stored = replace_events(session, result.events, result.source, result)
        rprint(f"[green]Stored {stored:,} events[/green]")

    if export:
        exporter = EventExporter(ExportConfig(format=export, output_dir=output_dir))
        path = exporter.export(result.events, file.stem)
        rprint(f"[green]Exported to:[/green] {path}")


@app.command("summary")
def summary(
    file: Annotated[Path, typer.Argument(help="EMDAT export (.csv or .xlsx)")],
    by: Annotated[
        SummaryKey,
        typer.Option("--by", "-b", help="Grouping"),
    ] = SummaryKey.TYPE,
) -> None:
    """Summarize events by type, year or country."""
    from disaster_data.core.statistics import (
        overview,
        summary_by_country,
        summary_by_type,
        summary_by_year,
    )

    events = _ingest(file).events
    summaries = {
        SummaryKey.TYPE: summary_by_type,
        SummaryKey.YEAR: summary_by_year,
        SummaryKey.COUNTRY: summary_by_country,
    }
    df = summaries[by](events)

    totals = overview(events)
    rprint(f"\n[bold]{totals.event_count:,} events[/bold] in {totals.countries} countries, "
           f"{totals.first_year}-{totals.last_year}")
    rprint(f"  Deaths:   {totals.deaths:,}")
    rprint(f"  Affected: {totals.affected:,}")
    rprint(f"  Economic loss: ${totals.economic_loss_usd:,.0f}\n")

    table = Table(title=f"Events by {by.value}")
    table.add_column(by.value.title(), style="cyan")
    table.add_column("Events", justify="right")
    table.add_column("Deaths", justify="right")
    table.add_column("Affected", justify="right")
    table.add_column("Economic loss (US$)", justify="right")

    for _, row in df.iterrows():
        table.add_row(
            str(row[by.value]),
            f"{int(row['event_count']):,}",
            f"{int(row['deaths']):,}",
            f"{int(row['affected']):,}",
            f"{row['economic_loss_usd']:,.0f}",
        )

    console.print(table)


@app.command("filter")
def filter_command(
    file: Annotated[Path, typer.Argument(help="EMDAT export (.csv or .xlsx)")],
    types: Annotated[
        Optional[list[DisasterType]],
        typer.Option("--type", "-t", help="Disaster type (repeatable)"),
    ] = None,
    countries: Annotated[
        Optional[list[str]],
        typer.Option("--country", "-c", help="Country name (repeatable or comma-separated)"),
    ] = None,
    date_from: Annotated[
        Optional[str],
        typer.Option("--from", help="Earliest start date (YYYY-MM-DD or YYYY)"),
    ] = None,
    date_to: Annotated[
        Optional[str],
        typer.Option("--to", help="Latest start date (YYYY-MM-DD or YYYY)"),
    ] = None,
    min_deaths: Annotated[
        Optional[int],
        typer.Option("--min-deaths", help="Minimum deaths"),
    ] = None,
    min_affected: Annotated[
        Optional[int],
        typer.Option("--min-affected", help="Minimum people affected"),
    ] = None,
    severity: Annotated[
        Optional[int],
        typer.Option("--severity", "-s", min=1, max=5, help="Exact severity level"),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Rows to display"),
    ] = 50,
) -> None:
    """
    List events matching the given criteria.

    Examples:
        disasterdata filter emdat.csv -t flood -t earthquake
        disasterdata filter emdat.csv -c Japan --from 2000 --min-deaths 100
    """
    events = _ingest(file).events
    options = FilterOptions(
        types=types or [],
        countries=_split(countries),
        start_date=date_from,
        end_date=date_to,
        min_deaths=min_deaths,
        min_affected=min_affected,
        severity_level=severity,
    )
    matching = filter_events(events, options)

    rprint(f"\n[bold]{len(matching):,}[/bold] of {len(events):,} events match\n")
    if matching:
        console.print(_events_table(matching[:limit], "Matching events"))
        if len(matching) > limit:
            rprint(f"[dim]... and {len(matching) - limit:,} more[/dim]")


@app.command("geocode")
def geocode(
    country: Annotated[str, typer.Option("--country", "-c", help="Country name")] = "",
    region: Annotated[Optional[str], typer.Option("--region", "-r", help="Region or province")] = None,
    city: Annotated[Optional[str], typer.Option("--city", help="City")] = None,
    lat: Annotated[Optional[float], typer.Option("--lat", help="Latitude")] = None,
    lng: Annotated[Optional[float], typer.Option("--lng", help="Longitude")] = None,
) -> None:
    """Resolve a location through the coordinate/city/region/country fallback."""
    from disaster_data.core.geocoding import LocationInput, LocationResolver, load_gazetteer

    try:
        resolver = LocationResolver(load_gazetteer())
    except DisasterDataError as e:
        rprint(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    coordinates = Coordinates(lat, lng) if lat is not None and lng is not None else None
    result = resolver.resolve(LocationInput(country=country, coordinates=coordinates, city=city, region=region))

    for error in result.errors:
        rprint(f"  [yellow]{escape(error)}[/yellow]")

    if result.coordinates is None:
        rprint("[red]Location could not be resolved[/red]")
        raise typer.Exit(1)

    rprint(
        f"[green]{result.coordinates.lat:.4f}, {result.coordinates.lng:.4f}[/green] "
        f"(by {result.fallback_level.value})"
    )


# =============================================================================
# DATABASE COMMANDS
# =============================================================================


@db_app.command("init")
def db_init(
    drop: Annotated[bool, typer.Option("--drop", help="Drop existing tables")] = False,
    database_url: DatabaseUrlOption = None,
) -> None:
    """Initialize the database schema."""
    from disaster_data.db.connection import check_connection, init_db

    with console.status("[bold green]Checking database connection..."):
        if not check_connection(database_url):
            rprint("[red]Error: Cannot connect to database![/red]")
            rprint(f"Connection string: {database_url or settings.database_url}")
            raise typer.Exit(1)

    if drop:
        if not typer.confirm("This will DELETE all stored events. Continue?"):
            raise typer.Abort()

    with console.status("[bold green]Initializing database..."):
        init_db(database_url, drop_existing=drop)

    rprint("[green]Database initialized successfully![/green]")


@db_app.command("status")
def db_status(database_url: DatabaseUrlOption = None) -> None:
    """Check database connection and show statistics."""
    from sqlalchemy.exc import SQLAlchemyError

    from disaster_data.db.connection import check_connection, session_scope
    from disaster_data.db.store import latest_batch, table_stats

    with console.status("[bold green]Checking connection..."):
        connected = check_connection(database_url)

    if not connected:
        rprint("[red]Error: Cannot connect to database![/red]")
        rprint(f"\nDatabase URL: {database_url or settings.database_url}")
        raise typer.Exit(1)

    rprint("[green]Database connection OK[/green]\n")

    try:
        with session_scope(database_url) as session:
            stats = table_stats(session)
            batch = latest_batch(session)
    except SQLAlchemyError as e:
        rprint(f"[yellow]Could not get table stats: {e}[/yellow]")
        rprint("Run [cyan]disasterdata db init[/cyan] first.")
        return

    table = Table(title="Table Statistics")
    table.add_column("Table", style="cyan")
    table.add_column("Rows", justify="right", style="green")
    for name, count in stats.items():
        table.add_row(name, f"{count:,}")
    console.print(table)

    if batch is not None:
        rprint(f"\nCurrent batch: [cyan]{batch.source_name}[/cyan] "
               f"({batch.records_loaded:,} events, stored {batch.completed_at:%Y-%m-%d %H:%M} UTC)")


@db_app.command("show")
def db_show(
    limit: Annotated[int, typer.Option("--limit", "-n", help="Rows to display")] = 20,
    database_url: DatabaseUrlOption = None,
) -> None:
    """Show the stored events."""
    from disaster_data.db.connection import init_db, session_scope
    from disaster_data.db.store import count_events, load_events

    init_db(database_url)
    with session_scope(database_url) as session:
        total = count_events(session)
        events = load_events(session, limit=limit)

    if not events:
        rprint("[yellow]No stored events. Run `disasterdata ingest FILE --store` first.[/yellow]")
        return

    console.print(_events_table(events, f"Stored events ({len(events)} of {total:,})"))


if __name__ == "__main__":
    app()
