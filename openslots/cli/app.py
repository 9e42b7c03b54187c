"""
Main CLI application using Typer.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_appointments import JsonAppointmentSource
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import SlotFinderError, ValidationError
from ..domain.models import AppointmentPolicy, SlotOptions, Strategy
from ..services.slot_finder import SlotFinderService, SlotResult

app = typer.Typer(
    name="openslots",
    help="Find open time slots in a window around existing appointments",
    add_completion=False
)

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Configure logging for all commands.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """
    Load the config file, falling back to built-in defaults.

    An explicitly passed file must exist; the default location is optional.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)

    logger.debug("No config file at %s, using defaults", default_path)
    return AppConfig()


def _print_table(result: SlotResult, options: SlotOptions) -> None:
    """Render the result as one table per date (or one flat table)."""
    groups = result if isinstance(result, dict) else {None: result}

    for date_key, slots in groups.items():
        if not slots:
            console.print("[yellow]⚠ No open slots found.[/yellow]")
            continue

        title = f"Open slots ({options.strategy.value})"
        if date_key:
            title = f"{title} - {date_key}"

        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Start", style="bold yellow")

        for idx, slot in enumerate(slots, 1):
            table.add_row(str(idx), slot["start"])

        console.print(table)


@app.command()
def find(
    start: Annotated[Optional[str], typer.Option("--start", help="Window start (ISO 8601, e.g. 2025-04-21T12:00:00Z)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Window end (ISO 8601)")] = None,
    appointments_file: Annotated[Optional[Path], typer.Option("--appointments", "-a", help="JSON file with existing appointments")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    strategy: Annotated[Optional[Strategy], typer.Option("--strategy", "-s", help="gaps: free regions, grid: fixed-length candidates")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Grid slot length in minutes")] = None,
    step: Annotated[Optional[int], typer.Option("--step", help="Grid step in minutes")] = None,
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-z", help="IANA zone for output, or raw-instant")] = None,
    group_by_date: Annotated[Optional[bool], typer.Option("--group-by-date/--flat", help="Key the result by the window's start date")] = None,
    strict: Annotated[Optional[bool], typer.Option("--strict/--lenient", help="Reject or drop malformed appointments")] = None,
    fit_within_window: Annotated[Optional[bool], typer.Option("--fit-within-window/--allow-overrun", help="Only offer grid slots that end inside the window")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON")] = False,
):
    """
    Find open slots between --start and --end.

    Examples:

        # Free regions around appointments from a file
        openslots find --start 2025-04-21T09:00:00Z --end 2025-04-21T17:00:00Z -a appointments.json

        # One-hour candidates every 30 minutes, shown in Toronto time
        openslots find --start 2025-04-21T13:00:00Z --end 2025-04-21T21:00:00Z --strategy grid -z America/Toronto
    """
    try:
        config = _load_config(config_file)

        policy = None
        if strict is not None:
            policy = AppointmentPolicy.STRICT if strict else AppointmentPolicy.LENIENT

        options = config.defaults.to_options(
            strategy=strategy,
            slot_duration_minutes=duration,
            step_minutes=step,
            output_timezone=timezone,
            group_by_date=group_by_date,
            appointment_policy=policy,
            fit_within_window=fit_within_window,
        )

        appointments = None
        source_path = appointments_file or config.appointments_file
        if source_path is not None:
            appointments = JsonAppointmentSource(source_path).load()

        service = SlotFinderService(options)
        result = service.compute_slots(start=start, end=end, appointments=appointments)

    except ValidationError as e:
        err_console.print(f"[bold red]Error ({e.kind}):[/bold red] {e.message}")
        raise typer.Exit(2)

    except (FileNotFoundError, ValueError, SlotFinderError) as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result, indent=2))
        return

    _print_table(result, options)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]openslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
