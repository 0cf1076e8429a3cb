"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.memory_store import load_fixture
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import SchedulingError
from ..domain.models import WEEKDAY_NAMES
from ..services.availability_service import AvailabilityService

app = typer.Typer(
    name="slotengine",
    help="Turn weekly availability windows into bookable slots",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
DataOption = Annotated[Optional[Path], typer.Option("--data", help="YAML file with windows and bookings. Overrides data_file from the config.")]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load(config_file: Optional[Path], data_file: Optional[Path]):
    """
    Load configuration and build a service over the fixture stores.
    Returns (config, service).
    """
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path) if config_path.exists() else AppConfig()

    data_path = data_file or config.data_file
    if data_path is None:
        console.print("[red]Error: no data file given (use --data or set data_file in config).[/red]")
        raise typer.Exit(1)

    window_store, booking_store = load_fixture(data_path)
    service = AvailabilityService.from_config(config, window_store, booking_store)
    return config, service


def _parse_date(value: str, label: str) -> pendulum.Date:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as e:
        console.print(f"[red]Error parsing {label}: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def windows(
    provider: Annotated[str, typer.Argument(help="Provider id")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    List the active availability windows of a provider.
    """
    try:
        _, service = _load(config_file, data_file)
        provider_windows = service.list_windows(provider)
    except (FileNotFoundError, SchedulingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not provider_windows:
        console.print(f"[yellow]No active windows for {provider}.[/yellow]")
        return

    table = Table(
        title=f"Availability of {provider}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Day", style="bold yellow")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Capacity", justify="right")
    table.add_column("Buffer", justify="right", style="dim")

    for window in provider_windows:
        table.add_row(
            WEEKDAY_NAMES[window.day_of_week],
            window.start_time,
            window.end_time,
            str(window.max_sessions_per_slot),
            f"{window.buffer_minutes} min",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def slots(
    provider: Annotated[str, typer.Argument(help="Provider id")],
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD). Defaults to today.")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End date (YYYY-MM-DD). Defaults to start + lookahead_days.")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Session duration in minutes")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    Show bookable slots for a provider.

    Examples:

        slotengine slots coach-1 --data schedule.yaml
        slotengine slots coach-1 --start 2024-11-25 --end 2024-11-29 --duration 45
    """
    try:
        config, service = _load(config_file, data_file)

        start_date = _parse_date(start, "start date") if start else config.today()
        end_date = (
            _parse_date(end, "end date") if end
            else start_date.add(days=config.defaults.lookahead_days)
        )

        found = service.get_slots(provider, start_date, end_date, duration)
    except (FileNotFoundError, SchedulingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print()
    if not found:
        console.print(
            "[yellow]No bookable slots found.[/yellow]\n"
            "Try a longer period or a shorter duration."
        )
    else:
        console.print(f"[bold green]✓ {len(found)} slot(s) available:[/bold green]\n")
        for slot in found:
            console.print(f"  {slot.format_display()}")
    console.print()


@app.command()
def check(
    provider: Annotated[str, typer.Argument(help="Provider id")],
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    time: Annotated[str, typer.Argument(help="Start time (HH:MM)")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    Check whether one more session can be booked at an exact date and time.
    """
    try:
        _, service = _load(config_file, data_file)
        slot_date = _parse_date(date, "date")
        available = service.check_slot(provider, slot_date, time)
        remaining = service.slot_capacity(provider, slot_date, time)
    except (FileNotFoundError, SchedulingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if available:
        console.print(f"[green]✓ {date} {time} is available ({remaining} place(s) left).[/green]")
    else:
        console.print(f"[red]✗ {date} {time} is not available.[/red]")
        raise typer.Exit(2)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotengine[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
