"""
xhair CLI - Command Line Interface for crosshair lookups

Provides commands for:
- Looking up a player's crosshair code from their latest FACEIT match
- Showing environment and configuration details
"""

import logging
import platform as plat
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from xhair import __version__
from xhair.core.config import config_to_dict, get_config, load_config, set_config, setup_logging
from xhair.core.models import CancelToken
from xhair.core.utils import is_valid_player_identity
from xhair.pipeline.orchestrator import CrosshairOrchestrator

app = typer.Typer(
    name="xhair",
    help="Read a player's crosshair code from their latest FACEIT match demo",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]xhair[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable verbose output"),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (.toml, .yaml or .json)",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """xhair - FACEIT crosshair lookup"""
    config = load_config(config_file)
    if verbose:
        config.logging.level = "DEBUG"
    setup_logging(config.logging)
    set_config(config)


@app.command()
def crosshair(
    steam_id: str = typer.Argument(..., help="Steam64 ID of the player"),
) -> None:
    """
    Print the crosshair code from the player's latest non-championship match.

    Downloads the demo, so this can take a while on large matches.
    Ctrl+C cancels the lookup.
    """
    if not is_valid_player_identity(steam_id):
        console.print(f"[red]Error:[/red] invalid steam id {steam_id!r}")
        raise typer.Exit(2)

    cancel = CancelToken()

    with CrosshairOrchestrator(get_config()) as orchestrator:
        try:
            with console.status(f"Looking up crosshair for {steam_id}..."):
                outcome = orchestrator.run(steam_id, cancel)
        except KeyboardInterrupt:
            cancel.cancel()
            console.print("\n[yellow]Cancelled[/yellow]")
            raise typer.Exit(130)

    if not outcome.ok:
        console.print(f"[red]Error ({outcome.status_code}):[/red] {outcome.message}")
        raise typer.Exit(1)

    if outcome.result.found:
        console.print(
            Panel(
                f"[cyan]Match:[/cyan] {outcome.match_id}\n"
                f"[cyan]Crosshair:[/cyan] [bold]{outcome.result.code}[/bold]",
                title="[bold blue]Crosshair Found[/bold blue]",
                expand=False,
            )
        )
    else:
        console.print(f"[yellow]No crosshair code for {steam_id} in match {outcome.match_id}[/yellow]")


@app.command()
def info() -> None:
    """
    Display information about xhair and the environment.
    """

    console.print(f"\n[bold blue]xhair[/bold blue] v{__version__}\n")

    table = Table(show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Python", plat.python_version())
    table.add_row("Platform", plat.system())

    try:
        import demoparser2

        table.add_row("demoparser2", getattr(demoparser2, "__version__", "installed"))
    except ImportError:
        table.add_row("demoparser2", "[red]not installed[/red]")

    config = config_to_dict(get_config())
    for section in ("faceit", "replay", "service"):
        for key, value in config[section].items():
            table.add_row(f"{section}.{key}", str(value))

    console.print(table)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
