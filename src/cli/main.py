"""CLI principal (Typer).

Comandos:
- `run`: bot de Telegram con reinicio automático.
- `open`: pulso de puerta desde la terminal.
- `state`: estado de una entidad.
- `doctor`: diagnóstico y setup.
"""

from __future__ import annotations

import asyncio

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.hass_client import HassClient
from cli import doctor
from cli.ui_components import build_error_panel, build_state_table, print_banner
from core.config import AppSettings
from core.endpoints import GetState
from core.errors import HassError
from core.log import configure_logging
from core.services.bot import run_forever
from core.services.door import DoorOpener

app = typer.Typer(no_args_is_help=True, help="Open the door through Home Assistant, from Telegram or the terminal.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _load_settings(verbose: bool) -> AppSettings:
    try:
        settings = AppSettings()
    except ValidationError as exc:
        _console.print(build_error_panel("Invalid configuration", str(exc)))
        raise typer.Exit(1) from exc
    configure_logging("DEBUG" if verbose else settings.log_level)
    return settings


@app.command(name="run")
def run_bot(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP traces.")) -> None:
    """Start the Telegram bot (restarts on failure)."""

    settings = _load_settings(verbose)
    if not settings.telegram_token or settings.control_chat_id is None:
        _console.print(
            build_error_panel(
                "Missing configuration",
                "DOORBOT_TELEGRAM_TOKEN and DOORBOT_CONTROL_CHAT_ID are required to run the bot.",
            )
        )
        raise typer.Exit(1)

    print_banner(_console)
    try:
        asyncio.run(run_forever(settings))
    except KeyboardInterrupt:
        _console.print("[dim]Bye.[/dim]")


async def _open_once(settings: AppSettings) -> None:
    async with HassClient.from_settings(settings) as client:
        opener = DoorOpener(client, settings.door_entity_id, pulse_seconds=settings.pulse_seconds)
        await opener.pulse()


@app.command(name="open")
def open_door(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP traces.")) -> None:
    """Pulse the door entity once."""

    settings = _load_settings(verbose)
    try:
        asyncio.run(_open_once(settings))
    except (HassError, ValueError) as exc:
        _console.print(build_error_panel("Door", str(exc)))
        raise typer.Exit(1) from exc
    _console.print(f"[green]Pulsed[/green] {settings.door_entity_id}")


async def _fetch_state(settings: AppSettings, entity_id: str):
    async with HassClient.from_settings(settings) as client:
        return await client.execute(GetState(entity_id=entity_id))


@app.command(name="state")
def show_state(
    entity_id: str = typer.Argument(..., help="Entity id, e.g. sun.sun"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP traces."),
) -> None:
    """Show the current state of one entity."""

    settings = _load_settings(verbose)
    try:
        state = asyncio.run(_fetch_state(settings, entity_id))
    except (HassError, ValueError) as exc:
        _console.print(build_error_panel(entity_id, str(exc)))
        raise typer.Exit(1) from exc
    _console.print(build_state_table(state))


def run() -> None:
    app()
