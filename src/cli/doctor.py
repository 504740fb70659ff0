"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from adapters.hass_client import HassClient
from core.config import AppSettings, write_user_env_vars
from core.endpoints import ApiStatus
from core.errors import HassError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_hass(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with HassClient.from_settings(settings) as client:
            status = await client.execute(ApiStatus())
        return True, status.message
    except HassError as exc:
        return False, str(exc)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    try:
        settings = AppSettings()
    except ValidationError as exc:
        _console.print(f"[red]Invalid configuration:[/red] {exc}")
        _console.print("Run [bold]doorbot doctor setup[/bold] or set DOORBOT_* environment variables.")
        raise typer.Exit(1) from exc

    table = Table(title="hass-doorbot Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("HA token", "OK", "set (hidden)")
    table.add_row("HA authority", "OK", settings.hass_authority)
    table.add_row("Door entity", "OK", f"{settings.door_entity_id} (pulse {settings.pulse_seconds:g}s)")
    if settings.telegram_token:
        table.add_row("Telegram token", "OK", f"bot @{settings.bot_username}")
    else:
        table.add_row("Telegram token", "MISSING", "`run` needs DOORBOT_TELEGRAM_TOKEN")
    if settings.control_chat_id is not None:
        table.add_row("Control chat", "OK", str(settings.control_chat_id))
    else:
        table.add_row("Control chat", "MISSING", "`run` needs DOORBOT_CONTROL_CHAT_ID")

    # Connectivity
    ok_hass, detail_hass = asyncio.run(_check_hass(settings))
    table.add_row("Home Assistant API", "OK" if ok_hass else "FAIL", detail_hass)

    _console.print(table)

    if not ok_hass:
        raise typer.Exit(1)


@app.command()
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    authority = typer.prompt("Home Assistant host:port", default="localhost:8123", show_default=True).strip()
    token = typer.prompt("Home Assistant long-lived token", hide_input=True).strip()
    telegram_token = typer.prompt("Telegram bot token", hide_input=True).strip()
    chat_id = typer.prompt("Control chat id", type=int)
    entity = typer.prompt("Door entity", default="switch.open_ring_one_door", show_default=True).strip()

    if not token or not telegram_token:
        raise typer.BadParameter("both tokens are required")

    env_path = write_user_env_vars(
        {
            "DOORBOT_HASS_AUTHORITY": authority,
            "DOORBOT_HASS_TOKEN": token,
            "DOORBOT_TELEGRAM_TOKEN": telegram_token,
            "DOORBOT_CONTROL_CHAT_ID": str(chat_id),
            "DOORBOT_DOOR_ENTITY_ID": entity,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
