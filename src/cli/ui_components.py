"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

import json

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import State


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("hass-doorbot", style="bold cyan")
    subtitle = Text("Home Assistant • Telegram • Puerta", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_state_table(state: State) -> Table:
    """Tabla Rich para un `State` (campos + atributos)."""

    table = Table(title=state.entity_id)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("state", state.state)
    table.add_row("last_changed", state.last_changed.isoformat())
    table.add_row("last_updated", state.last_updated.isoformat())
    table.add_row("context.id", state.context.id or "-")
    table.add_row("context.user_id", state.context.user_id or "-")

    attributes = state.attributes if isinstance(state.attributes, dict) else {}
    for key in sorted(attributes):
        value = attributes[key]
        rendered = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
        table.add_row(f"attributes.{key}", rendered, style="dim")
    return table


def build_error_panel(title: str, message: str) -> Panel:
    return Panel(Text(message), title=Text(title, style="bold red"), border_style="red")
