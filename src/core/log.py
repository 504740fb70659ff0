"""Inicialización de logging (Rich).

Por qué un único punto:
- La CLI configura el handler una sola vez; el resto de módulos solo usan
  `logging.getLogger(__name__)`.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "hass-doorbot"


def configure_logging(level: str | int = "INFO", *, console: Console | None = None) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)
            return

    handler = RichHandler(console=console or Console(stderr=True), show_path=False, rich_tracebacks=True)
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    root.addHandler(handler)

    # httpx/httpcore loguean cada request en INFO/DEBUG; nuestras trazas ya
    # cubren eso (con el token redactado).
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
