"""Apertura de la puerta (pulso sobre una entidad de Home Assistant).

- `button.*`: un único `button.press`.
- `switch.*`: `turn_on`, espera `pulse_seconds`, `turn_off`.

`DoorOpenerWorker` serializa los pulsos en una única tarea de fondo con una
cola de tamaño 1: como mucho un pulso en curso y uno pendiente.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Awaitable, Callable

from adapters.hass_client import HassClient
from core.domain.models import Entity
from core.domain.services import ButtonPress, SwitchTurnOff, SwitchTurnOn
from core.endpoints import ServicePost
from core.errors import HassError

logger = logging.getLogger(__name__)

SUPPORTED_DOMAINS = ("button", "switch")


class DoorOpener:
    def __init__(
        self,
        client: HassClient,
        entity_id: str,
        *,
        pulse_seconds: float = 5.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._entity = Entity(id=entity_id)
        if self._entity.domain not in SUPPORTED_DOMAINS:
            raise ValueError(f"unsupported door entity domain: {entity_id!r}")
        self._client = client
        self._pulse_seconds = pulse_seconds
        self._sleep = sleep

    @property
    def entity_id(self) -> str:
        return self._entity.id

    async def pulse(self) -> None:
        if self._entity.domain == "button":
            logger.debug("Pressing %s...", self._entity.id)
            await self._client.execute(ServicePost(ButtonPress(entity=self._entity)))
            return

        logger.debug("Opening %s...", self._entity.id)
        await self._client.execute(ServicePost(SwitchTurnOn(entity=self._entity)))
        await self._sleep(self._pulse_seconds)
        logger.debug("Closing %s...", self._entity.id)
        await self._client.execute(ServicePost(SwitchTurnOff(entity=self._entity)))


class DoorOpenerWorker:
    """Tarea de fondo que ejecuta los pulsos pedidos por el bot."""

    def __init__(self, opener: DoorOpener) -> None:
        self._opener = opener
        self._queue: asyncio.Queue[None] = asyncio.Queue(maxsize=1)
        self._task: asyncio.Task[None] | None = None

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name="door-opener")

    def try_request(self) -> bool:
        """Encola un pulso. `False` si ya hay uno pendiente."""

        try:
            self._queue.put_nowait(None)
        except asyncio.QueueFull:
            return False
        return True

    async def join(self) -> None:
        await self._queue.join()

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _run(self) -> None:
        while True:
            await self._queue.get()
            try:
                await self._opener.pulse()
            except HassError as exc:
                logger.warning("Error while opening door %s: %s", self._opener.entity_id, exc)
            except Exception:
                logger.exception("Unexpected error while opening door %s", self._opener.entity_id)
            finally:
                self._queue.task_done()
