"""Bucle del bot: long polling de Telegram + despacho de comandos.

`run_forever` reinicia el bot tras `restart_delay_seconds` cuando el stream de
updates falla; los errores de un mensaje concreto solo se loguean.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from adapters.hass_client import HassClient
from adapters.telegram import TelegramClient, TelegramError
from core.config import AppSettings
from core.services.commands import CommandError, CommandHandler
from core.services.door import DoorOpener, DoorOpenerWorker

logger = logging.getLogger(__name__)


async def run_bot(
    settings: AppSettings,
    *,
    hass_transport: httpx.AsyncBaseTransport | None = None,
    telegram_transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    if settings.control_chat_id is None:
        raise ValueError("DOORBOT_CONTROL_CHAT_ID is not configured")

    hass = HassClient.from_settings(settings, transport=hass_transport)
    telegram = TelegramClient.from_settings(settings, transport=telegram_transport)
    async with hass, telegram:
        worker = DoorOpenerWorker(
            DoorOpener(hass, settings.door_entity_id, pulse_seconds=settings.pulse_seconds)
        )
        handler = CommandHandler(
            telegram,
            worker,
            control_chat_id=settings.control_chat_id,
            bot_username=settings.bot_username,
        )
        worker.start()
        logger.info("Bot @%s listening (door: %s)", settings.bot_username, settings.door_entity_id)

        offset: int | None = None
        try:
            while True:
                updates = await telegram.get_updates(offset=offset, timeout=settings.poll_timeout_seconds)
                for update in updates:
                    offset = update.update_id + 1
                    logger.debug("A new update arrived: %s", update.update_id)
                    if update.message is None:
                        continue
                    try:
                        await handler.handle(update.message)
                    except CommandError as exc:
                        logger.debug("Error while handling an update: %s", exc)
        finally:
            await worker.stop()


async def run_forever(settings: AppSettings) -> None:
    while True:
        try:
            await run_bot(settings)
        except TelegramError as exc:
            logger.warning("Error while receiving updates: %s", exc)
        logger.info("Restarting in %s seconds", settings.restart_delay_seconds)
        await asyncio.sleep(settings.restart_delay_seconds)
