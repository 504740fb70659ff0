"""Comandos del bot.

- Solo se aceptan mensajes del chat de control.
- Los comandos salen de las entidades `bot_command` del mensaje; los dirigidos
  a otro bot (`/open@otro_bot`) se ignoran.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Iterable

from adapters.telegram import Message, MessageEntity, TelegramClient, TelegramError
from core.services.door import DoorOpenerWorker

logger = logging.getLogger(__name__)

_MARKDOWN_V2_RE = re.compile(r"([_*\[\]()~`>#+\-=|{}.!\\])")


class BotCommand(str, Enum):
    OPEN = "open"


class CommandError(Exception):
    """Motivo por el que un mensaje no se procesó (se loguea, no se responde)."""


def escape_markdown(text: str) -> str:
    return _MARKDOWN_V2_RE.sub(r"\\\1", text)


def escape_link_url(url: str) -> str:
    return url.replace("\\", "\\\\").replace(")", "\\)")


def _utf16_slice(text: str, offset: int, length: int) -> str:
    # Telegram cuenta offsets en unidades UTF-16.
    raw = text.encode("utf-16-le")
    return raw[offset * 2 : (offset + length) * 2].decode("utf-16-le", errors="ignore")


def extract_commands(text: str, entities: Iterable[MessageEntity], bot_username: str) -> list[str]:
    commands: list[str] = []
    for entity in entities:
        if entity.type != "bot_command":
            continue
        raw = _utf16_slice(text, entity.offset, entity.length).lstrip("/")
        name, sep, target = raw.partition("@")
        if sep and target.lower() != bot_username.lower():
            continue
        if name:
            commands.append(name)
    return commands


class CommandHandler:
    def __init__(
        self,
        telegram: TelegramClient,
        worker: DoorOpenerWorker,
        *,
        control_chat_id: int,
        bot_username: str,
    ) -> None:
        self._telegram = telegram
        self._worker = worker
        self._control_chat_id = control_chat_id
        self._bot_username = bot_username

    async def handle(self, message: Message) -> None:
        if message.chat.id != self._control_chat_id:
            raise CommandError("Message outside the control chat.")
        if message.text is None:
            raise CommandError("no text in the message")
        if not message.entities:
            raise CommandError("no entities")

        for name in extract_commands(message.text, message.entities, self._bot_username):
            try:
                command = BotCommand(name)
            except ValueError:
                raise CommandError(f"Some strange command: {name}") from None
            if command is BotCommand.OPEN:
                await self._open(message)

    async def _open(self, message: Message) -> None:
        sender = message.from_user
        if sender is None:
            raise CommandError("No sender: no sending")

        text = (
            f"Opening door for [{escape_markdown(sender.full_name)}]"
            f"({escape_link_url(sender.url)})\\. Bienvenue\\!"
        )
        try:
            await self._telegram.send_message(
                message.chat.id,
                text,
                parse_mode="MarkdownV2",
                reply_to_message_id=message.message_id,
            )
        except TelegramError as exc:
            raise CommandError(f"could not reply: {exc}") from exc

        logger.info("Door requested by %s (%s)", sender.full_name, sender.id)
        if not self._worker.try_request():
            raise CommandError("a door opening is already pending")
