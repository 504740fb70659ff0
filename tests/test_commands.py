from __future__ import annotations

from typing import Any

import pytest

from adapters.telegram import Message, MessageEntity, TelegramError
from core.services.commands import (
    BotCommand,
    CommandError,
    CommandHandler,
    escape_link_url,
    escape_markdown,
    extract_commands,
)

CONTROL_CHAT = -1001


def _message(text: str | None, *, chat_id: int = CONTROL_CHAT, with_sender: bool = True) -> Message:
    data: dict[str, Any] = {
        "message_id": 7,
        "chat": {"id": chat_id, "type": "supergroup"},
        "text": text,
    }
    if text and text.startswith("/"):
        command = text.split()[0]
        data["entities"] = [{"type": "bot_command", "offset": 0, "length": len(command)}]
    if with_sender:
        data["from"] = {"id": 42, "is_bot": False, "first_name": "Ada", "last_name": "Lovelace"}
    return Message.model_validate(data)


class FakeTelegram:
    def __init__(self, fail: bool = False) -> None:
        self.sent: list[dict[str, Any]] = []
        self._fail = fail

    async def send_message(self, chat_id: int, text: str, **kwargs: Any) -> None:
        if self._fail:
            raise TelegramError("sendMessage failed: Bad Request")
        self.sent.append({"chat_id": chat_id, "text": text, **kwargs})


class FakeWorker:
    def __init__(self, accept: bool = True) -> None:
        self.requests = 0
        self._accept = accept

    def try_request(self) -> bool:
        self.requests += 1
        return self._accept


def _handler(telegram: FakeTelegram, worker: FakeWorker) -> CommandHandler:
    return CommandHandler(
        telegram,  # type: ignore[arg-type]
        worker,  # type: ignore[arg-type]
        control_chat_id=CONTROL_CHAT,
        bot_username="undefspace_bot",
    )


def test_escape_markdown() -> None:
    assert escape_markdown("John_Doe (x).") == "John\\_Doe \\(x\\)\\."
    assert escape_markdown("a*b[c]~d`e>f#g+h-i=j|k{l}m!n") == (
        "a\\*b\\[c\\]\\~d\\`e\\>f\\#g\\+h\\-i\\=j\\|k\\{l\\}m\\!n"
    )
    assert escape_markdown("plain") == "plain"


def test_escape_link_url() -> None:
    assert escape_link_url("tg://user?id=42") == "tg://user?id=42"
    assert escape_link_url("http://x/a)b\\c") == "http://x/a\\)b\\\\c"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("/open@undefspace_bot", ["open"]),
        ("/open@UndefSpace_Bot please", ["open"]),
        ("/open", ["open"]),
        ("/open@other_bot", []),
        ("/close@undefspace_bot", ["close"]),
    ],
)
def test_extract_commands(text: str, expected: list[str]) -> None:
    command = text.split()[0]
    entities = [MessageEntity(type="bot_command", offset=0, length=len(command))]
    assert extract_commands(text, entities, "undefspace_bot") == expected


def test_extract_commands_uses_utf16_offsets() -> None:
    text = "🚪 /open@undefspace_bot"
    # El emoji ocupa 2 unidades UTF-16.
    entities = [
        MessageEntity(type="bold", offset=0, length=2),
        MessageEntity(type="bot_command", offset=3, length=20),
    ]
    assert extract_commands(text, entities, "undefspace_bot") == ["open"]


def test_bot_command_enum() -> None:
    assert BotCommand("open") is BotCommand.OPEN
    with pytest.raises(ValueError):
        BotCommand("close")


@pytest.mark.asyncio
async def test_open_replies_and_queues_pulse() -> None:
    telegram, worker = FakeTelegram(), FakeWorker()

    await _handler(telegram, worker).handle(_message("/open@undefspace_bot"))

    assert telegram.sent == [
        {
            "chat_id": CONTROL_CHAT,
            "text": "Opening door for [Ada Lovelace](tg://user?id=42)\\. Bienvenue\\!",
            "parse_mode": "MarkdownV2",
            "reply_to_message_id": 7,
        }
    ]
    assert worker.requests == 1


@pytest.mark.asyncio
async def test_messages_outside_control_chat_are_rejected() -> None:
    telegram, worker = FakeTelegram(), FakeWorker()

    with pytest.raises(CommandError, match="outside the control chat"):
        await _handler(telegram, worker).handle(_message("/open@undefspace_bot", chat_id=123))

    assert telegram.sent == []
    assert worker.requests == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("message", "reason"),
    [
        (_message(None), "no text"),
        (_message("hello there"), "no entities"),
        (_message("/close@undefspace_bot"), "Some strange command: close"),
        (_message("/open@undefspace_bot", with_sender=False), "No sender"),
    ],
)
async def test_rejected_messages(message: Message, reason: str) -> None:
    telegram, worker = FakeTelegram(), FakeWorker()

    with pytest.raises(CommandError, match=reason):
        await _handler(telegram, worker).handle(message)

    assert worker.requests == 0


@pytest.mark.asyncio
async def test_command_for_other_bot_is_ignored() -> None:
    telegram, worker = FakeTelegram(), FakeWorker()

    await _handler(telegram, worker).handle(_message("/open@other_bot"))

    assert telegram.sent == []
    assert worker.requests == 0


@pytest.mark.asyncio
async def test_busy_worker() -> None:
    telegram, worker = FakeTelegram(), FakeWorker(accept=False)

    with pytest.raises(CommandError, match="already pending"):
        await _handler(telegram, worker).handle(_message("/open@undefspace_bot"))

    assert len(telegram.sent) == 1


@pytest.mark.asyncio
async def test_reply_failure_does_not_open() -> None:
    telegram, worker = FakeTelegram(fail=True), FakeWorker()

    with pytest.raises(CommandError, match="could not reply"):
        await _handler(telegram, worker).handle(_message("/open@undefspace_bot"))

    assert worker.requests == 0
