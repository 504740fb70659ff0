from __future__ import annotations

import json

import httpx
import pytest

from adapters.telegram import TelegramClient, TelegramError, User


def _client(handler) -> TelegramClient:
    return TelegramClient("123:secret", api_url="https://tg.test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_get_updates_parses_messages() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "ok": True,
                "result": [
                    {
                        "update_id": 10,
                        "message": {
                            "message_id": 1,
                            "date": 1700000000,
                            "chat": {"id": -1001, "type": "supergroup", "title": "Ring"},
                            "from": {"id": 42, "is_bot": False, "first_name": "Ada", "language_code": "en"},
                            "text": "/open@undefspace_bot",
                            "entities": [{"type": "bot_command", "offset": 0, "length": 20}],
                        },
                    },
                    {"update_id": 11, "edited_message": {"message_id": 2}},
                ],
            },
        )

    async with _client(handler) as client:
        updates = await client.get_updates(offset=10, timeout=0)

    assert [u.update_id for u in updates] == [10, 11]
    assert updates[0].message is not None
    assert updates[0].message.from_user == User(id=42, first_name="Ada")
    assert updates[1].message is None

    assert seen[0].url.path == "/bot123:secret/getUpdates"
    assert json.loads(seen[0].content) == {"timeout": 0, "allowed_updates": ["message"], "offset": 10}


@pytest.mark.asyncio
async def test_send_message() -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(
            200,
            json={"ok": True, "result": {"message_id": 5, "chat": {"id": 1, "type": "private"}, "text": "hi"}},
        )

    async with _client(handler) as client:
        message = await client.send_message(1, "hi\\!", parse_mode="MarkdownV2", reply_to_message_id=3)

    assert message.message_id == 5
    assert seen == [{"chat_id": 1, "text": "hi\\!", "parse_mode": "MarkdownV2", "reply_to_message_id": 3}]


@pytest.mark.asyncio
async def test_api_error_is_telegram_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"ok": False, "error_code": 409, "description": "Conflict"})

    async with _client(handler) as client:
        with pytest.raises(TelegramError, match="Conflict"):
            await client.get_updates()


@pytest.mark.asyncio
async def test_network_error_does_not_leak_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("cannot reach https://tg.test/bot123:secret/getUpdates", request=request)

    async with _client(handler) as client:
        with pytest.raises(TelegramError) as excinfo:
            await client.get_updates()

    assert "secret" not in str(excinfo.value)


def test_user_helpers() -> None:
    user = User(id=42, first_name="Ada", last_name="Lovelace")
    assert user.full_name == "Ada Lovelace"
    assert user.url == "tg://user?id=42"
    assert User(id=1, first_name="Solo").full_name == "Solo"
