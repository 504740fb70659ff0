"""Adaptador mínimo de la Bot API de Telegram (httpx).

Solo lo que necesita el bot:
- `getUpdates` (long polling).
- `sendMessage` (respuestas en MarkdownV2).

Nota:
- El token va en la URL; nunca se loguea la URL completa.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field, TypeAdapter, ValidationError
from pydantic.config import ConfigDict

from adapters.http_client import build_async_client
from core.config import AppSettings

logger = logging.getLogger(__name__)


class TelegramError(Exception):
    """Fallo de red, HTTP o respuesta `ok: false` de la Bot API."""


class User(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    is_bot: bool = False
    first_name: str
    last_name: str | None = None
    username: str | None = None

    @property
    def full_name(self) -> str:
        if self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name

    @property
    def url(self) -> str:
        return f"tg://user?id={self.id}"


class Chat(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    type: str


class MessageEntity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    offset: int = Field(..., ge=0, description="Offset en unidades UTF-16.")
    length: int = Field(..., ge=0, description="Longitud en unidades UTF-16.")


class Message(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    message_id: int
    chat: Chat
    from_user: User | None = Field(default=None, alias="from")
    text: str | None = None
    entities: list[MessageEntity] | None = None


class Update(BaseModel):
    model_config = ConfigDict(extra="ignore")

    update_id: int
    message: Message | None = None


_UPDATES = TypeAdapter(list[Update])


class TelegramClient:
    def __init__(
        self,
        token: str,
        *,
        api_url: str = "https://api.telegram.org",
        settings: AppSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base = f"{api_url.rstrip('/')}/bot{token}"
        self._timeout = settings.http_timeout_seconds if settings else 20.0
        self._client = build_async_client(settings, transport=transport)

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "TelegramClient":
        if not settings.telegram_token:
            raise ValueError("DOORBOT_TELEGRAM_TOKEN is not configured")
        return cls(
            settings.telegram_token,
            api_url=settings.telegram_api_url,
            settings=settings,
            transport=transport,
        )

    async def __aenter__(self) -> "TelegramClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _call(self, method: str, params: dict[str, Any], *, extra_timeout: float = 0.0) -> Any:
        try:
            response = await self._client.post(
                f"{self._base}/{method}",
                json=params,
                timeout=self._timeout + extra_timeout,
            )
        except httpx.RequestError as exc:
            raise TelegramError(f"{method}: {type(exc).__name__}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise TelegramError(f"{method}: invalid JSON (HTTP {response.status_code})") from exc

        if not isinstance(data, dict) or not data.get("ok"):
            description = data.get("description") if isinstance(data, dict) else None
            raise TelegramError(f"{method} failed: {description or f'HTTP {response.status_code}'}")
        return data.get("result")

    async def get_updates(self, *, offset: int | None = None, timeout: int = 30) -> list[Update]:
        params: dict[str, Any] = {"timeout": timeout, "allowed_updates": ["message"]}
        if offset is not None:
            params["offset"] = offset
        result = await self._call("getUpdates", params, extra_timeout=float(timeout))
        try:
            return _UPDATES.validate_python(result)
        except ValidationError as exc:
            raise TelegramError(f"getUpdates: unexpected payload ({exc.error_count()} errors)") from exc

    async def send_message(
        self,
        chat_id: int,
        text: str,
        *,
        parse_mode: str | None = None,
        reply_to_message_id: int | None = None,
    ) -> Message:
        params: dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode:
            params["parse_mode"] = parse_mode
        if reply_to_message_id is not None:
            params["reply_to_message_id"] = reply_to_message_id
        result = await self._call("sendMessage", params)
        try:
            return Message.model_validate(result)
        except ValidationError as exc:
            raise TelegramError("sendMessage: unexpected payload") from exc
