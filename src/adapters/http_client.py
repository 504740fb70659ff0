"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers por defecto y User-Agent para todos los
  clientes (Home Assistant y Telegram).
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

from typing import Iterable, Mapping

import httpx

from core.config import DEFAULT_HTTP_TIMEOUT_SECONDS, DEFAULT_USER_AGENT, AppSettings

# Headers cuyo valor nunca se muestra en logs.
SENSITIVE_HEADERS = frozenset({"authorization", "proxy-authorization", "cookie", "set-cookie"})


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: Mapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    timeout: float | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todos los clientes se comporten igual.
    - `transport` permite sustituir la red en tests.
    """

    user_agent = settings.user_agent if settings else DEFAULT_USER_AGENT
    if timeout is None:
        timeout = settings.http_timeout_seconds if settings else DEFAULT_HTTP_TIMEOUT_SECONDS

    headers: dict[str, str] = {
        "User-Agent": user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def redact_headers(headers: Iterable[tuple[str, str]]) -> dict[str, str]:
    """Copia de headers apta para logs (valores sensibles como `[secure]`)."""

    out: dict[str, str] = {}
    for key, value in headers:
        out[key] = "[secure]" if key.lower() in SENSITIVE_HEADERS else value
    return out
