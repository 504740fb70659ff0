"""Cliente REST tipado para Home Assistant.

Responsabilidad:
- Mantener la configuración de conexión (authority + headers por defecto).
- Ejecutar cualquier `Endpoint` y devolver su salida ya decodificada.

Reglas:
- Sin reintentos ni caché: una request, un resultado tipado o un error tipado.
- El `httpx.AsyncClient` interno es inmutable una vez construido y se comparte
  entre llamadas concurrentes (el pool de conexiones lo gestiona httpx).
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from adapters.http_client import build_async_client, redact_headers
from adapters.http_methods import to_transport_method
from core.config import DEFAULT_HTTP_TIMEOUT_SECONDS, AppSettings
from core.errors import (
    InvalidEndpointError,
    InvalidTokenError,
    InvalidUriError,
    JsonError,
    RequestFailedError,
    TransportBuildError,
)
from core.interfaces.endpoint import Endpoint
from core.uri import DEFAULT_AUTHORITY, InvalidUri, InvalidUriParts, build_uri

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT")

# Bytes visibles ASCII, espacio y tab; el token no puede empezar ni acabar en blanco.
_HEADER_VALUE_RE = re.compile(r"^[\t\x20-\x7e]*$")


def bearer_header_value(token: str) -> str:
    value = f"Bearer {token}"
    if not _HEADER_VALUE_RE.fullmatch(value) or token != token.strip(" \t"):
        raise InvalidTokenError()
    return value


@lru_cache(maxsize=None)
def _adapter_for(output_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(output_type)


class HassClient:
    """Cliente de la API REST de Home Assistant.

    `authority` se puede cambiar tras la construcción (p.ej. desde config)
    antes del primer uso; el default es un placeholder local.
    """

    def __init__(
        self,
        token: str,
        authority: str = DEFAULT_AUTHORITY,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        settings: AppSettings | None = None,
    ) -> None:
        headers = {"Authorization": bearer_header_value(token)}
        try:
            self._client = build_async_client(
                settings,
                extra_headers=headers,
                transport=transport,
                timeout=timeout,
            )
        except (OSError, ValueError) as exc:
            raise TransportBuildError(exc) from exc
        self.authority = authority

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "HassClient":
        return cls(
            settings.hass_token,
            settings.hass_authority,
            transport=transport,
            timeout=settings.http_timeout_seconds,
            settings=settings,
        )

    def __repr__(self) -> str:
        return f"HassClient(authority={self.authority!r})"

    async def __aenter__(self) -> "HassClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def execute(self, request: Endpoint[OutputT]) -> OutputT:
        """Ejecuta el ciclo request/response completo para `request`.

        Errores:
        - `InvalidEndpointError`: el path del endpoint no es válido.
        - `InvalidUriError`: la authority o la URI ensamblada no son válidas.
        - `RequestFailedError`: fallo de red o status HTTP no exitoso.
        - `JsonError`: el cuerpo no encaja con el tipo de salida declarado.
        """

        try:
            path_and_query = request.path_and_query()
        except InvalidUri as exc:
            raise InvalidEndpointError(exc) from exc

        method = to_transport_method(request.method())
        try:
            url = build_uri(scheme="http", authority=self.authority, path_and_query=path_and_query)
            http_request = self._client.build_request(method, url, json=request.payload())
        except (InvalidUriParts, httpx.InvalidURL) as exc:
            raise InvalidUriError(exc) from exc

        logger.debug(
            "Request: %s %s headers=%s",
            http_request.method,
            http_request.url,
            redact_headers(http_request.headers.items()),
        )
        logger.debug("Request body: %r", http_request.content)

        try:
            response = await self._client.send(http_request)
        except httpx.RequestError as exc:
            raise RequestFailedError(str(exc)) from exc

        status_error: httpx.HTTPStatusError | None = None
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_error = exc

        logger.debug(
            "Response: %s headers=%s",
            response.status_code,
            redact_headers(response.headers.items()),
        )
        body = response.content
        logger.debug("Response body: %r", body)

        if status_error is not None:
            raise RequestFailedError(
                str(status_error),
                status_code=response.status_code,
                body=body,
            ) from status_error

        try:
            return _adapter_for(request.output_type()).validate_json(body)
        except ValidationError as exc:
            raise JsonError(exc) from exc
