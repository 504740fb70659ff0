"""Errores tipados del cliente de Home Assistant.

Reglas:
- El cliente no reintenta ni se recupera: todo fallo llega al caller como una
  de estas excepciones, encadenada (`raise ... from exc`) a la causa original.
- La capa de comandos decide qué mensaje ve el usuario.
"""

from __future__ import annotations


class HassError(Exception):
    """Base de todos los errores del cliente REST."""


class NewClientError(HassError):
    """No se pudo construir el cliente."""


class InvalidTokenError(NewClientError):
    def __init__(self) -> None:
        super().__init__("this token is invalid as a header value")


class TransportBuildError(NewClientError):
    def __init__(self, cause: Exception) -> None:
        super().__init__(f"could not create the HTTP transport: {cause}")


class RequestError(HassError):
    """Fallo durante `HassClient.execute`."""


class InvalidEndpointError(RequestError):
    def __init__(self, cause: Exception) -> None:
        super().__init__(f"invalid endpoint URI: {cause}")


class InvalidUriError(RequestError):
    def __init__(self, cause: Exception) -> None:
        super().__init__(f"could not build the request url: {cause}")


class RequestFailedError(RequestError):
    """Error de red o status HTTP no exitoso.

    `body` conserva el cuerpo de la respuesta de error (si lo hubo) para
    diagnóstico; no forma parte del mensaje.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: bytes | None = None,
    ) -> None:
        super().__init__(f"request failed: {message}")
        self.status_code = status_code
        self.body = body


class JsonError(RequestError):
    def __init__(self, cause: Exception) -> None:
        super().__init__(f"could not parse JSON: {cause}")
