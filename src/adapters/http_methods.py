"""Traducción de métodos HTTP: capa de endpoints -> transporte (httpx).

Por qué existe:
- Los endpoints describen su método con `http.HTTPMethod` (o un token de
  extensión) y no dependen de httpx.
- httpx recibe el método como token textual. Esta es la costura entre ambos
  vocabularios y nunca debe producir un método distinto al de origen.
"""

from __future__ import annotations

import re
from http import HTTPMethod

from core.interfaces.endpoint import Method

_STANDARD: dict[HTTPMethod, str] = {
    HTTPMethod.CONNECT: "CONNECT",
    HTTPMethod.DELETE: "DELETE",
    HTTPMethod.GET: "GET",
    HTTPMethod.HEAD: "HEAD",
    HTTPMethod.OPTIONS: "OPTIONS",
    HTTPMethod.PATCH: "PATCH",
    HTTPMethod.POST: "POST",
    HTTPMethod.PUT: "PUT",
    HTTPMethod.TRACE: "TRACE",
}

# RFC 9110 token
_TOKEN_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def to_transport_method(method: Method) -> str:
    """Devuelve el método equivalente para httpx.

    Los métodos estándar se mapean 1:1. Cualquier otro se reconstruye desde su
    texto; un token inválido es un error de programación (`ValueError`), no un
    error de request. Los tokens de extensión deben ir en mayúsculas: httpx
    normaliza el método con `.upper()` y enviaría otro token distinto al de
    origen.
    """

    direct = _STANDARD.get(method)  # type: ignore[call-overload]
    if direct is not None:
        return direct

    text = str(method)
    if not _TOKEN_RE.fullmatch(text) or text != text.upper():
        raise ValueError(f"source method is invalid as transport method: {text!r}")
    return text
