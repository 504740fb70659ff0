"""Piezas de URI para el cliente REST.

Por qué aquí (y no en adaptadores):
- Los endpoints construyen su path sin tocar la red; validar ese path es
  lógica pura del Core.
- El cliente solo ensambla `scheme + authority + path_and_query`.
"""

from __future__ import annotations

import re

# RFC 3986: pchar = unreserved / pct-encoded / sub-delims / ":" / "@"
_PATH_QUERY_RE = re.compile(r"^/(?:[A-Za-z0-9\-._~!$&'()*+,;=:@/?]|%[0-9A-Fa-f]{2})*$")

_REG_NAME = r"(?:[A-Za-z0-9\-._~!$&'()*+,;=]|%[0-9A-Fa-f]{2})+"
_IP_LITERAL = r"\[[0-9A-Fa-f:.]+\]"
_AUTHORITY_RE = re.compile(
    rf"^(?:(?P<userinfo>(?:[A-Za-z0-9\-._~!$&'()*+,;=:]|%[0-9A-Fa-f]{{2}})*)@)?"
    rf"(?P<host>{_IP_LITERAL}|{_REG_NAME})"
    rf"(?::(?P<port>[0-9]*))?$"
)

DEFAULT_AUTHORITY = "localhost:8123"


class InvalidUri(ValueError):
    """Un path-and-query no es sintácticamente válido."""


class InvalidUriParts(ValueError):
    """Las partes (scheme/authority/path) no forman una URI válida."""


class PathAndQuery(str):
    """Path + query ya validados (p.ej. `/api/services/switch/turn_on`)."""

    __slots__ = ()

    @classmethod
    def parse(cls, text: str) -> "PathAndQuery":
        if text == "":
            return cls("/")
        if not _PATH_QUERY_RE.fullmatch(text):
            raise InvalidUri(f"invalid path-and-query: {text!r}")
        return cls(text)

    @property
    def path(self) -> str:
        return self.split("?", 1)[0]

    @property
    def query(self) -> str | None:
        if "?" not in self:
            return None
        return self.split("?", 1)[1]


def parse_authority(text: str) -> str:
    """Valida `host[:port]` (opcionalmente con userinfo) y lo devuelve intacto."""

    match = _AUTHORITY_RE.fullmatch(text or "")
    if match is None:
        raise InvalidUriParts(f"invalid authority: {text!r}")
    port = match.group("port")
    if port and int(port) > 65535:
        raise InvalidUriParts(f"invalid port in authority: {text!r}")
    return text


def build_uri(*, scheme: str, authority: str, path_and_query: PathAndQuery) -> str:
    if scheme not in ("http", "https"):
        raise InvalidUriParts(f"unsupported scheme: {scheme!r}")
    return f"{scheme}://{parse_authority(authority)}{path_and_query}"
