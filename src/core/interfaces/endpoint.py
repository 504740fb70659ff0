"""Contratos de endpoints REST.

Por qué Protocol:
- Un endpoint nuevo (otra acción remota) solo necesita cumplir el contrato;
  el cliente no cambia.
- Los modelos Pydantic del dominio lo cumplen por duck typing, sin heredar de
  nada del cliente HTTP.
"""

from __future__ import annotations

from http import HTTPMethod
from typing import Any, Protocol, TypeVar, runtime_checkable

from core.uri import PathAndQuery

OutputT = TypeVar("OutputT", covariant=True)

# Vocabulario de métodos de la capa de endpoints: los estándar como
# `HTTPMethod`, cualquier otro como token textual (p.ej. "PURGE").
Method = HTTPMethod | str


@runtime_checkable
class Endpoint(Protocol[OutputT]):
    """Contrato request/response de una operación remota.

    Reglas de diseño:
    - `method` es constante para cada tipo concreto.
    - `path_and_query` es puro: no hace I/O ni toca estado mutable. Solo falla
      con `core.uri.InvalidUri` si el path resultante no es válido.
    - `payload` devuelve el cuerpo ya en forma JSON (dict/list/None).
    - `output_type` es el tipo en el que se decodifica la respuesta.
    """

    def method(self) -> Method:
        ...

    def path_and_query(self) -> PathAndQuery:
        ...

    def output_type(self) -> Any:
        ...

    def payload(self) -> Any:
        ...


@runtime_checkable
class Service(Protocol[OutputT]):
    """Llamada a un servicio remoto identificada por `domain` + `service`.

    Se convierte en endpoint envolviéndola con `core.endpoints.ServicePost`.
    """

    def domain(self) -> str:
        ...

    def service(self) -> str:
        ...

    def output_type(self) -> Any:
        ...

    def payload(self) -> Any:
        ...
