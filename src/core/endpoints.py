"""Endpoints concretos de la API REST de Home Assistant.

- `ServicePost`: adaptador genérico `POST /api/services/{domain}/{service}`
  para cualquier valor que cumpla `Service`.
- `ApiStatus`: `GET /api/` (sonda de conectividad).
- `GetState`: `GET /api/states/{entity_id}` (estado de una sola entidad).
"""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPMethod
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from core.domain.models import State
from core.interfaces.endpoint import Method, Service
from core.uri import InvalidUri, PathAndQuery

OutputT = TypeVar("OutputT")


@dataclass(frozen=True)
class ServicePost(Generic[OutputT]):
    """Envuelve un `Service` y lo expone como `Endpoint`.

    El cuerpo es el payload del servicio tal cual (wrapper transparente) y el
    tipo de salida es el del servicio, sin que el adaptador conozca su forma.
    """

    call: Service[OutputT]

    def method(self) -> Method:
        return HTTPMethod.POST

    def path_and_query(self) -> PathAndQuery:
        domain = self.call.domain()
        service = self.call.service()
        if not domain or not service:
            raise InvalidUri(f"empty service path segment: {domain!r}/{service!r}")
        return PathAndQuery.parse(f"/api/services/{domain}/{service}")

    def output_type(self) -> Any:
        return self.call.output_type()

    def payload(self) -> Any:
        return self.call.payload()


class ApiMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: str = Field(..., description="Mensaje de estado de la API (p.ej. 'API running.').")


class ApiStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    def method(self) -> Method:
        return HTTPMethod.GET

    def path_and_query(self) -> PathAndQuery:
        return PathAndQuery.parse("/api/")

    def output_type(self) -> Any:
        return ApiMessage

    def payload(self) -> Any:
        return None


class GetState(BaseModel):
    model_config = ConfigDict(frozen=True)

    entity_id: str = Field(..., min_length=1, description="Entidad a consultar (p.ej. 'sun.sun').")

    def method(self) -> Method:
        return HTTPMethod.GET

    def path_and_query(self) -> PathAndQuery:
        return PathAndQuery.parse(f"/api/states/{self.entity_id}")

    def output_type(self) -> Any:
        return State

    def payload(self) -> Any:
        return None
