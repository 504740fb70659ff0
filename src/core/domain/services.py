"""Llamadas a servicios de Home Assistant.

Cada clase cumple `core.interfaces.endpoint.Service` y se envía con
`core.endpoints.ServicePost`. Añadir una acción remota nueva = añadir una
subclase con su `DOMAIN`/`SERVICE`; el cliente no cambia.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, model_serializer, model_validator
from pydantic.config import ConfigDict

from core.domain.models import Entity, State


class EntityServiceCall(BaseModel):
    """Servicio que actúa sobre una entidad (opcional).

    Payload: `{"entity_id": "..."}`, o `{}` si no hay entidad.
    Respuesta: lista de estados que cambiaron durante la llamada.
    """

    model_config = ConfigDict(frozen=True)

    DOMAIN: ClassVar[str]
    SERVICE: ClassVar[str]

    entity: Entity | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_entity_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and "entity" not in data and "entity_id" in data:
            data = dict(data)
            data["entity"] = {"entity_id": data.pop("entity_id")}
        return data

    @model_serializer(mode="wrap")
    def _flatten_entity(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        entity = data.pop("entity", None) or {}
        return {**entity, **data}

    @classmethod
    def for_entity(cls, entity_id: str) -> "EntityServiceCall":
        return cls(entity=Entity(id=entity_id))

    def domain(self) -> str:
        return self.DOMAIN

    def service(self) -> str:
        return self.SERVICE

    def output_type(self) -> Any:
        return list[State]

    def payload(self) -> Any:
        return self.model_dump(mode="json")


class ButtonPress(EntityServiceCall):
    DOMAIN: ClassVar[str] = "button"
    SERVICE: ClassVar[str] = "press"


class SwitchTurnOn(EntityServiceCall):
    DOMAIN: ClassVar[str] = "switch"
    SERVICE: ClassVar[str] = "turn_on"


class SwitchTurnOff(EntityServiceCall):
    DOMAIN: ClassVar[str] = "switch"
    SERVICE: ClassVar[str] = "turn_off"
