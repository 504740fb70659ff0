"""Modelos del dominio (Pydantic v2).

Reflejan la representación de recursos de Home Assistant:
- `Entity`: identificador de la entidad remota (`button.open_ring_1`).
- `Context`: contexto de la última modificación.
- `State`: snapshot del estado de una entidad, genérico sobre `attributes`.

Nota:
- En el wire, `entity_id` va aplanado al nivel superior del objeto (no
  anidado bajo `entity`), tanto al serializar como al deserializar.
"""

from __future__ import annotations

from typing import Any, Generic

from pydantic import AliasChoices, AwareDatetime, BaseModel, Field, model_serializer, model_validator
from pydantic.config import ConfigDict
from typing_extensions import TypeVar

AttrsT = TypeVar("AttrsT", default=dict[str, Any])


class Entity(BaseModel):
    """Identificador de una entidad remota.

    Normalmente se usa aplanado dentro de otro objeto (`{"entity_id": ...}`).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(
        ...,
        validation_alias=AliasChoices("entity_id", "id"),
        description="Id de la entidad, con forma '<domain>.<object_id>'.",
    )

    @property
    def domain(self) -> str:
        return self.id.split(".", 1)[0]

    @model_serializer
    def _serialize(self) -> dict[str, str]:
        return {"entity_id": self.id}


class Context(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Id del contexto (puede ser vacío).")
    parent_id: str | None = Field(default=None)
    user_id: str | None = Field(default=None)


class State(BaseModel, Generic[AttrsT]):
    """Estado de una entidad.

    `attributes` es abierto: por defecto un mapping sin tipar, pero se puede
    parametrizar con un modelo concreto (`State[SunAttributes]`) para clases de
    entidad conocidas.
    """

    entity: Entity
    state: str
    last_changed: AwareDatetime
    last_updated: AwareDatetime
    context: Context
    attributes: AttrsT

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

    @property
    def entity_id(self) -> str:
        return self.entity.id
