"""Model definitions, the schema registry and payload projection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .exceptions import UnknownModelError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from pydantic import BaseModel


@dataclass(frozen=True)
class ModelDefinition:
    """Declared shape of a kind: its name, properties and identifier field."""

    name: str
    properties: frozenset[str] = field(default_factory=frozenset)
    id_field: str = "id"

    @classmethod
    def of(
        cls, name: str, properties: Iterable[str], *, id_field: str = "id"
    ) -> ModelDefinition:
        return cls(name=name, properties=frozenset(properties), id_field=id_field)


@runtime_checkable
class ISchemaRegistry(Protocol):
    """Read-only lookup of model definitions by model name."""

    def get_model_definition(self, model: str) -> ModelDefinition: ...


class SchemaRegistry(ISchemaRegistry):
    """In-process registry populated once at startup."""

    def __init__(self, definitions: Iterable[ModelDefinition] = ()) -> None:
        self._definitions: dict[str, ModelDefinition] = {}
        for definition in definitions:
            self.register(definition)

    def register(self, definition: ModelDefinition) -> ModelDefinition:
        if definition.name in self._definitions:
            raise ValidationError(
                {"model": [f"Model {definition.name!r} is already registered"]}
            )
        self._definitions[definition.name] = definition
        return definition

    def register_model(
        self,
        model_cls: type[BaseModel],
        *,
        name: str | None = None,
        id_field: str = "id",
    ) -> ModelDefinition:
        """Derive a definition from a pydantic model's declared fields."""
        definition = ModelDefinition.of(
            name or model_cls.__name__,
            model_cls.model_fields.keys(),
            id_field=id_field,
        )
        return self.register(definition)

    def get_model_definition(self, model: str) -> ModelDefinition:
        try:
            return self._definitions[model]
        except KeyError:
            raise UnknownModelError(model) from None

    def __contains__(self, model: object) -> bool:
        return model in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)


def project(definition: ModelDefinition, payload: Mapping[str, Any]) -> dict[str, Any]:
    """Restrict ``payload`` to the properties declared by ``definition``.

    Types and required fields are not checked; the store is authoritative.
    """
    return {k: v for k, v in payload.items() if k in definition.properties}
