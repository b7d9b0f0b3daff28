"""DatastoreSettings — connection configuration for the Mongo-backed store."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError


class DatastoreSettings(BaseModel):
    """Where the store lives and how long to wait for it.

    ``database`` scopes every kind to one project; ``namespace`` further
    prefixes collection names so several tenants can share a database.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = Field(min_length=1)
    database: str = Field(min_length=1)
    namespace: str | None = None
    server_selection_timeout_ms: int = Field(default=5000, gt=0)
    connect_timeout_ms: int = Field(default=10000, gt=0)

    @classmethod
    def from_mapping(cls, raw: Any) -> DatastoreSettings:
        """Validate raw settings, reporting problems as ``ValidationError``."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls.model_validate(raw)
        except PydanticValidationError as exc:
            errors: dict[str, list[str]] = {}
            for error in exc.errors():
                loc = ".".join(str(p) for p in error.get("loc", ())) or "__root__"
                msg = error.get("msg", "validation error")
                errors.setdefault(loc, []).append(msg)
            raise ValidationError(errors) from exc
