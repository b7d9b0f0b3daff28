"""Exceptions raised by the datastore connector."""

from __future__ import annotations

from typing import Any


class ConnectorError(Exception):
    """Root exception for the datastore connector."""


class ValidationError(ConnectorError):
    """Raised when a request fails a local precondition check.

    Carries structured errors: ``{field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(str(self.errors))


class UnknownModelError(ValidationError):
    """Raised when a model has no registered definition."""

    def __init__(self, model: str) -> None:
        self.model = model
        super().__init__({"model": [f"Unknown model {model!r}"]})


class NotFoundError(ConnectorError):
    """Raised when a record required by an operation does not exist."""


class EntityNotFoundError(NotFoundError):
    """Raised when a specific record cannot be found by identifier."""

    def __init__(self, entity_type: str, entity_id: object) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id={entity_id!r} not found")


class UnsupportedQueryError(ConnectorError):
    """Raised when a filter cannot be expressed as conjunctive equality.

    The store has no disjunction and no comparison operators, so the
    offending clause is rejected rather than partially applied.
    """

    def __init__(self, message: str, *, clause: Any = None) -> None:
        self.clause = clause
        super().__init__(message)


class StoreError(ConnectorError):
    """Raised when the underlying store fails.

    The store's own exception is kept as ``__cause__``.
    """

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        self.operation = operation
        super().__init__(message)


class StoreConnectionError(StoreError):
    """Raised when the connection to the store cannot be established."""
