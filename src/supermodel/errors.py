"""Exception hierarchy for Supermodel.

Every error raised on purpose by the library derives from SupermodelError:
- SchemaValidationError: a save was rejected by the model's schema
- PasswordMismatch: authenticate() could not match a candidate password
- ConfigurationError: a model class or the wiring around it is invalid
- SaveAbortedError: a pre-persist interceptor aborted the save
- NotFoundError / NoRowsUpdatedError / NoRowsDeletedError: require=True misses
- PersistenceError: the adapter could not carry out a statement
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from supermodel.schema.types import FieldError


class SupermodelError(Exception):
    """Base class for all Supermodel errors."""


class ConfigurationError(SupermodelError):
    """Raised when a model class or adapter wiring is invalid."""


class SchemaValidationError(SupermodelError):
    """Raised when attributes do not satisfy the model's schema.

    Attributes:
        errors: One FieldError per violated constraint
        table_name: Table of the model being saved (None outside a model)
    """

    def __init__(self, errors: list[FieldError], table_name: str | None = None):
        self.errors = list(errors)
        self.table_name = table_name
        details = "; ".join(
            f"{e.field}: {e.message}" if e.field else e.message for e in self.errors
        )
        where = f" on '{table_name}'" if table_name else ""
        super().__init__(f"Validation failed{where}: {details}")

    @property
    def fields(self) -> list[str]:
        """Names of the offending fields, in error order, without duplicates."""
        seen: list[str] = []
        for error in self.errors:
            if error.field and error.field not in seen:
                seen.append(error.field)
        return seen

    def to_dict(self) -> dict[str, Any]:
        return {
            "tableName": self.table_name,
            "errors": [e.to_dict() for e in self.errors],
        }


class PasswordMismatch(SupermodelError):
    """Raised when a candidate password does not match the stored digest."""

    def __init__(self, message: str = "Password does not match"):
        super().__init__(message)


class SaveAbortedError(SupermodelError):
    """Raised when a pre-persist interceptor returns an abort result."""

    def __init__(self, interceptor: str, message: str):
        self.interceptor = interceptor
        self.message = message
        super().__init__(f"Save aborted by '{interceptor}': {message}")


class PersistenceError(SupermodelError):
    """Raised when the persistence adapter cannot carry out a statement."""


class NotFoundError(PersistenceError):
    """Raised by fetches with require=True that match no row."""

    def __init__(self, table_name: str, query: dict[str, Any] | None = None):
        self.table_name = table_name
        self.query = dict(query or {})
        super().__init__(f"No '{table_name}' row matches {self.query}")


class NoRowsUpdatedError(PersistenceError):
    """Raised by updates with require=True that touch no row."""

    def __init__(self, table_name: str, id: Any):
        self.table_name = table_name
        self.id = id
        super().__init__(f"No '{table_name}' row was updated for id {id!r}")


class NoRowsDeletedError(PersistenceError):
    """Raised by deletes with require=True that touch no row."""

    def __init__(self, table_name: str, id: Any):
        self.table_name = table_name
        self.id = id
        super().__init__(f"No '{table_name}' row was deleted for id {id!r}")
