"""PersistenceAdapter Protocol: shared interface for all database adapters."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PersistenceAdapter(Protocol):
    """Interface all persistence adapters must implement.

    Every method speaks in model attribute names; adapters translate to
    column names themselves. ``id_attribute`` names the primary key
    attribute of the table.
    """

    def connect(self) -> None: ...

    def close(self) -> None: ...

    def insert(
        self, table: str, id_attribute: str, data: dict[str, Any]
    ) -> dict[str, Any]: ...

    def update(
        self, table: str, id_attribute: str, id: Any, data: dict[str, Any]
    ) -> int: ...

    def delete(self, table: str, id_attribute: str, id: Any) -> int: ...

    def select(
        self,
        table: str,
        filter: dict[str, Any] | None = None,
        columns: list[str] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]: ...

    def describe(self, table: str) -> list[str]: ...
