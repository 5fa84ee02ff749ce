"""Pre-persist interceptor types.

Defines the data structures passed through the save lifecycle:
- SaveMethod / SaveOptions: what kind of write a save call performs
- PersistContext: pending state handed to every interceptor
- InterceptResult: optional return value from an interceptor
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SaveMethod(Enum):
    """The kind of write a save performs."""

    INSERT = "insert"
    UPDATE = "update"


@dataclass(frozen=True)
class SaveOptions:
    """Options for a single save call.

    Attributes:
        method: Explicit operation kind; None lets the model decide from is_new()
        patch: Write only the attributes passed to this save call
        require: Fail when an update touches no row
    """

    method: SaveMethod | None = None
    patch: bool = False
    require: bool = True

    @classmethod
    def build(
        cls,
        method: SaveMethod | str | None = None,
        patch: bool = False,
        require: bool = True,
    ) -> "SaveOptions":
        """Create SaveOptions, accepting method names as strings."""
        if isinstance(method, str):
            method = SaveMethod(method)
        return cls(method=method, patch=patch, require=require)

    @property
    def marks_update(self) -> bool:
        """True when the caller explicitly asked for an update or a patch."""
        return self.method is SaveMethod.UPDATE or self.patch


@dataclass
class PersistContext:
    """Pending state for one save attempt, shared by all interceptors.

    Attributes:
        model: The instance being saved
        method: Resolved operation kind (insert or update)
        options: Options the save was called with
        is_new: Whether the instance had never been persisted
        attributes: Payload this save will write
        pending: Full attribute mapping the instance will hold on success
        staged: Snapshot of staged write-only field values
    """

    model: Any
    method: SaveMethod
    options: SaveOptions
    is_new: bool
    attributes: dict[str, Any]
    pending: dict[str, Any]
    staged: dict[str, Any] = field(default_factory=dict)

    @property
    def table_name(self) -> str | None:
        return getattr(self.model, "table_name", None)

    def update(self, values: dict[str, Any]) -> None:
        """Merge values into both the payload and the pending state."""
        self.attributes.update(values)
        self.pending.update(values)

    def discard(self, name: str) -> None:
        """Remove a key from both the payload and the pending state."""
        self.attributes.pop(name, None)
        self.pending.pop(name, None)


@dataclass
class InterceptResult:
    """Return value from a pre-persist interceptor.

    Attributes:
        update: Fields to merge into the payload and pending state
        abort: Error message to abort the save
    """

    update: dict[str, Any] | None = None
    abort: str | None = None


def compute_changes(
    record: dict[str, Any], original: dict[str, Any] | None
) -> dict[str, Any] | None:
    """Compute a diff of changed fields between record and original.

    Returns None if original is None (never persisted).
    Returns a dict of {field: new_value} for fields that differ.
    """
    if original is None:
        return None

    changes: dict[str, Any] = {}
    for key, value in record.items():
        if key in original and original[key] != value:
            changes[key] = value
        elif key not in original:
            changes[key] = value

    return changes
