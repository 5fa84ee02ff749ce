"""Attribute <-> column naming conventions.

Models use camelCase attribute names (``firstName``, ``passwordDigest``);
tables commonly use snake_case columns (``first_name``, ``password_digest``).
The adapter converts at the storage boundary so nothing above it sees
column names.
"""

import re
from typing import Protocol

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])|(?<=[A-Z])([A-Z][a-z])")


class NamingConvention(Protocol):
    def to_column(self, attribute: str) -> str: ...

    def to_attribute(self, column: str) -> str: ...


class IdentityNaming:
    """Attribute names are column names."""

    name = "identity"

    def to_column(self, attribute: str) -> str:
        return attribute

    def to_attribute(self, column: str) -> str:
        return column


class SnakeCaseNaming:
    """camelCase attributes stored in snake_case columns.

    Example:
        to_column("passwordDigest") -> "password_digest"
        to_attribute("created_at") -> "createdAt"

    Acronyms do not survive the round trip: "userID" is stored in "user_id"
    but read back as "userId". Spell such attributes "userId", or use
    IdentityNaming.
    """

    name = "snake"

    def to_column(self, attribute: str) -> str:
        return _CAMEL_BOUNDARY.sub(lambda m: "_" + (m.group(1) or m.group(2)), attribute).lower()

    def to_attribute(self, column: str) -> str:
        head, *rest = column.split("_")
        return head + "".join(part[:1].upper() + part[1:] for part in rest)


NAMING_CONVENTIONS: dict[str, type] = {
    IdentityNaming.name: IdentityNaming,
    SnakeCaseNaming.name: SnakeCaseNaming,
}


def get_naming(name: str) -> NamingConvention:
    """Get a naming convention by name ("snake" or "identity").

    Raises:
        ValueError: For unknown names
    """
    try:
        return NAMING_CONVENTIONS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown naming convention '{name}'. "
            f"Allowed: {', '.join(sorted(NAMING_CONVENTIONS))}"
        ) from None
