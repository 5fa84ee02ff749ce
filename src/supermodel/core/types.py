"""Field type registry and shared sentinels."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any


class _Unset:
    """Marker for "no value supplied", distinct from an explicit None."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class FieldType:
    """A schema field type.

    Attributes:
        name: Type name used in schema declarations ("string", "integer", ...)
        coerce: Converts an incoming value to the canonical Python value,
                raising ValueError/TypeError when it cannot
        description: Phrase used in error messages ("a string")
    """

    name: str
    coerce: Callable[[Any], Any]
    description: str


def _coerce_any(value: Any) -> Any:
    return value


def _coerce_string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError("not a string")
    return value


def _coerce_integer(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("booleans are not integers")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise TypeError("not an integer")


def _coerce_number(value: Any) -> int | float:
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            return float(text)
    raise TypeError("not a number")


def _coerce_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise TypeError("not a boolean")


def _coerce_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    raise TypeError("not a datetime")


def _coerce_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise TypeError("not a date")


# Built-in field types
FIELD_TYPES: dict[str, FieldType] = {
    "any": FieldType(name="any", coerce=_coerce_any, description="any value"),
    "string": FieldType(name="string", coerce=_coerce_string, description="a string"),
    "integer": FieldType(
        name="integer", coerce=_coerce_integer, description="an integer"
    ),
    "number": FieldType(name="number", coerce=_coerce_number, description="a number"),
    "boolean": FieldType(
        name="boolean", coerce=_coerce_boolean, description="a boolean"
    ),
    "datetime": FieldType(
        name="datetime", coerce=_coerce_datetime, description="a valid datetime"
    ),
    "date": FieldType(
        name="date", coerce=_coerce_date, description="a valid date (YYYY-MM-DD)"
    ),
}


def get_field_type(type_name: str) -> FieldType:
    """Get a field type definition.

    Raises:
        KeyError: If the type is not registered
    """
    return FIELD_TYPES[type_name]


def is_field_type(type_name: str) -> bool:
    return type_name in FIELD_TYPES
