"""Core types for declarative model schemas.

A schema is an immutable mapping of field name to Field. Schemas are built
once per model class; per-save variations (such as the relaxed schema used
for partial updates) are derived copies, never mutations.
"""

import copy
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from supermodel.core.types import UNSET, is_field_type
from supermodel.errors import ConfigurationError


@dataclass(frozen=True)
class Field:
    """Declaration of a single schema field.

    Attributes:
        type: Field type name ("any", "string", "integer", "number",
              "boolean", "datetime", "date")
        required: The field must be present on a full validation
        default: Value (or zero-argument callable) used when the field is
                 missing; UNSET means no default
        choices: Allowed values, None for no restriction
        nullable: None is an accepted value
        allow_empty: The empty string is an accepted value for strings
        min_length / max_length: String length bounds
        min / max: Numeric bounds
        pattern: Regex the whole string must match
    """

    type: str = "any"
    required: bool = False
    default: Any = UNSET
    choices: tuple[Any, ...] | None = None
    nullable: bool = False
    allow_empty: bool = False
    min_length: int | None = None
    max_length: int | None = None
    min: float | None = None
    max: float | None = None
    pattern: str | None = None

    def __post_init__(self) -> None:
        if not is_field_type(self.type):
            raise ConfigurationError(f"Unknown field type '{self.type}'")
        if self.choices is not None and not isinstance(self.choices, tuple):
            object.__setattr__(self, "choices", tuple(self.choices))
        if self.pattern is not None:
            try:
                re.compile(self.pattern)
            except re.error as e:
                raise ConfigurationError(f"Invalid pattern '{self.pattern}': {e}") from e

    @property
    def has_default(self) -> bool:
        return self.default is not UNSET

    def resolve_default(self) -> Any:
        """A fresh default value; mutable defaults are never shared."""
        if callable(self.default):
            return self.default()
        return copy.deepcopy(self.default)

    def optional(self) -> "Field":
        return self if not self.required else replace(self, required=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Field":
        """Create a Field from a YAML/JSON dict.

        Accepts camelCase keys (minLength, allowEmpty) alongside the
        attribute names.
        """
        aliases = {
            "minLength": "min_length",
            "maxLength": "max_length",
            "allowEmpty": "allow_empty",
            "oneOf": "choices",
        }
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = aliases.get(key, key)
            if name not in cls.__dataclass_fields__:
                raise ConfigurationError(f"Unknown field option '{key}'")
            kwargs[name] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class Schema:
    """Immutable, ordered set of named fields.

    Attributes:
        fields: Read-only mapping of field name to Field
        allow_unknown: Accept attributes the schema does not declare
    """

    fields: Mapping[str, Field] = field(default_factory=dict)
    allow_unknown: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self.fields)

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __len__(self) -> int:
        return len(self.fields)

    def with_fields(self, extra: Mapping[str, Field]) -> "Schema":
        """Return a copy gaining each of ``extra`` whose name is absent."""
        merged = dict(self.fields)
        for name, definition in extra.items():
            merged.setdefault(name, definition)
        return Schema(fields=merged, allow_unknown=self.allow_unknown)

    @classmethod
    def from_shape(cls, shape: "Schema | Mapping[str, Any]") -> "Schema":
        """Build a Schema from a schema or a schema shape.

        A shape maps field names to Field instances or to field dicts.
        The reserved key "allowUnknown" sets allow_unknown.
        """
        if isinstance(shape, Schema):
            return shape
        if not isinstance(shape, Mapping):
            raise ConfigurationError(
                f"validate must be a Schema or a mapping, got {type(shape).__name__}"
            )

        fields: dict[str, Field] = {}
        allow_unknown = False
        for name, definition in shape.items():
            if name == "allowUnknown":
                allow_unknown = bool(definition)
            elif isinstance(definition, Field):
                fields[name] = definition
            elif isinstance(definition, Mapping):
                fields[name] = Field.from_dict(definition)
            elif isinstance(definition, str):
                fields[name] = Field(type=definition)
            else:
                raise ConfigurationError(
                    f"Field '{name}' must be a Field, a dict or a type name"
                )
        return cls(fields=fields, allow_unknown=allow_unknown)


def relax(schema: Schema, names: Iterable[str]) -> Schema:
    """Return a copy of ``schema`` in which ``names`` are optional.

    Names the schema does not declare are ignored.
    """
    targets = set(names)
    if not targets & schema.names:
        return schema
    return Schema(
        fields={
            name: definition.optional() if name in targets else definition
            for name, definition in schema.fields.items()
        },
        allow_unknown=schema.allow_unknown,
    )


@dataclass(frozen=True)
class FieldError:
    """A single schema violation.

    Attributes:
        field: Offending field name
        message: Human-readable message
        code: Machine-readable code (e.g., "REQUIRED", "INVALID_OPTION")
    """

    field: str
    message: str
    code: str

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "message": self.message, "code": self.code}


@dataclass
class ValidationResult:
    """Result of validating one attribute mapping.

    Attributes:
        value: Validated, coerced and defaulted attributes
        errors: Violations found; empty when valid
        table_name: Table the attributes belong to, for error reporting
    """

    value: dict[str, Any] = field(default_factory=dict)
    errors: list[FieldError] = field(default_factory=list)
    table_name: str | None = None

    @property
    def valid(self) -> bool:
        return not self.errors
