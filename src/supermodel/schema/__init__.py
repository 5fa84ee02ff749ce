"""Declarative model schemas and the save-time validation engine.

Usage:
    from supermodel.schema import Field, Schema, relax, validate

    schema = Schema.from_shape({
        "firstName": Field("string", required=True, choices=("hello", "yo")),
        "lastName": Field("string", nullable=True),
    })
    result = validate(schema, {"firstName": "hello"})
"""

from supermodel.schema.engine import (
    ValidationMode,
    augment_schema,
    resolve_mode,
    validate_attributes,
    validate_pending,
    validate_save,
)
from supermodel.schema.loader import load_schema, schema_from_dict
from supermodel.schema.types import (
    Field,
    FieldError,
    Schema,
    ValidationResult,
    relax,
)
from supermodel.schema.validator import check_field, validate

__all__ = [
    "Field",
    "FieldError",
    "Schema",
    "ValidationMode",
    "ValidationResult",
    "augment_schema",
    "check_field",
    "load_schema",
    "relax",
    "resolve_mode",
    "schema_from_dict",
    "validate",
    "validate_attributes",
    "validate_pending",
    "validate_save",
]
