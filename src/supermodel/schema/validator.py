"""Field-level schema validation.

Checks an attribute mapping against a Schema:
- Unknown keys (unless the schema allows them)
- Required fields and defaults for missing optional fields
- Nullability
- Type coercion (e.g., "42" -> 42 for integer fields)
- Choices, string length, numeric bounds, regex pattern

All violations are collected; validation does not stop at the first one.
"""

import re
from typing import Any

from supermodel.core.types import get_field_type
from supermodel.schema.types import Field, FieldError, Schema, ValidationResult


def validate(
    schema: Schema,
    attributes: dict[str, Any],
    *,
    apply_defaults: bool = True,
    table_name: str | None = None,
) -> ValidationResult:
    """Validate ``attributes`` against ``schema``.

    Args:
        schema: The schema to enforce
        attributes: Attribute mapping to check (not modified)
        apply_defaults: Fill missing optional fields that declare a default
        table_name: Recorded on the result for error reporting

    Returns:
        ValidationResult with the canonical value and any errors
    """
    value: dict[str, Any] = {}
    errors: list[FieldError] = []

    for name, raw in attributes.items():
        if name not in schema.fields:
            if schema.allow_unknown:
                value[name] = raw
            else:
                errors.append(FieldError(
                    field=name,
                    message=f"'{name}' is not allowed",
                    code="UNKNOWN_FIELD",
                ))

    for name, definition in schema.fields.items():
        if name not in attributes:
            if definition.required:
                errors.append(FieldError(
                    field=name,
                    message=f"'{name}' is required",
                    code="REQUIRED",
                ))
            elif apply_defaults and definition.has_default:
                value[name] = definition.resolve_default()
            continue

        checked, field_errors = check_field(name, definition, attributes[name])
        if field_errors:
            errors.extend(field_errors)
        else:
            value[name] = checked

    return ValidationResult(value=value, errors=errors, table_name=table_name)


def check_field(name: str, definition: Field, raw: Any) -> tuple[Any, list[FieldError]]:
    """Check one present value. Returns (canonical value, errors)."""
    if raw is None:
        if definition.nullable:
            return None, []
        return None, [FieldError(
            field=name,
            message=f"'{name}' must not be null",
            code="NOT_NULLABLE",
        )]

    field_type = get_field_type(definition.type)
    try:
        value = field_type.coerce(raw)
    except (TypeError, ValueError):
        return raw, [FieldError(
            field=name,
            message=f"'{name}' must be {field_type.description}",
            code=f"INVALID_{definition.type.upper()}",
        )]

    errors: list[FieldError] = []

    if definition.type == "string" and value == "" and not definition.allow_empty:
        # Empty strings are rejected before any other string rule
        return value, [FieldError(
            field=name,
            message=f"'{name}' must not be empty",
            code="EMPTY",
        )]

    if definition.choices is not None and value not in definition.choices:
        allowed = ", ".join(repr(c) for c in definition.choices)
        errors.append(FieldError(
            field=name,
            message=f"'{name}' must be one of [{allowed}]",
            code="INVALID_OPTION",
        ))

    if isinstance(value, str):
        errors.extend(_check_length(name, definition, value))
        if definition.pattern and not re.fullmatch(definition.pattern, value):
            errors.append(FieldError(
                field=name,
                message=f"'{name}' format is invalid",
                code="PATTERN_MISMATCH",
            ))

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        errors.extend(_check_bounds(name, definition, value))

    return value, errors


def _check_length(name: str, definition: Field, value: str) -> list[FieldError]:
    errors = []
    if definition.min_length is not None and len(value) < definition.min_length:
        errors.append(FieldError(
            field=name,
            message=f"'{name}' must be at least {definition.min_length} characters",
            code="MIN_LENGTH",
        ))
    if definition.max_length is not None and len(value) > definition.max_length:
        errors.append(FieldError(
            field=name,
            message=f"'{name}' must be at most {definition.max_length} characters",
            code="MAX_LENGTH",
        ))
    return errors


def _check_bounds(name: str, definition: Field, value: float) -> list[FieldError]:
    errors = []
    if definition.min is not None and value < definition.min:
        errors.append(FieldError(
            field=name,
            message=f"'{name}' must be at least {definition.min}",
            code="MIN_VALUE",
        ))
    if definition.max is not None and value > definition.max:
        errors.append(FieldError(
            field=name,
            message=f"'{name}' must be at most {definition.max}",
            code="MAX_VALUE",
        ))
    return errors
