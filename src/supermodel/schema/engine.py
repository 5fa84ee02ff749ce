"""Save-time validation engine.

Decides how much of a model's schema a save must satisfy, validates the
attributes and rewrites the pending attribute state from the validated
result:

- FULL: a new record saved without an explicit update/patch flag. The whole
  attribute mapping is checked against the complete schema, defaults are
  applied and required fields are enforced.
- PARTIAL: everything else. Only the payload of the save call is checked,
  against a copy of the schema where every field the payload does not carry
  is optional.
"""

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any

from supermodel.errors import SchemaValidationError
from supermodel.hooks.types import PersistContext, SaveOptions
from supermodel.schema.types import Field, Schema, relax
from supermodel.schema.validator import validate

logger = logging.getLogger(__name__)


class ValidationMode(Enum):
    FULL = "full"
    PARTIAL = "partial"


def resolve_mode(is_new: bool, options: SaveOptions) -> ValidationMode:
    """An explicit update or patch overrides newness."""
    if is_new and not options.marks_update:
        return ValidationMode.FULL
    return ValidationMode.PARTIAL


def augment_schema(
    schema: Schema,
    id_attribute: str = "id",
    timestamps: Iterable[str] = (),
    digest_column: str | None = None,
) -> Schema:
    """Add the implicitly optional bookkeeping fields a model schema needs.

    Fields the schema already declares are left as declared.
    """
    extra: dict[str, Field] = {id_attribute: Field("any", nullable=True)}
    for name in timestamps:
        extra[name] = Field("datetime", nullable=True)
    if digest_column:
        extra[digest_column] = Field("string", nullable=True)
    return schema.with_fields(extra)


def validate_attributes(
    schema: Schema,
    mode: ValidationMode,
    attributes: dict[str, Any],
    current: dict[str, Any],
    table_name: str | None = None,
) -> dict[str, Any]:
    """Validate a save and return the canonical values to write.

    Args:
        schema: The model's complete schema
        mode: FULL checks ``current``; PARTIAL checks ``attributes``
        attributes: Payload of the save call
        current: Full attribute mapping of the instance
        table_name: Reported on failure

    Raises:
        SchemaValidationError: If any constraint is violated
    """
    if mode is ValidationMode.FULL:
        result = validate(schema, current, table_name=table_name)
    else:
        optional = schema.names - set(attributes)
        result = validate(
            relax(schema, optional),
            attributes,
            apply_defaults=False,
            table_name=table_name,
        )

    if not result.valid:
        raise SchemaValidationError(result.errors, table_name)
    return result.value


def validate_save(
    model: Any,
    attributes: dict[str, Any] | None = None,
    options: SaveOptions | None = None,
) -> dict[str, Any]:
    """Validate ``model`` for a save and write the result back onto it.

    Args:
        model: Instance whose class declares a schema
        attributes: Payload being written; defaults to all attributes
        options: Save options; defaults to a plain save

    Returns:
        The validated attributes

    Raises:
        SchemaValidationError: If validation fails; the model is unchanged
    """
    options = options or SaveOptions()
    current = dict(model.attributes)
    payload = dict(current if attributes is None else attributes)
    mode = resolve_mode(model.is_new(), options)
    value = validate_attributes(type(model).schema, mode, payload, current, model.table_name)
    model.attributes.update(value)
    return value


async def validate_pending(ctx: PersistContext) -> None:
    """Pre-persist interceptor running the engine on a save in progress."""
    schema = type(ctx.model).schema
    if schema is None:
        return None

    mode = resolve_mode(ctx.is_new, ctx.options)
    logger.debug("Validating %s save on '%s'", mode.value, ctx.table_name)
    value = validate_attributes(schema, mode, ctx.attributes, ctx.pending, ctx.table_name)

    ctx.attributes = dict(value)
    ctx.pending.update(value)
    return None
