"""Supermodel: schema-validated models with secure passwords and CRUD helpers."""

from supermodel.core.types import UNSET
from supermodel.errors import (
    ConfigurationError,
    NoRowsDeletedError,
    NoRowsUpdatedError,
    NotFoundError,
    PasswordMismatch,
    PersistenceError,
    SaveAbortedError,
    SchemaValidationError,
    SupermodelError,
)
from supermodel.hooks import InterceptResult, PersistContext, SaveMethod, SaveOptions
from supermodel.model import Model, WriteOnlyField
from supermodel.schema import Field, Schema, load_schema, relax
from supermodel.supermodel import Supermodel, make_supermodel

__version__ = "0.4.0"

__all__ = [
    "ConfigurationError",
    "Field",
    "InterceptResult",
    "Model",
    "NoRowsDeletedError",
    "NoRowsUpdatedError",
    "NotFoundError",
    "PasswordMismatch",
    "PersistContext",
    "PersistenceError",
    "SaveAbortedError",
    "SaveMethod",
    "SaveOptions",
    "Schema",
    "SchemaValidationError",
    "Supermodel",
    "SupermodelError",
    "UNSET",
    "WriteOnlyField",
    "load_schema",
    "make_supermodel",
    "relax",
]
