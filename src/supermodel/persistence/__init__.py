"""Persistence layer - database adapters and operations."""

from supermodel.persistence.adapter import PersistenceAdapter
from supermodel.persistence.config import DatabaseConfig, create_adapter
from supermodel.persistence.naming import IdentityNaming, SnakeCaseNaming, get_naming
from supermodel.persistence.sql import SQLAlchemyAdapter

__all__ = [
    "DatabaseConfig",
    "IdentityNaming",
    "PersistenceAdapter",
    "SQLAlchemyAdapter",
    "SnakeCaseNaming",
    "create_adapter",
    "get_naming",
]
