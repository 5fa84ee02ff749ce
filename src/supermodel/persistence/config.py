"""Database configuration and adapter factory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from supermodel.persistence.adapter import PersistenceAdapter


@dataclass
class DatabaseConfig:
    """Database connection configuration.

    Supports sqlite:/// and postgresql:// URL schemes.
    """

    url: str
    naming: str = "snake"

    @classmethod
    def from_env(cls) -> DatabaseConfig:
        """Create config from environment variables.

        URL resolution order:
        1. SUPERMODEL_DATABASE_URL env var
        2. DATABASE_URL env var (standard)
        3. Default: sqlite:///supermodel.db

        Column naming comes from SUPERMODEL_COLUMN_NAMING ("snake" or
        "identity", default "snake").
        """
        url = (
            os.environ.get("SUPERMODEL_DATABASE_URL")
            or os.environ.get("DATABASE_URL")
            or "sqlite:///supermodel.db"
        )
        naming = os.environ.get("SUPERMODEL_COLUMN_NAMING", "snake")
        return cls(url=url, naming=naming)

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_postgresql(self) -> bool:
        return self.url.startswith("postgresql")

    @property
    def sqlalchemy_url(self) -> str:
        """URL suitable for SQLAlchemy engine creation.

        Ensures postgresql:// URLs use the psycopg (v3) driver, which is what
        the postgresql extra installs, not psycopg2.
        """
        if self.url.startswith("postgresql://"):
            return self.url.replace("postgresql://", "postgresql+psycopg://", 1)
        return self.url


def create_adapter(config: DatabaseConfig) -> PersistenceAdapter:
    """Create a persistence adapter based on the database URL scheme.

    Args:
        config: Database configuration with URL.

    Returns:
        A PersistenceAdapter instance (not yet connected).

    Raises:
        ValueError: For unsupported URL schemes or naming conventions.
    """
    from supermodel.persistence.naming import get_naming
    from supermodel.persistence.sql import SQLAlchemyAdapter

    if not (config.is_sqlite or config.is_postgresql):
        raise ValueError(f"Unsupported database URL scheme: {config.url}")

    return SQLAlchemyAdapter(config.sqlalchemy_url, naming=get_naming(config.naming))
