"""Shared fixtures: SQLite databases built in tmp_path."""

import pytest
from sqlalchemy import Column, DateTime, Integer, MetaData, String, Table, create_engine

from supermodel import Field, make_supermodel
from supermodel.persistence import SQLAlchemyAdapter


def _build_tables(url: str) -> None:
    metadata = MetaData()
    Table(
        "crud_table",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("first_name", String(255), nullable=False),
        Column("last_name", String(255)),
        Column("created_at", DateTime),
        Column("updated_at", DateTime),
    )
    Table(
        "secured_password_table",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("password_digest", String(255), nullable=True),
        Column("custom_column", String(255), nullable=True),
        Column("created_at", DateTime),
        Column("updated_at", DateTime),
    )
    engine = create_engine(url)
    metadata.create_all(engine)
    engine.dispose()


@pytest.fixture
def database_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'supermodel.db'}"
    _build_tables(url)
    return url


@pytest.fixture
def adapter(database_url):
    adapter = SQLAlchemyAdapter(database_url)
    adapter.connect()
    yield adapter
    adapter.close()


@pytest.fixture
def Base(adapter):
    return make_supermodel(adapter)


@pytest.fixture
def Specimen(Base):
    """Model with a required one-of first name and a nullable last name."""

    class Specimen(Base):
        table_name = "crud_table"
        validate = {
            "firstName": Field("string", required=True, choices=("hello", "goodbye", "yo")),
            "lastName": Field("string", nullable=True),
        }

    return Specimen
