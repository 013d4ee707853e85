# tests/conftest.py

from typing import Iterable, List, Optional

import pytest
from sqlalchemy import create_engine, text

from schemagraph.config.settings import LayoutConfig, Settings
from schemagraph.connectors.sqlite_connector import SQLiteConnector
from schemagraph.graph_engine.models import Column, ForeignKey, SchemaDef, Table


def _table(name: str, *columns: str, pk: Iterable[str] = ("ifc_id",)) -> Table:
    pk_columns = list(pk)
    names = pk_columns + [column for column in columns if column not in pk_columns]
    return Table(
        name=name,
        columns=[Column(name=column, is_primary_key=column in pk_columns) for column in names],
    )


def _schema(tables: List[Table], foreign_keys: Optional[List[ForeignKey]] = None) -> SchemaDef:
    return SchemaDef(tables=tables, foreign_keys=foreign_keys or [])


@pytest.fixture
def make_table():
    """make_table('IfcWall', 'OwnerHistory') -> Table with an ifc_id primary key."""
    return _table


@pytest.fixture
def make_schema():
    return _schema


@pytest.fixture
def wall_schema() -> SchemaDef:
    """Two IFC tables linked only by naming convention."""
    return _schema([
        _table("IfcOwnerHistory"),
        _table("IfcWall", "OwnerHistory"),
    ])


@pytest.fixture
def layout_config() -> LayoutConfig:
    return LayoutConfig()


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'model.db'}"


@pytest.fixture
def ifc_database(sqlite_url) -> str:
    """A small converted model: no declared foreign keys, one AUTOINCREMENT table."""
    engine = create_engine(sqlite_url)
    with engine.begin() as connection:
        connection.execute(text('CREATE TABLE "IfcWall" (ifc_id INTEGER PRIMARY KEY, GlobalId TEXT NOT NULL, OwnerHistory INTEGER, Name TEXT DEFAULT \'wall\')'))
        connection.execute(text('CREATE TABLE "IfcOwnerHistory" (ifc_id INTEGER PRIMARY KEY AUTOINCREMENT, CreationDate INTEGER)'))
    engine.dispose()
    return sqlite_url


@pytest.fixture
def connector(ifc_database):
    with SQLiteConnector(Settings(database_url=ifc_database)) as sqlite_connector:
        yield sqlite_connector
