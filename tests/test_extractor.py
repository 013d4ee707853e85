# tests/test_extractor.py

import pytest
from sqlalchemy import create_engine, text

from schemagraph.config.settings import Settings
from schemagraph.connectors.sqlite_connector import SQLiteConnector
from schemagraph.graph_engine.exceptions import ExtractionError
from schemagraph.graph_engine.extractor import SchemaExtractor
from schemagraph.graph_engine.models import ForeignKey


def test_lists_tables_by_name_and_skips_internal_tables(connector):
    schema = SchemaExtractor(connector.execute_query).extract_schema()

    assert [table.name for table in schema.tables] == ["IfcOwnerHistory", "IfcWall"]
    assert schema.foreign_keys == []


def test_reads_column_metadata_in_database_order(connector):
    schema = SchemaExtractor(connector.execute_query).extract_schema()
    wall = schema.get_table("IfcWall")

    assert [column.name for column in wall.columns] == ["ifc_id", "GlobalId", "OwnerHistory", "Name"]
    ifc_id, global_id, _, name = wall.columns
    assert ifc_id.is_primary_key and ifc_id.type == "INTEGER"
    assert global_id.not_null and not global_id.is_primary_key
    assert name.default_value == "'wall'"
    assert global_id.default_value is None


def test_composite_keys_untyped_columns_and_declared_foreign_keys(sqlite_url):
    engine = create_engine(sqlite_url)
    with engine.begin() as connection:
        connection.execute(text("CREATE TABLE parent (a INTEGER, b INTEGER, PRIMARY KEY (a, b))"))
        connection.execute(text(
            "CREATE TABLE child (id INTEGER PRIMARY KEY, pa INTEGER, pb INTEGER, note, "
            "owner INTEGER REFERENCES parent, "
            "FOREIGN KEY (pa, pb) REFERENCES parent (a, b))"
        ))
    engine.dispose()

    with SQLiteConnector(Settings(database_url=sqlite_url)) as connector:
        schema = SchemaExtractor(connector.execute_query).extract_schema()

    parent = schema.get_table("parent")
    assert [column.name for column in parent.primary_key_columns()] == ["a", "b"]

    child = schema.get_table("child")
    assert next(column for column in child.columns if column.name == "note").type == "TEXT"

    # `owner` references the parent without naming a column, so it has no target column
    assert schema.foreign_keys == [
        ForeignKey(from_table="child", from_column="pa", to_table="parent", to_column="a"),
        ForeignKey(from_table="child", from_column="pb", to_table="parent", to_column="b"),
    ]


def test_skips_malformed_foreign_key_rows():
    def query_fn(sql):
        if sql.startswith("SELECT name FROM sqlite_master"):
            return [{"name": "IfcWall"}]
        if sql.startswith("PRAGMA table_info"):
            return [{"name": "ifc_id", "type": "INTEGER", "notnull": 1, "pk": 1, "dflt_value": None}]
        return [
            {"from": "ifc_id", "table": "IfcSite", "to": "ifc_id"},
            {"from": None, "table": "IfcSite", "to": "ifc_id"},
            {"from": "ifc_id", "table": "", "to": "ifc_id"},
            {"from": "ifc_id", "table": "IfcSite", "to": None},
        ]

    schema = SchemaExtractor(query_fn).extract_schema()

    assert len(schema.foreign_keys) == 1
    assert schema.foreign_keys[0].to_table == "IfcSite"


def test_query_failure_aborts_extraction():
    def query_fn(sql):
        if sql.startswith("PRAGMA foreign_key_list"):
            raise RuntimeError("database is locked")
        if sql.startswith("SELECT"):
            return [{"name": "IfcWall"}]
        return []

    with pytest.raises(ExtractionError, match="database is locked") as excinfo:
        SchemaExtractor(query_fn).extract_schema()
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_table_row_without_name_is_an_extraction_error():
    with pytest.raises(ExtractionError):
        SchemaExtractor(lambda sql: [{"tbl": "IfcWall"}]).extract_schema()


def test_table_names_are_quoted_in_pragmas():
    seen = []

    def query_fn(sql):
        seen.append(sql)
        return [{"name": 'odd "name'}] if sql.startswith("SELECT") else []

    SchemaExtractor(query_fn).extract_schema()

    assert 'PRAGMA table_info("odd ""name")' in seen


def test_accepts_sqlalchemy_row_mappings(ifc_database):
    engine = create_engine(ifc_database)
    with engine.connect() as connection:
        schema = SchemaExtractor(lambda sql: connection.execute(text(sql)).mappings().all()).extract_schema()
    engine.dispose()

    assert [table.name for table in schema.tables] == ["IfcOwnerHistory", "IfcWall"]
    assert [column.name for column in schema.get_table("IfcWall").columns] == [
        "ifc_id", "GlobalId", "OwnerHistory", "Name",
    ]
