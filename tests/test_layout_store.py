# tests/test_layout_store.py

import json
from unittest.mock import MagicMock

import pytest
from neo4j.exceptions import ServiceUnavailable

from schemagraph.config.settings import Settings
from schemagraph.graph_engine.exceptions import PersistenceError
from schemagraph.graph_engine.layout_store import LayoutStore, create_storage_key
from schemagraph.graph_engine.mapper import to_graph
from schemagraph.graph_engine.models import Position
from schemagraph.storage import neo4j_backend
from schemagraph.storage.base import KeyValueBackend
from schemagraph.storage.factory import create_backend
from schemagraph.storage.file_backend import JsonFileBackend
from schemagraph.storage.memory_backend import MemoryBackend
from schemagraph.storage.neo4j_backend import Neo4jBackend

KEY = "ifc-schema-layout::ifc::model"


class BrokenBackend(KeyValueBackend):
    def get(self, key):
        raise PersistenceError("disk unplugged")

    def set(self, key, value):
        raise PersistenceError("disk unplugged")

    def remove(self, key):
        raise PersistenceError("disk unplugged")


@pytest.fixture
def positioned_nodes(wall_schema):
    nodes, _ = to_graph(wall_schema)
    return [nodes[0].with_position(10, 20.5), nodes[1].with_position(-300, 0)]


@pytest.mark.parametrize("schema_name, file_name, expected", [
    ("IFC4", "My House.ifc", "ifc-schema-layout::ifc4::my-house-ifc"),
    ("ifc", None, "ifc-schema-layout::ifc::model"),
    (None, "a__b", "ifc-schema-layout::schema::a-b"),
    ("", "", "ifc-schema-layout::schema::model"),
    ("Ifc--Schema", "Ünïcode.ifc", "ifc-schema-layout::ifc-schema::-n-code-ifc"),
])
def test_storage_key(schema_name, file_name, expected):
    assert create_storage_key(schema_name, file_name) == expected


def test_save_then_load_returns_the_same_positions(positioned_nodes):
    store = LayoutStore(MemoryBackend())

    store.save(KEY, positioned_nodes)

    assert store.load(KEY) == {
        "IfcOwnerHistory": Position(x=10, y=20.5),
        "IfcWall": Position(x=-300, y=0),
    }


def test_saved_record_is_a_list_of_ids_and_positions(positioned_nodes):
    backend = MemoryBackend()

    LayoutStore(backend).save(KEY, positioned_nodes)

    assert json.loads(backend.get(KEY)) == [
        {"id": "IfcOwnerHistory", "position": {"x": 10.0, "y": 20.5}},
        {"id": "IfcWall", "position": {"x": -300.0, "y": 0.0}},
    ]


@pytest.mark.parametrize("raw", [None, "", "{not json", "42", '"text"'])
def test_missing_or_unusable_records_load_as_none(raw):
    backend = MemoryBackend()
    if raw is not None:
        backend.set(KEY, raw)

    assert LayoutStore(backend).load(KEY) is None


def test_malformed_entries_are_skipped():
    backend = MemoryBackend()
    backend.set(KEY, json.dumps([
        {"id": "IfcWall", "position": {"x": 1, "y": 2}},
        {"id": "IfcSlab", "position": {"x": "1", "y": 2}},
        {"id": "IfcRoof", "position": {"x": True, "y": 2}},
        {"id": 7, "position": {"x": 1, "y": 2}},
        {"position": {"x": 1, "y": 2}},
        {"id": "IfcDoor"},
        "IfcWindow",
    ]))

    assert LayoutStore(backend).load(KEY) == {"IfcWall": Position(x=1, y=2)}


def test_older_mapping_records_are_still_readable():
    backend = MemoryBackend()
    backend.set(KEY, json.dumps({"IfcWall": {"x": 5, "y": 6}, "IfcSlab": None}))

    assert LayoutStore(backend).load(KEY) == {"IfcWall": Position(x=5, y=6)}


def test_restore_applies_a_complete_record(wall_schema, positioned_nodes):
    store = LayoutStore(MemoryBackend())
    store.save(KEY, positioned_nodes)
    fresh, _ = to_graph(wall_schema)

    restored = store.restore(KEY, fresh)

    assert [node.position for node in restored] == [node.position for node in positioned_nodes]
    assert all(node.position == Position() for node in fresh)


def test_restore_rejects_a_record_missing_any_node(make_schema, make_table, wall_schema, positioned_nodes):
    store = LayoutStore(MemoryBackend())
    store.save(KEY, positioned_nodes)
    grown, _ = to_graph(make_schema(list(wall_schema.tables) + [make_table("IfcSlab")]))

    assert store.restore(KEY, grown) is None


def test_remove_clears_the_record(positioned_nodes):
    store = LayoutStore(MemoryBackend())
    store.save(KEY, positioned_nodes)

    store.remove(KEY)
    store.remove(KEY)

    assert store.load(KEY) is None


def test_backend_failures_never_reach_the_caller(positioned_nodes, caplog):
    store = LayoutStore(BrokenBackend())

    store.save(KEY, positioned_nodes)
    store.remove(KEY)

    assert store.load(KEY) is None
    assert store.restore(KEY, positioned_nodes) is None
    assert "disk unplugged" in caplog.text


# --- Backends ---

def test_file_backend_round_trip(tmp_path):
    backend = JsonFileBackend(tmp_path / "layouts")

    assert backend.get(KEY) is None
    backend.set(KEY, "[]")
    backend.set(KEY, '[{"id": "IfcWall"}]')

    assert backend.get(KEY) == '[{"id": "IfcWall"}]'
    assert [path.name for path in (tmp_path / "layouts").iterdir()] == ["ifc-schema-layout__ifc__model.json"]

    backend.remove(KEY)
    backend.remove(KEY)
    assert backend.get(KEY) is None


def test_file_backend_wraps_os_errors(tmp_path):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("")

    with pytest.raises(PersistenceError):
        JsonFileBackend(blocker).set(KEY, "[]")


@pytest.fixture
def neo4j_session():
    driver = MagicMock()
    session = MagicMock()
    driver.session.return_value.__enter__.return_value = session
    return driver, session


@pytest.fixture
def neo4j_settings():
    return Settings(layout_backend="neo4j", neo4j_uri="bolt://cache:7687", neo4j_user="neo4j", neo4j_password="secret")


def test_neo4j_backend_reads_the_payload(neo4j_session):
    driver, session = neo4j_session
    session.run.return_value = [{"payload": "[]"}]

    assert Neo4jBackend(driver).get(KEY) == "[]"
    assert session.run.call_args.kwargs == {"key": KEY}


def test_neo4j_backend_missing_key(neo4j_session):
    driver, session = neo4j_session
    session.run.return_value = []

    assert Neo4jBackend(driver).get(KEY) is None


def test_neo4j_backend_writes_with_merge(neo4j_session):
    driver, session = neo4j_session

    Neo4jBackend(driver).set(KEY, "[]")

    query = session.run.call_args.args[0]
    assert "MERGE (l:SavedLayout {key: $key})" in query
    assert session.run.call_args.kwargs == {"key": KEY, "payload": "[]"}


def test_neo4j_backend_wraps_driver_errors():
    driver = MagicMock()
    driver.session.side_effect = ServiceUnavailable("cache is down")

    with pytest.raises(PersistenceError, match="cache is down"):
        Neo4jBackend(driver).remove(KEY)


def test_neo4j_backend_requires_credentials():
    with pytest.raises(ValueError):
        Neo4jBackend.from_settings(Settings(layout_backend="neo4j", neo4j_uri=None, neo4j_user=None, neo4j_password=None))


def test_neo4j_backend_closes_a_driver_that_cannot_connect(neo4j_settings, monkeypatch):
    driver = MagicMock()
    driver.verify_connectivity.side_effect = ServiceUnavailable("connection refused")
    monkeypatch.setattr(neo4j_backend.GraphDatabase, "driver", MagicMock(return_value=driver))

    with pytest.raises(PersistenceError, match="connection refused"):
        Neo4jBackend.from_settings(neo4j_settings)
    driver.close.assert_called_once()


def test_factory_backend_closes_its_driver_on_exit(neo4j_settings, monkeypatch):
    driver = MagicMock()
    factory = MagicMock(return_value=driver)
    monkeypatch.setattr(neo4j_backend.GraphDatabase, "driver", factory)

    with create_backend(neo4j_settings) as backend:
        assert isinstance(backend, Neo4jBackend)
        driver.close.assert_not_called()

    factory.assert_called_once_with("bolt://cache:7687", auth=("neo4j", "secret"))
    driver.close.assert_called_once()


def test_local_backends_support_with_blocks(tmp_path):
    with JsonFileBackend(tmp_path) as backend:
        backend.set(KEY, "[]")
    with MemoryBackend() as backend:
        assert backend.get(KEY) is None
