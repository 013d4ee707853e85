# tests/test_mapper.py

from schemagraph.graph_engine.mapper import sanitize, to_graph
from schemagraph.graph_engine.models import EntityCategory, ForeignKey, Position


def fk(from_table, from_column, to_table, to_column="ifc_id"):
    return ForeignKey(from_table=from_table, from_column=from_column, to_table=to_table, to_column=to_column)


def test_one_unpositioned_node_per_table(wall_schema):
    nodes, edges = to_graph(wall_schema)

    assert [node.id for node in nodes] == ["IfcOwnerHistory", "IfcWall"]
    assert [node.category for node in nodes] == [EntityCategory.CORE, EntityCategory.ELEMENTS]
    assert all(node.position == Position(x=0, y=0) for node in nodes)
    assert nodes[1].table is wall_schema.tables[1]
    assert edges == []


def test_edge_ids_anchors_and_label(make_schema, make_table, wall_schema):
    schema = make_schema(list(wall_schema.tables), [fk("IfcWall", "OwnerHistory", "IfcOwnerHistory")])

    _, (edge,) = to_graph(schema)

    assert edge.id == "fk-IfcWall-OwnerHistory-IfcOwnerHistory-ifc_id-0"
    assert (edge.source, edge.target) == ("IfcWall", "IfcOwnerHistory")
    assert edge.source_anchor == "out-IfcWall-OwnerHistory"
    assert edge.target_anchor == "in-IfcOwnerHistory-ifc_id"
    assert edge.label == "OwnerHistory → ifc_id"
    assert edge.foreign_key == schema.foreign_keys[0]


def test_anchors_are_sanitized(make_schema, make_table):
    schema = make_schema(
        [make_table("my table", "owner-id"), make_table("other.t")],
        [fk("my table", "owner-id", "other.t", "ifc id")],
    )

    _, (edge,) = to_graph(schema)

    assert edge.source_anchor == "out-my_table-owner_id"
    assert edge.target_anchor == "in-other_t-ifc_id"
    assert sanitize("a-b c.d_é9") == "a_b_c_d__9"


def test_duplicate_tuples_collapse_but_distinct_columns_stay(make_schema, wall_schema):
    schema = make_schema(list(wall_schema.tables), [
        fk("IfcWall", "OwnerHistory", "IfcOwnerHistory"),
        fk("IfcWall", "OwnerHistory", "IfcOwnerHistory"),
        fk("IfcWall", "ifc_id", "IfcOwnerHistory"),
    ])

    _, edges = to_graph(schema)

    assert [edge.id for edge in edges] == [
        "fk-IfcWall-OwnerHistory-IfcOwnerHistory-ifc_id-0",
        "fk-IfcWall-ifc_id-IfcOwnerHistory-ifc_id-1",
    ]
    assert len({edge.id for edge in edges}) == len(edges)
