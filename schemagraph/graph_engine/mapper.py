# schemagraph/graph_engine/mapper.py

import logging
import re
from typing import List, Set, Tuple

from schemagraph.graph_engine.categorizer import categorize
from schemagraph.graph_engine.models import ForeignKey, GraphEdge, GraphNode, Position, SchemaDef

logger = logging.getLogger(__name__)

UNSAFE_ANCHOR_CHARS = re.compile(r"[^A-Za-z0-9_]")


def sanitize(value: str) -> str:
    return UNSAFE_ANCHOR_CHARS.sub("_", value)


def source_anchor(table: str, column: str) -> str:
    return f"out-{sanitize(table)}-{sanitize(column)}"


def target_anchor(table: str, column: str) -> str:
    return f"in-{sanitize(table)}-{sanitize(column)}"


def edge_id(fk: ForeignKey, ordinal: int) -> str:
    return f"fk-{fk.from_table}-{fk.from_column}-{fk.to_table}-{fk.to_column}-{ordinal}"


def to_graph(schema: SchemaDef) -> Tuple[List[GraphNode], List[GraphEdge]]:
    """
    Converts a schema into unpositioned nodes and anchored edges.

    Repeated (from_table, from_column, to_table, to_column) tuples collapse
    into the first occurrence; edges differing only by column stay distinct.
    """
    nodes = [
        GraphNode(id=table.name, category=categorize(table.name), table=table, position=Position())
        for table in schema.tables
    ]

    edges: List[GraphEdge] = []
    seen: Set[Tuple[str, str, str, str]] = set()
    for fk in schema.foreign_keys:
        key = fk.as_tuple()
        if key in seen:
            continue
        seen.add(key)
        edges.append(GraphEdge(
            id=edge_id(fk, len(edges)),
            source=fk.from_table,
            target=fk.to_table,
            source_anchor=source_anchor(fk.from_table, fk.from_column),
            target_anchor=target_anchor(fk.to_table, fk.to_column),
            label=f"{fk.from_column} → {fk.to_column}",
            foreign_key=fk,
        ))

    skipped = len(schema.foreign_keys) - len(edges)
    logger.info(
        "Mapped %d tables to nodes and %d foreign keys to edges (%d duplicates dropped)",
        len(nodes), len(edges), skipped,
    )
    return nodes, edges
