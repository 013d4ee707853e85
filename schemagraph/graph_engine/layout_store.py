# schemagraph/graph_engine/layout_store.py

import json
import logging
import re
from typing import Dict, List, Optional

from schemagraph.graph_engine.models import GraphNode, Position
from schemagraph.storage.base import KeyValueBackend

logger = logging.getLogger(__name__)

STORAGE_PREFIX = "ifc-schema-layout"
UNSAFE_KEY_CHARS = re.compile(r"[^a-z0-9]+")

LayoutRecord = Dict[str, Position]


def create_storage_key(schema_name: Optional[str], file_name: Optional[str] = None) -> str:
    """
    'IFC Schema', 'My House.ifc' -> 'ifc-schema-layout::ifc-schema::my-house-ifc'.
    """
    safe_schema = UNSAFE_KEY_CHARS.sub("-", schema_name.lower()) if schema_name else "schema"
    safe_file = UNSAFE_KEY_CHARS.sub("-", file_name.lower()) if file_name else "model"
    return f"{STORAGE_PREFIX}::{safe_schema}::{safe_file}"


def _parse_position(raw) -> Optional[Position]:
    if not isinstance(raw, dict):
        return None
    x, y = raw.get("x"), raw.get("y")
    # bool is an int subclass but never a coordinate
    if isinstance(x, bool) or isinstance(y, bool):
        return None
    if not isinstance(x, (int, float)) or not isinstance(y, (int, float)):
        return None
    return Position(x=x, y=y)


class LayoutStore:
    """
    Saves and restores node coordinates per schema/file key. Storage failures
    never reach the caller: a failed read is "no saved layout" and a failed
    write is logged and dropped.
    """
    def __init__(self, backend: KeyValueBackend):
        self.backend = backend

    def save(self, key: str, nodes: List[GraphNode]) -> None:
        payload = [
            {"id": node.id, "position": {"x": node.position.x, "y": node.position.y}}
            for node in nodes
        ]
        try:
            self.backend.set(key, json.dumps(payload))
            logger.debug("Saved layout '%s' with %d nodes", key, len(payload))
        except Exception as e:
            logger.warning("Failed to persist layout '%s': %s", key, e)

    def load(self, key: str) -> Optional[LayoutRecord]:
        """
        Returns the saved id -> position map, or None when nothing usable is
        stored. Malformed entries are skipped.
        """
        try:
            raw = self.backend.get(key)
        except Exception as e:
            logger.warning("Failed to read stored layout '%s': %s", key, e)
            return None
        if not raw:
            return None

        try:
            parsed = json.loads(raw)
        except ValueError as e:
            logger.warning("Stored layout '%s' is not valid JSON: %s", key, e)
            return None

        record: LayoutRecord = {}
        if isinstance(parsed, list):
            for entry in parsed:
                if not isinstance(entry, dict) or not isinstance(entry.get("id"), str):
                    continue
                position = _parse_position(entry.get("position"))
                if position is not None:
                    record[entry["id"]] = position
        elif isinstance(parsed, dict):
            # older {id: {x, y}} records
            for node_id, raw_position in parsed.items():
                position = _parse_position(raw_position)
                if position is not None:
                    record[node_id] = position
        else:
            logger.warning("Stored layout '%s' has an unexpected shape; ignoring it", key)
            return None
        return record

    def remove(self, key: str) -> None:
        try:
            self.backend.remove(key)
        except Exception as e:
            logger.warning("Failed to clear stored layout '%s': %s", key, e)

    def restore(self, key: str, nodes: List[GraphNode]) -> Optional[List[GraphNode]]:
        """
        Returns copies of `nodes` at their saved positions, or None when the
        saved record does not cover every node (the caller should run a layout).
        """
        record = self.load(key)
        if record is None:
            return None

        missing = [node.id for node in nodes if node.id not in record]
        if missing:
            logger.info("Stored layout '%s' is missing %d nodes; discarding it", key, len(missing))
            return None
        return [node.with_position(record[node.id].x, record[node.id].y) for node in nodes]
