# schemagraph/graph_engine/inference/stock/suffix_rule.py

import re
from typing import List

from schemagraph.graph_engine.inference.base import BaseInferenceRule, ColumnContext, ENTITY_PREFIX
from schemagraph.graph_engine.models import ForeignKey

ID_SUFFIX = re.compile(r"(_id|Id)$")


def to_entity_name(stem: str) -> str:
    """'building_storey' -> 'IfcBuildingStorey', 'IfcWall' stays 'IfcWall'."""
    pascal = "".join(part[:1].upper() + part[1:] for part in stem.split("_") if part)
    if not pascal or pascal.startswith(ENTITY_PREFIX):
        return pascal
    return ENTITY_PREFIX + pascal


class IdSuffixRule(BaseInferenceRule):
    """
    Columns ending in `_id` or `Id` point at the entity named by the rest of
    the column name, e.g. `Wall_id` or `WallId` -> IfcWall.
    """
    @property
    def name(self) -> str:
        return "IdSuffix"

    def infer(self, context: ColumnContext) -> List[ForeignKey]:
        column_name = context.column.name
        if not ID_SUFFIX.search(column_name):
            return []

        target = to_entity_name(ID_SUFFIX.sub("", column_name))
        if not target:
            return []

        edge = context.reference(target)
        return [edge] if edge else []
