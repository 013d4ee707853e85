# schemagraph/graph_engine/inference/stock/spatial_rule.py

from typing import List

from schemagraph.graph_engine.inference.base import BaseInferenceRule, ColumnContext
from schemagraph.graph_engine.models import ForeignKey

SPATIAL_KEYWORDS = ("Spatial", "Structure", "Space")

# Tried in order; the first one present in the schema wins.
SPATIAL_CONTAINERS = ("IfcSpace", "IfcBuilding", "IfcBuildingStorey", "IfcSite")


class SpatialContainerRule(BaseInferenceRule):
    """
    Columns mentioning a spatial concept point at the most specific spatial
    container available. Emits at most one edge per column.
    """
    @property
    def name(self) -> str:
        return "SpatialContainer"

    def infer(self, context: ColumnContext) -> List[ForeignKey]:
        if not any(keyword in context.column.name for keyword in SPATIAL_KEYWORDS):
            return []

        for container in SPATIAL_CONTAINERS:
            edge = context.reference(container)
            if edge:
                return [edge]
        return []
