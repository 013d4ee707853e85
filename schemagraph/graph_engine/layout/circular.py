# schemagraph/graph_engine/layout/circular.py

import math
from typing import List

from schemagraph.graph_engine.layout.base import BaseLayout, Coordinates, node_size
from schemagraph.graph_engine.models import GraphEdge, GraphNode, LayoutAlgorithm


class CircularLayout(BaseLayout):
    """Evenly spaced nodes whose centers sit exactly on one circle."""

    @property
    def algorithm(self) -> LayoutAlgorithm:
        return LayoutAlgorithm.CIRCULAR

    def radius(self, node_count: int) -> float:
        config = self.config
        return max(config.circle_min_radius, min(config.circle_max_radius, node_count * config.circle_per_node_radius))

    def compute(self, nodes: List[GraphNode], edges: List[GraphEdge]) -> Coordinates:
        if not nodes:
            return {}

        radius = self.radius(len(nodes))
        step = 2 * math.pi / len(nodes)
        coordinates: Coordinates = {}
        for index, node in enumerate(nodes):
            angle = self.config.circle_start_angle + index * step
            width, height = node_size(node, self.config)
            center_x = self.config.circle_center_x + radius * math.cos(angle)
            center_y = self.config.circle_center_y + radius * math.sin(angle)
            coordinates[node.id] = (center_x - width / 2, center_y - height / 2)
        return coordinates
