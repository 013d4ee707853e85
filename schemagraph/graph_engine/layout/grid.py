# schemagraph/graph_engine/layout/grid.py

import math
from typing import List

from schemagraph.graph_engine.categorizer import category_spacing, group_nodes
from schemagraph.graph_engine.layout.base import BaseLayout, Coordinates, node_size
from schemagraph.graph_engine.models import GraphEdge, GraphNode, LayoutAlgorithm


class GridLayout(BaseLayout):
    """
    One horizontal band per category, in category display order. Each band
    is a near-square grid of its members sorted by id.
    """
    @property
    def algorithm(self) -> LayoutAlgorithm:
        return LayoutAlgorithm.GRID

    def compute(self, nodes: List[GraphNode], edges: List[GraphEdge]) -> Coordinates:
        coordinates: Coordinates = {}
        cursor_y = 0.0

        for group in group_nodes(nodes):
            horizontal, vertical = category_spacing(group.category)
            columns = math.ceil(math.sqrt(len(group.nodes)))

            for row_start in range(0, len(group.nodes), columns):
                row = group.nodes[row_start:row_start + columns]
                for column_index, node in enumerate(row):
                    coordinates[node.id] = (column_index * horizontal, cursor_y)
                # tall tables push the next row down so rows never overlap
                tallest = max(node_size(node, self.config)[1] for node in row)
                cursor_y += max(vertical, tallest + self.config.grid_row_gap)

            cursor_y += self.config.category_gap

        return coordinates
