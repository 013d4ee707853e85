# schemagraph/graph_engine/layout/force.py

import math
from typing import Dict, List

import networkx as nx
import numpy as np
from scipy.spatial import cKDTree

from schemagraph.graph_engine.layout.base import BaseLayout, Coordinates, node_size
from schemagraph.graph_engine.models import GraphEdge, GraphNode, LayoutAlgorithm


class ForceDirectedLayout(BaseLayout):
    """
    Fruchterman-Reingold simulation (edges attract, every pair repels) with a
    fixed seed and iteration cap, followed by a collision pass that separates
    nodes whose bounding circles overlap.
    """
    @property
    def algorithm(self) -> LayoutAlgorithm:
        return LayoutAlgorithm.FORCE

    def compute(self, nodes: List[GraphNode], edges: List[GraphEdge]) -> Coordinates:
        if not nodes:
            return {}

        graph = nx.Graph()
        graph.add_nodes_from(node.id for node in nodes)
        graph.add_edges_from(
            (edge.source, edge.target) for edge in edges
            if edge.source != edge.target and edge.source in graph and edge.target in graph
        )

        scale = self.config.force_scale_per_node * math.sqrt(len(nodes))
        positions = nx.spring_layout(
            graph,
            iterations=self.config.force_iterations,
            seed=self.config.force_seed,
            scale=scale,
            center=(0, 0),
        )
        centers = {node_id: [float(point[0]), float(point[1])] for node_id, point in positions.items()}

        sizes = {node.id: node_size(node, self.config) for node in nodes}
        radii = {
            node_id: math.hypot(width, height) / 2 + self.config.collision_padding / 2
            for node_id, (width, height) in sizes.items()
        }
        self._resolve_collisions([node.id for node in nodes], centers, radii)

        return {
            node_id: (center[0] - sizes[node_id][0] / 2, center[1] - sizes[node_id][1] / 2)
            for node_id, center in centers.items()
        }

    def _resolve_collisions(self, ids: List[str], centers: Dict[str, List[float]], radii: Dict[str, float]):
        """
        Pushes overlapping pairs apart along the line joining their centers.
        Candidate pairs come from a KD-tree, so each pass only visits nodes
        within reach of each other.
        """
        if len(ids) < 2:
            return
        reach = 2 * max(radii[node_id] for node_id in ids)

        for _ in range(self.config.collision_passes):
            points = np.array([centers[node_id] for node_id in ids])
            moved = False
            for i, j in sorted(cKDTree(points).query_pairs(reach)):
                first, second = ids[i], ids[j]
                a, b = centers[first], centers[second]
                dx, dy = b[0] - a[0], b[1] - a[1]
                distance = math.hypot(dx, dy)
                required = radii[first] + radii[second]
                if distance >= required:
                    continue

                if distance < 1e-9:
                    # coincident centers: split along a direction fixed by the pair's index
                    angle = 2 * math.pi * j / len(ids)
                    dx, dy, distance = math.cos(angle), math.sin(angle), 1.0
                    required += 1.0

                push = (required - distance) / 2
                ux, uy = dx / distance, dy / distance
                a[0] -= ux * push
                a[1] -= uy * push
                b[0] += ux * push
                b[1] += uy * push
                moved = True
            if not moved:
                break
