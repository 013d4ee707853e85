# schemagraph/graph_engine/layout/hierarchical.py

import logging
from collections import defaultdict
from typing import Dict, List, Set

import networkx as nx

from schemagraph.graph_engine.categorizer import CATEGORY_RANK
from schemagraph.graph_engine.layout.base import BaseLayout, Coordinates, node_size
from schemagraph.graph_engine.models import GraphEdge, GraphNode, LayoutAlgorithm

logger = logging.getLogger(__name__)


class HierarchicalLayout(BaseLayout):
    """
    Layered left-to-right drawing. Layers come from the longest path from a
    source; reference cycles are collapsed first so every table lands in
    exactly one layer. Inside a layer, nodes are grouped by category and
    ordered by barycenter sweeps to cut edge crossings.
    """
    @property
    def algorithm(self) -> LayoutAlgorithm:
        return LayoutAlgorithm.HIERARCHICAL

    def compute(self, nodes: List[GraphNode], edges: List[GraphEdge]) -> Coordinates:
        if not nodes:
            return {}

        graph = self._build_graph(nodes, edges)
        layers = self._assign_layers(graph, nodes)
        categories = {node.id: CATEGORY_RANK[node.category] for node in nodes}
        ordered = self._order_layers(layers, graph, categories)
        return self._place(ordered, {node.id: node for node in nodes})

    def _build_graph(self, nodes: List[GraphNode], edges: List[GraphEdge]) -> nx.DiGraph:
        graph = nx.DiGraph()
        graph.add_nodes_from(node.id for node in nodes)
        for edge in edges:
            if edge.source == edge.target:
                continue
            if edge.source in graph and edge.target in graph:
                graph.add_edge(edge.source, edge.target)
        return graph

    def _assign_layers(self, graph: nx.DiGraph, nodes: List[GraphNode]) -> List[List[str]]:
        """Longest-path layering over the condensation (a DAG of cycles)."""
        condensed = nx.condensation(graph)
        mapping = condensed.graph["mapping"]

        depth: Dict[int, int] = {}
        for component in nx.topological_sort(condensed):
            depth[component] = max((depth[pred] + 1 for pred in condensed.predecessors(component)), default=0)

        layers: Dict[int, List[str]] = defaultdict(list)
        for node in nodes:
            layers[depth[mapping[node.id]]].append(node.id)
        logger.debug("Hierarchical layout: %d nodes in %d layers", len(nodes), len(layers))
        return [layers[index] for index in sorted(layers)]

    def _order_layers(self, layers: List[List[str]], graph: nx.DiGraph, categories: Dict[str, int]) -> List[List[str]]:
        ordered = [sorted(layer, key=lambda node_id: (categories[node_id], node_id)) for layer in layers]
        neighbours: Dict[str, Set[str]] = {
            node_id: set(graph.predecessors(node_id)) | set(graph.successors(node_id)) for node_id in graph
        }

        for sweep in range(self.config.barycenter_sweeps):
            # even sweeps go left-to-right, odd sweeps right-to-left
            indices = range(1, len(ordered)) if sweep % 2 == 0 else range(len(ordered) - 2, -1, -1)
            for index in indices:
                reference = ordered[index - 1] if sweep % 2 == 0 else ordered[index + 1]
                ordered[index] = self._barycenter_sort(ordered[index], reference, neighbours, categories)
        return ordered

    def _barycenter_sort(self, layer: List[str], reference: List[str],
                         neighbours: Dict[str, Set[str]], categories: Dict[str, int]) -> List[str]:
        reference_index = {node_id: position for position, node_id in enumerate(reference)}

        def key(item):
            position, node_id = item
            linked = [reference_index[other] for other in neighbours[node_id] if other in reference_index]
            barycenter = sum(linked) / len(linked) if linked else float(position)
            return (categories[node_id], barycenter, node_id)

        return [node_id for _, node_id in sorted(enumerate(layer), key=key)]

    def _place(self, layers: List[List[str]], by_id: Dict[str, GraphNode]) -> Coordinates:
        config = self.config
        coordinates: Coordinates = {}
        for layer_index, layer in enumerate(layers):
            x = layer_index * (config.node_width + config.layer_spacing)
            y = 0.0
            for node_id in layer:
                coordinates[node_id] = (x, y)
                y += node_size(by_id[node_id], config)[1] + config.node_spacing
        return coordinates
