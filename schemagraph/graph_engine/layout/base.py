# schemagraph/graph_engine/layout/base.py

from abc import ABC, abstractmethod
from typing import Dict, List, Tuple

from schemagraph.config.settings import LayoutConfig
from schemagraph.graph_engine.models import GraphEdge, GraphNode, LayoutAlgorithm

# node id -> top-left corner
Coordinates = Dict[str, Tuple[float, float]]


def node_size(node: GraphNode, config: LayoutConfig) -> Tuple[float, float]:
    """Width is fixed; height grows with the number of column rows."""
    height = config.header_height + len(node.table.columns) * config.row_height
    return config.node_width, height


class BaseLayout(ABC):
    """
    Abstract base class for the layout algorithms. Implementations return
    coordinates only; the engine copies them onto new nodes.
    """
    def __init__(self, config: LayoutConfig):
        self.config = config

    @property
    @abstractmethod
    def algorithm(self) -> LayoutAlgorithm:
        pass

    @abstractmethod
    def compute(self, nodes: List[GraphNode], edges: List[GraphEdge]) -> Coordinates:
        """Returns a top-left coordinate for every node id in `nodes`."""
        pass
