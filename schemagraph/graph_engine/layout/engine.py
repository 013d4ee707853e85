# schemagraph/graph_engine/layout/engine.py

import logging
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from schemagraph.config.settings import LayoutConfig
from schemagraph.graph_engine.exceptions import LayoutError
from schemagraph.graph_engine.layout.base import BaseLayout
from schemagraph.graph_engine.layout.circular import CircularLayout
from schemagraph.graph_engine.layout.force import ForceDirectedLayout
from schemagraph.graph_engine.layout.grid import GridLayout
from schemagraph.graph_engine.layout.hierarchical import HierarchicalLayout
from schemagraph.graph_engine.models import GraphEdge, GraphNode, LayoutAlgorithm

logger = logging.getLogger(__name__)


class LayoutResult(BaseModel):
    """Outcome of one layout run. On failure `nodes` are the untouched input nodes."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    algorithm: LayoutAlgorithm
    nodes: List[GraphNode]
    error: Optional[LayoutError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class LayoutEngine:
    """Dispatches to one of the registered layout algorithms."""

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()
        self._layouts: Dict[LayoutAlgorithm, BaseLayout] = {}
        for layout in (
            HierarchicalLayout(self.config),
            ForceDirectedLayout(self.config),
            CircularLayout(self.config),
            GridLayout(self.config),
        ):
            self._layouts[layout.algorithm] = layout

    def layout(self, nodes: List[GraphNode], edges: List[GraphEdge],
               algorithm: Union[LayoutAlgorithm, str] = LayoutAlgorithm.HIERARCHICAL) -> LayoutResult:
        """
        Computes positions for `nodes` and returns positioned copies.

        Args:
            nodes: Nodes to place. They are never modified.
            edges: Edges between the nodes; edges touching unknown ids are ignored.
            algorithm: One of LayoutAlgorithm or its string value.

        Returns:
            A LayoutResult. If the algorithm fails, the result holds the input
            nodes and a LayoutError instead of raising.

        Raises:
            ValueError: If `algorithm` is not a known algorithm name.
        """
        algorithm = LayoutAlgorithm(algorithm)
        layout = self._layouts[algorithm]

        try:
            coordinates = layout.compute(nodes, edges)
            missing = [node.id for node in nodes if node.id not in coordinates]
            if missing:
                raise LayoutError(algorithm.value, f"no position returned for {missing[:5]}")
        except LayoutError as e:
            logger.error("%s", e)
            return LayoutResult(algorithm=algorithm, nodes=list(nodes), error=e)
        except Exception as e:
            logger.exception("%s layout failed", algorithm.value)
            return LayoutResult(algorithm=algorithm, nodes=list(nodes), error=LayoutError(algorithm.value, str(e)))

        positioned = [node.with_position(*coordinates[node.id]) for node in nodes]
        logger.info("Applied %s layout to %d nodes", algorithm.value, len(positioned))
        return LayoutResult(algorithm=algorithm, nodes=positioned)
