# schemagraph/graph_engine/orchestrator.py

import logging
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict

from schemagraph.graph_engine.exceptions import LayoutError
from schemagraph.graph_engine.extractor import QueryFn, SchemaExtractor
from schemagraph.graph_engine.inference.inferrer import RelationshipInferrer
from schemagraph.graph_engine.layout.engine import LayoutEngine
from schemagraph.graph_engine.layout_store import LayoutStore
from schemagraph.graph_engine.mapper import to_graph
from schemagraph.graph_engine.models import GraphEdge, GraphNode, LayoutAlgorithm, Position, SchemaDef
from schemagraph.graph_engine.relationship_filter import RelationshipFilter, filter_edges

logger = logging.getLogger(__name__)


class SchemaGraph(BaseModel):
    """A positioned graph plus whatever went wrong while laying it out."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    schema_def: SchemaDef
    nodes: List[GraphNode]
    edges: List[GraphEdge]
    algorithm: LayoutAlgorithm
    from_saved_layout: bool = False
    layout_error: Optional[LayoutError] = None

    @property
    def retryable(self) -> bool:
        """True when the UI should offer a retry action."""
        return self.layout_error is not None


class SchemaGraphOrchestrator:
    """
    Runs the whole workflow:
    Extract -> Infer -> Map -> Layout (or restore) -> Persist.
    Filtering is applied on demand and never triggers a new layout.
    """
    def __init__(self, query_fn: QueryFn, layout_store: LayoutStore,
                 layout_engine: Optional[LayoutEngine] = None, infer_relationships: bool = True):
        self.extractor = SchemaExtractor(query_fn)
        self.inferrer = RelationshipInferrer()
        self.layout_engine = layout_engine or LayoutEngine()
        self.layout_store = layout_store
        self.infer_relationships = infer_relationships

    def load_schema(self) -> SchemaDef:
        """
        Extracts the schema and, if enabled, appends inferred relationships.

        Raises:
            ExtractionError: If introspection fails. Nothing partial is returned.
        """
        schema = self.extractor.extract_schema()
        if self.infer_relationships:
            schema = self.inferrer.enhance(schema)
        return schema

    def build_graph(self, schema: SchemaDef, storage_key: str,
                    algorithm: Union[LayoutAlgorithm, str] = LayoutAlgorithm.HIERARCHICAL,
                    use_saved: bool = True) -> SchemaGraph:
        """
        Maps `schema` to a graph and positions it. A saved layout that covers
        every node is used as-is; otherwise the layout engine runs and the
        complete result is saved back.
        """
        algorithm = LayoutAlgorithm(algorithm)
        nodes, edges = to_graph(schema)

        if use_saved:
            restored = self.layout_store.restore(storage_key, nodes)
            if restored is not None:
                logger.info("Restored saved layout '%s' for %d nodes", storage_key, len(restored))
                return SchemaGraph(schema_def=schema, nodes=restored, edges=edges,
                                   algorithm=algorithm, from_saved_layout=True)

        return self._run_layout(schema, nodes, edges, algorithm, storage_key)

    def relayout(self, graph: SchemaGraph, storage_key: str,
                 algorithm: Union[LayoutAlgorithm, str, None] = None) -> SchemaGraph:
        """Runs a layout again from the current node set, ignoring saved positions."""
        chosen = LayoutAlgorithm(algorithm) if algorithm is not None else graph.algorithm
        return self._run_layout(graph.schema_def, graph.nodes, graph.edges, chosen, storage_key)

    def reset_layout(self, graph: SchemaGraph, storage_key: str,
                     algorithm: Union[LayoutAlgorithm, str, None] = None) -> SchemaGraph:
        """Forgets the saved layout and lays the graph out from scratch."""
        self.layout_store.remove(storage_key)
        return self.relayout(graph, storage_key, algorithm)

    def move_node(self, graph: SchemaGraph, node_id: str, position: Position, storage_key: str) -> SchemaGraph:
        """
        Records a node's settled position after a drag and persists the layout.

        Raises:
            KeyError: If `node_id` is not part of the graph.
        """
        if not any(node.id == node_id for node in graph.nodes):
            raise KeyError(node_id)

        nodes = [
            node.with_position(position.x, position.y) if node.id == node_id else node
            for node in graph.nodes
        ]
        self.layout_store.save(storage_key, nodes)
        return graph.model_copy(update={"nodes": nodes})

    def visible_edges(self, graph: SchemaGraph, relationship_filter: RelationshipFilter) -> List[GraphEdge]:
        return filter_edges(graph.edges, relationship_filter)

    def _run_layout(self, schema: SchemaDef, nodes: List[GraphNode], edges: List[GraphEdge],
                    algorithm: LayoutAlgorithm, storage_key: str) -> SchemaGraph:
        result = self.layout_engine.layout(nodes, edges, algorithm)
        if result.ok:
            self.layout_store.save(storage_key, result.nodes)
        else:
            logger.warning("Keeping previous positions for '%s': %s", storage_key, result.error)
        return SchemaGraph(schema_def=schema, nodes=result.nodes, edges=edges,
                           algorithm=algorithm, layout_error=result.error)
