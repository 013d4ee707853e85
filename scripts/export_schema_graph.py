# scripts/export_schema_graph.py

import argparse
import json
import logging
import sys

from schemagraph.config.logging_config import setup_logging
from schemagraph.config.settings import settings
from schemagraph.connectors.sqlite_connector import SQLiteConnector
from schemagraph.graph_engine.exceptions import ExtractionError, PersistenceError
from schemagraph.graph_engine.layout.engine import LayoutEngine
from schemagraph.graph_engine.layout_store import LayoutStore, create_storage_key
from schemagraph.graph_engine.models import LayoutAlgorithm
from schemagraph.graph_engine.orchestrator import SchemaGraphOrchestrator
from schemagraph.graph_engine.overlay import render_payload
from schemagraph.graph_engine.relationship_filter import RelationshipFilter, filter_summary
from schemagraph.storage.factory import create_backend

logger = logging.getLogger("export_schema_graph")


def main() -> int:
    parser = argparse.ArgumentParser(description="Extract, lay out and export a schema graph as JSON")
    parser.add_argument("--database-url", default=settings.database_url)
    parser.add_argument("--file-name", default=None, help="Source model file; part of the saved-layout key")
    parser.add_argument("--layout", choices=[algorithm.value for algorithm in LayoutAlgorithm],
                        default=LayoutAlgorithm.HIERARCHICAL.value)
    parser.add_argument("--reset-layout", action="store_true", help="Ignore and replace any saved layout")
    parser.add_argument("--no-inference", action="store_true", help="Only draw declared foreign keys")
    parser.add_argument("--hide", action="append", default=[],
                        choices=["show_owner_history", "show_spatial", "show_properties",
                                 "show_types", "show_materials", "show_classifications"],
                        help="Relationship category to hide (repeatable)")
    parser.add_argument("--output", default="-", help="Output path, '-' for stdout")
    args = parser.parse_args()

    setup_logging(settings.log_level)

    run_settings = settings.model_copy(update={"database_url": args.database_url})
    storage_key = create_storage_key(settings.schema_name, args.file_name)
    try:
        backend = create_backend(run_settings)
    except PersistenceError as e:
        logger.error("Layout storage is unavailable: %s", e)
        return 1

    with backend, SQLiteConnector(run_settings) as connector:
        orchestrator = SchemaGraphOrchestrator(
            query_fn=connector.execute_query,
            layout_store=LayoutStore(backend),
            layout_engine=LayoutEngine(settings.layout),
            infer_relationships=not args.no_inference,
        )
        try:
            schema = orchestrator.load_schema()
        except ExtractionError as e:
            logger.error("Schema extraction failed: %s", e)
            return 1

        graph = orchestrator.build_graph(schema, storage_key, args.layout, use_saved=not args.reset_layout)

    if graph.layout_error:
        logger.error("Layout failed, positions were not updated: %s", graph.layout_error)

    relationship_filter = RelationshipFilter()
    for flag in args.hide:
        relationship_filter = relationship_filter.toggle(flag)
    edges = orchestrator.visible_edges(graph, relationship_filter)
    logger.info(filter_summary(graph.edges, relationship_filter))

    payload = render_payload(graph.nodes, edges)
    text = json.dumps(payload, indent=2)
    if args.output == "-":
        sys.stdout.write(text + "\n")
    else:
        with open(args.output, "w", encoding="utf-8") as fh:
            fh.write(text)
        logger.info("Wrote %d nodes and %d edges to %s", len(payload["nodes"]), len(payload["edges"]), args.output)

    return 0 if graph.layout_error is None else 2


if __name__ == "__main__":
    sys.exit(main())
