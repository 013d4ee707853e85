# schemagraph/graph_engine/extractor.py

import logging
from collections.abc import Mapping
from typing import Any, Callable, List, Sequence

from schemagraph.graph_engine.exceptions import ExtractionError
from schemagraph.graph_engine.models import Column, ForeignKey, SchemaDef, Table

logger = logging.getLogger(__name__)

QueryFn = Callable[[str], Sequence[Mapping[str, Any]]]

TABLE_LIST_QUERY = (
    "SELECT name FROM sqlite_master "
    "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
)


def _quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class SchemaExtractor:
    """
    Extracts tables, columns and declared foreign keys through an injected
    query capability.
    """
    def __init__(self, query_fn: QueryFn):
        """
        Args:
            query_fn: Callable that runs one SQL statement and returns its rows
                as dictionaries (e.g. SQLiteConnector.execute_query).
        """
        self.query_fn = query_fn

    def extract_schema(self) -> SchemaDef:
        """
        Builds a fresh SchemaDef from the live database.

        Returns:
            The extracted schema, with explicit foreign keys only.

        Raises:
            ExtractionError: If any query fails or a row cannot be read. No
                partial schema is returned.
        """
        logger.info("Starting schema extraction")

        tables: List[Table] = []
        foreign_keys: List[ForeignKey] = []

        table_names = [self._row_name(row, "table") for row in self._run(TABLE_LIST_QUERY)]
        logger.info("Found %d tables. Inspecting each one...", len(table_names))

        for table_name in table_names:
            tables.append(Table(name=table_name, columns=self._extract_columns(table_name)))
            foreign_keys.extend(self._extract_foreign_keys(table_name))
            logger.debug("Inspected table '%s'", table_name)

        logger.info(
            "Schema extraction completed: %d tables, %d declared foreign keys",
            len(tables), len(foreign_keys),
        )
        return SchemaDef(tables=tables, foreign_keys=foreign_keys)

    def _run(self, sql: str) -> List[Mapping[str, Any]]:
        try:
            return list(self.query_fn(sql))
        except Exception as e:
            raise ExtractionError(f"Query failed: {sql}: {e}") from e

    def _row_name(self, row: Mapping[str, Any], kind: str) -> str:
        name = row.get("name") if isinstance(row, Mapping) else None
        if not name:
            raise ExtractionError(f"Malformed {kind} row without a name: {row!r}")
        return str(name)

    def _extract_columns(self, table_name: str) -> List[Column]:
        rows = self._run(f"PRAGMA table_info({_quote_identifier(table_name)})")
        columns = []
        for row in rows:
            default = row.get("dflt_value")
            columns.append(Column(
                name=self._row_name(row, "column"),
                type=row.get("type") or "TEXT",
                not_null=bool(row.get("notnull")),
                # pk holds the 1-based position inside a composite key, 0 otherwise
                is_primary_key=bool(row.get("pk")),
                default_value=None if default is None else str(default),
            ))
        return columns

    def _extract_foreign_keys(self, table_name: str) -> List[ForeignKey]:
        rows = self._run(f"PRAGMA foreign_key_list({_quote_identifier(table_name)})")
        foreign_keys = []
        for row in rows:
            from_column, to_table, to_column = row.get("from"), row.get("table"), row.get("to")
            if not from_column or not to_table or not to_column:
                logger.debug("Skipping malformed foreign key row on '%s': %r", table_name, row)
                continue
            foreign_keys.append(ForeignKey(
                from_table=table_name,
                from_column=str(from_column),
                to_table=str(to_table),
                to_column=str(to_column),
            ))
        return foreign_keys
