# schemagraph/connectors/sqlite_connector.py

import logging
from typing import Any, Dict, List

from sqlalchemy import create_engine, text, Engine

from schemagraph.config.settings import Settings

logger = logging.getLogger(__name__)


class SQLiteConnector:
    """
    Manages the connection to the SQLite database produced by the model
    conversion pipeline, using SQLAlchemy.
    """
    def __init__(self, settings: Settings):
        """
        Initializes the connector with database connection settings.

        Args:
            settings: The application settings object containing the database URL.
        """
        self.url: str = settings.database_url
        self.engine: Engine | None = None

    def connect(self) -> None:
        """
        Creates a SQLAlchemy engine for the configured database URL.
        """
        if self.engine is not None:
            return

        try:
            self.engine = create_engine(self.url, echo=False)
            logger.info("SQLAlchemy engine created for %s", self.url)
        except Exception:
            logger.exception("Could not create SQLAlchemy engine")
            raise

    def disconnect(self) -> None:
        """
        Disposes of the engine's connection pool.
        """
        if self.engine:
            self.engine.dispose()
            self.engine = None
            logger.info("SQLAlchemy engine disposed")

    def execute_query(self, sql: str) -> List[Dict[str, Any]]:
        """
        Runs a single statement and returns its rows as plain dictionaries.

        This is the query capability consumed by the schema extractor.

        Raises:
            ConnectionError: If the engine is not connected.
        """
        if not self.engine:
            raise ConnectionError("Not connected. Please call connect() before running queries.")

        with self.engine.connect() as connection:
            result = connection.execute(text(sql))
            return [dict(row) for row in result.mappings().all()]

    # --- Context Management Support ---
    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
