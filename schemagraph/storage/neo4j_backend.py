# schemagraph/storage/neo4j_backend.py

import logging
from typing import Optional

from neo4j import Driver, GraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from schemagraph.config.settings import Settings
from schemagraph.graph_engine.exceptions import PersistenceError
from schemagraph.storage.base import KeyValueBackend

logger = logging.getLogger(__name__)

GET_QUERY = "MATCH (l:SavedLayout {key: $key}) RETURN l.payload AS payload"

SET_QUERY = """
MERGE (l:SavedLayout {key: $key})
SET l.payload = $payload,
    l.updated_at = timestamp()
"""

REMOVE_QUERY = "MATCH (l:SavedLayout {key: $key}) DELETE l"


class Neo4jBackend(KeyValueBackend):
    """
    Keeps saved layouts as (:SavedLayout {key, payload}) nodes so several
    viewers can share one layout cache. The backend owns its driver; close it
    (or use it in a `with` block) when done.
    """
    def __init__(self, driver: Driver):
        self.driver = driver

    @classmethod
    def from_settings(cls, settings: Settings) -> "Neo4jBackend":
        """
        Creates a driver from the Neo4j settings and verifies it can reach the server.

        Raises:
            ValueError: If the Neo4j URI or credentials are not configured.
            PersistenceError: If the server cannot be reached.
        """
        if not settings.neo4j_uri or not settings.neo4j_user or settings.neo4j_password is None:
            raise ValueError("Neo4j layout backend selected but neo4j_uri/neo4j_user/neo4j_password are not set.")

        # The official driver expects a tuple for authentication.
        auth = (settings.neo4j_user, settings.neo4j_password.get_secret_value())
        driver = GraphDatabase.driver(settings.neo4j_uri, auth=auth)
        try:
            driver.verify_connectivity()
        except (Neo4jError, DriverError) as e:
            driver.close()
            raise PersistenceError(f"Could not reach the layout cache at {settings.neo4j_uri}: {e}") from e
        logger.info("Neo4j layout cache connected at %s", settings.neo4j_uri)
        return cls(driver)

    def _run(self, action: str, key: str, query: str, **params):
        try:
            with self.driver.session() as session:
                records = list(session.run(query, key=key, **params))
        except (Neo4jError, DriverError) as e:
            raise PersistenceError(f"Could not {action} layout '{key}': {e}") from e
        return records[0] if records else None

    def get(self, key: str) -> Optional[str]:
        record = self._run("read", key, GET_QUERY)
        return record["payload"] if record else None

    def set(self, key: str, value: str) -> None:
        self._run("write", key, SET_QUERY, payload=value)

    def remove(self, key: str) -> None:
        self._run("remove", key, REMOVE_QUERY)

    def close(self) -> None:
        self.driver.close()
        logger.info("Neo4j layout cache closed")
