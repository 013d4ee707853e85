# schemagraph/config/logging_config.py

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configures the root logger once for scripts and services."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # the neo4j driver is chatty at debug level
    logging.getLogger("neo4j").setLevel(logging.WARNING)
