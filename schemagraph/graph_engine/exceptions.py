# schemagraph/graph_engine/exceptions.py


class SchemaGraphError(Exception):
    """Base class for every error raised by the schema graph engine."""


class ExtractionError(SchemaGraphError):
    """The query capability failed or returned rows that cannot be read."""


class LayoutError(SchemaGraphError):
    """A layout algorithm failed. The previous node positions stay in effect."""

    def __init__(self, algorithm: str, message: str):
        super().__init__(f"{algorithm} layout failed: {message}")
        self.algorithm = algorithm


class PersistenceError(SchemaGraphError):
    """A layout backend could not read or write a record."""
