# schemagraph/storage/factory.py

from schemagraph.config.settings import Settings
from schemagraph.storage.base import KeyValueBackend
from schemagraph.storage.file_backend import JsonFileBackend
from schemagraph.storage.memory_backend import MemoryBackend
from schemagraph.storage.neo4j_backend import Neo4jBackend


def create_backend(settings: Settings) -> KeyValueBackend:
    """
    Builds the layout backend named by `settings.layout_backend`. The caller
    owns the result and should close it, e.g. `with create_backend(settings) as backend:`.
    """
    if settings.layout_backend == "memory":
        return MemoryBackend()
    if settings.layout_backend == "file":
        return JsonFileBackend(settings.layout_store_dir)
    return Neo4jBackend.from_settings(settings)
