# schemagraph/storage/memory_backend.py

from typing import Dict, Optional

from schemagraph.storage.base import KeyValueBackend


class MemoryBackend(KeyValueBackend):
    """Process-local storage. Layouts are lost when the process exits."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)
