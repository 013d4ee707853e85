# schemagraph/storage/file_backend.py

import re
from pathlib import Path
from typing import Optional

from schemagraph.graph_engine.exceptions import PersistenceError
from schemagraph.storage.base import KeyValueBackend

UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class JsonFileBackend(KeyValueBackend):
    """Stores each key as one JSON file inside `directory`."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / (UNSAFE_FILENAME_CHARS.sub("_", key) + ".json")

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(f"Could not read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # atomic replace
            tmp_path = path.with_suffix(".json.tmp")
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise PersistenceError(f"Could not write {path}: {e}") from e

    def remove(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Could not remove {path}: {e}") from e
