# schemagraph/storage/base.py

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueBackend(ABC):
    """
    String key/value storage used by the layout store. Implementations raise
    PersistenceError when the underlying storage fails.
    """
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Returns the stored value, or None when the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Deletes the key. Removing an absent key is not an error."""
        pass

    def close(self) -> None:
        """Releases any client the backend holds. Nothing to do by default."""
        pass

    # --- Context Management Support ---
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
