"""Key-value caches for JSON-serializable responses.

The GitHub client depends on BaseCache, not on a concrete backend, so tests
can hand it a MemoryCache while the CLI uses a FileCache on disk.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Optional


class BaseCache(ABC):
    """Read-through store keyed by a deterministic string."""

    @abstractmethod
    def get(self, name: str) -> Optional[Any]:
        """Return the cached value for ``name`` or None."""

    @abstractmethod
    def set(self, name: str, value: Any) -> None:
        """Store ``value`` under ``name``."""

    def check(self, name: str, operation: Callable[[], Any]) -> Any:
        """Return the cached value, or run ``operation`` and cache a truthy result."""
        logger = logging.getLogger(__name__)
        cached = self.get(name)
        if cached is not None:
            logger.debug(f"Cache hit for {name}")
            return cached

        response = operation()
        if response:
            self.set(name, response)
        return response


class MemoryCache(BaseCache):
    """Process-local cache, mostly for tests."""

    def __init__(self):
        self._data: Dict[str, Any] = {}

    def get(self, name: str) -> Optional[Any]:
        return self._data.get(name)

    def set(self, name: str, value: Any) -> None:
        self._data[name] = value


class FileCache(BaseCache):
    """One JSON file per key inside ``directory``. Entries are never invalidated."""

    def __init__(self, directory: str = ".cache"):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, name: str) -> Path:
        return self.directory / name

    def get(self, name: str) -> Optional[Any]:
        path = self._path(name)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def set(self, name: str, value: Any) -> None:
        with open(self._path(name), "w", encoding="utf-8") as f:
            json.dump(value, f)
