"""Key-value text storage for client state (port and adapters).

``MemoryStorage`` stands in for session-scoped storage: it lives as long as
the object does. ``FileStorage`` is durable, one file per key.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import quote


class KeyValueStorage(ABC):
    """Abstract key-value storage interface."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored text or ``None`` when the key is absent."""
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove_item(self, key: str) -> None: ...


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class FileStorage(KeyValueStorage):
    """Durable storage under a directory (``GROCERLY_STORAGE_DIR`` by default)."""

    def __init__(self, directory: str | Path | None = None):
        self.directory = Path(directory or os.getenv("GROCERLY_STORAGE_DIR", ".grocerly"))
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        # Percent-encoding is reversible, so distinct keys never share a file.
        return self.directory / f"{quote(key, safe='')}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)

    def remove_item(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)
