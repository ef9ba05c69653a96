"""
Key-Value Backend Implementations

MemoryBackend keeps values in a dict and is used by tests and
throwaway sessions. JsonFileBackend keeps one file per key in a data
directory, which is the on-device layout used by the app.

TRADEOFFS:
- Files are small and written whole, so I/O is done inline rather than
  on a worker thread
- Writes go to a temp file first and are moved into place, so a crash
  mid-write never leaves a half-written collection
"""

from pathlib import Path
from typing import Optional

from pocket_ledger.services.storage.interface import KeyValueBackend, StorageError


class MemoryBackend(KeyValueBackend):
    """In-process backend. Contents are lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._items)


class JsonFileBackend(KeyValueBackend):
    """
    File-based backend: the value for key K lives in <data_dir>/K.json.
    """

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Unable to create data directory {self._data_dir}: {e}") from e

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    async def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Unable to read from {path}: {e}") from e

    async def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                handle.write(value)
                handle.flush()
            # replace() is atomic on POSIX
            temp_path.replace(path)
        except OSError as e:
            raise StorageError(f"Unable to write to {path}: {e}") from e

    async def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Unable to remove {path}: {e}") from e
