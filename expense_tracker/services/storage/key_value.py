"""
Key-Value Store Implementations

Two backends for the KeyValueStore interface:
- InMemoryKeyValueStore: a dict, for tests and throwaway sessions
- JsonFileKeyValueStore: one JSON file per key in a data directory

DESIGN DECISION: Each file write goes to a temporary file first and is
then moved over the target with os.replace(). A crash mid-write leaves
the previous value intact instead of a truncated file.

Transient OSErrors (e.g. the file briefly locked by a sync client or
antivirus scanner) are retried a few times before giving up.
"""

import os
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.services.storage.interface import (
    ConnectionError,
    KeyValueStore,
    StorageError,
)

logger = structlog.get_logger(__name__)


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store. Contents are lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._data


class JsonFileKeyValueStore(KeyValueStore):
    """
    File-backed store: the value for key lives in <directory>/<key>.json.

    The directory is created on first write.
    """

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)
        if self._directory.exists() and not self._directory.is_dir():
            raise ConnectionError(
                f"Storage path exists but is not a directory: {self._directory}"
            )

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        """File holding the value for key."""
        if not key or key.startswith(".") or any(sep in key for sep in ("/", "\\")):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        """Read a stored value; unreadable files are treated as absent."""
        path = self.path_for(key)
        if not path.exists():
            return None

        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(
                "storage_read_failed",
                key=key,
                path=str(path),
                error=str(e),
            )
            return None

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, max=1),
        reraise=True,
    )
    def _write(self, path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_name(f"{path.name}.tmp")
        temp_path.write_text(value, encoding="utf-8")
        os.replace(temp_path, path)

    def set(self, key: str, value: str) -> None:
        """Atomically replace the stored value for key."""
        path = self.path_for(key)
        try:
            self._write(path, value)
        except OSError as e:
            logger.error(
                "storage_write_failed",
                key=key,
                path=str(path),
                error=str(e),
            )
            raise StorageError(f"Failed to write {key}: {e}")
