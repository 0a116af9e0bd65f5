import asyncio
import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import aiofiles

from resultdesk.config import settings
from resultdesk.schemas.result import ProcessedResult

logger = logging.getLogger(__name__)

RESULTS_KEY = "processed_results"


class DuplicateResultError(Exception):
    """Raised when an identical mark-sheet has already been stored."""

    def __init__(self, existing: ProcessedResult):
        self.existing = existing
        super().__init__(f"File already processed. Duplicate of result ID: {existing.id}")


class ResultNotFoundError(Exception):
    """Raised when a result ID is not in the store."""

    pass


class StorageBackend(ABC):
    """Abstract base class for key-value storage backends."""

    @abstractmethod
    async def read(self, key: str) -> Any | None:
        """
        Return the value stored under key, or None.
        """
        pass

    @abstractmethod
    async def write(self, key: str, value: Any) -> None:
        """
        Store a JSON-serializable value under key.
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Delete key if present.
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """
        Check if key exists.
        """
        pass


class LocalStorageBackend(StorageBackend):
    """Local filesystem storage backend: one JSON file per key."""

    def __init__(self, base_path: str | None = None):
        self.base_path = Path(base_path or settings.storage_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _resolve_path(self, key: str) -> Path:
        if not re.fullmatch(r"[A-Za-z0-9_.-]+", key):
            raise ValueError(f"Invalid storage key: {key}")
        return self.base_path / f"{key}.json"

    async def read(self, key: str) -> Any | None:
        """Read and decode the JSON file for key."""
        path = self._resolve_path(key)
        if not path.exists():
            return None
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            return json.loads(await f.read())

    async def write(self, key: str, value: Any) -> None:
        """Write value to a temporary file, then move it over the old one."""
        path = self._resolve_path(key)
        tmp_path = path.parent / f"{path.name}.tmp"
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(value))
        tmp_path.replace(path)

    async def delete(self, key: str) -> None:
        """Delete the file for key."""
        path = self._resolve_path(key)
        if path.exists():
            path.unlink()

    async def exists(self, key: str) -> bool:
        """Check if the file for key exists."""
        return self._resolve_path(key).exists()


class MemoryStorageBackend(StorageBackend):
    """In-process storage backend; values are kept JSON-encoded so they round-trip like the local backend."""

    def __init__(self):
        self._data: dict[str, str] = {}

    async def read(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    async def write(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def exists(self, key: str) -> bool:
        return key in self._data


def create_backend(backend_type: str | None = None) -> StorageBackend:
    """Get storage backend based on configuration."""
    backend_type = (backend_type or settings.storage_backend).lower()
    if backend_type == "local":
        return LocalStorageBackend()
    if backend_type == "memory":
        return MemoryStorageBackend()
    raise ValueError(f"Unsupported storage backend: {backend_type}")


class ResultStore:
    """
    The processed-results collection, persisted under a single key.

    Every read-modify-write runs under one lock, so appending a result and
    reading the cohort back for statistics never interleave.
    """

    def __init__(self, backend: StorageBackend | None = None):
        self._backend = backend
        self.lock = asyncio.Lock()

    @property
    def backend(self) -> StorageBackend:
        if self._backend is None:
            self._backend = create_backend()
        return self._backend

    async def _load(self) -> list[ProcessedResult]:
        raw = await self.backend.read(RESULTS_KEY)
        if raw is None:
            return []
        return [ProcessedResult.model_validate(item) for item in raw]

    async def _save(self, results: list[ProcessedResult]) -> None:
        await self.backend.write(RESULTS_KEY, [r.model_dump(mode="json") for r in results])

    async def all_results(self) -> list[ProcessedResult]:
        """All stored results in submission order."""
        async with self.lock:
            return await self._load()

    async def get(self, result_id: str) -> ProcessedResult:
        for result in await self.all_results():
            if result.id == result_id:
                return result
        raise ResultNotFoundError(f"Result with id {result_id} not found")

    async def add(self, result: ProcessedResult, reject_duplicates: bool | None = None) -> ProcessedResult:
        """
        Append a result.

        Returns the stored result; when a result with the same checksum exists
        and duplicates are not rejected, the existing result is returned instead.

        Raises:
            DuplicateResultError: If the checksum is already stored and duplicates are rejected
        """
        if reject_duplicates is None:
            reject_duplicates = settings.reject_duplicate_files

        async with self.lock:
            results = await self._load()
            existing = next((r for r in results if r.file_info.checksum == result.file_info.checksum), None)
            if existing is not None:
                if reject_duplicates:
                    raise DuplicateResultError(existing)
                return existing
            results.append(result)
            await self._save(results)

        logger.info(f"Stored result {result.id} for {result.aggregate.student_info.roll_number}")
        return result

    async def remove(self, result_id: str) -> None:
        async with self.lock:
            results = await self._load()
            remaining = [r for r in results if r.id != result_id]
            if len(remaining) == len(results):
                raise ResultNotFoundError(f"Result with id {result_id} not found")
            await self._save(remaining)
        logger.info(f"Removed result {result_id}")

    async def clear(self) -> int:
        """Delete every stored result and return how many there were."""
        async with self.lock:
            count = len(await self._load())
            await self.backend.delete(RESULTS_KEY)
        logger.info(f"Cleared {count} stored results")
        return count


# Global result store instance
result_store = ResultStore()
