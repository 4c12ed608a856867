"""
audioextract.extract.pool - Shared worker pool and thread-safe accumulators.

One ExtractionPool is created per run and handed to every stage that
needs workers. MetadataAccumulator and RowCounter are the only objects
mutated by several workers at once.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

import pyarrow as pa

METADATA_COLUMNS = ("file_name", "transcription")


class ExtractionPool:
    """Bounded thread pool shared across files and rows.

    Only the thread that owns the pool waits on futures; workers never
    block on other workers, so file loads and row writes can share it.
    """

    def __init__(self, workers: int = 3):
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.workers = workers
        self._executor: ThreadPoolExecutor | None = None

    def __enter__(self) -> ExtractionPool:
        self._executor = ThreadPoolExecutor(
            max_workers=self.workers,
            thread_name_prefix="audioextract",
        )
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        if self._executor is None:
            raise RuntimeError("ExtractionPool is not running")
        return self._executor.submit(fn, *args, **kwargs)

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None


class MetadataAccumulator:
    """Ordered (file_name, transcription) pairs appended under a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: list[tuple[str, str]] = []

    def append(self, file_name: str, transcription: str) -> None:
        with self._lock:
            self._records.append((file_name, transcription))

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def records(self) -> list[tuple[str, str]]:
        with self._lock:
            return list(self._records)

    def to_table(self) -> pa.Table:
        """Snapshot the records as a two-column string table."""
        records = self.records()
        return pa.table(
            {
                METADATA_COLUMNS[0]: pa.array([r[0] for r in records], type=pa.string()),
                METADATA_COLUMNS[1]: pa.array([r[1] for r in records], type=pa.string()),
            }
        )


class RowCounter:
    """Integer counter with atomic increments."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def add(self, amount: int = 1) -> int:
        with self._lock:
            self._value += amount
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value
