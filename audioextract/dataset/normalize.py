"""
audioextract.dataset.normalize - Arrow IPC stream to in-memory Parquet.

Record batches from the stream are written into a Parquet buffer held in
memory, which is then read back through the Parquet loader so both input
formats get identical projection and unnesting.
"""

from __future__ import annotations

from typing import Any

import pyarrow as pa
import pyarrow.parquet as pq

from audioextract.config import ColumnConfig
from audioextract.dataset.loader import load_parquet
from audioextract.exceptions import DecodeError
from audioextract.logging import logger


class ParquetBufferBuilder:
    """Collects record batches into a Parquet file held in memory.

    Use as a context manager. The buffer is only available after
    ``finalize()``; leaving the block always closes the writer.
    """

    def __init__(self, schema: pa.Schema):
        self.schema = schema
        self._sink: pa.BufferOutputStream | None = None
        self._writer: pq.ParquetWriter | None = None
        self._buffer: pa.Buffer | None = None
        self.batches_written = 0

    def __enter__(self) -> ParquetBufferBuilder:
        self._sink = pa.BufferOutputStream()
        self._writer = pq.ParquetWriter(self._sink, self.schema)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._writer is not None:
            self._writer.close()
            self._writer = None

    def write_batch(self, batch: pa.RecordBatch) -> None:
        if self._writer is None:
            raise RuntimeError("ParquetBufferBuilder is not open for writing")
        self._writer.write_batch(batch)
        self.batches_written += 1

    def finalize(self) -> pa.Buffer:
        """Close the writer and return the completed Parquet buffer."""
        if self._writer is None:
            raise RuntimeError("ParquetBufferBuilder is not open for writing")
        self._writer.close()
        self._writer = None
        self._buffer = self._sink.getvalue()
        return self._buffer

    @property
    def buffer(self) -> pa.Buffer:
        if self._buffer is None:
            raise RuntimeError("Parquet buffer requested before finalize()")
        return self._buffer


def stream_to_parquet(source: Any) -> pa.Buffer:
    """Rewrite an Arrow IPC stream as an in-memory Parquet buffer.

    Raises:
        DecodeError: If the stream is empty, malformed or has no record batches
    """
    try:
        reader = pa.ipc.open_stream(source)
        with ParquetBufferBuilder(reader.schema) as builder:
            for batch in reader:
                builder.write_batch(batch)
            if builder.batches_written == 0:
                raise DecodeError("Arrow stream contains no record batches")
            buffer = builder.finalize()
    except DecodeError:
        raise
    except (pa.ArrowException, OSError) as e:
        raise DecodeError(f"Cannot read Arrow stream: {e}") from e

    logger.debug(
        "Converted %d record batch(es) to %d bytes of Parquet",
        builder.batches_written,
        buffer.size,
    )
    return buffer


def normalize_stream(source: Any, columns: ColumnConfig, with_text: bool = False) -> pa.Table:
    """Load an Arrow IPC stream as a flat, projected table."""
    buffer = stream_to_parquet(source)
    return load_parquet(pa.BufferReader(buffer), columns, with_text)
