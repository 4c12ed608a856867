"""
audioextract.dataset.loader - Parquet reader with column projection.
"""

from __future__ import annotations

from typing import Any

import pyarrow as pa
import pyarrow.parquet as pq

from audioextract.config import ColumnConfig
from audioextract.dataset.schema import prepare_table, resolve_columns
from audioextract.exceptions import DecodeError


def load_parquet(source: Any, columns: ColumnConfig, with_text: bool = False) -> pa.Table:
    """Read the projected columns of a Parquet file.

    Args:
        source: Readable binary file object, pyarrow NativeFile or path
        columns: Configured column names
        with_text: Whether to read the transcription column

    Returns:
        Flat table with payload, path and optional transcription columns

    Raises:
        DecodeError: If the data is not valid Parquet or lacks required columns
    """
    try:
        parquet_file = pq.ParquetFile(source)
        selected = resolve_columns(parquet_file.schema_arrow, columns, with_text)
        table = parquet_file.read(columns=selected)
    except DecodeError:
        raise
    except (pa.ArrowException, OSError) as e:
        raise DecodeError(f"Cannot read Parquet data: {e}") from e

    return prepare_table(table, columns, with_text)
