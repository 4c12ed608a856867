"""
audioextract.io - Payload file writes and metadata CSV output.

Centralized I/O utilities for the extraction pipeline.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

import pyarrow as pa
import pyarrow.csv as pacsv


def write_bytes_if_absent(path: Path, payload: bytes) -> bool:
    """Write a payload to a new file, never replacing an existing one.

    The file is opened in exclusive-create mode and filled with a single
    write. If that write fails the partial file is removed.

    Args:
        path: Destination file path
        payload: Bytes to write

    Returns:
        True if the file was created, False if it already existed

    Raises:
        OSError: If the file cannot be created or written
    """
    try:
        f = open(path, "xb")
    except FileExistsError:
        return False

    try:
        with f:
            f.write(payload)
    except Exception:
        path.unlink(missing_ok=True)
        raise
    return True


def write_metadata_csv(path: Path, table: pa.Table) -> None:
    """Write the metadata table as CSV atomically.

    Writes to a temp file first, then renames to prevent a truncated
    side-table on interruption.

    Args:
        path: Destination path for the CSV file
        table: Table of (file_name, transcription) rows
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="wb",
        dir=path.parent,
        delete=False,
        suffix=".tmp",
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            pacsv.write_csv(table, tmp)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise
    tmp_path.replace(path)
