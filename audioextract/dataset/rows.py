"""
audioextract.dataset.rows - Per-row records with type guards.

Zips the payload, path and transcription columns of a projected table
into RowRecord values. Wrongly typed payloads or paths raise
TypeMismatchError so the caller can skip that row and keep going.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

import pyarrow as pa

from audioextract.config import ColumnConfig
from audioextract.exceptions import TypeMismatchError
from audioextract.logging import logger


@dataclass(frozen=True)
class RowRecord:
    """One extracted row: where it goes, what it holds, what was said."""

    identifier: str
    payload: bytes
    transcription: str | None = None

    @property
    def file_name(self) -> str:
        return output_name(self.identifier)


def output_name(identifier: str) -> str:
    """Derive the output file name (stem + extension) from a stored path."""
    return PurePosixPath(identifier.replace("\\", "/")).name


def describe_type(value: object) -> str:
    if value is None:
        return "null"
    return type(value).__name__


class RowViews:
    """Aligned per-row views over a projected dataset table."""

    def __init__(self, table: pa.Table, columns: ColumnConfig, with_text: bool = False):
        self.columns = columns
        self.payloads = table.column(columns.payload_column)
        self.identifiers = table.column(columns.path_column)
        self.transcriptions = None
        if with_text and columns.text_column in table.column_names:
            self.transcriptions = table.column(columns.text_column)
        self.num_rows = table.num_rows

    def __len__(self) -> int:
        return self.num_rows

    def record(self, index: int) -> RowRecord:
        """Build the RowRecord for one row.

        Raises:
            TypeMismatchError: If the payload is not binary or the path is not
                usable text
        """
        payload = self.payloads[index].as_py()
        if not isinstance(payload, bytes):
            raise TypeMismatchError(index, self.columns.payload_column, describe_type(payload))

        identifier = self.identifiers[index].as_py()
        if not isinstance(identifier, str):
            raise TypeMismatchError(index, self.columns.path_column, describe_type(identifier))
        if "\x00" in identifier or output_name(identifier) in ("", ".", ".."):
            raise TypeMismatchError(
                index, self.columns.path_column, f"unusable path {identifier!r}"
            )

        transcription = None
        if self.transcriptions is not None:
            text = self.transcriptions[index].as_py()
            if isinstance(text, str):
                transcription = text
            elif text is not None:
                logger.warning(
                    "row %d: transcription column '%s' holds %s; no metadata recorded",
                    index,
                    self.columns.text_column,
                    describe_type(text),
                )

        return RowRecord(identifier=identifier, payload=payload, transcription=transcription)


def extract_row(
    table: pa.Table,
    index: int,
    columns: ColumnConfig,
    with_text: bool = False,
) -> RowRecord:
    """Convenience wrapper building a RowRecord straight from a table."""
    return RowViews(table, columns, with_text).record(index)
