"""
audioextract.dataset.schema - Column resolution, struct unnesting, projection.

Datasets either store audio as flat payload/path columns or as a struct
column (``audio: {bytes, path}``). Both shapes end up as the same flat,
projected table before rows are extracted.
"""

from __future__ import annotations

import pyarrow as pa

from audioextract.config import ColumnConfig
from audioextract.exceptions import DecodeError
from audioextract.logging import logger


def has_flat_columns(names: list[str], columns: ColumnConfig) -> bool:
    return columns.payload_column in names and columns.path_column in names


def resolve_columns(
    schema: pa.Schema,
    columns: ColumnConfig,
    with_text: bool = False,
) -> list[str]:
    """Pick the top-level columns to read from a file with this schema.

    Args:
        schema: Arrow schema of the input file
        columns: Configured column names
        with_text: Whether the transcription column is wanted

    Returns:
        Column names to pass to the reader

    Raises:
        DecodeError: If neither flat columns nor a struct audio column exist
    """
    names = schema.names
    if has_flat_columns(names, columns):
        selected = [columns.payload_column, columns.path_column]
    elif columns.audio_column in names:
        audio_type = schema.field(columns.audio_column).type
        if not pa.types.is_struct(audio_type):
            raise DecodeError(
                f"Column '{columns.audio_column}' is {audio_type}, expected a struct"
            )
        selected = [columns.audio_column]
    else:
        raise DecodeError(
            f"Missing columns: need '{columns.payload_column}' and "
            f"'{columns.path_column}' or a '{columns.audio_column}' struct "
            f"(found: {', '.join(names) or 'none'})"
        )

    if with_text:
        if columns.text_column in names:
            selected.append(columns.text_column)
        else:
            logger.warning(
                "Transcription column '%s' not present; no metadata will be recorded",
                columns.text_column,
            )
    return selected


def unnest_audio(table: pa.Table, columns: ColumnConfig) -> pa.Table:
    """Promote the payload and path fields of the audio struct to top level.

    Tables that already carry flat payload/path columns are returned as-is.

    Raises:
        DecodeError: If the struct lacks the payload or path field
    """
    if has_flat_columns(table.column_names, columns):
        return table
    if columns.audio_column not in table.column_names:
        return table

    flat = table.select([columns.audio_column]).flatten()
    promoted = {}
    for field in (columns.payload_column, columns.path_column):
        nested_name = f"{columns.audio_column}.{field}"
        if nested_name not in flat.column_names:
            raise DecodeError(
                f"Struct column '{columns.audio_column}' has no '{field}' field"
            )
        promoted[field] = flat.column(nested_name)

    index = table.schema.get_field_index(columns.audio_column)
    result = table.remove_column(index)
    for name, values in promoted.items():
        result = result.append_column(name, values)
    return result


def project(table: pa.Table, columns: ColumnConfig, with_text: bool = False) -> pa.Table:
    """Select payload, path and (optionally) transcription columns, in that order.

    Raises:
        DecodeError: If the payload or path column is missing
    """
    required = [columns.payload_column, columns.path_column]
    missing = [name for name in required if name not in table.column_names]
    if missing:
        raise DecodeError(f"Missing required columns: {', '.join(missing)}")

    selected = list(required)
    if with_text and columns.text_column in table.column_names:
        selected.append(columns.text_column)
    return table.select(selected)


def prepare_table(table: pa.Table, columns: ColumnConfig, with_text: bool = False) -> pa.Table:
    """Unnest then project a freshly loaded table."""
    return project(unnest_audio(table, columns), columns, with_text)
