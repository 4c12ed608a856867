"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from audioextract.config import ColumnConfig, ExtractConfig

AUDIO_STRUCT = pa.struct([("bytes", pa.binary()), ("path", pa.string())])


def write_parquet(path: Path, table: pa.Table) -> Path:
    pq.write_table(table, path)
    return path


def write_stream(path: Path, table: pa.Table, max_chunksize: int | None = None) -> Path:
    with pa.OSFile(str(path), "wb") as sink:
        with pa.ipc.new_stream(sink, table.schema) as writer:
            writer.write_table(table, max_chunksize=max_chunksize)
    return path


def write_empty_stream(path: Path, schema: pa.Schema) -> Path:
    """Write a stream holding a schema but no record batches."""
    with pa.OSFile(str(path), "wb") as sink:
        with pa.ipc.new_stream(sink, schema):
            pass
    return path


@pytest.fixture
def columns() -> ColumnConfig:
    return ColumnConfig()


@pytest.fixture
def flat_table() -> pa.Table:
    """Two clips in flat bytes/path columns; the second has no transcription."""
    return pa.table(
        {
            "bytes": pa.array([b"AAA", b"BBB"], type=pa.binary()),
            "path": pa.array(["x.wav", "y.wav"], type=pa.string()),
            "transcription": pa.array(["hello there", None], type=pa.string()),
            "speaker_id": pa.array([7, 8], type=pa.int64()),
        }
    )


@pytest.fixture
def nested_table() -> pa.Table:
    """Hugging Face style table with an audio struct column."""
    return pa.table(
        {
            "audio": pa.array(
                [
                    {"bytes": b"RIFF-one", "path": "clips/one.wav"},
                    {"bytes": b"RIFF-two", "path": "clips/two.flac"},
                    {"bytes": b"RIFF-three", "path": "clips/three.wav"},
                ],
                type=AUDIO_STRUCT,
            ),
            "transcription": pa.array(["first", "second", None], type=pa.string()),
        }
    )


@pytest.fixture
def scenario_table() -> pa.Table:
    """Three rows where the last path is not text."""
    return pa.table(
        {
            "bytes": pa.array([b"AAA", b"BBB", b"CCC"], type=pa.binary()),
            "path": pa.array(["x.wav", "y.wav", None], type=pa.string()),
        }
    )


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def make_config(tmp_path: Path, out_dir: Path):
    """Build an ExtractConfig with sensible test defaults."""

    def _make(**kwargs) -> ExtractConfig:
        values = {"input_dir": tmp_path, "output_dir": out_dir, "workers": 2}
        values.update(kwargs)
        if "input_file" in kwargs:
            values.pop("input_dir", None)
        return ExtractConfig(**values)

    return _make
