"""
audioextract.extract.batch - Single-file and directory extraction runs.

Loads each input into a projected table, hands its rows to the
dispatcher and totals the results. In directory mode the loads run in
the shared pool too, through a window of at most `workers` files, so
only a bounded number of tables is held at once. Only the calling
thread waits on futures, so file and row parallelism never deadlock.
"""

from __future__ import annotations

from concurrent.futures import FIRST_COMPLETED, Future, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pyarrow as pa

from audioextract.config import ExtractConfig, InputFormat
from audioextract.dataset.loader import load_parquet
from audioextract.dataset.normalize import normalize_stream
from audioextract.exceptions import DecodeError, InputError
from audioextract.extract.dispatcher import FileResult, extract_table
from audioextract.extract.pool import ExtractionPool, MetadataAccumulator, RowCounter
from audioextract.io import write_metadata_csv
from audioextract.logging import logger


@dataclass
class ExtractionSummary:
    """Totals for a whole run."""

    mode: str
    files: list[FileResult] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)
    total_rows: int = 0
    metadata_records: int = 0
    metadata_path: Path | None = None

    @property
    def written(self) -> int:
        return sum(f.written for f in self.files)

    @property
    def existing(self) -> int:
        return sum(f.existing for f in self.files)

    @property
    def skipped(self) -> int:
        return sum(f.skipped for f in self.files)

    @property
    def failed(self) -> int:
        return sum(f.failed for f in self.files)


def load_input(path: Path, config: ExtractConfig) -> pa.Table:
    """Open one input file and load it as a flat, projected table.

    Raises:
        InputError: If the file cannot be opened
        DecodeError: If its contents cannot be decoded
    """
    try:
        f = open(path, "rb")
    except OSError as e:
        raise InputError(f"Cannot open {path}: {e}") from e

    with f:
        try:
            if config.input_format is InputFormat.ARROW:
                return normalize_stream(f, config.columns, config.with_transcription)
            return load_parquet(f, config.columns, config.with_transcription)
        except DecodeError as e:
            raise DecodeError(f"{path}: {e}") from e


def discover_inputs(directory: Path, input_format: InputFormat) -> list[Path]:
    """List regular files directly under a directory matching the format.

    Raises:
        InputError: If the directory cannot be listed
    """
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        raise InputError(f"Cannot list {directory}: {e}") from e

    return [p for p in entries if p.is_file() and p.suffix.lower() in input_format.extensions]


def run_single(
    path: Path,
    pool: ExtractionPool,
    config: ExtractConfig,
    accumulator: MetadataAccumulator,
) -> FileResult:
    """Extract every row of one input file.

    Raises:
        InputError: If the path is missing or not a regular file
        DecodeError: If the file cannot be decoded
    """
    if not path.exists():
        raise InputError(f"Input file not found: {path}")
    if not path.is_file():
        raise InputError(f"Input path is not a file: {path}")

    table = load_input(path, config)
    logger.debug("%s: loaded %d rows", path.name, table.num_rows)
    return extract_table(pool, table, config, accumulator, source=path.name)


def run_directory(
    directory: Path,
    pool: ExtractionPool,
    config: ExtractConfig,
    accumulator: MetadataAccumulator,
    counter: RowCounter | None = None,
) -> ExtractionSummary:
    """Extract every matching file in a directory.

    A file that fails to load or (in strict mode) to write is logged,
    recorded in ``errors`` and contributes no rows; the rest carry on.

    Raises:
        InputError: If the directory is missing or cannot be listed
    """
    if not directory.exists():
        raise InputError(f"Input directory not found: {directory}")
    if not directory.is_dir():
        raise InputError(f"Input path is not a directory: {directory}")

    counter = counter if counter is not None else RowCounter()
    summary = ExtractionSummary(mode="directory")

    inputs = discover_inputs(directory, config.input_format)
    if not inputs:
        logger.warning("No %s files found in %s", config.input_format.value, directory)
        return summary

    # At most `pool.workers` files are loading or holding a table at once.
    remaining = iter(inputs)
    loading: dict[Future, Path] = {}

    def start_next_load() -> None:
        path = next(remaining, None)
        if path is not None:
            loading[pool.submit(load_input, path, config)] = path

    for _ in range(pool.workers):
        start_next_load()

    while loading:
        done, _ = wait(loading, return_when=FIRST_COMPLETED)
        for future in done:
            path = loading.pop(future)
            try:
                table = future.result()
            except Exception as e:
                logger.error("Skipping %s: %s", path.name, e)
                summary.errors.append({"source": str(path), "error": str(e)})
                start_next_load()
                continue

            logger.debug("%s: loaded %d rows", path.name, table.num_rows)
            try:
                result = extract_table(pool, table, config, accumulator, path.name)
            except Exception as e:
                logger.error("Aborted %s: %s", path.name, e)
                summary.errors.append({"source": str(path), "error": str(e)})
            else:
                counter.add(result.rows)
                summary.files.append(result)
            start_next_load()

    order = {path.name: index for index, path in enumerate(inputs)}
    summary.files.sort(key=lambda result: order[result.source])
    summary.errors.sort(key=lambda error: order[Path(error["source"]).name])
    summary.total_rows = counter.value
    return summary


def run_extraction(config: ExtractConfig) -> ExtractionSummary:
    """Run one extraction as configured and write the metadata table.

    The output directory must already exist. Single-file errors propagate;
    directory-mode file errors are collected in the summary.
    """
    accumulator = MetadataAccumulator()
    counter = RowCounter()

    with ExtractionPool(config.workers) as pool:
        if config.input_file is not None:
            result = run_single(config.input_file, pool, config, accumulator)
            counter.add(result.rows)
            summary = ExtractionSummary(mode="file", files=[result])
        else:
            summary = run_directory(config.input_dir, pool, config, accumulator, counter)

    summary.total_rows = counter.value
    summary.metadata_records = len(accumulator)

    if config.metadata_output is not None:
        if summary.metadata_records:
            write_metadata_csv(config.metadata_output, accumulator.to_table())
            summary.metadata_path = config.metadata_output
        else:
            logger.warning("No transcriptions recorded; %s not written", config.metadata_output)

    return summary
