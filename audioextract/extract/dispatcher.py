"""
audioextract.extract.dispatcher - Fan rows of one table out over the pool.

Every row is extracted and written by its own pool task. Results are
folded into a FileResult once all tasks for the table are done.
"""

from __future__ import annotations

from concurrent.futures import Future, as_completed
from dataclasses import dataclass
from enum import Enum

import pyarrow as pa

from audioextract.config import ExtractConfig
from audioextract.dataset.rows import RowViews
from audioextract.exceptions import ExtractionError, TypeMismatchError
from audioextract.extract.pool import ExtractionPool, MetadataAccumulator
from audioextract.io import write_bytes_if_absent
from audioextract.logging import logger


class RowOutcome(str, Enum):
    WRITTEN = "written"
    EXISTS = "exists"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class FileResult:
    """Per-input row tallies. ``rows`` counts every row in the table."""

    source: str
    rows: int = 0
    written: int = 0
    existing: int = 0
    skipped: int = 0
    failed: int = 0

    def record(self, outcome: RowOutcome) -> None:
        if outcome is RowOutcome.WRITTEN:
            self.written += 1
        elif outcome is RowOutcome.EXISTS:
            self.existing += 1
        elif outcome is RowOutcome.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1


def process_row(
    views: RowViews,
    index: int,
    config: ExtractConfig,
    accumulator: MetadataAccumulator,
    source: str,
) -> RowOutcome:
    """Extract one row and write its payload.

    Type mismatches are logged and skipped. Write failures are logged and
    reported as FAILED, or raised as ExtractionError in strict mode.
    """
    try:
        record = views.record(index)
    except TypeMismatchError as e:
        logger.warning("%s: skipping %s", source, e)
        return RowOutcome.SKIPPED

    dest = config.output_dir / record.file_name
    try:
        created = write_bytes_if_absent(dest, record.payload)
    except (OSError, ValueError) as e:
        if config.strict_writes:
            raise ExtractionError(dest, f"write failed: {e}") from e
        logger.error("%s: failed to write %s: %s", source, dest, e)
        return RowOutcome.FAILED

    if record.transcription is not None:
        accumulator.append(record.file_name, record.transcription)

    if not created:
        logger.debug("%s: %s already exists, left untouched", source, dest)
        return RowOutcome.EXISTS
    return RowOutcome.WRITTEN


def dispatch_rows(
    pool: ExtractionPool,
    table: pa.Table,
    config: ExtractConfig,
    accumulator: MetadataAccumulator,
    source: str = "<table>",
) -> list[Future]:
    """Submit one task per row of the table to the pool."""
    views = RowViews(table, config.columns, config.with_transcription)
    return [
        pool.submit(process_row, views, index, config, accumulator, source)
        for index in range(len(views))
    ]


def collect_rows(futures: list[Future], rows: int, source: str = "<table>") -> FileResult:
    """Wait for a table's row tasks and tally their outcomes.

    Raises:
        ExtractionError: In strict mode, after cancelling the rows not yet started
    """
    result = FileResult(source=source, rows=rows)
    try:
        for future in as_completed(futures):
            result.record(future.result())
    except Exception:
        for future in futures:
            future.cancel()
        raise

    logger.debug(
        "%s: %d rows, %d written, %d existing, %d skipped, %d failed",
        source,
        result.rows,
        result.written,
        result.existing,
        result.skipped,
        result.failed,
    )
    return result


def extract_table(
    pool: ExtractionPool,
    table: pa.Table,
    config: ExtractConfig,
    accumulator: MetadataAccumulator,
    source: str = "<table>",
) -> FileResult:
    """Write every row of a projected table and return the tallies."""
    futures = dispatch_rows(pool, table, config, accumulator, source)
    return collect_rows(futures, table.num_rows, source)
