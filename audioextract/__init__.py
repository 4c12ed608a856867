"""
audioextract - Pull embedded audio out of columnar datasets.

Reads Parquet files or Arrow IPC streams that carry audio blobs in a
column, writes each blob to its own file, and optionally emits a CSV
mapping file names to transcriptions.
"""

__version__ = "0.1.0"
