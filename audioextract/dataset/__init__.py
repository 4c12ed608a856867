"""
audioextract.dataset - Loading datasets into a flat, projected Arrow table.

Parquet files are read directly; Arrow IPC streams are first rewritten
into an in-memory Parquet buffer so both formats share one reader.
"""

from __future__ import annotations
