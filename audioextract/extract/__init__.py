"""
audioextract.extract - Parallel extraction of payloads to files.

Rows of each loaded table are written by a shared worker pool; per-file
tallies and transcription records are gathered for the whole run.
"""

from __future__ import annotations
