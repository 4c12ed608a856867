"""
audioextract.config - YAML config loading, CLI override merging, validation.

Handles loading an optional YAML config file, layering command-line
values on top of it, and validating the result.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from audioextract.exceptions import ConfigError


class InputFormat(str, Enum):
    """Container encoding of the input datasets."""

    ARROW = "arrow"
    PARQUET = "parquet"

    @property
    def extensions(self) -> frozenset[str]:
        return FORMAT_EXTENSIONS[self]


FORMAT_EXTENSIONS: dict[InputFormat, frozenset[str]] = {
    InputFormat.ARROW: frozenset({".arrow", ".arrows"}),
    InputFormat.PARQUET: frozenset({".parquet", ".pq"}),
}


class ColumnConfig(BaseModel):
    """Names of the dataset columns the extractor reads."""

    audio_column: str = "audio"
    payload_column: str = "bytes"
    path_column: str = "path"
    text_column: str = "transcription"

    @field_validator("audio_column", "payload_column", "path_column", "text_column")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Column name must not be empty")
        return v


class ExtractConfig(BaseModel):
    """Resolved configuration for one extraction run."""

    input_file: Path | None = None
    input_dir: Path | None = None
    input_format: InputFormat = InputFormat.PARQUET

    output_dir: Path = Path("output")
    workers: int = Field(default=3, gt=0)

    metadata_output: Path | None = None
    strict_writes: bool = False

    columns: ColumnConfig = Field(default_factory=ColumnConfig)

    @model_validator(mode="after")
    def validate_input_mode(self) -> ExtractConfig:
        if self.input_file is not None and self.input_dir is not None:
            raise ValueError("input_file and input_dir are mutually exclusive")
        if self.input_file is None and self.input_dir is None:
            raise ValueError("one of input_file or input_dir is required")
        return self

    @property
    def with_transcription(self) -> bool:
        """Transcriptions are only read when a side-table was requested."""
        return self.metadata_output is not None


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file into a plain dict."""
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return raw


def merge_config(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Merge overrides onto a base config. Non-None overrides take precedence."""
    merged = base.copy()
    for key, value in overrides.items():
        if key == "columns" and isinstance(value, dict):
            merged["columns"] = {**(merged.get("columns") or {}), **value}
        elif value is not None:
            merged[key] = value
    return merged


def load_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> ExtractConfig:
    """Load, merge and validate the configuration for a run.

    Args:
        config_path: Optional YAML file with base settings
        overrides: Values from the command line; None entries are ignored

    Returns:
        Validated ExtractConfig

    Raises:
        ConfigError: If the file is unreadable or the merged values are invalid
    """
    base = load_config_file(config_path) if config_path else {}
    merged = merge_config(base, overrides or {})
    try:
        return ExtractConfig(**merged)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
