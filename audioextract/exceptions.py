"""
audioextract.exceptions - Custom exception classes.

All audioextract-specific exceptions inherit from AudioExtractError.
"""


class AudioExtractError(Exception):
    """Base exception for all audioextract errors."""

    pass


class ConfigError(AudioExtractError):
    """Configuration loading or validation error."""

    pass


class InputError(AudioExtractError):
    """Input path missing, unreadable, or not listable."""

    pass


class DecodeError(AudioExtractError):
    """Container could not be decoded into a usable table."""

    pass


class TypeMismatchError(AudioExtractError):
    """A row value has the wrong runtime type for its column."""

    def __init__(self, row: int, column: str, observed: str):
        self.row = row
        self.column = column
        self.observed = observed
        super().__init__(f"row {row}: column '{column}' holds {observed}")


class ExtractionError(AudioExtractError):
    """Payload could not be written to its output path."""

    def __init__(self, path, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")
