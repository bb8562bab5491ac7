"""Custom exception types for pubpage operations."""


class PubpageError(Exception):
    """Base exception for all pubpage operations."""


class SourceFetchError(PubpageError, OSError):
    """Raised when the BibTeX source cannot be read or downloaded."""


class InvalidDataError(PubpageError):
    """Raised when data validation fails."""


class ConfigError(InvalidDataError):
    """Raised when the site settings file is malformed."""


class RenderError(PubpageError):
    """Raised when rendered output cannot be written."""
