"""Exception and warning classes for heifmeta."""


class HeifMetaError(Exception):
    """Base class for all heifmeta errors."""


class TruncatedStreamError(HeifMetaError):
    """Raised when the underlying source ends before a read completes."""


class BoxFormatError(HeifMetaError):
    """Raised when a box header cannot describe a valid box."""


class ImageProcessingError(HeifMetaError):
    """Raised when captured payloads cannot be turned into an artifact.

    The original failure is always chained as ``__cause__``.
    """


class HeifMetaWarning(UserWarning):
    """Non-fatal problem encountered while reading a file."""
