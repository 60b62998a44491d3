"""
Custom exception hierarchy for media hygiene.

Fatal errors (missing tools, bad arguments, missing journals) abort the
command. Recoverable ones are raised inside a pipeline, logged, and the
pipeline moves on to the next group or record.
"""


class MediaHygieneError(Exception):
    """Base exception for all media hygiene errors."""
    pass


class MissingToolError(MediaHygieneError):
    """Raised when a required external binary is not installed."""
    pass


class InvalidArgumentError(MediaHygieneError):
    """Raised when command-line arguments are missing or invalid."""
    pass


class MetadataExtractionError(MediaHygieneError):
    """Raised when no capture time can be extracted from a file."""
    pass


class FileOperationError(MediaHygieneError):
    """Raised when a rename or copy operation fails."""
    pass


class NoLogFoundError(MediaHygieneError):
    """Raised when the journal needed for undo or backsync does not exist."""
    pass


class StaleLogEntryError(MediaHygieneError):
    """Raised when a journalled rename can no longer be reverted."""
    pass
