"""Error taxonomy for the commit analytics pipeline.

None of these conditions is fatal to the pipeline as a whole. Each one is
handled where it occurs and degrades a single row, commit or view.
"""

from typing import Optional


class CommitLensError(Exception):
    """Base class for all CommitLens errors."""


class MalformedRowError(CommitLensError):
    """A raw row could not be turned into a line record."""

    def __init__(self, reason: str, row_number: Optional[int] = None) -> None:
        self.reason = reason
        self.row_number = row_number
        location = f"row {row_number}" if row_number is not None else "row"
        super().__init__(f"Malformed {location}: {reason}")


class InvalidTimestampError(CommitLensError):
    """No usable timestamp could be resolved for a row."""

    def __init__(self, value: Optional[str], row_number: Optional[int] = None) -> None:
        self.value = value
        self.row_number = row_number
        super().__init__(f"Could not resolve timestamp: {value!r}")


class EmptyDatasetError(CommitLensError):
    """The loaded dataset produced no commits."""


class MissingCollaboratorError(CommitLensError):
    """A renderer operation the pipeline relies on is not available."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Renderer operation not available: {operation}")
