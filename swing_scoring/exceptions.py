"""Error taxonomy for the swing scoring engine."""

from typing import Optional


class ScoringError(Exception):
    """Base class for all engine errors."""
    pass


class EmptyInputError(ScoringError, ValueError):
    """
    Raised when no valid swings or samples remain after filtering.

    This is the only failure the parser and the aggregators propagate; every
    downstream score assumes a non-empty denominator.

    Attributes:
        source: Name of the file or batch that produced no data, if known.
    """

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class PartialParseWarning(UserWarning):
    """
    Malformed rows were skipped while parsing a vendor export.

    Instances are recorded on the parse result and surfaced to the caller;
    they are never raised.

    Attributes:
        source: File the rows came from.
        skipped_rows: Number of rows that were dropped.
        valid_rows: Number of rows that parsed into swing records.
    """

    def __init__(self, source: str, skipped_rows: int, valid_rows: int):
        self.source = source
        self.skipped_rows = skipped_rows
        self.valid_rows = valid_rows
        super().__init__(
            f"{source}: skipped {skipped_rows} malformed row(s), "
            f"kept {valid_rows} valid swing(s)"
        )
