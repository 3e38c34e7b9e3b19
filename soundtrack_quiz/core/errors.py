"""Error taxonomy for catalog loading, selection and quiz generation."""

from __future__ import annotations


class SoundtrackQuizError(Exception):
    """Base class for expected domain failures."""


class DataUnavailableError(SoundtrackQuizError):
    """Raised when catalog data cannot be read, parsed or validated."""


class InsufficientDataError(SoundtrackQuizError):
    """Raised when the catalog cannot supply what was requested."""


class NoOperationError(SoundtrackQuizError):
    """Raised when there is nothing to compute, e.g. zero songs."""
