"""Error taxonomy for analysis and playback."""

from __future__ import annotations


class TraceViewerError(Exception):
    """Base class for every error surfaced to the user."""

    pass


class AnalyzerUnavailableError(TraceViewerError):
    """Raised when the external analyzer cannot be reached or returns nothing."""

    pass


class MalformedTraceError(TraceViewerError):
    """Raised when the analyzer reply is not a usable trace document.

    Covers invalid JSON, a top-level shape violation, an explicit ``error``
    field, and an empty ``steps`` list.
    """

    pass


class InvalidTraceError(MalformedTraceError):
    """Raised by PlaybackController.load() for a document it cannot play."""

    pass


class UserInputError(TraceViewerError):
    """Raised for empty or unsubmitted source, before the analyzer is called."""

    pass


class AnalysisInProgressError(TraceViewerError):
    """Raised when a second analysis is requested while one is outstanding."""

    pass
