"""Error taxonomy for the scrape pipeline.

Only ``InvalidQuery`` is meant to reach a caller. Everything else is raised
below the orchestrator and converted into a warning on the ScrapeResult.
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classification of a failed browser step."""

    TIMEOUT = "timeout"
    NAVIGATION = "navigation-failure"
    OTHER = "other"


class ScrapeError(Exception):
    """Base class for scrape pipeline errors."""


class InvalidQuery(ScrapeError, ValueError):
    """A required query field is missing or malformed. Never retried."""


class FetchFailure(ScrapeError):
    """The browser step failed before producing candidate records."""

    kind: FailureKind = FailureKind.OTHER

    def __init__(self, message: str, *, kind: FailureKind | None = None) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class FetchTimeout(FetchFailure):
    """The browser step exceeded its deadline."""

    kind = FailureKind.TIMEOUT


class EmptyExtraction(ScrapeError):
    """The page loaded but held zero usable candidate records."""
