"""Abstract base class for search drivers."""

from abc import ABC, abstractmethod

from src.core.schemas import RawRecord


class SearchDriver(ABC):
    """Fetches raw candidate records for a search URL.

    Implementations raise FetchTimeout / FetchFailure (src.core.errors) on
    failure and must release their browser resources when cancelled.
    """

    @abstractmethod
    async def fetch_records(self, url: str) -> list[RawRecord]:
        """Navigate to ``url`` and return raw card snapshots in page order."""
