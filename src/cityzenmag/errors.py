"""Error taxonomy for the search core."""

from __future__ import annotations


class CityzenSearchError(Exception):
    """Base class for all search errors."""


class IndexingError(CityzenSearchError):
    """A normalization/indexing pass failed; the previous index is kept."""


class NotIndexedError(CityzenSearchError):
    """Search attempted before the first successful index build."""

    def __init__(self, message: str = "Index de recherche non prêt") -> None:
        super().__init__(message)


class SearchExecutionError(CityzenSearchError):
    """Unexpected failure while filtering, scoring or sorting."""


class PersistenceError(CityzenSearchError):
    """History/popularity could not be loaded or saved."""
