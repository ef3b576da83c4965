"""
Matching Engine Errors

None of these reach the host: the engine catches each one at its boundary
and degrades to a smaller, empty, or fallback result.
"""

from typing import Any, Optional


class RecommendationError(Exception):
    """Base class for all matching engine errors."""


class InsufficientDataError(RecommendationError):
    """Fewer signals than a matching step needs (e.g. too few assessments)."""

    def __init__(self, message: str, required: int = 0, available: int = 0):
        super().__init__(message)
        self.required = required
        self.available = available


class MalformedRecordError(RecommendationError):
    """A single answer or row holds a value that cannot be interpreted."""

    def __init__(self, reason: str, record_id: Optional[Any] = None):
        super().__init__(f"{reason} (record={record_id})" if record_id is not None else reason)
        self.reason = reason
        self.record_id = record_id


class CatalogUnavailableError(RecommendationError):
    """A career or program catalog is empty, missing, or failed to load."""

    def __init__(self, catalog: str, reason: str = "catalog is empty"):
        super().__init__(f"{catalog} catalog unavailable: {reason}")
        self.catalog = catalog
        self.reason = reason
