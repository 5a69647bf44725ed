"""Exception hierarchy for geo_reference.

Only construction-time problems are errors. A query that finds nothing
returns an empty list or None; it never raises.

Exception Hierarchy:
    GeoReferenceError (base)
    └── DatasetError
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class GeoReferenceError(Exception):
    """Base exception for all geo_reference errors.

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class DatasetError(GeoReferenceError):
    """The reference dataset could not be loaded or indexed.

    Raised when a data file is missing or unreadable, a collection is not
    iterable, or a record does not match its entity shape.
    """

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = dict(details or {})
        if collection:
            details["collection"] = collection
        super().__init__(message, details=details)
        self.collection = collection
