"""
List-Curation-Service - Custom Exceptions

All exception classes end with "Error" and do not shadow built-in names.
"""

from __future__ import annotations


class ListCurationError(Exception):
    """Base exception for List-Curation-Service.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message


class ConfigurationError(ListCurationError):
    """Raised when configuration is invalid or missing."""


class InvalidCriteriaError(ListCurationError):
    """Raised when curation criteria are malformed.

    Raised before any filtering runs, e.g. when the required permission
    level is not part of the permission scale or a strategy is not callable.
    """


class DuplicateRecordError(InvalidCriteriaError):
    """Raised when the input contains the same identifier more than once.

    Attributes:
        record_id: The first repeated identifier.
    """

    def __init__(self, record_id: str) -> None:
        super().__init__(f"duplicate record id: {record_id!r}")
        self.record_id = record_id


class InputTooLargeError(ListCurationError):
    """Raised when the input exceeds the configured record bound.

    Attributes:
        size: Number of records supplied.
        limit: Configured maximum.
    """

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"{size} records exceed the limit of {limit}")
        self.size = size
        self.limit = limit


class RankingUndefinedError(ListCurationError):
    """Raised when a ranking function yields no usable rank for a record.

    This is a per-record condition. The ranking stage absorbs it by
    excluding the record, so it never aborts a curation run.

    Attributes:
        record_id: Identifier of the record that could not be ranked.
        reason: Why the rank is undefined.
    """

    def __init__(self, record_id: str, reason: str) -> None:
        super().__init__(f"rank undefined for record {record_id!r}: {reason}")
        self.record_id = record_id
        self.reason = reason
