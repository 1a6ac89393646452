# core/exceptions.py
from typing import Any, Optional


class SffvektorError(Exception):
    """Base class for errors raised by the sync core.

    Carries a machine readable ``code`` and optional ``details`` so the API
    can render a structured error payload.
    """

    code = "UNKNOWN_INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {
            'message': self.message,
            'code': self.code,
            'details': self.details,
        }


class EntityNotFound(SffvektorError):
    """A referenced entity (book list, book) does not exist."""
    code = "ENTITY_NOT_FOUND"


class ExtractionError(SffvektorError):
    """Required markup is missing from a fetched page."""
    code = "EXTRACTION_ERROR"


class FetchError(SffvektorError):
    """An HTTP request failed after all retries were used up."""
    code = "FETCH_ERROR"

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        super().__init__(message, {'url': url, 'status_code': status_code})
        self.url = url
        self.status_code = status_code


class UniqueConstraintError(SffvektorError):
    """A row with the same unique key already exists."""
    code = "UNIQUE_CONSTRAINT_VIOLATION"
