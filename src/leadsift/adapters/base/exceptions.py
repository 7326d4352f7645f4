"""Adapter-specific exceptions."""

from __future__ import annotations

from typing import Any


class AdapterError(Exception):
    """Base exception for adapter errors."""


class ConnectionError(AdapterError):
    """Raised when the adapter cannot connect to the search backend."""


class DocumentNotFoundError(AdapterError):
    """Raised when a requested document does not exist."""


class QueryError(AdapterError):
    """Raised when the backend rejects or fails a request.

    Attributes:
        error_type: Backend error type (e.g. ``query_shard_exception``), if reported.
        detail: Backend error body, if reported.
    """

    def __init__(self, message: str, error_type: str | None = None, detail: Any = None) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.detail = detail

