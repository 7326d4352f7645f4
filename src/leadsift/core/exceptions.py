"""Lead search exceptions surfaced to the API layer."""

from __future__ import annotations

from typing import Any


class LeadSearchError(Exception):
    """Base exception for lead search failures."""


class IndexUnavailableError(LeadSearchError):
    """No configured or default index exists.

    Not retryable: the same configuration cannot resolve on a second try.
    """

    def __init__(self, tried: list[str]) -> None:
        super().__init__(f"No OpenSearch index found (tried: {', '.join(tried) or 'none'})")
        self.tried = tried


class SearchEngineError(LeadSearchError):
    """The engine rejected the compiled query (parse or shard failure)."""

    def __init__(self, message: str, detail: Any = None) -> None:
        super().__init__(message)
        self.detail = detail


class InternalSearchError(LeadSearchError):
    """Any other search failure (connectivity, timeouts, unexpected responses)."""


class LeadNotFoundError(LeadSearchError):
    """The requested lead document does not exist."""


class InvalidFilterError(LeadSearchError):
    """The request carried filter parameters outside the recognized vocabulary."""

    def __init__(self, unknown: list[str]) -> None:
        super().__init__(f"Unrecognized filter parameters: {', '.join(unknown)}")
        self.unknown = unknown
