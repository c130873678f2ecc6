"""Custom exception hierarchy for the graph HTTP service."""
from __future__ import annotations

from typing import Any


class GraphHTTPError(RuntimeError):
    """Base error for graph HTTP failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class EncodingError(GraphHTTPError):
    """Raised when a parameter value cannot be serialized for the wire."""

    def __init__(self, message: str, *, key: str, details: Any | None = None) -> None:
        super().__init__(message, details=details)
        self.key = key


class UploadError(GraphHTTPError):
    """Raised when an upload source or its content type cannot be resolved."""
