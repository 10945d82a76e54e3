"""Exceptions for Gemini API errors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from genai_tokens.api._types import File


class APIError(Exception):
    """Raised when the Gemini API returns an HTTP error."""

    def __init__(self, status_code: int, body: dict[str, Any] | str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body}")


class RateLimitError(APIError):
    """Raised on HTTP 429 — includes optional ``retry_after`` from the server."""

    def __init__(
        self,
        status_code: int,
        body: dict[str, Any] | str,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(status_code, body)
        self.retry_after = retry_after


class FileProcessingError(Exception):
    """Raised when an uploaded file ends up in the ``FAILED`` state."""

    def __init__(self, file: File, message: str | None = None) -> None:
        self.file = file
        super().__init__(message or f"Processing of {file.name} failed: {file.error or 'unknown'}")


class FileProcessingTimeout(FileProcessingError):
    """Raised when a file is still ``PROCESSING`` after the wait bound."""

    def __init__(self, file: File, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(file, f"{file.name} still processing after {timeout:g}s")
