"""Failure kinds raised by the embedding index client."""

from __future__ import annotations

from typing import Any


class EmbeddingAPIError(Exception):
    """Base class for every error raised by :class:`EmbeddingIndexAPI`."""


class HTTPError(EmbeddingAPIError):
    """The backend answered with a non-success status.

    ``detail`` is the raw ``detail`` field of the error body, which may be a
    string, a list of validation errors, or ``None`` when the body had none.
    """

    def __init__(self, status_code: int, detail: Any) -> None:
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class ParseError(EmbeddingAPIError):
    """The response body was not the JSON document the operation expects."""

    def __init__(self, status_code: int, body: str, reason: str = "invalid JSON") -> None:
        super().__init__(f"HTTP {status_code}: {reason}")
        self.status_code = status_code
        self.body = body
        self.reason = reason


class NetworkError(EmbeddingAPIError):
    """The request never produced a response."""

    def __init__(self, method: str, url: str) -> None:
        super().__init__(f"{method} {url} failed before a response was received")
        self.method = method
        self.url = url
