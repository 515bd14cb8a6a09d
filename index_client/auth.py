"""Bearer token sources.

A token source is any zero-argument callable returning the current token. The
client calls it once per request, so swapping the value takes effect on the
next call.
"""

from __future__ import annotations

import os
from threading import Lock
from typing import Callable, Optional

TokenSource = Callable[[], Optional[str]]


class TokenStore:
    """Mutable single-value holder for the current session token."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token
        self._lock = Lock()

    def get(self) -> str | None:
        with self._lock:
            return self._token

    def set(self, token: str | None) -> None:
        with self._lock:
            self._token = token

    def clear(self) -> None:
        self.set(None)

    def __call__(self) -> str | None:
        return self.get()


def static_token(value: str | None) -> TokenSource:
    def _source() -> str | None:
        return value

    return _source


def env_token(name: str = "EMBEDDING_API_TOKEN") -> TokenSource:
    """Read ``name`` from the environment on every call."""

    def _source() -> str | None:
        return os.getenv(name)

    return _source


def as_token_source(token: TokenSource | str | None) -> TokenSource:
    if callable(token):
        return token
    return static_token(token)
