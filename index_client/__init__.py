"""Client for the embedding index endpoints of the LLM backend."""

from .api import EmbeddingIndexAPI
from .auth import TokenStore, env_token, static_token
from .config import Settings, settings
from .errors import EmbeddingAPIError, HTTPError, NetworkError, ParseError

__all__ = [
    "EmbeddingIndexAPI",
    "TokenStore",
    "env_token",
    "static_token",
    "Settings",
    "settings",
    "EmbeddingAPIError",
    "HTTPError",
    "NetworkError",
    "ParseError",
]
