"""HTTP client for the embedding index service."""

from __future__ import annotations

import logging
import os
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, BinaryIO, Iterator, Union

import requests

from .auth import TokenSource, as_token_source
from .config import Settings
from .errors import HTTPError, NetworkError, ParseError
from .logging import REQUEST_ID_CTX

FileInput = Union[str, "os.PathLike[str]", bytes, BinaryIO]

DEFAULT_UPLOAD_NAME = "upload.bin"


class EmbeddingIndexAPI:
    """Create, list and query embedding indices on the LLM backend.

    Each method performs a single request. ``token`` is either a string or a
    zero-argument callable; callables are invoked on every request so the
    ``Authorization`` header always reflects the current value.

    ``session`` only needs ``request(method, url, **kwargs)``; by default the
    ``requests`` module itself is used, so instances share no connection state.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: TokenSource | str | None = None,
        *,
        session: Any = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.base = base_url.rstrip("/")
        self._token = as_token_source(token)
        self._session = session if session is not None else requests
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "EmbeddingIndexAPI":
        kwargs.setdefault("token", settings.api_token or None)
        return cls(settings.normalized_base_url(), **kwargs)

    # -- operations -----------------------------------------------------

    def create_index(
        self,
        name: str,
        category: str,
        geographic: str,
        append_summary: bool = False,
    ) -> Any:
        body = {
            "name": name,
            "category": category,
            "geographic": geographic,
            "is_append_summary_to_chunk": append_summary,
        }
        return self._request("POST", "/embedding/index/", json=body)

    def list_indexes(self) -> list[Any]:
        return self._request("GET", "/embedding/index/", envelope="results")

    def list_public_indexes(self) -> list[Any]:
        return self._request(
            "GET", "/embedding/index/", params={"public": "true"}, envelope="results"
        )

    def list_files(self, index_id: int) -> list[Any]:
        return self._request("GET", f"/embedding/index/{index_id}/files", envelope="results")

    def upload_file(
        self,
        index_id: int,
        file: FileInput,
        *,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> Any:
        """Upload ``file`` to be embedded under ``index_id``.

        ``file`` may be a path, raw bytes or an open binary file object. Paths
        are opened and closed here; file objects are left open for the caller.
        """
        with _upload_part(file, filename) as (name, payload):
            part = (name, payload) if content_type is None else (name, payload, content_type)
            return self._request(
                "POST",
                "/embedding/index-file",
                data={"org_index_id": str(index_id)},
                files={"files": part},
            )

    def delete_file(self, index_id: int, file_id: int, doc_ref_id: str) -> Any:
        body = {"org_index_id": index_id, "file_id": file_id, "doc_ref_id": doc_ref_id}
        return self._request("POST", "/embedding/delete-doc", json=body)

    def query_ranked_chunks(self, index_id: int, question: str) -> Any:
        body = {"org_index_id": index_id, "question": question}
        return self._request("POST", "/embedding/query-ranked-chunk", json=body)

    # -- transport ------------------------------------------------------

    def _headers(self, request_id: str, *, multipart: bool) -> dict[str, str]:
        token = self._token()
        headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {token or ''}",
            "X-Request-ID": request_id,
        }
        if not multipart:
            headers["Content-Type"] = "application/json"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        data: dict[str, str] | None = None,
        files: dict[str, Any] | None = None,
        envelope: str | None = None,
    ) -> Any:
        url = self.base + path
        request_id = uuid.uuid4().hex
        ctx_token = REQUEST_ID_CTX.set(request_id)
        try:
            kwargs: dict[str, Any] = {
                "headers": self._headers(request_id, multipart=files is not None)
            }
            if params is not None:
                kwargs["params"] = params
            if json is not None:
                kwargs["json"] = json
            if data is not None:
                kwargs["data"] = data
            if files is not None:
                kwargs["files"] = files

            log_extra = {"method": method, "path": path}
            self._logger.info("request_started", extra=log_extra)
            start = time.time()
            try:
                response = self._session.request(method, url, **kwargs)
            except requests.RequestException as exc:
                self._logger.warning(
                    "request_failed", extra={**log_extra, "error": str(exc)}
                )
                raise NetworkError(method, url) from exc
            duration_ms = int((time.time() - start) * 1000)
            status = response.status_code

            try:
                payload = response.json()
            except ValueError:
                self._logger.warning(
                    "response_parse_failed",
                    extra={**log_extra, "status_code": status, "duration_ms": duration_ms},
                )
                raise ParseError(status, response.text) from None

            if not 200 <= status < 300:
                detail = payload.get("detail") if isinstance(payload, dict) else None
                self._logger.warning(
                    "request_failed",
                    extra={**log_extra, "status_code": status, "duration_ms": duration_ms},
                )
                raise HTTPError(status, detail)

            self._logger.info(
                "request_completed",
                extra={**log_extra, "status_code": status, "duration_ms": duration_ms},
            )
            if envelope is None:
                return payload
            if not isinstance(payload, dict) or envelope not in payload:
                self._logger.warning(
                    "response_parse_failed",
                    extra={**log_extra, "status_code": status, "missing": envelope},
                )
                raise ParseError(status, response.text, reason=f"missing '{envelope}'")
            return payload[envelope]
        finally:
            REQUEST_ID_CTX.reset(ctx_token)


@contextmanager
def _upload_part(file: FileInput, filename: str | None) -> Iterator[tuple[str, Any]]:
    if isinstance(file, (str, os.PathLike)):
        path = Path(file)
        with path.open("rb") as fh:
            yield filename or path.name, fh
    elif isinstance(file, (bytes, bytearray)):
        yield filename or DEFAULT_UPLOAD_NAME, bytes(file)
    else:
        name = getattr(file, "name", None)
        if filename is None:
            filename = Path(name).name if isinstance(name, str) and name else DEFAULT_UPLOAD_NAME
        yield filename, file
