from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.testclient import TestClient
from starlette.datastructures import UploadFile

from index_client import EmbeddingIndexAPI, TokenStore

BASE_URL = "http://testserver"


@dataclass
class SeenRequest:
    method: str
    path: str
    query: dict[str, str]
    headers: dict[str, str]
    json: Any = None
    form: list[tuple[str, Any]] = field(default_factory=list)


class MockBackend:
    """Records every request and answers with a canned (status, body) per route."""

    def __init__(self) -> None:
        self.requests: list[SeenRequest] = []
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.app = self._build_app()

    def respond(self, method: str, path: str, status: int, body: Any) -> None:
        self.routes[(method, path)] = (status, body)

    @property
    def last(self) -> SeenRequest:
        return self.requests[-1]

    def _build_app(self) -> FastAPI:
        app = FastAPI()

        @app.api_route("/{path:path}", methods=["GET", "POST"])
        async def catch_all(path: str, request: Request):
            seen = SeenRequest(
                method=request.method,
                path=request.url.path,
                query=dict(request.query_params),
                headers={k.lower(): v for k, v in request.headers.items()},
            )
            content_type = request.headers.get("content-type", "")
            if content_type.startswith("multipart/form-data"):
                form = await request.form()
                for key, value in form.multi_items():
                    if isinstance(value, UploadFile):
                        seen.form.append((key, (value.filename, await value.read())))
                    else:
                        seen.form.append((key, value))
            elif content_type.startswith("application/json") and request.method == "POST":
                seen.json = await request.json()
            self.requests.append(seen)

            status, body = self.routes.get((request.method, request.url.path), (404, {"detail": "Not Found"}))
            if isinstance(body, str):
                return PlainTextResponse(body, status_code=status)
            return JSONResponse(body, status_code=status)

        return app


@pytest.fixture
def backend() -> MockBackend:
    return MockBackend()


@pytest.fixture
def token_store() -> TokenStore:
    return TokenStore("secret-token")


@pytest.fixture
def api(backend: MockBackend, token_store: TokenStore) -> EmbeddingIndexAPI:
    return EmbeddingIndexAPI(BASE_URL, token_store, session=TestClient(backend.app))
