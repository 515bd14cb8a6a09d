import json

import pytest
from fastapi.testclient import TestClient

from index_client import EmbeddingIndexAPI, cli


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)


@pytest.fixture
def cli_api(backend):
    return EmbeddingIndexAPI("http://testserver", "cli-token", session=TestClient(backend.app))


def test_list_public_prints_results(backend, cli_api, capsys):
    backend.respond("GET", "/embedding/index/", 200, {"results": [{"id": 1, "name": "A"}]})

    code = cli.main(["list", "--public"], api=cli_api)

    assert code == 0
    assert json.loads(capsys.readouterr().out) == [{"id": 1, "name": "A"}]
    assert backend.last.query == {"public": "true"}


def test_create_passes_append_summary(backend, cli_api, capsys):
    backend.respond("POST", "/embedding/index/", 201, {"id": 9})

    code = cli.main(["create", "Legal Docs", "legal", "US", "--append-summary"], api=cli_api)

    assert code == 0
    assert backend.last.json["is_append_summary_to_chunk"] is True
    assert json.loads(capsys.readouterr().out) == {"id": 9}


def test_upload_reads_path(backend, cli_api, tmp_path):
    path = tmp_path / "report.txt"
    path.write_text("quarterly", encoding="utf-8")
    backend.respond("POST", "/embedding/index-file", 200, {"status": "ok"})

    assert cli.main(["upload", "4", str(path)], api=cli_api) == 0
    assert backend.last.form == [("org_index_id", "4"), ("files", ("report.txt", b"quarterly"))]


def test_http_error_exits_non_zero(backend, cli_api, capsys):
    backend.respond("POST", "/embedding/delete-doc", 404, {"detail": "file not found"})

    code = cli.main(["delete", "7", "3", "doc-99"], api=cli_api)

    captured = capsys.readouterr()
    assert code == 1
    assert "file not found" in captured.err
    assert "404" in captured.err
    assert captured.out == ""


def test_upload_missing_path_exits_non_zero(backend, cli_api, tmp_path, capsys):
    missing = tmp_path / "nope.pdf"

    code = cli.main(["upload", "4", str(missing)], api=cli_api)

    captured = capsys.readouterr()
    assert code == 1
    assert "nope.pdf" in captured.err
    assert captured.out == ""
    assert backend.requests == []
