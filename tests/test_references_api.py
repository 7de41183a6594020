# tests/test_references_api.py
"""
Tests for routes/references_api.py - the /api/references endpoints.
"""

import pytest

from mybible.core import config
from mybible.routes import references_api
from mybible.server import create_app

from conftest import MODULE_NAME


@pytest.fixture
def client(service):
    references_api.set_service(service)
    app = create_app()
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client
    references_api.set_service(None)


def test_parse(client):
    resp = client.get("/api/references/parse", query_string={"ref": "John 3:16-18", "module": MODULE_NAME})

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["module"] == MODULE_NAME
    assert data["ranges"][0]["verse_count"] == 3
    assert data["ranges"][0]["start"] == {"book": 500, "chapter": 3, "verse": 16, "book_name": "John"}


def test_parse_reports_default_module(client, default_module):
    resp = client.get("/api/references/parse", query_string={"ref": "Jude"})

    assert resp.status_code == 200
    assert resp.get_json()["module"] == MODULE_NAME


def test_parse_without_any_module(client, monkeypatch):
    monkeypatch.setattr(config, "DEFAULT_MODULE", "")
    resp = client.get("/api/references/parse", query_string={"ref": "Jude"})
    assert resp.status_code == 404


def test_parse_missing_ref(client):
    resp = client.get("/api/references/parse")

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "missing_parameter"


def test_parse_invalid_reference(client):
    resp = client.get("/api/references/parse", query_string={"ref": "John 99:1", "module": MODULE_NAME})

    assert resp.status_code == 400
    data = resp.get_json()
    assert data["error"] == "invalid_reference"
    assert data["kind"] == "out_of_range"
    assert data["token"] == "99:1"
    assert "detail" in data


def test_unknown_module(client):
    resp = client.get("/api/references/parse", query_string={"ref": "John 3:16", "module": "NOPE"})
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "not_found"


def test_unreadable_module(client, modules_dir):
    (modules_dir / "BROKEN.SQLite3").write_bytes(b"garbage" * 200)
    resp = client.get("/api/references/lookup", query_string={"ref": "John 3:16", "module": "BROKEN"})
    assert resp.status_code == 503
    assert resp.get_json()["error"] == "index_unavailable"


def test_lookup(client):
    resp = client.get("/api/references/lookup", query_string={"ref": "Jude 1:1-3", "module": MODULE_NAME})

    assert resp.status_code == 200
    data = resp.get_json()
    assert [v["verse"] for v in data["verses"]] == [1, 2, 3]
    assert data["verse_count"] == 3


def test_lookup_with_module_abbreviations(client):
    resp = client.get(
        "/api/references/lookup",
        query_string={"ref": "Jhn 3:16", "module": MODULE_NAME, "abbreviations": "true"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["verses"][0]["verse"] == 16


def test_lookup_invalid_reference(client):
    resp = client.get("/api/references/lookup", query_string={"ref": "John 3:18-16", "module": MODULE_NAME})

    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "inverted_range"


def test_modules(client):
    resp = client.get("/api/references/modules")

    assert resp.status_code == 200
    modules = resp.get_json()["modules"]
    assert [m["name"] for m in modules] == [MODULE_NAME]
    assert modules[0]["language"] == "en"
