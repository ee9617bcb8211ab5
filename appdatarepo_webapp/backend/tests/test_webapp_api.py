"""API tests for the appdatarepo backend."""

from pathlib import Path

from fastapi.testclient import TestClient

from app.main import app

client = TestClient(app)

DOC = b"""<?xml version="1.0"?>
<component type="desktop">
  <id>foo.desktop</id>
  <name>Foo</name>
  <summary>Does foo</summary>
</component>
"""


def test_parse_document() -> None:
    """POST /api/parse returns the records of the body."""
    response = client.post("/api/parse", content=DOC)
    assert response.status_code == 200
    records = response.json()["records"]
    assert len(records) == 1
    assert records[0]["name"] == "application:Foo"
    assert records[0]["summary"] == "Does foo"
    assert "foo.appdata.xml" in records[0]["requires"]


def test_parse_with_filename() -> None:
    """The filename query parameter replaces the guessed link filename."""
    response = client.post("/api/parse", params={"filename": "org.foo.metainfo.xml"}, content=DOC)
    assert response.status_code == 200
    assert response.json()["records"][0]["requires"] == ["org.foo.metainfo.xml"]


def test_parse_malformed() -> None:
    """Malformed markup returns 422 with a location."""
    response = client.post("/api/parse", content=b"<component><name>x</component>")
    assert response.status_code == 422
    data = response.json()
    assert data["line"] == 1
    assert "message" in data


def test_directory(tmp_path: Path) -> None:
    """GET /api/directory ingests matching files and reports bad ones."""
    (tmp_path / "foo.appdata.xml").write_bytes(DOC)
    (tmp_path / "bad.metainfo.xml").write_text("<component>")
    (tmp_path / "README").write_text("ignored")
    response = client.get("/api/directory", params={"path": str(tmp_path)})
    assert response.status_code == 200
    data = response.json()
    assert [r["name"] for r in data["records"]] == ["application:Foo"]
    assert len(data["errors"]) == 1
    assert data["errors"][0]["path"].endswith("bad.metainfo.xml")


def test_directory_not_found() -> None:
    """GET /api/directory on a missing path returns 404."""
    response = client.get("/api/directory", params={"path": "/nonexistent/dir_xyz_123"})
    assert response.status_code == 404
    assert "not found" in response.json()["detail"].lower()
