import pytest
from fastapi.testclient import TestClient

from glyphmap.config import Settings
from glyphmap.main import app, create_app

client = TestClient(app)


@pytest.fixture
def fresh():
    return TestClient(create_app(Settings(seed_defaults=True)))


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_convert_with_default_rules(fresh):
    r = fresh.post("/api/convert-text", json={"text": "sa"})
    assert r.status_code == 200
    assert r.json() == {"originalText": "sa", "convertedText": "કઅ", "rulesApplied": 3}


def test_convert_requires_text(fresh):
    assert fresh.post("/api/convert-text", json={}).status_code == 400
    r = fresh.post("/api/convert-text", json={"text": "", "configId": "x"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Text is required"


def test_import_rule_file(fresh):
    raw = "source,target\nb,ા\n".encode("utf-8")
    files = {"file": ("rules.csv", raw, "text/csv")}
    r = fresh.post("/api/mapping-rules/import", files=files)
    assert r.status_code == 201

    data = r.json()
    assert data["message"] == "Successfully imported 1 mapping rules"
    assert data["rules"][0]["sourceChar"] == "b"
    assert data["configuration"] is None

    r = fresh.post("/api/convert-text", json={"text": "ab"})
    assert r.json()["convertedText"] == "આ"
    assert r.json()["rulesApplied"] == 4


def test_import_rejects_unknown_type(fresh):
    files = {"file": ("rules.xml", b"<rules/>", "application/xml")}
    assert fresh.post("/api/mapping-rules/import", files=files).status_code == 422


def test_import_rejects_malformed_file(fresh):
    files = {"file": ("rules.json", b"{broken", "application/json")}
    r = fresh.post("/api/mapping-rules/import", files=files)
    assert r.status_code == 400
    assert r.json()["detail"] == "Failed to parse or import file"


def test_import_size_limit():
    small = TestClient(create_app(Settings(max_upload_bytes=8)))
    files = {"file": ("rules.txt", b"k = x\ng = y\n", "text/plain")}
    assert small.post("/api/mapping-rules/import", files=files).status_code == 413
