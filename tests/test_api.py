import pytest
from fastapi.testclient import TestClient

from glyphmap.config import Settings
from glyphmap.main import create_app


@pytest.fixture
def client():
    return TestClient(create_app(Settings(seed_defaults=True)))


@pytest.fixture
def empty_client():
    return TestClient(create_app(Settings(seed_defaults=False)))


def test_list_default_rules(client):
    r = client.get("/api/mapping-rules")
    assert r.status_code == 200
    rules = r.json()
    assert [rule["sourceChar"] for rule in rules] == ["s", "a", "k"]
    assert set(rules[0]) == {"id", "sourceChar", "targetChar", "caseSensitive", "isActive"}


def test_rule_lifecycle(client):
    r = client.post("/api/mapping-rules", json={"sourceChar": "g", "targetChar": "ગ"})
    assert r.status_code == 201
    rule = r.json()
    assert rule["caseSensitive"] is True
    assert rule["isActive"] is True

    r = client.put(f"/api/mapping-rules/{rule['id']}", json={"isActive": False})
    assert r.status_code == 200
    assert r.json()["isActive"] is False
    assert r.json()["targetChar"] == "ગ"

    assert client.delete(f"/api/mapping-rules/{rule['id']}").status_code == 204
    assert client.delete(f"/api/mapping-rules/{rule['id']}").status_code == 404
    assert client.put(f"/api/mapping-rules/{rule['id']}", json={"isActive": True}).status_code == 404


def test_create_rule_validation(client):
    r = client.post("/api/mapping-rules", json={"sourceChar": "", "targetChar": "ગ"})
    assert r.status_code == 422


def test_inactive_rule_does_not_convert(client):
    rules = client.get("/api/mapping-rules").json()
    s_rule = next(rule for rule in rules if rule["sourceChar"] == "s")
    client.put(f"/api/mapping-rules/{s_rule['id']}", json={"isActive": False})

    r = client.post("/api/convert-text", json={"text": "sa"})
    assert r.json() == {"originalText": "sa", "convertedText": "sઅ", "rulesApplied": 2}


def test_clear_rules(client):
    r = client.delete("/api/mapping-rules")
    assert r.status_code == 200
    assert r.json() == {"message": "Successfully deleted 3 mapping rules", "deletedCount": 3}

    r = client.post("/api/convert-text", json={"text": "િક"})
    assert r.json() == {"originalText": "િક", "convertedText": "કિ", "rulesApplied": 0}


def test_export_rules(client):
    r = client.get("/api/mapping-rules/export", params={"format": "txt"})
    assert r.status_code == 200
    assert r.text == "s = ક\na = અ\nk = ક\n"
    assert "mapping-rules.txt" in r.headers["content-disposition"]

    r = client.get("/api/mapping-rules/export")
    assert [rule["sourceChar"] for rule in r.json()["rules"]] == ["s", "a", "k"]

    assert client.get("/api/mapping-rules/export", params={"format": "xml"}).status_code == 422


def test_import_with_configuration(client):
    body = '{"rules": [{"sourceChar": "g", "targetChar": "ગ"}], "configuration": {"name": "Mine"}}'
    files = {"file": ("mine.json", body.encode("utf-8"), "application/json")}
    r = client.post("/api/mapping-rules/import", files=files)
    assert r.status_code == 201
    assert r.json()["configuration"]["name"] == "Mine"
    assert len(client.get("/api/mapping-configurations").json()) == 2


def test_configuration_lifecycle(client):
    r = client.get("/api/mapping-configurations/default")
    assert r.status_code == 200
    default = r.json()
    assert default["isDefault"] is True
    assert default["caseSensitivity"] == "sensitive"

    r = client.put(f"/api/mapping-configurations/{default['id']}", json={"outputFormat": "html"})
    assert r.status_code == 200
    assert r.json()["outputFormat"] == "html"

    r = client.post("/api/mapping-configurations", json={"name": "Other", "mappingMode": "bogus"})
    assert r.status_code == 422

    r = client.post("/api/mapping-configurations", json={"name": "Other"})
    assert r.status_code == 201
    other = r.json()

    assert client.delete(f"/api/mapping-configurations/{other['id']}").status_code == 204
    assert client.delete(f"/api/mapping-configurations/{other['id']}").status_code == 404
    assert client.put(f"/api/mapping-configurations/{other['id']}", json={"name": "x"}).status_code == 404


def test_no_default_configuration(empty_client):
    assert empty_client.get("/api/mapping-configurations/default").status_code == 404
    assert empty_client.get("/api/mapping-rules").json() == []


def test_normalize_endpoint(empty_client):
    r = empty_client.post("/api/normalize-text", json={"text": "અા"})
    assert r.json() == {"originalText": "અા", "normalizedText": "આ"}


def test_text_statistics_endpoint(empty_client):
    r = empty_client.post("/api/text-statistics", json={"text": "one two\nthree"})
    assert r.json() == {"characters": 13, "words": 3, "lines": 2}


def test_service_statistics(client):
    r = client.get("/api/statistics")
    assert r.json() == {"activeMappings": 3, "totalMappings": 3, "configFiles": 1}


def test_character_catalogue(empty_client):
    r = empty_client.get("/api/characters")
    assert r.status_code == 200
    assert "ક" in r.json()["categories"]["consonants"]
