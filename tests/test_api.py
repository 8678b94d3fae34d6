"""
Tests for the FastAPI service surface.
"""

from __future__ import annotations


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/").json() == {"status": "ok"}


def test_score_endpoint(client):
    payload = {
        "raw": {
            "business_name": "Malerbetrieb Beispiel",
            "performance": {"score": 80},
            "privacy": {"violations": [{"description": "Datenschutzerklärung fehlt", "severity": "critical"}]},
        },
        "manual": {"data_privacy": {"overall_score": 95}},
    }
    response = client.post("/api/score", json=payload)
    assert response.status_code == 200
    body = response.json()
    assert body["topics"]["data_privacy"]["score"] == 59
    assert body["topics"]["hourly_rate"]["score"] is None
    assert body["validation"]["isValid"] is True


def test_score_endpoint_rejects_bad_payload(client):
    response = client.post("/api/score", json={"raw": {"social": "nope"}})
    assert response.status_code == 422


def test_test_score_endpoint(client):
    response = client.post("/api/test-score", json={"business_name": "Dachdecker Meier"})
    assert response.status_code == 200
    body = response.json()
    assert body["isTest"] is True
    assert 0 <= body["overall"]["displayScore"] <= 100


def test_export_check(client):
    blocked = client.post(
        "/api/export/check",
        json={"categories": {"recommendations": {"is_reviewed": False}, "summary": {"is_reviewed": True}}},
    )
    assert blocked.status_code == 409
    assert blocked.json()["detail"]["unreviewedCategories"] == ["recommendations"]

    allowed = client.post("/api/export/check", json={"categories": {"summary": {"is_reviewed": True}}})
    assert allowed.status_code == 200
    assert allowed.json()["allowed"] is True
