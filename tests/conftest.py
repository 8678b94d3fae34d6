"""
Pytest fixtures for presence_audit tests.
"""

from __future__ import annotations

import pytest

from presence_audit.diagnostics import MemorySink
from presence_audit.models import ManualOverrides, RawFindings


@pytest.fixture
def empty_raw():
    """Findings with nothing detected."""
    return RawFindings()


@pytest.fixture
def sink():
    """Diagnostic sink that keeps traces in memory."""
    return MemorySink()


@pytest.fixture
def full_raw():
    """Findings with data for every automated topic."""
    return RawFindings.model_validate({
        "business_name": "Malerbetrieb Beispiel",
        "search": {"score": 70, "keywords": [{"keyword": "maler", "found": True}, {"keyword": "lackierer"}]},
        "performance": {"score": 80},
        "mobile": {"score": 90},
        "local": {"score": 60},
        "content": {"score": 65},
        "backlinks": {"referring_domains": 25},
        "social": {"Facebook": {"found": True, "followers": 150, "last_post": "heute"}},
        "reviews": {"count": 12, "rating": 4.5},
        "workplace": {"kununu": {"found": True, "rating": 4.0, "reviews": 12}},
        "accessibility": {"violations": [], "passes": 25},
        "privacy": {"violations": []},
        "security": {
            "has_ssl": True,
            "ssl_grade": "A",
            "headers": {
                "content_security_policy": True,
                "x_frame_options": True,
                "x_content_type_options": True,
                "strict_transport_security": True,
                "referrer_policy": True,
            },
        },
    })


@pytest.fixture
def empty_manual():
    return ManualOverrides()


@pytest.fixture
def client():
    """FastAPI TestClient for the scoring API."""
    from fastapi.testclient import TestClient

    from presence_audit.api import app

    return TestClient(app)
