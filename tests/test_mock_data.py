"""
Tests for the deterministic sample findings.
"""

from __future__ import annotations

from presence_audit.engine import score_analysis
from presence_audit.mock_data import generate_mock_findings
from presence_audit.score_validator import validate_score_report


def test_mock_findings_are_deterministic():
    assert generate_mock_findings("Tischlerei Holz") == generate_mock_findings("Tischlerei Holz")


def test_mock_findings_vary_by_name():
    assert generate_mock_findings("A").model_dump() != generate_mock_findings("Bäckerei Korn").model_dump()


def test_mock_findings_score_cleanly():
    for name in ("A", "Dachdecker Meier", "Elektro Schulz GmbH", "Sanitär & Heizung Yilmaz"):
        report = score_analysis(generate_mock_findings(name), parallel=False)
        assert report.errors == []
        assert validate_score_report(report).is_valid
