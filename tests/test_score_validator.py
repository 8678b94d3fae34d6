"""
Tests for score report validation, bands and labels.
"""

from __future__ import annotations

from presence_audit.engine import score_analysis
from presence_audit.score_validator import (
    describe_score,
    generate_validation_report,
    score_band,
    validate_score_report,
)
from presence_audit.scores import NO_DATA, Topic


def test_engine_report_is_valid(full_raw):
    result = validate_score_report(score_analysis(full_raw, parallel=False))
    assert result.is_valid
    # market environment and service quality have no data
    assert len([w for w in result.warnings if w.field.startswith("categories.")]) == 2


def test_out_of_range_score_is_an_error(full_raw):
    data = score_analysis(full_raw, parallel=False).to_dict()
    data["topics"]["search"]["score"] = 140
    result = validate_score_report(data)
    assert not result.is_valid
    assert result.errors[0].field == "topics.search.score"


def test_weight_mismatch_is_an_error(full_raw):
    data = score_analysis(full_raw, parallel=False).to_dict()
    data["overall"]["effectiveWeights"]["online_quality"] += 1
    assert not validate_score_report(data).is_valid


def test_uncapped_score_with_active_violation_is_an_error(full_raw):
    data = score_analysis(full_raw, parallel=False).to_dict()
    data["topics"]["accessibility"]["violations"]["capCount"] = 1
    assert not validate_score_report(data).is_valid


def test_missing_sections():
    result = validate_score_report({"overall": {}})
    assert not result.is_valid
    assert {e.field for e in result.errors} == {"categories", "topics"}


def test_score_band():
    assert score_band(95) == "excellent"
    assert score_band(90) == "excellent"
    assert score_band(61) == "good"
    assert score_band(60) == "poor"
    assert score_band(NO_DATA) is None


def test_describe_score():
    assert describe_score(92) == "Sehr gut"
    assert describe_score(55, Topic.DATA_PRIVACY) == "Verbesserungsbedarf"
    assert describe_score(85, "hourly_rate") == "sehr gut positioniert"
    assert describe_score(0, Topic.WORKPLACE) == "—"
    assert describe_score(NO_DATA, Topic.SEARCH) == "—"
    assert describe_score(70, Topic.LOCAL_PRESENCE) == "Befriedigend"
    assert describe_score(78, Topic.IMPRINT) == "Weitgehend vollständig"


def test_validation_report_text(full_raw):
    text = generate_validation_report(validate_score_report(score_analysis(full_raw, parallel=False)))
    assert "Report passed validation" in text
    assert "WARNINGS" in text


def test_cap_check_follows_violation_count(full_raw):
    data = score_analysis(full_raw, parallel=False).to_dict()
    accessibility = data["topics"]["accessibility"]
    accessibility["violations"]["capCount"] = 2
    accessibility["score"] = 50
    result = validate_score_report(data)
    assert not result.is_valid
    assert result.errors[0].field == "topics.accessibility"

    accessibility["score"] = 35
    assert validate_score_report(data).is_valid

    accessibility["violations"]["capCount"] = 3
    assert not validate_score_report(data).is_valid
