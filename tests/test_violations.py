"""
Tests for the violation registry: ids, severities, suppression, neutralization.
"""

from __future__ import annotations

from presence_audit.models import AccessibilityOverride, ViolationFinding
from presence_audit.violations import (
    AssertionRule,
    NeutralizationRule,
    Origin,
    Severity,
    assess_violations,
    build_violations,
    derive_asserted_violations,
    make_violation_id,
    parse_severity,
    severity_penalty,
)

ALT_RULE = NeutralizationRule("alt_texts", r"alternativ", "alt_texts_present")
ALT_ASSERTION = AssertionRule("alt_texts_present", "Alternativtexte fehlen", Severity.CRITICAL, r"alternativ")


def _findings(*items):
    return [ViolationFinding(description=d, severity=s) for d, s in items]


def test_ids_do_not_depend_on_position():
    first = build_violations("accessibility", _findings(("A", "high"), ("B", "low")), origin=Origin.AUTO)
    second = build_violations("accessibility", _findings(("B", "low"), ("A", "high")), origin=Origin.AUTO)
    assert {v.id for v in first} == {v.id for v in second}
    assert first[0].id == second[1].id


def test_producer_id_is_kept():
    finding = ViolationFinding(id="axe:image-alt", description="Bild ohne Alternativtext", severity="critical")
    (violation,) = build_violations("accessibility", [finding], origin=Origin.AUTO)
    assert violation.id == "axe:image-alt"


def test_make_violation_id_format():
    violation_id = make_violation_id("data_privacy", Origin.CUSTOM, "Kein Impressum", "high")
    assert violation_id.startswith("data_privacy:custom:")


def test_severity_aliases_and_invalid():
    assert parse_severity("serious", topic="t", violation_id="x") is Severity.HIGH
    assert parse_severity("Critical", topic="t", violation_id="x") is Severity.CRITICAL
    assert parse_severity("catastrophic", topic="t", violation_id="x") is None


def test_invalid_severity_is_kept_but_ignored():
    violations = build_violations("accessibility", _findings(("Seltsam", "urgent")), origin=Origin.AUTO)
    assessment = assess_violations("accessibility", violations, None, [])
    assert len(assessment.violations) == 1
    assert assessment.cap_count == 0
    assert severity_penalty(assessment.statuses) == 0


def test_neutralized_violation_stays_in_list():
    violations = build_violations(
        "accessibility", _findings(("Bilder ohne Alternativtext", "critical")), origin=Origin.AUTO
    )
    override = AccessibilityOverride(alt_texts_present=True)
    assessment = assess_violations("accessibility", violations, override, [ALT_RULE])
    assert len(assessment.violations) == 1
    assert assessment.neutralized[0].neutralized_by == "alt_texts"
    assert assessment.cap_count == 0


def test_unanswered_checkbox_does_not_neutralize():
    violations = build_violations(
        "accessibility", _findings(("Bilder ohne Alternativtext", "critical")), origin=Origin.AUTO
    )
    assessment = assess_violations("accessibility", violations, AccessibilityOverride(), [ALT_RULE])
    assert assessment.cap_count == 1


def test_suppressed_violation_does_not_count():
    violations = build_violations(
        "accessibility",
        _findings(("Bilder ohne Alternativtext", "critical")),
        origin=Origin.AUTO,
    )
    suppressed = build_violations(
        "accessibility",
        _findings(("Bilder ohne Alternativtext", "critical")),
        origin=Origin.AUTO,
        suppressed_ids=[violations[0].id],
    )
    assessment = assess_violations("accessibility", suppressed, None, [])
    assert suppressed[0].suppressed
    assert assessment.cap_count == 0
    assert len(assessment.violations) == 1


def test_medium_violations_never_count_toward_cap():
    violations = build_violations("accessibility", _findings(("Fokus fehlt", "medium")), origin=Origin.AUTO)
    assessment = assess_violations("accessibility", violations, None, [])
    assert assessment.cap_count == 0
    assert severity_penalty(assessment.statuses) == 8


def test_false_assertion_adds_manual_violation():
    override = AccessibilityOverride(alt_texts_present=False)
    derived = derive_asserted_violations("accessibility", override, [ALT_ASSERTION], [])
    assert len(derived) == 1
    assert derived[0].origin is Origin.MANUAL
    assert derived[0].id == "accessibility:manual:alt_texts_present"


def test_false_assertion_not_duplicated_when_auto_exists():
    existing = build_violations(
        "accessibility", _findings(("Bilder ohne Alternativtext", "critical")), origin=Origin.AUTO
    )
    override = AccessibilityOverride(alt_texts_present=False)
    assert derive_asserted_violations("accessibility", override, [ALT_ASSERTION], existing) == []


def test_false_assertion_not_covered_by_low_finding():
    existing = build_violations(
        "accessibility", _findings(("Einige Bilder ohne Alternativtext", "minor")), origin=Origin.AUTO
    )
    override = AccessibilityOverride(alt_texts_present=False)
    derived = derive_asserted_violations("accessibility", override, [ALT_ASSERTION], existing)
    assert [v.id for v in derived] == ["accessibility:manual:alt_texts_present"]
    assessment = assess_violations("accessibility", existing + derived, override, [ALT_RULE])
    assert assessment.cap_count == 1


def test_false_assertion_not_covered_by_invalid_severity():
    existing = build_violations(
        "accessibility", _findings(("Bilder ohne Alternativtext", "urgent")), origin=Origin.AUTO
    )
    override = AccessibilityOverride(alt_texts_present=False)
    derived = derive_asserted_violations("accessibility", override, [ALT_ASSERTION], existing)
    assert len(derived) == 1
    assert derived[0].severity is Severity.CRITICAL


def test_false_assertion_not_covered_by_suppressed_finding():
    findings = _findings(("Bilder ohne Alternativtext", "critical"))
    first = build_violations("accessibility", findings, origin=Origin.AUTO)
    existing = build_violations(
        "accessibility", findings, origin=Origin.AUTO, suppressed_ids=[first[0].id]
    )
    override = AccessibilityOverride(alt_texts_present=False)
    assert len(derive_asserted_violations("accessibility", override, [ALT_ASSERTION], existing)) == 1
