"""
Compliance topic scorers: accessibility, data privacy, technical security.

All three share the same pattern: compute a pre-cap score, assess the topic's
violations against the reviewer's checklist, then cap the score by the number
of active critical/high violations.
"""
from typing import Dict, List, Optional

from .audit_logging import get_logger
from .capping import apply_cap, cap_for
from .diagnostics import DiagnosticSink
from .models import (
    AccessibilityOverride,
    DataPrivacyOverride,
    RawFindings,
    TechnicalSecurityOverride,
)
from .reconcile import Partial, blend, finalize, rating
from .scores import NO_DATA, Topic, TopicScore, clamp_score
from .violations import (
    AssertionRule,
    NeutralizationRule,
    Origin,
    Severity,
    Violation,
    ViolationAssessment,
    ViolationId,
    assess_violations,
    build_violations,
    derive_asserted_violations,
    severity_penalty,
)

logger = get_logger(__name__)


def _collect_violations(
    topic: Topic,
    auto_findings,
    override,
    assertion_rules,
    extra: List[Violation] = None,
) -> List[Violation]:
    """Auto + custom + extra violations, followed by those implied by 'not present' answers."""
    suppressed = getattr(override, "suppressed_violation_ids", None) or []
    violations = build_violations(topic.value, auto_findings, origin=Origin.AUTO, suppressed_ids=suppressed)
    if override is not None:
        violations += build_violations(
            topic.value, override.custom_violations, origin=Origin.CUSTOM, suppressed_ids=suppressed
        )
    violations += extra or []
    violations += derive_asserted_violations(topic.value, override, assertion_rules, violations)
    return violations


def _capped(pre_cap: Partial, assessment: ViolationAssessment):
    if pre_cap is NO_DATA:
        return NO_DATA, NO_DATA
    pre = clamp_score(pre_cap)
    capped = apply_cap(pre, assessment.cap_count)
    if capped < pre:
        logger.info("score_capped", topic=assessment.topic, pre_cap=pre, score=capped,
                    active_critical=assessment.cap_count)
    return pre, capped


# ============================================
# ACCESSIBILITY
# ============================================

ACCESSIBILITY_CHECKLIST = (
    "keyboard_navigation",
    "screen_reader_compatible",
    "color_contrast",
    "alt_texts_present",
    "focus_visibility",
    "text_scaling",
)

ACCESSIBILITY_NEUTRALIZATION_RULES = (
    NeutralizationRule("alt_texts", r"\balt\b|alt.?text|alternativ|bildbeschreibung", "alt_texts_present"),
    NeutralizationRule("keyboard", r"keyboard|tastatur", "keyboard_navigation"),
    NeutralizationRule("screen_reader", r"screen.?reader|aria|label", "screen_reader_compatible"),
    NeutralizationRule("contrast", r"contrast|kontrast", "color_contrast"),
    NeutralizationRule("focus", r"focus|fokus", "focus_visibility"),
    NeutralizationRule("text_scaling", r"zoom|scal|skalier|schriftgr", "text_scaling"),
)

ACCESSIBILITY_ASSERTION_RULES = (
    AssertionRule("alt_texts_present", "Alternativtexte für Bilder fehlen", Severity.CRITICAL,
                  r"\balt\b|alt.?text|alternativ|bildbeschreibung"),
    AssertionRule("keyboard_navigation", "Keine vollständige Tastaturnavigation", Severity.CRITICAL,
                  r"keyboard|tastatur"),
    AssertionRule("screen_reader_compatible", "Nicht mit Screenreadern kompatibel", Severity.HIGH,
                  r"screen.?reader|aria|label"),
    AssertionRule("color_contrast", "Unzureichender Farbkontrast", Severity.HIGH,
                  r"contrast|kontrast"),
    AssertionRule("focus_visibility", "Fokus nicht sichtbar", Severity.MEDIUM, r"focus|fokus"),
    AssertionRule("text_scaling", "Text nicht skalierbar", Severity.MEDIUM,
                  r"zoom|scal|skalier|schriftgr"),
)

# (maximum active violations, score), checked top-down
ACCESSIBILITY_VIOLATION_TIERS = (
    (0, 95),
    (3, 75),
    (7, 55),
)
ACCESSIBILITY_FLOOR_SCORE = 40

CHECKLIST_WEIGHT = 0.6
MANUAL_RATING_WEIGHT = 0.4


def accessibility_auto_score(active_auto_violations: int) -> int:
    for maximum, tier_score in ACCESSIBILITY_VIOLATION_TIERS:
        if active_auto_violations <= maximum:
            return tier_score
    return ACCESSIBILITY_FLOOR_SCORE


def accessibility_manual_score(manual: Optional[AccessibilityOverride]) -> Partial:
    """Checklist completeness blended with the reviewer's overall rating."""
    if manual is None:
        return NO_DATA
    answers = [getattr(manual, name) for name in ACCESSIBILITY_CHECKLIST]
    answered = [a for a in answers if a is not None]
    overall = rating(manual.overall_score, topic=Topic.ACCESSIBILITY.value, field="overall_score")
    if not answered:
        return overall
    completeness = sum(1 for a in answers if a is True) / len(ACCESSIBILITY_CHECKLIST) * 100
    if overall is NO_DATA:
        return completeness
    return CHECKLIST_WEIGHT * completeness + MANUAL_RATING_WEIGHT * overall


def score_accessibility(
    raw: RawFindings,
    manual: Optional[AccessibilityOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    topic = Topic.ACCESSIBILITY
    auto_findings = raw.accessibility.violations if raw.accessibility else []
    violations = _collect_violations(topic, auto_findings, manual, ACCESSIBILITY_ASSERTION_RULES)
    assessment = assess_violations(topic.value, violations, manual, ACCESSIBILITY_NEUTRALIZATION_RULES)

    auto: Partial = NO_DATA
    active_auto = 0
    if raw.accessibility is not None:
        active_auto = sum(1 for s in assessment.active if s.violation.origin is Origin.AUTO)
        auto = float(accessibility_auto_score(active_auto))
    manual_score = accessibility_manual_score(manual)

    pre_cap, value = _capped(blend(auto, manual_score), assessment)
    return finalize(
        topic,
        value,
        inputs=(raw.accessibility, manual),
        details={
            "auto": auto,
            "activeAutoViolations": active_auto,
            "manual": manual_score,
            "preCap": pre_cap,
            "cap": cap_for(assessment.cap_count),
        },
        sink=sink,
        violations=assessment,
    )


# ============================================
# DATA PRIVACY
# ============================================

PRIVACY_BASELINE = 75

PRIVACY_NEUTRALIZATION_RULES = (
    NeutralizationRule("ssl", r"ssl|tls|https|verschlüssel", "has_ssl", exclude_pattern=r"hsts"),
    NeutralizationRule("cookie_consent", r"cookie.?banner|consent|einwilligung", "cookie_consent"),
    NeutralizationRule("cookie_policy", r"cookie.?(richtlinie|policy)", "cookie_policy"),
    NeutralizationRule("privacy_policy", r"datenschutzerkl|privacy.?policy", "privacy_policy"),
    NeutralizationRule("processing_agreement", r"auftragsverarbeitung|\bavv\b|processing.?agreement",
                       "data_processing_agreement"),
    NeutralizationRule("data_subject_rights", r"betroffenenrecht|data.?subject", "data_subject_rights"),
)

PRIVACY_ASSERTION_RULES = (
    AssertionRule("has_ssl", "Keine SSL/TLS-Verschlüsselung", Severity.CRITICAL, r"ssl|tls|https"),
    AssertionRule("privacy_policy", "Datenschutzerklärung fehlt", Severity.CRITICAL,
                  r"datenschutzerkl|privacy.?policy"),
    AssertionRule("cookie_consent", "Kein Cookie-Consent-Banner", Severity.HIGH,
                  r"cookie.?banner|consent|einwilligung"),
)

TRACKING_WITHOUT_CONSENT_PENALTY = 10
THIRD_COUNTRY_WITHOUT_DPA_PENALTY = 8

PROCESSING_REGISTER_PRESENT = 10
PROCESSING_REGISTER_ABSENT = -10
DPO_PRESENT = 10
DPO_ABSENT = -5
NO_THIRD_COUNTRY_TRANSFER = 5
DOCUMENTED_TRANSFER = 3
UNDOCUMENTED_TRANSFER = -15


def _derived_privacy_violations(manual: Optional[DataPrivacyOverride]) -> Dict[ViolationId, tuple]:
    """Tracking scripts without consent and third-country services without a DPA."""
    derived: Dict[ViolationId, tuple] = {}
    if manual is None:
        return derived
    suppressed = set(manual.suppressed_violation_ids)
    topic = Topic.DATA_PRIVACY.value
    for script in manual.tracking_scripts:
        if script.has_consent is True:
            continue
        violation_id = ViolationId(f"{topic}:{Origin.DERIVED.value}:tracking:{script.name.strip().lower()}")
        violation = Violation(
            id=violation_id,
            topic=topic,
            description=f"Tracking-Skript lädt ohne Zustimmung: {script.name}",
            severity=Severity.HIGH,
            origin=Origin.DERIVED,
            suppressed=violation_id in suppressed,
            raw_severity=Severity.HIGH.value,
        )
        derived[violation_id] = (violation, TRACKING_WITHOUT_CONSENT_PENALTY)
    for service in manual.external_services:
        if not service.third_country or service.has_dpa is True:
            continue
        violation_id = ViolationId(f"{topic}:{Origin.DERIVED.value}:third-country:{service.name.strip().lower()}")
        violation = Violation(
            id=violation_id,
            topic=topic,
            description=f"Drittland-Dienst ohne AV-Vertrag: {service.name}",
            severity=Severity.HIGH,
            origin=Origin.DERIVED,
            suppressed=violation_id in suppressed,
            raw_severity=Severity.HIGH.value,
        )
        derived[violation_id] = (violation, THIRD_COUNTRY_WITHOUT_DPA_PENALTY)
    return derived


def privacy_compliance_adjustment(manual: Optional[DataPrivacyOverride]) -> int:
    """Bonuses and deductions for explicitly confirmed mandatory-compliance facts."""
    if manual is None:
        return 0
    adjustment = 0
    if manual.processing_register is True:
        adjustment += PROCESSING_REGISTER_PRESENT
    elif manual.processing_register is False:
        adjustment += PROCESSING_REGISTER_ABSENT
    if manual.data_protection_officer is True:
        adjustment += DPO_PRESENT
    elif manual.data_protection_officer is False:
        adjustment += DPO_ABSENT
    if manual.third_country_transfer is False:
        adjustment += NO_THIRD_COUNTRY_TRANSFER
    elif manual.third_country_transfer is True:
        if manual.third_country_documented is True:
            adjustment += DOCUMENTED_TRANSFER
        else:
            adjustment += UNDOCUMENTED_TRANSFER
    return adjustment


def score_data_privacy(
    raw: RawFindings,
    manual: Optional[DataPrivacyOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    """
    Data-privacy score.

    Starts at 75 (or the reviewer's overall rating when set), subtracts
    severity penalties for active violations, applies compliance bonuses,
    subtracts per tracking script lacking consent and per third-country
    service lacking a processing agreement, then caps by active critical/high
    violations (derived ones included).
    """
    topic = Topic.DATA_PRIVACY
    if raw.privacy is None and manual is None:
        return finalize(topic, NO_DATA, inputs=(None, None), details={}, sink=sink)

    derived = _derived_privacy_violations(manual)
    auto_findings = raw.privacy.violations if raw.privacy else []
    violations = _collect_violations(
        topic,
        auto_findings,
        manual,
        PRIVACY_ASSERTION_RULES,
        extra=[violation for violation, _ in derived.values()],
    )
    assessment = assess_violations(topic.value, violations, manual, PRIVACY_NEUTRALIZATION_RULES)

    base: Partial = PRIVACY_BASELINE
    if manual is not None:
        overall = rating(manual.overall_score, topic=topic.value, field="overall_score")
        if overall is not NO_DATA:
            base = overall

    penalties = severity_penalty(assessment.statuses, skip_ids=derived.keys())
    derived_penalties = sum(
        penalty for violation_id, (_, penalty) in derived.items()
        if assessment.get(violation_id).is_active
    )
    adjustment = privacy_compliance_adjustment(manual)
    raw_score = base - penalties - derived_penalties + adjustment

    pre_cap, value = _capped(raw_score, assessment)
    return finalize(
        topic,
        value,
        inputs=(raw.privacy, manual),
        details={
            "base": base,
            "violationPenalty": penalties,
            "derivedPenalty": derived_penalties,
            "complianceAdjustment": adjustment,
            "preCap": pre_cap,
            "cap": cap_for(assessment.cap_count),
        },
        sink=sink,
        violations=assessment,
    )


# ============================================
# TECHNICAL SECURITY
# ============================================

SSL_GRADE_DEDUCTIONS = {
    "A+": 0,
    "A": 0,
    "B": 10,
    "C": 20,
    "D": 30,
    "E": 35,
    "T": 40,
    "F": 40,
}
NO_SSL_DEDUCTION = 40
MISSING_HEADER_DEDUCTION = 6
SECURITY_HEADERS = (
    "content_security_policy",
    "x_frame_options",
    "x_content_type_options",
    "strict_transport_security",
    "referrer_policy",
)

SECURITY_NEUTRALIZATION_RULES = (
    NeutralizationRule("ssl", r"ssl|tls|https|zertifikat|certificate", "has_ssl", exclude_pattern=r"hsts"),
    NeutralizationRule("hsts", r"hsts|strict.?transport", "has_hsts"),
    NeutralizationRule("safe_browsing", r"malware|phishing|safe.?browsing|unsicher", "safe_browsing_clean"),
)

SECURITY_ASSERTION_RULES = (
    AssertionRule("has_ssl", "Keine SSL/TLS-Verschlüsselung", Severity.CRITICAL,
                  r"ssl|tls|https|zertifikat|certificate"),
    AssertionRule("safe_browsing_clean", "Website als unsicher gemeldet", Severity.CRITICAL,
                  r"malware|phishing|safe.?browsing|unsicher"),
)

SSL_MISSING_ID = ViolationId("technical_security:auto:ssl-missing")
HSTS_MISSING_ID = ViolationId("technical_security:auto:hsts-missing")


def normalize_ssl_grade(grade: Optional[str]) -> Optional[str]:
    """Map an SSL Labs grade (A+, A-, B, ...) onto the deduction table."""
    grade = (grade or "").strip().upper()
    if not grade:
        return None
    if grade == "A+":
        return "A+"
    if grade[0] in "ABCDET":
        return grade[0]
    return "F"


def _security_findings_violations(raw: RawFindings, suppressed) -> List[Violation]:
    """Violations implied directly by the security findings."""
    security = raw.security
    topic = Topic.TECHNICAL_SECURITY.value
    found: List[Violation] = []
    if security is None:
        return found
    if security.has_ssl is False:
        found.append(Violation(
            id=SSL_MISSING_ID, topic=topic, description="Keine SSL/TLS-Verschlüsselung",
            severity=Severity.CRITICAL, origin=Origin.AUTO,
            suppressed=SSL_MISSING_ID in suppressed, raw_severity=Severity.CRITICAL.value,
        ))
    if security.headers is not None and not security.headers.strict_transport_security:
        found.append(Violation(
            id=HSTS_MISSING_ID, topic=topic, description="HSTS-Header fehlt",
            severity=Severity.MEDIUM, origin=Origin.AUTO,
            suppressed=HSTS_MISSING_ID in suppressed, raw_severity=Severity.MEDIUM.value,
        ))
    for threat in security.safe_browsing_threats:
        violation_id = ViolationId(f"{topic}:auto:threat:{threat.strip().lower()}")
        found.append(Violation(
            id=violation_id, topic=topic, description=f"Safe-Browsing-Warnung: {threat}",
            severity=Severity.CRITICAL, origin=Origin.AUTO,
            suppressed=violation_id in suppressed, raw_severity=Severity.CRITICAL.value,
        ))
    return found


def security_auto_score(raw: RawFindings, manual: Optional[TechnicalSecurityOverride]) -> Partial:
    """100 minus SSL and security-header deductions."""
    security = raw.security
    if security is None:
        return NO_DATA
    has_ssl = security.has_ssl
    if manual is not None and manual.has_ssl is not None:
        has_ssl = manual.has_ssl

    score = 100
    grade = normalize_ssl_grade(security.ssl_grade)
    if has_ssl is False:
        score -= NO_SSL_DEDUCTION
    elif grade is not None:
        score -= SSL_GRADE_DEDUCTIONS[grade]
    elif has_ssl is None:
        score -= NO_SSL_DEDUCTION

    if security.headers is None:
        score -= MISSING_HEADER_DEDUCTION * len(SECURITY_HEADERS)
    else:
        missing = [h for h in SECURITY_HEADERS if not getattr(security.headers, h)]
        if "strict_transport_security" in missing and manual is not None and manual.has_hsts is True:
            missing.remove("strict_transport_security")
        score -= MISSING_HEADER_DEDUCTION * len(missing)
    return float(score)


def score_technical_security(
    raw: RawFindings,
    manual: Optional[TechnicalSecurityOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    topic = Topic.TECHNICAL_SECURITY
    if raw.security is None and manual is None:
        return finalize(topic, NO_DATA, inputs=(None, None), details={}, sink=sink)

    suppressed = set(manual.suppressed_violation_ids) if manual else set()
    findings_violations = _security_findings_violations(raw, suppressed)
    auto_findings = raw.security.violations if raw.security else []
    violations = _collect_violations(
        topic, auto_findings, manual, SECURITY_ASSERTION_RULES, extra=findings_violations
    )
    assessment = assess_violations(topic.value, violations, manual, SECURITY_NEUTRALIZATION_RULES)

    auto = security_auto_score(raw, manual)
    penalties = 0
    if auto is not NO_DATA:
        # SSL and HSTS are already reflected in the deductions above
        penalties = severity_penalty(assessment.statuses, skip_ids=(SSL_MISSING_ID, HSTS_MISSING_ID))
        auto = auto - penalties
    manual_rating = rating(manual.rating, topic=topic.value, field="rating") if manual else NO_DATA

    pre_cap, value = _capped(blend(auto, manual_rating), assessment)
    return finalize(
        topic,
        value,
        inputs=(raw.security, manual),
        details={
            "auto": auto,
            "violationPenalty": penalties,
            "manual": manual_rating,
            "preCap": pre_cap,
            "cap": cap_for(assessment.cap_count),
        },
        sink=sink,
        violations=assessment,
    )
