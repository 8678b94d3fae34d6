"""
Score report validation, score bands and text labels.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .aggregation import CATEGORY_WEIGHTS, TOPIC_WEIGHTS
from .capping import cap_for
from .scores import NO_DATA, ScoreValue, Topic

WEIGHT_TOLERANCE = 1e-6


@dataclass
class ValidationError:
    """Single validation error."""
    field: str
    message: str
    severity: str = "error"  # "error" or "warning"

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message, "severity": self.severity}


@dataclass
class ValidationResult:
    """Result of score validation."""
    is_valid: bool
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationError] = field(default_factory=list)

    def add_error(self, field: str, message: str):
        self.errors.append(ValidationError(field, message, "error"))
        self.is_valid = False

    def add_warning(self, field: str, message: str):
        self.warnings.append(ValidationError(field, message, "warning"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


def _check_score(result: ValidationResult, path: str, score: Any) -> None:
    if score is None:
        return
    if isinstance(score, bool) or not isinstance(score, int):
        result.add_error(path, f"Score must be an integer, got {type(score).__name__}")
    elif score < 0 or score > 100:
        result.add_error(path, f"Score must be 0-100, got {score}")


def validate_score_report(report: Union[Dict[str, Any], Any]) -> ValidationResult:
    """
    Validate a score report (ScoreReport or its dict form).

    Errors: scores outside 0-100, missing categories, effective weights that
    do not add up to the base total. Warnings: categories and topics without
    data, failed scorers.
    """
    data = report if isinstance(report, dict) else report.to_dict()
    result = ValidationResult(is_valid=True)

    for required in ("overall", "categories", "topics"):
        if required not in data:
            result.add_error(required, f"Missing required field: {required}")
    if not result.is_valid:
        return result

    overall = data["overall"]
    _check_score(result, "overall.score", overall.get("score"))
    if overall.get("score") is None:
        result.add_warning("overall.score", "No category has data, overall score shown as 0")
    else:
        effective = overall.get("effectiveWeights", {})
        base_total = sum(CATEGORY_WEIGHTS.values())
        if abs(sum(effective.values()) - base_total) > WEIGHT_TOLERANCE:
            result.add_error(
                "overall.effectiveWeights",
                f"Effective weights sum to {sum(effective.values())}, expected {base_total}",
            )

    categories = data["categories"]
    for category in CATEGORY_WEIGHTS:
        path = f"categories.{category.value}"
        if category.value not in categories:
            result.add_error(path, f"Missing category: {category.value}")
            continue
        cat_data = categories[category.value]
        _check_score(result, f"{path}.score", cat_data.get("score"))
        if cat_data.get("score") is None:
            result.add_warning(path, "Category has no data, its weight was redistributed")
        for topic_name in cat_data.get("effectiveWeights", {}):
            if Topic(topic_name) not in TOPIC_WEIGHTS[category]:
                result.add_error(f"{path}.effectiveWeights", f"Topic {topic_name} does not belong here")

    for topic_name, topic_data in data["topics"].items():
        path = f"topics.{topic_name}"
        _check_score(result, f"{path}.score", topic_data.get("score"))
        violations = topic_data.get("violations")
        if violations and topic_data.get("score") is not None:
            cap_count = violations.get("capCount", 0)
            if cap_count and topic_data["score"] > cap_for(cap_count):
                result.add_error(path, f"Score {topic_data['score']} exceeds cap for {cap_count} active violation(s)")

    for failure in data.get("errors", []):
        result.add_warning(f"{failure['stage']}.{failure['name']}", f"Scoring failed: {failure['error']}")

    return result


# ============================================
# SCORE BANDS AND LABELS
# ============================================

SCORE_BANDS = (
    (90, "excellent"),
    (61, "good"),
)


def score_band(score: ScoreValue) -> Optional[str]:
    """excellent (>=90), good (>=61) or poor; None for NO_DATA."""
    if score is NO_DATA or score is None:
        return None
    for minimum, band in SCORE_BANDS:
        if score >= minimum:
            return band
    return "poor"


# (minimum score, label), checked top-down; the last entry is the fallback
SCORE_LABELS: Dict[str, tuple] = {
    "general": ((90, "Sehr gut"), (75, "Gut"), (60, "Befriedigend"), (40, "Ausbaufähig"), (0, "Mangelhaft")),
    "search": ((90, "Hervorragend optimiert"), (75, "Gut optimiert"), (60, "Grundoptimierung vorhanden"),
               (40, "Verbesserungsbedarf"), (0, "Erhebliche Mängel")),
    "performance": ((90, "Sehr schnell"), (75, "Schnell"), (60, "Akzeptabel"), (40, "Langsam"),
                    (0, "Sehr langsam")),
    "mobile": ((90, "Vollständig optimiert"), (75, "Gut optimiert"), (60, "Grundoptimierung"),
               (40, "Ausbaufähig"), (0, "Nicht mobiloptimiert")),
    "content": ((90, "Hervorragender Content"), (75, "Guter Content"), (60, "Durchschnittlicher Content"),
                (40, "Ausbaufähiger Content"), (0, "Unzureichender Content")),
    "imprint": ((90, "Vollständig"), (75, "Weitgehend vollständig"), (60, "Grunddaten vorhanden"),
                (40, "Unvollständig"), (0, "Erhebliche Mängel")),
    "social_media": ((80, "Sehr aktiv"), (60, "Aktiv"), (40, "Mäßig aktiv"), (0, "Inaktiv")),
    "workplace": ((70, "Sehr gute Bewertungen"), (50, "Gute Bewertungen"), (0, "Verbesserungsbedarf")),
    "data_privacy": ((90, "DSGVO-konform"), (70, "Gute Compliance"), (50, "Verbesserungsbedarf"),
                     (0, "Kritische Mängel")),
    "accessibility": ((95, "Vollständig barrierefrei"), (80, "Gut zugänglich"),
                      (60, "Grundlegende Barrierefreiheit"), (0, "Erhebliche Barrieren")),
    "hourly_rate": ((85, "sehr gut positioniert"), (70, "gut positioniert"), (60, "Sehr wettbewerbsfähig"),
                    (40, "wettbewerbsfähig"), (0, "Ausbaufähig")),
}

NO_DATA_LABEL = "—"


def describe_score(score: ScoreValue, topic: Union[Topic, str, None] = None) -> str:
    """German text label for a score, topic-specific where one exists."""
    if score is NO_DATA or score is None:
        return NO_DATA_LABEL
    key = topic.value if isinstance(topic, Topic) else (topic or "general")
    if key == "workplace" and score <= 0:
        return NO_DATA_LABEL
    for minimum, label in SCORE_LABELS.get(key, SCORE_LABELS["general"]):
        if score >= minimum:
            return label
    return SCORE_LABELS["general"][-1][1]


def generate_validation_report(result: ValidationResult) -> str:
    """
    Generate a human-readable validation report.

    Args:
        result: ValidationResult to format

    Returns:
        Formatted report string
    """
    lines = ["=" * 50, "SCORE REPORT VALIDATION", "=" * 50, ""]
    lines.append("✓ Report passed validation" if result.is_valid else "✗ Report FAILED validation")

    for title, items, marker in (("ERRORS", result.errors, "✗"), ("WARNINGS", result.warnings, "⚠")):
        if items:
            lines.extend(["", f"{title} ({len(items)}):", "-" * 30])
            lines.extend(f"  {marker} [{item.field}] {item.message}" for item in items)

    if not result.errors and not result.warnings:
        lines.extend(["", "No issues found."])
    lines.extend(["", "=" * 50])
    return "\n".join(lines)
