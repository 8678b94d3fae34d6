"""
Violation registry: classification, suppression and neutralization.

Every violation keeps a stable ViolationId assigned when it is created. A
violation counts toward a topic's cap when its severity is critical or high,
the reviewer has not suppressed it, and no neutralization rule matches the
current manual override. Neutralized and suppressed violations stay in the
assessment for the audit trail.
"""
import hashlib
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, NewType, Optional, Sequence

from .audit_logging import get_logger
from .models import ViolationFinding

logger = get_logger(__name__)

ViolationId = NewType("ViolationId", str)


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Origin(str, Enum):
    AUTO = "auto"        # detected by the crawler
    CUSTOM = "custom"    # added by a reviewer
    MANUAL = "manual"    # derived from an explicit "not present" answer
    DERIVED = "derived"  # derived from reviewer-entered facts (scripts, services)


CAP_SEVERITIES = (Severity.CRITICAL, Severity.HIGH)

SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}

SEVERITY_PENALTY = {
    Severity.CRITICAL: 30,
    Severity.HIGH: 15,
    Severity.MEDIUM: 8,
    Severity.LOW: 3,
}

# Impact names used by automated accessibility checkers
SEVERITY_ALIASES = {
    "serious": Severity.HIGH,
    "moderate": Severity.MEDIUM,
    "minor": Severity.LOW,
}


def parse_severity(raw: str, *, topic: str, violation_id: str) -> Optional[Severity]:
    """Map a raw severity string; unknown values are logged and return None."""
    value = (raw or "").strip().lower()
    try:
        return Severity(value)
    except ValueError:
        pass
    if value in SEVERITY_ALIASES:
        return SEVERITY_ALIASES[value]
    logger.warning("invalid_severity", topic=topic, violation_id=violation_id, severity=raw)
    return None


def make_violation_id(topic: str, origin: Origin, description: str, severity: str) -> ViolationId:
    """Content-derived id, independent of the violation's position in a list."""
    key = f"{topic}|{origin.value}|{description.strip().lower()}|{(severity or '').strip().lower()}"
    digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:12]
    return ViolationId(f"{topic}:{origin.value}:{digest}")


@dataclass(frozen=True)
class Violation:
    id: ViolationId
    topic: str
    description: str
    severity: Optional[Severity]
    origin: Origin
    index: Optional[int] = None
    suppressed: bool = False
    raw_severity: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "severity": self.severity.value if self.severity else self.raw_severity,
            "origin": self.origin.value,
            "index": self.index,
            "suppressed": self.suppressed,
        }


@dataclass(frozen=True)
class NeutralizationRule:
    """
    A violation whose description matches `pattern` (and not
    `exclude_pattern`) is neutralized when `override_field` equals
    `required_value` on the topic's manual override.
    """
    name: str
    pattern: str
    override_field: str
    required_value: Any = True
    exclude_pattern: Optional[str] = None

    def applies_to(self, violation: Violation) -> bool:
        if not re.search(self.pattern, violation.description, re.IGNORECASE):
            return False
        if self.exclude_pattern and re.search(self.exclude_pattern, violation.description, re.IGNORECASE):
            return False
        return True

    def is_satisfied(self, override: Any) -> bool:
        if override is None:
            return False
        value = getattr(override, self.override_field, None)
        if isinstance(self.required_value, bool):
            return value is self.required_value
        return value == self.required_value

    def neutralizes(self, violation: Violation, override: Any) -> bool:
        return self.applies_to(violation) and self.is_satisfied(override)


@dataclass(frozen=True)
class AssertionRule:
    """
    An explicit False on `override_field` is recorded as a violation, unless
    an active violation matching `pattern` with at least the rule's severity
    already exists. Weaker or unclassified matches never stand in for it.
    """
    override_field: str
    description: str
    severity: Severity
    pattern: str

    def asserted_false(self, override: Any) -> bool:
        return override is not None and getattr(override, self.override_field, None) is False

    def covered_by(self, violations: Iterable[Violation]) -> bool:
        return any(
            v.severity is not None
            and not v.suppressed
            and SEVERITY_RANK[v.severity] >= SEVERITY_RANK[self.severity]
            and re.search(self.pattern, v.description, re.IGNORECASE)
            for v in violations
        )


@dataclass
class ViolationStatus:
    violation: Violation
    neutralized_by: Optional[str] = None

    @property
    def neutralized(self) -> bool:
        return self.neutralized_by is not None

    @property
    def is_active(self) -> bool:
        """Valid severity, not suppressed, not neutralized."""
        v = self.violation
        return v.severity is not None and not v.suppressed and not self.neutralized

    @property
    def counts_toward_cap(self) -> bool:
        return self.is_active and self.violation.severity in CAP_SEVERITIES

    def to_dict(self) -> Dict[str, Any]:
        out = self.violation.to_dict()
        out["neutralizedBy"] = self.neutralized_by
        out["countsTowardCap"] = self.counts_toward_cap
        return out


@dataclass
class ViolationAssessment:
    """All violations of one topic with their cap/penalty status."""
    topic: str
    statuses: List[ViolationStatus] = field(default_factory=list)

    @property
    def violations(self) -> List[Violation]:
        return [s.violation for s in self.statuses]

    @property
    def active(self) -> List[ViolationStatus]:
        return [s for s in self.statuses if s.is_active]

    @property
    def neutralized(self) -> List[ViolationStatus]:
        return [s for s in self.statuses if s.neutralized]

    @property
    def cap_count(self) -> int:
        return sum(1 for s in self.statuses if s.counts_toward_cap)

    def get(self, violation_id: str) -> Optional[ViolationStatus]:
        for status in self.statuses:
            if status.violation.id == violation_id:
                return status
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topic": self.topic,
            "capCount": self.cap_count,
            "items": [s.to_dict() for s in self.statuses],
        }


def build_violations(
    topic: str,
    findings: Sequence[ViolationFinding],
    *,
    origin: Origin,
    suppressed_ids: Iterable[str] = (),
) -> List[Violation]:
    """Classify findings into Violations with stable ids."""
    suppressed = set(suppressed_ids)
    violations = []
    for index, finding in enumerate(findings):
        violation_id = (finding.id or "").strip()
        if not violation_id:
            violation_id = make_violation_id(topic, origin, finding.description, finding.severity)
        violations.append(
            Violation(
                id=ViolationId(violation_id),
                topic=topic,
                description=finding.description,
                severity=parse_severity(finding.severity, topic=topic, violation_id=violation_id),
                origin=origin,
                index=index,
                suppressed=violation_id in suppressed,
                raw_severity=finding.severity,
            )
        )
    return violations


def derive_asserted_violations(
    topic: str,
    override: Any,
    rules: Sequence[AssertionRule],
    existing: Sequence[Violation],
) -> List[Violation]:
    """Violations implied by the reviewer explicitly denying a property."""
    derived = []
    suppressed = set(getattr(override, "suppressed_violation_ids", None) or [])
    for rule in rules:
        if not rule.asserted_false(override) or rule.covered_by(existing):
            continue
        violation_id = ViolationId(f"{topic}:{Origin.MANUAL.value}:{rule.override_field}")
        derived.append(
            Violation(
                id=violation_id,
                topic=topic,
                description=rule.description,
                severity=rule.severity,
                origin=Origin.MANUAL,
                suppressed=violation_id in suppressed,
                raw_severity=rule.severity.value,
            )
        )
    return derived


def assess_violations(
    topic: str,
    violations: Sequence[Violation],
    override: Any,
    rules: Sequence[NeutralizationRule],
) -> ViolationAssessment:
    """Attach neutralization status to each violation; nothing is dropped."""
    known_ids = {v.id for v in violations}
    for suppressed_id in getattr(override, "suppressed_violation_ids", None) or []:
        if suppressed_id not in known_ids:
            logger.warning("unknown_violation_id", topic=topic, violation_id=suppressed_id)

    statuses = []
    for violation in violations:
        neutralized_by = None
        for rule in rules:
            if rule.neutralizes(violation, override):
                neutralized_by = rule.name
                break
        statuses.append(ViolationStatus(violation=violation, neutralized_by=neutralized_by))

    assessment = ViolationAssessment(topic=topic, statuses=statuses)
    logger.debug(
        "violations_assessed",
        topic=topic,
        total=len(statuses),
        neutralized=len(assessment.neutralized),
        cap_count=assessment.cap_count,
    )
    return assessment


def severity_penalty(statuses: Iterable[ViolationStatus], skip_ids: Iterable[str] = ()) -> int:
    """Sum of severity penalties over active violations."""
    skip = set(skip_ids)
    return sum(
        SEVERITY_PENALTY[s.violation.severity]
        for s in statuses
        if s.is_active and s.violation.id not in skip
    )
