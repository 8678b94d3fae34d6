"""
Score caps for topics with unresolved critical violations.
"""
from .audit_logging import get_logger
from .scores import NO_DATA, ScoreValue

logger = get_logger(__name__)

NO_CAP = 100

# (minimum active critical count, cap), checked top-down
CAP_TIERS = (
    (3, 20),
    (2, 35),
    (1, 59),
)


def cap_for(critical_count: int) -> int:
    """Upper bound for a topic with the given number of active critical violations."""
    if critical_count < 0:
        logger.warning("invalid_critical_count", critical_count=critical_count)
        return NO_CAP
    for minimum, cap in CAP_TIERS:
        if critical_count >= minimum:
            return cap
    return NO_CAP


def apply_cap(score: ScoreValue, critical_count: int) -> ScoreValue:
    """Effective score = min(score, cap). Never raises a score; NO_DATA passes through."""
    if score is NO_DATA:
        return NO_DATA
    return min(score, cap_for(critical_count))
