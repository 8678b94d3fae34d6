"""
Reconciliation of automated and manual signals, and the missing-data policy.

Automated data is the baseline, manual review is the correction layer:
auto only -> auto, manual only -> manual, both -> 60/40 blend, neither ->
NO_DATA. Malformed numbers are sanitized to 0 where they are used.
"""
import math
from typing import Any, Iterable, Optional, Tuple, Union

from .audit_logging import get_logger
from .diagnostics import DiagnosticSink, record_score
from .scores import NO_DATA, NoData, Topic, TopicScore, clamp_value

logger = get_logger(__name__)

AUTO_WEIGHT = 0.6
MANUAL_WEIGHT = 0.4

Partial = Union[float, NoData]


def safe_number(value: Any, *, topic: str, field: str) -> Optional[float]:
    """
    Convert a possibly malformed number.

    None stays None (unset). NaN, infinities and unparsable values become 0.0
    and are logged as warnings.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(" ", "")
        if text == "":
            return None
        try:
            number = float(text.replace(",", "."))
        except ValueError:
            logger.warning("invalid_number", topic=topic, field=field, value=repr(value))
            return 0.0
    if math.isnan(number) or math.isinf(number):
        logger.warning("invalid_number", topic=topic, field=field, value=repr(value))
        return 0.0
    return number


def number_or_zero(value: Any, *, topic: str, field: str) -> float:
    number = safe_number(value, topic=topic, field=field)
    return 0.0 if number is None else number


def rating(value: Any, *, topic: str, field: str) -> Partial:
    """A 0-100 reviewer rating, or NO_DATA when unset."""
    number = safe_number(value, topic=topic, field=field)
    if number is None:
        return NO_DATA
    return max(0.0, min(100.0, number))


def ratio(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return part / whole


def mean_present(values: Iterable[Partial]) -> Partial:
    """Mean of the values that carry data; NO_DATA if none do."""
    present = [v for v in values if v is not NO_DATA]
    if not present:
        return NO_DATA
    return sum(present) / len(present)


def blend(auto: Partial, manual: Partial) -> Partial:
    """Combine an automated and a manual partial score."""
    if auto is NO_DATA and manual is NO_DATA:
        return NO_DATA
    if manual is NO_DATA:
        return auto
    if auto is NO_DATA:
        return manual
    return AUTO_WEIGHT * auto + MANUAL_WEIGHT * manual


def count_answers(values: Iterable[Optional[bool]]) -> Tuple[int, int]:
    """Return (answered, confirmed) for a tri-state checklist."""
    answered = confirmed = 0
    for value in values:
        if value is None:
            continue
        answered += 1
        if value is True:
            confirmed += 1
    return answered, confirmed


def _jsonable_partial(value: Any) -> Any:
    if value is NO_DATA:
        return None
    if isinstance(value, float):
        return round(value, 2)
    return value


def finalize(
    topic: Topic,
    value: Partial,
    *,
    inputs: tuple,
    details: dict,
    sink: Optional[DiagnosticSink] = None,
    violations: Any = None,
) -> TopicScore:
    """Clamp the value, record the trace and build the TopicScore."""
    final = clamp_value(value)
    clean_details = {k: _jsonable_partial(v) for k, v in details.items()}
    record_score(
        sink,
        topic.value,
        inputs,
        clean_details,
        None if final is NO_DATA else final,
    )
    return TopicScore(topic=topic, value=final, details=clean_details, violations=violations)
