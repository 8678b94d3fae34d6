"""
Business topic scorers based on reviewer input: staff qualification, quote
response, hourly-rate positioning and corporate identity.
"""
from typing import List, Optional

from .audit_logging import get_logger
from .diagnostics import DiagnosticSink
from .models import (
    CorporateIdentityOverride,
    HourlyRateOverride,
    QuoteResponseOverride,
    RawFindings,
    StaffOverride,
)
from .reconcile import Partial, count_answers, finalize, number_or_zero, ratio, safe_number
from .scores import NO_DATA, Topic, TopicScore

logger = get_logger(__name__)


# ============================================
# STAFF QUALIFICATION
# ============================================

# (minimum ratio, points), checked top-down
QUALIFIED_RATIO_TIERS = ((0.9, 40), (0.8, 35), (0.7, 30), (0.5, 20))
QUALIFIED_BASE_MAX = 40
MASTER_RATIO_TIERS = ((0.3, 25), (0.2, 20), (0.1, 12))
MASTER_PRESENT_POINTS = 5
SKILLED_RATIO_TIERS = ((0.5, 20), (0.3, 15), (0.15, 10))
SKILLED_LINEAR_MAX = 10
QUALIFICATION_BONUS_TIERS = ((0.95, 10), (0.85, 5))
TRAINING_HOURS_TIERS = ((40, 10), (24, 7), (16, 5), (8, 3))

CERTIFICATION_SLOTS = 6
CERTIFICATION_MAX = 5
INDUSTRY_QUALIFICATION_SLOTS = 6
INDUSTRY_QUALIFICATION_MAX = 10
EMPLOYEE_CERTIFICATION_SLOTS = 5
EMPLOYEE_CERTIFICATION_MAX = 10


def _tier(value: float, tiers) -> Optional[int]:
    for minimum, points in tiers:
        if value >= minimum:
            return points
    return None


def staff_breakdown(manual: StaffOverride) -> Optional[dict]:
    """Point components of the staff score, or None when no staff data was entered."""
    topic = Topic.STAFF_QUALIFICATION.value
    counts = {
        name: max(0.0, number_or_zero(getattr(manual, name), topic=topic, field=name))
        for name in ("masters", "skilled_workers", "office_workers", "apprentices", "unskilled_workers")
    }
    total = safe_number(manual.total_employees, topic=topic, field="total_employees")
    if total is None or total <= 0:
        total = sum(counts.values())

    certifications_confirmed = sum(1 for v in manual.certifications.values() if v is True)
    has_input = (
        total > 0
        or certifications_confirmed > 0
        or bool(manual.industry_specific)
        or manual.annual_training_hours_per_employee is not None
        or bool(manual.employee_certifications)
    )
    if not has_input:
        return None

    qualified = ratio(counts["masters"] + counts["skilled_workers"] + counts["office_workers"], total)
    master_share = ratio(counts["masters"], total)
    skilled_share = ratio(counts["skilled_workers"], total)

    base = _tier(qualified, QUALIFIED_RATIO_TIERS)
    if base is None:
        base = QUALIFIED_BASE_MAX * qualified

    masters = _tier(master_share, MASTER_RATIO_TIERS)
    if masters is None:
        masters = MASTER_PRESENT_POINTS if master_share > 0 else 0

    skilled = _tier(skilled_share, SKILLED_RATIO_TIERS)
    if skilled is None:
        skilled = skilled_share / SKILLED_RATIO_TIERS[-1][0] * SKILLED_LINEAR_MAX

    bonus = _tier(qualified, QUALIFICATION_BONUS_TIERS) or 0

    certifications = min(
        CERTIFICATION_MAX, certifications_confirmed / CERTIFICATION_SLOTS * CERTIFICATION_MAX
    )
    industry = min(
        INDUSTRY_QUALIFICATION_MAX,
        len(manual.industry_specific) / INDUSTRY_QUALIFICATION_SLOTS * INDUSTRY_QUALIFICATION_MAX,
    )
    hours = number_or_zero(
        manual.annual_training_hours_per_employee, topic=topic, field="annual_training_hours_per_employee"
    )
    training = _tier(hours, TRAINING_HOURS_TIERS) or 0

    certified_entries = sum(1 for c in manual.employee_certifications if c.employees_certified > 0)
    employee_certs = (
        min(certified_entries, EMPLOYEE_CERTIFICATION_SLOTS)
        / EMPLOYEE_CERTIFICATION_SLOTS
        * EMPLOYEE_CERTIFICATION_MAX
    )

    return {
        "total": total,
        "qualifiedRatio": qualified,
        "base": base,
        "masters": masters,
        "skilled": skilled,
        "qualificationBonus": bonus,
        "certifications": certifications,
        "industryQualifications": industry,
        "training": training,
        "employeeCertifications": employee_certs,
    }


STAFF_POINT_KEYS = (
    "base",
    "masters",
    "skilled",
    "qualificationBonus",
    "certifications",
    "industryQualifications",
    "training",
    "employeeCertifications",
)


def score_staff_qualification(
    raw: RawFindings,
    manual: Optional[StaffOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    topic = Topic.STAFF_QUALIFICATION
    breakdown = staff_breakdown(manual) if manual is not None else None
    if breakdown is None:
        return finalize(topic, NO_DATA, inputs=(manual,), details={}, sink=sink)
    value = sum(breakdown[key] for key in STAFF_POINT_KEYS)
    return finalize(topic, value, inputs=(manual,), details=breakdown, sink=sink)


# ============================================
# QUOTE RESPONSE
# ============================================

NO_RESPONSE_SCORES = {
    "no-response": 10,
    "no-response-2-days": 15,
}

RESPONSE_TIME_POINTS = {
    "1-hour": 40,
    "2-4-hours": 35,
    "4-8-hours": 30,
    "1-day": 20,
    "2-3-days": 10,
    "over-3-days": 5,
}

CHANNEL_POINTS = {
    "phone": 6.25,
    "email": 6.25,
    "contact_form": 6.25,
    "whatsapp": 6.25,
    "messenger": 4,
}
CHANNEL_MAX = 30

RESPONSE_QUALITY_POINTS = {
    "excellent": 30,
    "good": 22,
    "average": 15,
    "poor": 8,
}


def score_quote_response(
    raw: RawFindings,
    manual: Optional[QuoteResponseOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    """
    Response to a test quote request.

    A missing response short-circuits to a fixed low score; otherwise
    response time, available contact channels and answer quality add up.
    """
    topic = Topic.QUOTE_RESPONSE
    channels = [name for name in CHANNEL_POINTS if manual is not None and getattr(manual, name)]
    if manual is None or (manual.response_time is None and manual.response_quality is None and not channels):
        return finalize(topic, NO_DATA, inputs=(manual,), details={}, sink=sink)

    if manual.response_time in NO_RESPONSE_SCORES:
        value = NO_RESPONSE_SCORES[manual.response_time]
        return finalize(
            topic, value, inputs=(manual,), details={"responseTime": manual.response_time}, sink=sink
        )

    time_points = 0
    if manual.response_time is not None:
        if manual.response_time in RESPONSE_TIME_POINTS:
            time_points = RESPONSE_TIME_POINTS[manual.response_time]
        else:
            logger.warning("unknown_response_time", topic=topic.value, value=manual.response_time)

    quality_points = 0
    if manual.response_quality is not None:
        if manual.response_quality in RESPONSE_QUALITY_POINTS:
            quality_points = RESPONSE_QUALITY_POINTS[manual.response_quality]
        else:
            logger.warning("unknown_response_quality", topic=topic.value, value=manual.response_quality)

    channel_points = min(CHANNEL_MAX, sum(CHANNEL_POINTS[name] for name in channels))
    value = time_points + channel_points + quality_points
    return finalize(
        topic,
        value,
        inputs=(manual,),
        details={
            "responseTime": time_points,
            "channels": channel_points,
            "quality": quality_points,
        },
        sink=sink,
    )


# ============================================
# HOURLY RATE
# ============================================

RATE_TIERS = ("master", "skilled", "apprentice", "helper")
PREMIUM_RATIO = 1.10
MARKET_RATIO = 0.90


def _present_rates(tiers, side: str) -> dict:
    rates = {}
    for name in RATE_TIERS:
        value = safe_number(getattr(tiers, name), topic=Topic.HOURLY_RATE.value, field=f"{side}.{name}")
        if value is not None and value > 0:
            rates[name] = value
    return rates


def rate_ratio(manual: Optional[HourlyRateOverride]) -> Optional[float]:
    """Own average rate over the regional average, across tiers set on both sides."""
    if manual is None:
        return None
    own = _present_rates(manual.own_rates, "own_rates")
    regional = _present_rates(manual.regional_rates, "regional_rates")
    shared: List[str] = [name for name in RATE_TIERS if name in own and name in regional]
    if not shared:
        return None
    own_average = sum(own[name] for name in shared) / len(shared)
    regional_average = sum(regional[name] for name in shared) / len(shared)
    return round(own_average / regional_average, 4)


def hourly_rate_points(rate: float) -> float:
    """Above-market pricing scores highest, far below market lowest."""
    if rate >= PREMIUM_RATIO:
        return 85 + min(15.0, (rate - PREMIUM_RATIO) * 50)
    if rate >= MARKET_RATIO:
        return 60 + (rate - MARKET_RATIO) / 0.20 * 24
    return max(40.0, 59 - (MARKET_RATIO - rate) / 0.30 * 19)


def score_hourly_rate(
    raw: RawFindings,
    manual: Optional[HourlyRateOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    topic = Topic.HOURLY_RATE
    rate = rate_ratio(manual)
    value: Partial = NO_DATA if rate is None else hourly_rate_points(rate)
    return finalize(topic, value, inputs=(manual,), details={"ratio": rate}, sink=sink)


# ============================================
# CORPORATE IDENTITY
# ============================================

CORPORATE_IDENTITY_CHECKS = (
    "uniform_logo",
    "uniform_work_clothing",
    "uniform_vehicle_branding",
    "uniform_color_scheme",
)
NEUTRAL_SCORE = 50


def score_corporate_identity(
    raw: RawFindings,
    manual: Optional[CorporateIdentityOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    """Share of confirmed brand-consistency checks; neutral 50 when nothing was answered."""
    topic = Topic.CORPORATE_IDENTITY
    answered, confirmed = (0, 0)
    if manual is not None:
        answered, confirmed = count_answers(getattr(manual, name) for name in CORPORATE_IDENTITY_CHECKS)
    value = ratio(confirmed, answered) * 100 if answered else NEUTRAL_SCORE
    return finalize(
        topic,
        value,
        inputs=(manual,),
        details={"answered": answered, "confirmed": confirmed},
        sink=sink,
    )
