"""
Social topic scorers: social-media presence, customer reviews and workplace
reputation.
"""
import re
from dataclasses import dataclass
from typing import Dict, Optional

from .audit_logging import get_logger
from .diagnostics import DiagnosticSink
from .models import (
    SOCIAL_PLATFORMS,
    RawFindings,
    SocialOverride,
    WorkplaceOverride,
)
from .reconcile import Partial, finalize, number_or_zero, safe_number
from .scores import NO_DATA, Topic, TopicScore

logger = get_logger(__name__)

# Points per platform
PLATFORM_MAX = 30.0
PRESENCE_SHARE = 0.50
FOLLOWER_BASE_SHARE = 0.20
FOLLOWER_BASE_MINIMUM = 100

# (minimum followers, share of PLATFORM_MAX), checked top-down
FOLLOWER_TIERS = (
    (10000, 0.15),
    (1000, 0.10),
    (500, 0.05),
)

# (maximum days since last post, share of PLATFORM_MAX), checked top-down
RECENCY_TIERS = (
    (1, 0.15),
    (7, 0.10),
    (31, 0.05),
)
STALE_POST_SHARE = 0.02

TWO_PLATFORM_BONUS = 0.10
MULTI_PLATFORM_BONUS = 0.25

# 5 platforms x 30 points x 1.25 bonus
SOCIAL_NORMALIZATION = 187.5

_NOT_FOUND = ("nicht gefunden", "not found", "keine", "none", "-")
_TODAY = ("heute", "today", "gerade", "just now")
_YESTERDAY = ("gestern", "yesterday")
_UNIT_DAYS = (
    (r"tag|day", 1),
    (r"woche|week", 7),
    (r"monat|month", 30),
    (r"jahr|year", 365),
)
_AMOUNT = re.compile(r"(\d+(?:[.,]\d+)?)")


def parse_last_post(text: Optional[str]) -> Optional[float]:
    """
    Days since the last post, from a crawler or reviewer description.

    Understands "heute", "gestern", "vor 3 Tagen", "2 weeks ago", "1 Monat"
    and similar. Returns None when nothing was found or the text is unreadable.
    """
    if text is None:
        return None
    lowered = text.strip().lower()
    if not lowered or lowered in _NOT_FOUND:
        return None
    if any(word in lowered for word in _TODAY):
        return 0.0
    if any(word in lowered for word in _YESTERDAY):
        return 1.0
    for pattern, days in _UNIT_DAYS:
        if re.search(pattern, lowered):
            match = _AMOUNT.search(lowered)
            amount = float(match.group(1).replace(",", ".")) if match else 1.0
            return amount * days
    match = _AMOUNT.fullmatch(lowered)
    if match:
        return float(match.group(1).replace(",", "."))
    logger.warning("unparsable_last_post", value=text)
    return None


@dataclass
class PlatformPresence:
    """Merged view of one platform: reviewer data wins, crawler data fills gaps."""
    platform: str
    followers: float = 0.0
    days_since_post: Optional[float] = None

    def points(self) -> float:
        points = PLATFORM_MAX * PRESENCE_SHARE
        if self.followers >= FOLLOWER_BASE_MINIMUM:
            points += PLATFORM_MAX * FOLLOWER_BASE_SHARE
        for minimum, share in FOLLOWER_TIERS:
            if self.followers >= minimum:
                points += PLATFORM_MAX * share
                break
        if self.days_since_post is not None:
            for maximum, share in RECENCY_TIERS:
                if self.days_since_post <= maximum:
                    points += PLATFORM_MAX * share
                    break
            else:
                points += PLATFORM_MAX * STALE_POST_SHARE
        return min(PLATFORM_MAX, points)


def _days(days_value, text, platform: str) -> Optional[float]:
    days = safe_number(days_value, topic=Topic.SOCIAL_MEDIA.value, field=f"{platform}.last_post_days")
    if days is not None:
        return max(0.0, days)
    return parse_last_post(text)


def merge_platforms(raw: RawFindings, manual: Optional[SocialOverride]) -> Dict[str, PlatformPresence]:
    """Present platforms keyed by name."""
    topic = Topic.SOCIAL_MEDIA.value
    manual_platforms = manual.platforms if manual else {}
    names = list(SOCIAL_PLATFORMS) + sorted(
        (set(raw.social) | set(manual_platforms)) - set(SOCIAL_PLATFORMS)
    )

    merged: Dict[str, PlatformPresence] = {}
    for name in names:
        auto = raw.social.get(name)
        entry = manual_platforms.get(name)
        auto_found = auto is not None and auto.found
        if entry is not None and entry.is_present:
            followers = safe_number(entry.followers, topic=topic, field=f"{name}.followers")
            if followers is None and auto_found:
                followers = safe_number(auto.followers, topic=topic, field=f"{name}.followers")
            days = _days(entry.last_post_days, entry.last_post, name)
            if days is None and auto_found:
                days = _days(auto.last_post_days, auto.last_post, name)
        elif auto_found:
            followers = safe_number(auto.followers, topic=topic, field=f"{name}.followers")
            days = _days(auto.last_post_days, auto.last_post, name)
        else:
            continue
        merged[name] = PlatformPresence(
            platform=name,
            followers=max(0.0, followers or 0.0),
            days_since_post=days,
        )
    return merged


def score_social_media(
    raw: RawFindings,
    manual: Optional[SocialOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    """
    Social-media presence.

    Each present platform earns up to 30 points; the sum gets a bonus for
    multi-platform presence and is normalized against 187.5.
    """
    topic = Topic.SOCIAL_MEDIA
    has_manual = manual is not None and bool(manual.platforms)
    if not raw.social and not has_manual:
        return finalize(topic, NO_DATA, inputs=(None, manual), details={}, sink=sink)

    platforms = merge_platforms(raw, manual)
    points = {name: p.points() for name, p in platforms.items()}
    subtotal = sum(points.values())
    bonus = 0.0
    if len(platforms) == 2:
        bonus = subtotal * TWO_PLATFORM_BONUS
    elif len(platforms) >= 3:
        bonus = subtotal * MULTI_PLATFORM_BONUS

    value = (subtotal + bonus) / SOCIAL_NORMALIZATION * 100
    return finalize(
        topic,
        value,
        inputs=(raw.social, manual),
        details={
            "platforms": {name: round(p, 2) for name, p in points.items()},
            "subtotal": subtotal,
            "bonus": bonus,
        },
        sink=sink,
    )


def score_reviews(
    raw: RawFindings,
    manual=None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    """Average customer rating on a five-star scale mapped to 0-100."""
    topic = Topic.REVIEWS
    reviews = raw.reviews
    if reviews is None or (reviews.count is None and reviews.rating is None):
        return finalize(topic, NO_DATA, inputs=(reviews,), details={}, sink=sink)

    count = number_or_zero(reviews.count, topic=topic.value, field="count")
    stars = number_or_zero(reviews.rating, topic=topic.value, field="rating")
    if reviews.count is not None and count <= 0:
        value = 0.0
    else:
        value = min(100.0, stars * 20)
    return finalize(
        topic,
        value,
        inputs=(reviews,),
        details={"count": count, "rating": stars},
        sink=sink,
    )


# ============================================
# WORKPLACE
# ============================================

WORKPLACE_PLATFORMS = ("kununu", "glassdoor")
WORKPLACE_RATING_POINTS = 25

# (minimum reviews, points), checked top-down
WORKPLACE_REVIEW_TIERS = (
    (50, 15),
    (20, 12),
    (10, 8),
    (5, 5),
    (1, 2),
)
WORKPLACE_PRESENCE_BONUS = {1: 10, 2: 20}


def _workplace_review_points(reviews: float) -> int:
    for minimum, points in WORKPLACE_REVIEW_TIERS:
        if reviews >= minimum:
            return points
    return 0


def workplace_platform_points(
    raw: RawFindings,
    manual: Optional[WorkplaceOverride],
    platform: str,
) -> Optional[float]:
    """Points for one employer-review platform, or None when it is absent."""
    topic = Topic.WORKPLACE.value
    auto = getattr(raw.workplace, platform, None) if raw.workplace else None
    if manual is not None and getattr(manual, f"disable_auto_{platform}"):
        auto = None
    entry = getattr(manual, platform, None) if manual else None

    found = auto.found if auto is not None else False
    rating_value = auto.rating if auto is not None else None
    reviews_value = auto.reviews if auto is not None else None
    if entry is not None:
        if entry.found is not None:
            found = entry.found
        elif entry.rating is not None or entry.reviews is not None:
            found = True
        if entry.rating is not None:
            rating_value = entry.rating
        if entry.reviews is not None:
            reviews_value = entry.reviews
    if not found:
        return None

    stars = max(0.0, min(5.0, number_or_zero(rating_value, topic=topic, field=f"{platform}.rating")))
    reviews = number_or_zero(reviews_value, topic=topic, field=f"{platform}.reviews")
    return stars / 5 * WORKPLACE_RATING_POINTS + _workplace_review_points(reviews)


def score_workplace(
    raw: RawFindings,
    manual: Optional[WorkplaceOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    topic = Topic.WORKPLACE
    points = {}
    for platform in WORKPLACE_PLATFORMS:
        platform_points = workplace_platform_points(raw, manual, platform)
        if platform_points is not None:
            points[platform] = platform_points

    if not points:
        return finalize(topic, NO_DATA, inputs=(raw.workplace, manual), details={}, sink=sink)

    bonus = WORKPLACE_PRESENCE_BONUS.get(len(points), 0)
    value: Partial = sum(points.values()) + bonus
    return finalize(
        topic,
        value,
        inputs=(raw.workplace, manual),
        details={"platforms": {k: round(v, 2) for k, v in points.items()}, "presenceBonus": bonus},
        sink=sink,
    )
