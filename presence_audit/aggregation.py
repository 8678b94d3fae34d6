"""
Category and overall aggregation.

Only topics and categories with data take part in a weighted mean. The weight
of a category without data is spread evenly across the categories that have
data, so the effective weights always add up to the original total.
"""
from typing import Dict, Iterable, Mapping, Optional

from .audit_logging import get_logger
from .scores import (
    NO_DATA,
    Category,
    CategoryScore,
    OverallScore,
    Topic,
    TopicScore,
    clamp_score,
)

logger = get_logger(__name__)

CATEGORY_WEIGHTS: Dict[Category, float] = {
    Category.ONLINE_QUALITY: 30,
    Category.WEBSITE_PERFORMANCE: 20,
    Category.SOCIAL_MEDIA: 20,
    Category.MARKET_ENVIRONMENT: 10,
    Category.CORPORATE_APPEARANCE: 10,
    Category.SERVICE_QUALITY: 10,
}

# Category-local topic weights
TOPIC_WEIGHTS: Dict[Category, Dict[Topic, float]] = {
    Category.ONLINE_QUALITY: {
        Topic.SEARCH: 25,
        Topic.LOCAL_PRESENCE: 20,
        Topic.CONTENT: 15,
        Topic.BACKLINKS: 10,
        Topic.IMPRINT: 10,
        Topic.ACCESSIBILITY: 15,
        Topic.DATA_PRIVACY: 15,
    },
    Category.WEBSITE_PERFORMANCE: {
        Topic.PERFORMANCE: 40,
        Topic.MOBILE: 35,
        Topic.TECHNICAL_SECURITY: 25,
    },
    Category.SOCIAL_MEDIA: {
        Topic.SOCIAL_MEDIA: 40,
        Topic.REVIEWS: 40,
        Topic.WORKPLACE: 20,
    },
    Category.MARKET_ENVIRONMENT: {
        Topic.HOURLY_RATE: 1,
    },
    Category.CORPORATE_APPEARANCE: {
        Topic.CORPORATE_IDENTITY: 1,
    },
    Category.SERVICE_QUALITY: {
        Topic.STAFF_QUALIFICATION: 50,
        Topic.QUOTE_RESPONSE: 50,
    },
}


def aggregate_category(
    category: Category,
    topic_scores: Iterable[TopicScore],
    weights: Optional[Mapping[Topic, float]] = None,
) -> CategoryScore:
    """Weighted mean over the category's member topics that have data."""
    weights = TOPIC_WEIGHTS[category] if weights is None else weights
    members = [t for t in topic_scores if t.topic in weights]
    present = [t for t in members if t.has_data and weights[t.topic] > 0]

    total_weight = sum(weights[t.topic] for t in present)
    if not present or total_weight <= 0:
        return CategoryScore(category=category, value=NO_DATA, topics=members)

    weighted = sum(weights[t.topic] * t.value for t in present)
    return CategoryScore(
        category=category,
        value=clamp_score(weighted / total_weight),
        effective_weights={t.topic: weights[t.topic] for t in present},
        topics=members,
    )


def redistribute_weights(
    base_weights: Mapping[Category, float],
    present: Iterable[Category],
) -> Dict[Category, float]:
    """
    Spread the weight of absent categories evenly over present ones.

    The last present category absorbs any floating-point residue so the
    result adds up to sum(base_weights) whenever at least one is present.
    """
    present_set = set(present)
    present = [c for c in base_weights if c in present_set]
    if not present:
        return {}
    total = sum(base_weights.values())
    missing = sum(w for c, w in base_weights.items() if c not in present)
    share = missing / len(present)

    effective = {c: base_weights[c] + share for c in present[:-1]}
    effective[present[-1]] = total - sum(effective.values())
    return effective


def aggregate_overall(
    category_scores: Iterable[CategoryScore],
    base_weights: Optional[Mapping[Category, float]] = None,
) -> OverallScore:
    """Weighted overall score; NO_DATA when no category has data."""
    base_weights = dict(CATEGORY_WEIGHTS if base_weights is None else base_weights)
    by_category = {c.category: c for c in category_scores}
    present = [c for c in base_weights if c in by_category and by_category[c].has_data]

    effective = redistribute_weights(base_weights, present)
    if not effective:
        logger.info("overall_without_data", categories=len(by_category))
        return OverallScore(value=NO_DATA, base_weights=base_weights)

    total = sum(effective.values())
    weighted = sum(effective[c] * by_category[c].value for c in present)
    return OverallScore(
        value=clamp_score(weighted / total),
        effective_weights=effective,
        base_weights=base_weights,
    )
