"""
Tests for category and overall aggregation with weight redistribution.
"""

from __future__ import annotations

import pytest

from presence_audit.aggregation import (
    CATEGORY_WEIGHTS,
    aggregate_category,
    aggregate_overall,
    redistribute_weights,
)
from presence_audit.scores import NO_DATA, Category, CategoryScore, Topic, TopicScore


def _topic(topic, value):
    return TopicScore(topic=topic, value=value)


def _category(category, value):
    return CategoryScore(category=category, value=value)


def test_category_mean_excludes_no_data():
    scores = [
        _topic(Topic.PERFORMANCE, 80),
        _topic(Topic.MOBILE, NO_DATA),
        _topic(Topic.TECHNICAL_SECURITY, 40),
    ]
    result = aggregate_category(Category.WEBSITE_PERFORMANCE, scores)
    # (80 * 40 + 40 * 25) / 65
    assert result.value == 65
    assert result.effective_weights == {Topic.PERFORMANCE: 40, Topic.TECHNICAL_SECURITY: 25}


def test_category_ignores_foreign_topics():
    scores = [_topic(Topic.HOURLY_RATE, 85), _topic(Topic.SEARCH, 10)]
    assert aggregate_category(Category.MARKET_ENVIRONMENT, scores).value == 85


def test_category_without_data():
    result = aggregate_category(Category.SERVICE_QUALITY, [_topic(Topic.QUOTE_RESPONSE, NO_DATA)])
    assert result.value is NO_DATA


def test_zero_is_a_score_not_missing_data():
    scores = [_topic(Topic.STAFF_QUALIFICATION, 0), _topic(Topic.QUOTE_RESPONSE, 80)]
    assert aggregate_category(Category.SERVICE_QUALITY, scores).value == 40


def test_missing_category_weight_spread_evenly():
    present = [c for c in CATEGORY_WEIGHTS if c is not Category.CORPORATE_APPEARANCE]
    effective = redistribute_weights(CATEGORY_WEIGHTS, present)
    assert Category.CORPORATE_APPEARANCE not in effective
    for category in present:
        assert effective[category] == CATEGORY_WEIGHTS[category] + 2
    assert sum(effective.values()) == 100


def test_weights_conserved_for_uneven_split():
    present = [Category.ONLINE_QUALITY, Category.SOCIAL_MEDIA, Category.SERVICE_QUALITY]
    effective = redistribute_weights(CATEGORY_WEIGHTS, present)
    assert sum(effective.values()) == pytest.approx(100, abs=1e-9)
    assert effective[Category.ONLINE_QUALITY] == pytest.approx(30 + 40 / 3)


def test_overall_uses_redistributed_weights():
    categories = [
        _category(Category.ONLINE_QUALITY, 68),
        _category(Category.WEBSITE_PERFORMANCE, 89),
        _category(Category.SOCIAL_MEDIA, 49),
        _category(Category.MARKET_ENVIRONMENT, NO_DATA),
        _category(Category.CORPORATE_APPEARANCE, 50),
        _category(Category.SERVICE_QUALITY, NO_DATA),
    ]
    overall = aggregate_overall(categories)
    # (68 * 35 + 89 * 25 + 49 * 25 + 50 * 15) / 100
    assert overall.value == 66
    assert overall.effective_weights[Category.ONLINE_QUALITY] == 35


def test_overall_without_any_data():
    overall = aggregate_overall([_category(c, NO_DATA) for c in CATEGORY_WEIGHTS])
    assert overall.value is NO_DATA
    assert overall.display == 0


def test_imprint_counts_toward_online_quality():
    scores = [_topic(Topic.SEARCH, 80), _topic(Topic.IMPRINT, 50), _topic(Topic.CONTENT, NO_DATA)]
    result = aggregate_category(Category.ONLINE_QUALITY, scores)
    # (80 * 25 + 50 * 10) / 35
    assert result.value == 71
    assert result.effective_weights == {Topic.SEARCH: 25, Topic.IMPRINT: 10}


def test_category_payload_carries_title():
    payload = aggregate_category(Category.SERVICE_QUALITY, [_topic(Topic.QUOTE_RESPONSE, 70)]).to_dict()
    assert payload["title"] == "Qualität · Service · Kundenorientierung"
    assert payload["category"] == "service_quality"
