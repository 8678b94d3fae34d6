"""
Tests for social-media, review and workplace scorers.
"""

from __future__ import annotations

import pytest

from presence_audit.models import RawFindings, SocialOverride, WorkplaceOverride
from presence_audit.scores import NO_DATA
from presence_audit.social_scores import (
    parse_last_post,
    score_reviews,
    score_social_media,
    score_workplace,
)


@pytest.mark.parametrize(
    "text,days",
    [
        ("heute", 0),
        ("Gestern", 1),
        ("vor 3 Tagen", 3),
        ("2 Wochen", 14),
        ("1 Monat", 30),
        ("vor 2 Jahren", 730),
        ("Nicht gefunden", None),
        (None, None),
    ],
)
def test_parse_last_post(text, days):
    assert parse_last_post(text) == days


def test_single_platform_example(empty_raw):
    manual = SocialOverride.model_validate({
        "platforms": {"facebook": {"url": "https://facebook.com/beispiel", "followers": 150, "last_post": "heute"}}
    })
    # (15 + 6 + 4.5) / 187.5 * 100 = 13.6
    assert score_social_media(empty_raw, manual).value == 14


def test_auto_only_platform(full_raw):
    assert score_social_media(full_raw).value == 14


def test_multi_platform_bonus(empty_raw):
    two = SocialOverride.model_validate({
        "platforms": {"facebook": {"url": "fb"}, "instagram": {"url": "ig"}}
    })
    three = SocialOverride.model_validate({
        "platforms": {"facebook": {"url": "fb"}, "instagram": {"url": "ig"}, "youtube": {"url": "yt"}}
    })
    # 30 * 1.10 / 187.5 and 45 * 1.25 / 187.5
    assert score_social_media(empty_raw, two).value == 18
    assert score_social_media(empty_raw, three).value == 30


def test_full_presence_reaches_100(empty_raw):
    platforms = {
        name: {"url": name, "followers": 20000, "last_post": "heute"}
        for name in ("facebook", "instagram", "linkedin", "twitter", "youtube")
    }
    manual = SocialOverride.model_validate({"platforms": platforms})
    assert score_social_media(empty_raw, manual).value == 100


def test_manual_values_fill_from_auto():
    raw = RawFindings.model_validate({"social": {"instagram": {"found": True, "followers": 2000, "last_post_days": 3}}})
    manual = SocialOverride.model_validate({"platforms": {"instagram": {"url": "https://instagram.com/x"}}})
    # 15 + 6 + 3 + 3 = 27
    assert score_social_media(raw, manual).details["platforms"] == {"instagram": 27.0}


def test_no_platform_found_is_zero():
    raw = RawFindings.model_validate({"social": {"facebook": {"found": False}}})
    assert score_social_media(raw).value == 0


def test_no_social_data_is_no_data(empty_raw):
    assert score_social_media(empty_raw).value is NO_DATA


def test_reviews(full_raw, empty_raw):
    assert score_reviews(full_raw).value == 90
    assert score_reviews(empty_raw).value is NO_DATA
    assert score_reviews(RawFindings.model_validate({"reviews": {"count": 0}})).value == 0
    assert score_reviews(RawFindings.model_validate({"reviews": {"count": 3, "rating": 5}})).value == 100


def test_workplace_auto_only(full_raw):
    # 4.0 / 5 * 25 + 8 review points + 10 presence bonus
    assert score_workplace(full_raw).value == 38


def test_workplace_manual_wins_per_field(full_raw):
    manual = WorkplaceOverride.model_validate({"kununu": {"rating": 5.0}})
    assert score_workplace(full_raw, manual).value == 43


def test_workplace_two_platforms(full_raw):
    manual = WorkplaceOverride.model_validate({"glassdoor": {"found": True, "rating": 3.0, "reviews": 60}})
    # kununu 28 + glassdoor 30 + bonus 20
    assert score_workplace(full_raw, manual).value == 78


def test_workplace_disable_auto(full_raw):
    manual = WorkplaceOverride(disable_auto_kununu=True)
    assert score_workplace(full_raw, manual).value is NO_DATA
