"""
Tests for website topic scorers.
"""

from __future__ import annotations

from presence_audit.models import (
    BacklinkOverride,
    ContentOverride,
    ImprintOverride,
    LocalPresenceOverride,
    PerformanceOverride,
    RawFindings,
    SearchOverride,
)
from presence_audit.scores import NO_DATA
from presence_audit.website_scores import (
    backlink_auto_score,
    imprint_auto_score,
    score_backlinks,
    score_content,
    score_imprint,
    score_local_presence,
    score_mobile,
    score_performance,
    score_search,
)


def test_search_averages_score_and_keyword_coverage(full_raw):
    assert score_search(full_raw).value == 60


def test_search_blends_reviewer_rating(full_raw):
    assert score_search(full_raw, SearchOverride(rating=100)).value == 76


def test_no_data_without_any_signal(empty_raw):
    for scorer in (score_search, score_local_presence, score_content, score_backlinks,
                   score_imprint, score_performance, score_mobile):
        assert scorer(empty_raw).value is NO_DATA


def test_manual_only_uses_manual(empty_raw):
    assert score_performance(empty_raw, PerformanceOverride(rating=42)).value == 42


def test_local_presence_points(empty_raw):
    manual = LocalPresenceOverride.model_validate({
        "directory_listings": [
            {"name": "Gelbe Seiten", "listed": True, "complete": True, "verified": True},
            {"name": "Das Örtliche", "listed": False},
        ],
        "business_listing_claimed": True,
        "nap_consistency": 80,
        "keyword_rankings": [
            {"keyword": "maler", "position": 2},
            {"keyword": "lackierer", "position": 8},
            {"keyword": "fassade", "position": 15},
            {"keyword": "tapezieren", "position": 50},
        ],
        "has_local_schema": True,
    })
    # 12.5 listings + 15 claimed + 12 NAP + 6 rankings + 5 schema
    assert score_local_presence(empty_raw, manual).value == 51


def test_local_presence_empty_override_is_no_data(empty_raw):
    assert score_local_presence(empty_raw, LocalPresenceOverride()).value is NO_DATA


def test_backlink_referring_domain_tiers():
    assert backlink_auto_score(RawFindings.model_validate({"backlinks": {"referring_domains": 0}})) == 10
    assert backlink_auto_score(RawFindings.model_validate({"backlinks": {"referring_domains": 120}})) == 90
    assert backlink_auto_score(RawFindings.model_validate({"backlinks": {"referring_domains": 7}})) == 40
    assert backlink_auto_score(RawFindings.model_validate({"backlinks": {"score": 33, "referring_domains": 7}})) == 33


def test_backlinks_blend_with_reviewer_mean(full_raw):
    manual = BacklinkOverride(quality_score=80, domain_authority=40)
    # 0.6 * 60 + 0.4 * 60
    assert score_backlinks(full_raw, manual).value == 60


def test_content_blend(full_raw):
    manual = ContentOverride(text_quality=80, relevance=60)
    assert score_content(full_raw, manual).value == 67


def test_trace_is_recorded(full_raw, sink):
    score_mobile(full_raw, sink=sink)
    (trace,) = sink.for_topic("mobile")
    assert trace.score == 90
    assert len(trace.inputs_hash) == 16


def _imprint_raw(**imprint):
    return RawFindings.model_validate({"imprint": imprint})


def test_imprint_auto_uses_detected_elements():
    raw = _imprint_raw(found=True, found_elements=["Anschrift", "Kontakt", "Inhaber", "Register"],
                       missing_elements=["USt-IdNr.", "Aufsicht"])
    assert score_imprint(raw).value == 67
    assert imprint_auto_score(_imprint_raw(found=True, score=85, found_elements=["Anschrift"])) == 85


def test_missing_imprint_scores_zero_unless_reviewer_found_it():
    raw = _imprint_raw(found=False)
    assert score_imprint(raw).value == 0
    assert score_imprint(raw, ImprintOverride(found=True, rating=80)).value == 80


def test_imprint_checklist_blends_with_crawler_score():
    manual = ImprintOverride(
        provider_name=True,
        address=True,
        contact=True,
        representative=True,
        register_entry=True,
        vat_id=False,
        rating=90,
    )
    result = score_imprint(_imprint_raw(found=True, score=70), manual)
    # manual 0.6 * 83.3 + 0.4 * 90 = 86, blended 0.6 * 70 + 0.4 * 86
    assert result.value == 76
    assert result.details["manual"] == 86.0


def test_reviewer_denied_imprint():
    result = score_imprint(_imprint_raw(found=True, score=90), ImprintOverride(found=False))
    assert result.value == 54
