"""
Website topic scorers: search optimization, local presence, content,
backlinks, legal notice, performance and mobile.
"""
from typing import List, Optional

from .diagnostics import DiagnosticSink
from .models import (
    BacklinkOverride,
    ContentOverride,
    ImprintOverride,
    LocalPresenceOverride,
    MobileOverride,
    PerformanceOverride,
    RawFindings,
    SearchOverride,
)
from .reconcile import (
    Partial,
    blend,
    count_answers,
    finalize,
    mean_present,
    number_or_zero,
    rating,
    ratio,
    safe_number,
)
from .scores import NO_DATA, Topic, TopicScore

# Local presence point budgets
DIRECTORY_PRESENCE_POINTS = 10
DIRECTORY_COMPLETENESS_POINTS = 8
DIRECTORY_VERIFICATION_POINTS = 7
LISTING_CLAIMED_POINTS = 15
LISTING_VERIFIED_POINTS = 15
NAP_CONSISTENCY_POINTS = 15
KEYWORD_RANKING_MAX = 15
ON_PAGE_SIGNAL_POINTS = 5

# (referring domains, score), checked top-down
REFERRING_DOMAIN_TIERS = (
    (100, 90),
    (50, 75),
    (20, 60),
    (5, 40),
    (1, 25),
)
NO_REFERRING_DOMAINS_SCORE = 10

# Mandatory legal-notice details a reviewer can confirm
IMPRINT_CHECKLIST = (
    "provider_name",
    "address",
    "contact",
    "representative",
    "register_entry",
    "vat_id",
)
IMPRINT_CHECKLIST_WEIGHT = 0.6
IMPRINT_RATING_WEIGHT = 0.4


def _auto_score(value, topic: Topic, field: str) -> Partial:
    number = safe_number(value, topic=topic.value, field=field)
    if number is None:
        return NO_DATA
    return max(0.0, min(100.0, number))


def _rated_topic(
    topic: Topic,
    auto: Partial,
    manual_rating: Partial,
    inputs: tuple,
    sink: Optional[DiagnosticSink],
) -> TopicScore:
    value = blend(auto, manual_rating)
    return finalize(
        topic,
        value,
        inputs=inputs,
        details={"auto": auto, "manual": manual_rating},
        sink=sink,
    )


def score_search(
    raw: RawFindings,
    manual: Optional[SearchOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    """Search optimization: crawler score and keyword coverage, corrected by a reviewer rating."""
    topic = Topic.SEARCH
    parts: List[Partial] = []
    coverage: Partial = NO_DATA
    if raw.search is not None:
        parts.append(_auto_score(raw.search.score, topic, "score"))
        keywords = raw.search.keywords
        if keywords:
            found = sum(1 for k in keywords if k.found)
            coverage = ratio(found, len(keywords)) * 100
            parts.append(coverage)
    auto = mean_present(parts)
    manual_rating = rating(manual.rating, topic=topic.value, field="rating") if manual else NO_DATA
    value = blend(auto, manual_rating)
    return finalize(
        topic,
        value,
        inputs=(raw.search, manual),
        details={"auto": auto, "keywordCoverage": coverage, "manual": manual_rating},
        sink=sink,
    )


def _ranking_points(position: Optional[int]) -> int:
    if position is None or position <= 0:
        return 0
    if position <= 3:
        return 3
    if position <= 10:
        return 2
    if position <= 20:
        return 1
    return 0


def local_presence_points(manual: Optional[LocalPresenceOverride]) -> Partial:
    """
    Manual local-presence score out of 100.

    Directory listings (<=25), business listing claim/verification (<=30),
    NAP consistency (<=15), ranked keywords (<=15), on-page signals (<=15).
    Returns NO_DATA when the reviewer entered nothing.
    """
    if manual is None:
        return NO_DATA
    topic = Topic.LOCAL_PRESENCE.value
    has_input = False
    points = 0.0

    listings = manual.directory_listings
    if listings:
        has_input = True
        total = len(listings)
        listed = [entry for entry in listings if entry.listed]
        points += ratio(len(listed), total) * DIRECTORY_PRESENCE_POINTS
        points += ratio(sum(1 for e in listed if e.complete), total) * DIRECTORY_COMPLETENESS_POINTS
        points += ratio(sum(1 for e in listed if e.verified), total) * DIRECTORY_VERIFICATION_POINTS

    for flag, flag_points in (
        (manual.business_listing_claimed, LISTING_CLAIMED_POINTS),
        (manual.business_listing_verified, LISTING_VERIFIED_POINTS),
        (manual.has_local_schema, ON_PAGE_SIGNAL_POINTS),
        (manual.address_on_website, ON_PAGE_SIGNAL_POINTS),
        (manual.maps_embedded, ON_PAGE_SIGNAL_POINTS),
    ):
        if flag is not None:
            has_input = True
        if flag is True:
            points += flag_points

    nap = safe_number(manual.nap_consistency, topic=topic, field="nap_consistency")
    if nap is not None:
        has_input = True
        points += max(0.0, min(100.0, nap)) / 100 * NAP_CONSISTENCY_POINTS

    if manual.keyword_rankings:
        has_input = True
        ranking_points = sum(_ranking_points(r.position) for r in manual.keyword_rankings)
        points += min(KEYWORD_RANKING_MAX, ranking_points)

    if not has_input:
        return NO_DATA
    return min(100.0, points)


def score_local_presence(
    raw: RawFindings,
    manual: Optional[LocalPresenceOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    topic = Topic.LOCAL_PRESENCE
    auto = _auto_score(raw.local.score, topic, "score") if raw.local else NO_DATA
    manual_points = local_presence_points(manual)
    value = blend(auto, manual_points)
    return finalize(
        topic,
        value,
        inputs=(raw.local, manual),
        details={"auto": auto, "manual": manual_points},
        sink=sink,
    )


def score_content(
    raw: RawFindings,
    manual: Optional[ContentOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    topic = Topic.CONTENT
    auto = _auto_score(raw.content.score, topic, "score") if raw.content else NO_DATA
    manual_score: Partial = NO_DATA
    if manual is not None:
        manual_score = mean_present(
            rating(getattr(manual, name), topic=topic.value, field=name)
            for name in ("text_quality", "relevance", "expertise", "freshness")
        )
    return _rated_topic(topic, auto, manual_score, (raw.content, manual), sink)


def backlink_auto_score(raw: RawFindings) -> Partial:
    """Crawler backlink score, or a tier from the referring-domain count."""
    topic = Topic.BACKLINKS
    if raw.backlinks is None:
        return NO_DATA
    auto = _auto_score(raw.backlinks.score, topic, "score")
    if auto is not NO_DATA:
        return auto
    if raw.backlinks.referring_domains is None:
        return NO_DATA
    domains = number_or_zero(raw.backlinks.referring_domains, topic=topic.value, field="referring_domains")
    for minimum, tier_score in REFERRING_DOMAIN_TIERS:
        if domains >= minimum:
            return float(tier_score)
    return float(NO_REFERRING_DOMAINS_SCORE)


def score_backlinks(
    raw: RawFindings,
    manual: Optional[BacklinkOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    topic = Topic.BACKLINKS
    auto = backlink_auto_score(raw)
    manual_score: Partial = NO_DATA
    if manual is not None:
        manual_score = mean_present(
            rating(getattr(manual, name), topic=topic.value, field=name)
            for name in ("quality_score", "domain_authority", "local_relevance")
        )
    return _rated_topic(topic, auto, manual_score, (raw.backlinks, manual), sink)


def imprint_auto_score(raw: RawFindings, manual: Optional[ImprintOverride] = None) -> Partial:
    """
    Crawler completeness of the legal notice.

    A missing notice scores 0 unless the reviewer found it. Otherwise the
    crawler score is used, or the share of detected mandatory elements.
    """
    topic = Topic.IMPRINT
    imprint = raw.imprint
    if imprint is None:
        return NO_DATA
    confirmed_by_reviewer = manual is not None and manual.found is True
    if imprint.found is False and not confirmed_by_reviewer:
        return 0.0
    auto = _auto_score(imprint.score, topic, "score")
    if auto is not NO_DATA:
        return auto
    total = len(imprint.found_elements) + len(imprint.missing_elements)
    if total == 0:
        return NO_DATA
    return ratio(len(imprint.found_elements), total) * 100


def imprint_manual_score(manual: Optional[ImprintOverride]) -> Partial:
    """Checklist completeness blended with the reviewer's rating."""
    if manual is None:
        return NO_DATA
    if manual.found is False:
        return 0.0
    answered, confirmed = count_answers(getattr(manual, name) for name in IMPRINT_CHECKLIST)
    overall = rating(manual.rating, topic=Topic.IMPRINT.value, field="rating")
    if not answered:
        return overall
    completeness = ratio(confirmed, len(IMPRINT_CHECKLIST)) * 100
    if overall is NO_DATA:
        return completeness
    return IMPRINT_CHECKLIST_WEIGHT * completeness + IMPRINT_RATING_WEIGHT * overall


def score_imprint(
    raw: RawFindings,
    manual: Optional[ImprintOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    topic = Topic.IMPRINT
    auto = imprint_auto_score(raw, manual)
    manual_score = imprint_manual_score(manual)
    return _rated_topic(topic, auto, manual_score, (raw.imprint, manual), sink)


def score_performance(
    raw: RawFindings,
    manual: Optional[PerformanceOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    topic = Topic.PERFORMANCE
    auto = _auto_score(raw.performance.score, topic, "score") if raw.performance else NO_DATA
    manual_rating = rating(manual.rating, topic=topic.value, field="rating") if manual else NO_DATA
    return _rated_topic(topic, auto, manual_rating, (raw.performance, manual), sink)


def score_mobile(
    raw: RawFindings,
    manual: Optional[MobileOverride] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
) -> TopicScore:
    topic = Topic.MOBILE
    auto = _auto_score(raw.mobile.score, topic, "score") if raw.mobile else NO_DATA
    manual_rating = rating(manual.rating, topic=topic.value, field="rating") if manual else NO_DATA
    return _rated_topic(topic, auto, manual_rating, (raw.mobile, manual), sink)
