"""
Scoring engine: runs every topic scorer and aggregates the results.

Topic scorers are independent and may run on a thread pool. A failing scorer
or aggregator never propagates to the caller: its result degrades to NO_DATA
and the failure is logged.
"""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .aggregation import CATEGORY_WEIGHTS, TOPIC_WEIGHTS, aggregate_category, aggregate_overall
from .audit_logging import get_logger
from .business_scores import (
    score_corporate_identity,
    score_hourly_rate,
    score_quote_response,
    score_staff_qualification,
)
from .compliance_scores import score_accessibility, score_data_privacy, score_technical_security
from .config import get_settings
from .diagnostics import DiagnosticSink
from .models import ManualOverrides, RawFindings
from .scores import NO_DATA, Category, CategoryScore, OverallScore, Topic, TopicScore
from .social_scores import score_reviews, score_social_media, score_workplace
from .website_scores import (
    score_backlinks,
    score_content,
    score_imprint,
    score_local_presence,
    score_mobile,
    score_performance,
    score_search,
)

logger = get_logger(__name__)

TopicScorer = Callable[..., TopicScore]

TOPIC_SCORERS: Dict[Topic, TopicScorer] = {
    Topic.SEARCH: score_search,
    Topic.LOCAL_PRESENCE: score_local_presence,
    Topic.CONTENT: score_content,
    Topic.BACKLINKS: score_backlinks,
    Topic.IMPRINT: score_imprint,
    Topic.ACCESSIBILITY: score_accessibility,
    Topic.DATA_PRIVACY: score_data_privacy,
    Topic.TECHNICAL_SECURITY: score_technical_security,
    Topic.PERFORMANCE: score_performance,
    Topic.MOBILE: score_mobile,
    Topic.SOCIAL_MEDIA: score_social_media,
    Topic.REVIEWS: score_reviews,
    Topic.WORKPLACE: score_workplace,
    Topic.STAFF_QUALIFICATION: score_staff_qualification,
    Topic.QUOTE_RESPONSE: score_quote_response,
    Topic.HOURLY_RATE: score_hourly_rate,
    Topic.CORPORATE_IDENTITY: score_corporate_identity,
}


@dataclass
class ScoreReport:
    """Everything a report renderer needs, passed explicitly."""
    topics: Dict[Topic, TopicScore] = field(default_factory=dict)
    categories: Dict[Category, CategoryScore] = field(default_factory=dict)
    overall: OverallScore = field(default_factory=lambda: OverallScore(value=NO_DATA))
    errors: List[Dict[str, str]] = field(default_factory=list)

    @property
    def violations(self) -> Dict[Topic, Any]:
        """Violation assessments of the capped topics."""
        return {t: s.violations for t, s in self.topics.items() if s.violations is not None}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall.to_dict(),
            "categories": {c.value: s.to_dict() for c, s in self.categories.items()},
            "topics": {t.value: s.to_dict() for t, s in self.topics.items()},
            "errors": self.errors,
        }


def _run_scorer(
    topic: Topic,
    raw: RawFindings,
    manual: ManualOverrides,
    sink: Optional[DiagnosticSink],
    errors: List[Dict[str, str]],
) -> TopicScore:
    scorer = TOPIC_SCORERS[topic]
    override = getattr(manual, topic.value, None)
    try:
        return scorer(raw, override, sink=sink)
    except Exception as e:
        logger.error("topic_scorer_failed", topic=topic.value, error=str(e), exc_info=True)
        errors.append({"stage": "topic", "name": topic.value, "error": str(e)})
        return TopicScore(topic=topic, value=NO_DATA, details={"error": str(e)})


def score_topics(
    raw: RawFindings,
    manual: Optional[ManualOverrides] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
    parallel: Optional[bool] = None,
    max_workers: Optional[int] = None,
    errors: Optional[List[Dict[str, str]]] = None,
) -> Dict[Topic, TopicScore]:
    """Fan out to every topic scorer."""
    settings = get_settings()
    manual = manual or ManualOverrides()
    parallel = settings.parallel_scoring if parallel is None else parallel
    errors = [] if errors is None else errors
    topics = list(TOPIC_SCORERS)

    if parallel:
        workers = max_workers or settings.scoring_workers
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                topic: executor.submit(_run_scorer, topic, raw, manual, sink, errors)
                for topic in topics
            }
            return {topic: futures[topic].result() for topic in topics}
    return {topic: _run_scorer(topic, raw, manual, sink, errors) for topic in topics}


def score_analysis(
    raw: RawFindings,
    manual: Optional[ManualOverrides] = None,
    *,
    sink: Optional[DiagnosticSink] = None,
    parallel: Optional[bool] = None,
    max_workers: Optional[int] = None,
) -> ScoreReport:
    """
    Score one analysis end to end.

    Args:
        raw: Automated findings for the business
        manual: Reviewer overrides, one optional record per topic
        sink: Diagnostic sink receiving one trace per topic
        parallel: Run topic scorers on a thread pool (defaults to settings)
        max_workers: Thread pool size (defaults to settings)

    Returns:
        ScoreReport with topic, category and overall scores
    """
    report = ScoreReport()
    report.topics = score_topics(
        raw, manual, sink=sink, parallel=parallel, max_workers=max_workers, errors=report.errors
    )

    for category in CATEGORY_WEIGHTS:
        try:
            report.categories[category] = aggregate_category(
                category, report.topics.values(), TOPIC_WEIGHTS[category]
            )
        except Exception as e:
            logger.error("category_aggregation_failed", category=category.value, error=str(e), exc_info=True)
            report.errors.append({"stage": "category", "name": category.value, "error": str(e)})
            report.categories[category] = CategoryScore(category=category, value=NO_DATA)

    try:
        report.overall = aggregate_overall(report.categories.values(), CATEGORY_WEIGHTS)
    except Exception as e:
        logger.error("overall_aggregation_failed", error=str(e), exc_info=True)
        report.errors.append({"stage": "overall", "name": "overall", "error": str(e)})
        report.overall = OverallScore(value=NO_DATA, base_weights=dict(CATEGORY_WEIGHTS))

    logger.info(
        "analysis_scored",
        business=raw.business_name,
        overall=report.overall.display,
        categories_with_data=sum(1 for c in report.categories.values() if c.has_data),
        errors=len(report.errors),
    )
    return report
