"""
Core score types shared by topic scorers and aggregators.
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from .audit_logging import get_logger

if TYPE_CHECKING:
    from .violations import ViolationAssessment

logger = get_logger(__name__)


class NoData(Enum):
    """Explicit absence of a score. Never averaged, never treated as 0."""
    NO_DATA = "no_data"

    def __repr__(self) -> str:
        return "NO_DATA"


NO_DATA = NoData.NO_DATA

ScoreValue = Union[int, NoData]

MIN_SCORE = 0
MAX_SCORE = 100


class Topic(str, Enum):
    SEARCH = "search"
    LOCAL_PRESENCE = "local_presence"
    CONTENT = "content"
    BACKLINKS = "backlinks"
    IMPRINT = "imprint"
    ACCESSIBILITY = "accessibility"
    DATA_PRIVACY = "data_privacy"
    TECHNICAL_SECURITY = "technical_security"
    PERFORMANCE = "performance"
    MOBILE = "mobile"
    SOCIAL_MEDIA = "social_media"
    REVIEWS = "reviews"
    WORKPLACE = "workplace"
    STAFF_QUALIFICATION = "staff_qualification"
    QUOTE_RESPONSE = "quote_response"
    HOURLY_RATE = "hourly_rate"
    CORPORATE_IDENTITY = "corporate_identity"


class Category(str, Enum):
    ONLINE_QUALITY = "online_quality"
    WEBSITE_PERFORMANCE = "website_performance"
    SOCIAL_MEDIA = "social_media"
    MARKET_ENVIRONMENT = "market_environment"
    CORPORATE_APPEARANCE = "corporate_appearance"
    SERVICE_QUALITY = "service_quality"


CATEGORY_TITLES = {
    Category.ONLINE_QUALITY: "Online-Qualität · Relevanz · Autorität",
    Category.WEBSITE_PERFORMANCE: "Webseiten-Performance & Technik",
    Category.SOCIAL_MEDIA: "Online-/Web-/Social-Media Performance",
    Category.MARKET_ENVIRONMENT: "Markt & Marktumfeld",
    Category.CORPORATE_APPEARANCE: "Außendarstellung & Erscheinungsbild",
    Category.SERVICE_QUALITY: "Qualität · Service · Kundenorientierung",
}


def has_data(value: Any) -> bool:
    return value is not NO_DATA


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Round half-up and clamp to [0, 100]. NaN and infinities become 0."""
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        logger.warning("invalid_score_value", value=repr(value))
        return MIN_SCORE
    if math.isnan(value) or math.isinf(value):
        logger.warning("invalid_score_value", value=repr(value))
        return MIN_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, round_half_up(value)))


def clamp_value(value: Union[float, NoData]) -> ScoreValue:
    """clamp_score that lets NO_DATA through untouched."""
    if value is NO_DATA:
        return NO_DATA
    return clamp_score(value)


def display_value(value: ScoreValue) -> int:
    """Numeric value for displays that cannot show 'no data'."""
    return 0 if value is NO_DATA else value


def _serialize(value: ScoreValue) -> Optional[int]:
    return None if value is NO_DATA else value


@dataclass
class TopicScore:
    """Score of a single topic, with the intermediates used to compute it."""
    topic: Topic
    value: ScoreValue
    details: Dict[str, Any] = field(default_factory=dict)
    violations: Optional["ViolationAssessment"] = None

    @property
    def has_data(self) -> bool:
        return self.value is not NO_DATA

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "topic": self.topic.value,
            "score": _serialize(self.value),
            "hasData": self.has_data,
            "details": self.details,
        }
        if self.violations is not None:
            out["violations"] = self.violations.to_dict()
        return out


@dataclass
class CategoryScore:
    """Weighted mean of a category's present topics."""
    category: Category
    value: ScoreValue
    effective_weights: Dict[Topic, float] = field(default_factory=dict)
    topics: List[TopicScore] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return self.value is not NO_DATA

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "title": CATEGORY_TITLES[self.category],
            "score": _serialize(self.value),
            "hasData": self.has_data,
            "effectiveWeights": {t.value: w for t, w in self.effective_weights.items()},
            "topics": [t.topic.value for t in self.topics],
        }


@dataclass
class OverallScore:
    """Overall score with the redistributed category weights actually used."""
    value: ScoreValue
    effective_weights: Dict[Category, float] = field(default_factory=dict)
    base_weights: Dict[Category, float] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return self.value is not NO_DATA

    @property
    def display(self) -> int:
        return display_value(self.value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": _serialize(self.value),
            "displayScore": self.display,
            "hasData": self.has_data,
            "effectiveWeights": {c.value: w for c, w in self.effective_weights.items()},
            "baseWeights": {c.value: w for c, w in self.base_weights.items()},
        }
