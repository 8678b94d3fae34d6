"""
Export compliance gate.

A customer-facing artifact may only be produced once every category that
contains AI/automatically generated content has been reviewed by a person.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .audit_logging import get_logger

logger = get_logger(__name__)


class CategoryReview(BaseModel):
    is_reviewed: bool = False
    reviewed_at: Optional[datetime] = None
    reviewer: Optional[str] = None
    review_notes: Optional[str] = None


class ReviewStatus(BaseModel):
    """Review state per AI-content category name."""
    categories: Dict[str, CategoryReview] = Field(default_factory=dict)

    @classmethod
    def initialize(cls, names: List[str]) -> "ReviewStatus":
        """All given categories, none reviewed yet."""
        return cls(categories={name: CategoryReview() for name in names})

    def mark_reviewed(self, name: str, reviewer: Optional[str] = None, notes: Optional[str] = None) -> None:
        self.categories[name] = CategoryReview(
            is_reviewed=True,
            reviewed_at=datetime.now(timezone.utc),
            reviewer=reviewer,
            review_notes=notes,
        )

    def unreviewed(self) -> List[str]:
        return [name for name, review in self.categories.items() if not review.is_reviewed]


@dataclass
class ExportGateResult:
    allowed: bool
    unreviewed_categories: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.allowed:
            return "Export allowed"
        return "Unreviewed AI content in: " + ", ".join(self.unreviewed_categories)

    def to_dict(self) -> Dict[str, object]:
        return {
            "allowed": self.allowed,
            "unreviewedCategories": self.unreviewed_categories,
            "message": self.message,
        }


class ExportBlockedError(Exception):
    """Raised by require_export_allowed while AI content is unreviewed."""

    def __init__(self, result: ExportGateResult):
        super().__init__(result.message)
        self.result = result


def check_export_gate(review_status: Optional[ReviewStatus]) -> ExportGateResult:
    """Advisory check; lists the categories that still need a review."""
    unreviewed = review_status.unreviewed() if review_status is not None else []
    result = ExportGateResult(allowed=not unreviewed, unreviewed_categories=unreviewed)
    if not result.allowed:
        logger.warning("export_blocked", unreviewed_categories=unreviewed)
    return result


def require_export_allowed(review_status: Optional[ReviewStatus]) -> ExportGateResult:
    """Like check_export_gate but raises ExportBlockedError when blocked."""
    result = check_export_gate(review_status)
    if not result.allowed:
        raise ExportBlockedError(result)
    return result
