"""
Online Presence Audit - Scoring Engine
"""
from .aggregation import aggregate_category, aggregate_overall, redistribute_weights
from .compliance_gate import ExportBlockedError, ReviewStatus, check_export_gate, require_export_allowed
from .engine import ScoreReport, score_analysis
from .models import ManualOverrides, RawFindings
from .score_validator import describe_score, score_band, validate_score_report
from .scores import NO_DATA, Category, Topic

__all__ = [
    "NO_DATA",
    "Category",
    "Topic",
    "RawFindings",
    "ManualOverrides",
    "ScoreReport",
    "score_analysis",
    "aggregate_category",
    "aggregate_overall",
    "redistribute_weights",
    "ReviewStatus",
    "ExportBlockedError",
    "check_export_gate",
    "require_export_allowed",
    "validate_score_report",
    "score_band",
    "describe_score",
]
