"""
Tests for the export compliance gate.
"""

from __future__ import annotations

import pytest

from presence_audit.compliance_gate import (
    ExportBlockedError,
    ReviewStatus,
    check_export_gate,
    require_export_allowed,
)


def test_unreviewed_categories_block_export():
    status = ReviewStatus.initialize(["executive_summary", "recommendations"])
    status.mark_reviewed("executive_summary", reviewer="pruefer@example.de")
    result = check_export_gate(status)
    assert not result.allowed
    assert result.unreviewed_categories == ["recommendations"]
    assert "recommendations" in result.message


def test_fully_reviewed_allows_export():
    status = ReviewStatus.initialize(["executive_summary"])
    status.mark_reviewed("executive_summary")
    assert check_export_gate(status).allowed
    assert status.categories["executive_summary"].reviewed_at is not None


def test_no_ai_content_allows_export():
    assert check_export_gate(ReviewStatus()).allowed
    assert check_export_gate(None).allowed


def test_require_export_allowed_raises():
    status = ReviewStatus.initialize(["recommendations"])
    with pytest.raises(ExportBlockedError) as excinfo:
        require_export_allowed(status)
    assert excinfo.value.result.unreviewed_categories == ["recommendations"]
