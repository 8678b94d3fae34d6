"""
Tests for auto/manual reconciliation and number sanitizing.
"""

from __future__ import annotations

import math

import pytest

from presence_audit.reconcile import blend, count_answers, mean_present, rating, safe_number
from presence_audit.scores import NO_DATA


def test_blend_policy():
    assert blend(NO_DATA, NO_DATA) is NO_DATA
    assert blend(80.0, NO_DATA) == 80.0
    assert blend(NO_DATA, 40.0) == 40.0
    assert blend(80.0, 40.0) == pytest.approx(64.0)


def test_safe_number_sanitizes_bad_values():
    assert safe_number(None, topic="t", field="f") is None
    assert safe_number(math.nan, topic="t", field="f") == 0.0
    assert safe_number("n/a", topic="t", field="f") == 0.0
    assert safe_number("4,5", topic="t", field="f") == 4.5
    assert safe_number("", topic="t", field="f") is None


def test_rating_is_clamped():
    assert rating(120, topic="t", field="f") == 100.0
    assert rating(-5, topic="t", field="f") == 0.0
    assert rating(None, topic="t", field="f") is NO_DATA


def test_mean_present_ignores_no_data():
    assert mean_present([NO_DATA, 40.0, 60.0]) == 50.0
    assert mean_present([NO_DATA]) is NO_DATA


def test_count_answers_tristate():
    assert count_answers([True, False, None, True]) == (3, 2)
