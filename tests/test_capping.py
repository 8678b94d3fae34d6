"""
Tests for the critical-violation score cap.
"""

from __future__ import annotations

import pytest

from presence_audit.capping import NO_CAP, apply_cap, cap_for
from presence_audit.scores import NO_DATA


@pytest.mark.parametrize(
    "count,cap",
    [(0, 100), (1, 59), (2, 35), (3, 20), (7, 20)],
)
def test_cap_tiers(count, cap):
    assert cap_for(count) == cap


def test_negative_count_is_uncapped():
    assert cap_for(-1) == NO_CAP


def test_cap_never_raises_a_score():
    assert apply_cap(40, 1) == 40
    assert apply_cap(80, 1) == 59
    assert apply_cap(80, 0) == 80


def test_cap_is_monotonic_in_violation_count():
    scores = [apply_cap(95, k) for k in range(6)]
    assert scores == sorted(scores, reverse=True)


def test_no_data_passes_through():
    assert apply_cap(NO_DATA, 3) is NO_DATA
