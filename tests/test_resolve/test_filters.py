"""Tests for wuwa_catalog.resolve.filters."""

from __future__ import annotations

from wuwa_catalog.resolve.filters import exclusion_reason


def test_not_excluded_by_default():
    assert exclusion_reason(1, "Jiyan", [], []) is None


def test_skip_list():
    reason = exclusion_reason(1501, "Rover", [1501, 1502], [])
    assert reason is not None
    assert "1501" in reason


def test_name_pattern_substring_case_insensitive():
    assert exclusion_reason(9, "Weapon Projection: Sword", [], ["projection"]) is not None


def test_pattern_not_matching():
    assert exclusion_reason(9, "Emerald of Genesis", [], ["Projection"]) is None


def test_empty_pattern_ignored():
    assert exclusion_reason(9, "Anything", [], [""]) is None
