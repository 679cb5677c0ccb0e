"""Tests for app.core.quadrant."""

import pytest

from app.core.quadrant import (
    QUADRANT_LABELS,
    Quadrant,
    classify_quadrant,
    parse_quadrant,
    scale_midpoint,
)


class TestClassifyQuadrant:
    @pytest.mark.parametrize(
        "impact, effort, expected",
        [
            (4.0, 2.0, Quadrant.QUICK_WIN),
            (4.0, 4.0, Quadrant.MAJOR_PROJECT),
            (2.0, 2.0, Quadrant.FILL_IN),
            (2.0, 4.0, Quadrant.EXPERIMENTAL),
        ],
    )
    def test_four_cells(self, impact, effort, expected):
        assert classify_quadrant(impact, effort) == expected

    def test_threshold_counts_as_high(self):
        assert classify_quadrant(3.0, 3.0) == Quadrant.MAJOR_PROJECT
        assert classify_quadrant(3.0, 2.9) == Quadrant.QUICK_WIN

    def test_uses_rounded_scores(self):
        # 2.96 displays as 3.0, so it is high impact
        assert classify_quadrant(2.96, 2.0) == Quadrant.QUICK_WIN
        assert classify_quadrant(2.94, 2.0) == Quadrant.FILL_IN

    def test_custom_threshold(self):
        assert classify_quadrant(4.0, 4.0, threshold=4.5) == Quadrant.FILL_IN

    def test_labels(self):
        assert Quadrant.QUICK_WIN.value == "Quick Win"
        assert len(QUADRANT_LABELS) == 4


class TestParseQuadrant:
    def test_known_label(self):
        assert parse_quadrant("Major Project") == Quadrant.MAJOR_PROJECT

    @pytest.mark.parametrize("label", [None, "", "Strategic Bet", "quick win"])
    def test_unknown_label(self, label):
        assert parse_quadrant(label) is None


def test_scale_midpoint():
    assert scale_midpoint(1.0, 5.0) == 3.0
    assert scale_midpoint(0.0, 10.0) == 5.0


@pytest.mark.parametrize(
    "impact, effort, expected",
    [
        (5, 1, Quadrant.QUICK_WIN),
        (3, 3, Quadrant.MAJOR_PROJECT),
        (1, 5, Quadrant.EXPERIMENTAL),
        (1, 1, Quadrant.FILL_IN),
    ],
)
def test_scale_corners_at_midpoint(impact, effort, expected):
    assert classify_quadrant(impact, effort, scale_midpoint(1, 5)) == expected
