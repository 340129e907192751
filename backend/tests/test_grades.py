"""
Tests for slope grade classification.
"""

import pytest

from core.grades import Grade, GRADE_ORDER, classify_slope


class TestClassifySlope:
    """Tests for classify_slope."""

    @pytest.mark.parametrize("slope,expected", [
        (19.0, Grade.C),
        (18.9, Grade.UNCLASSIFIED),
        (25.9, Grade.C),
        (26.0, Grade.B),
        (35.9, Grade.B),
        (36.0, Grade.A),
        (44.9, Grade.A),
        (45.0, Grade.S),
        (120.0, Grade.S),
        (0.0, Grade.UNCLASSIFIED),
    ])
    def test_boundaries(self, slope, expected):
        """Each minimum belongs to its own grade."""
        assert classify_slope(slope) is expected

    def test_unclassified_label(self):
        """Slopes under 19 % carry the em-dash label."""
        assert classify_slope(13.5).value == '—'
        assert not classify_slope(13.5).is_classified


class TestGrade:
    """Tests for the Grade enum."""

    def test_order_is_steepest_first(self):
        """Classified grades are ordered S, A, B, C."""
        assert [g.value for g in GRADE_ORDER] == ['S', 'A', 'B', 'C']

    def test_min_slopes(self):
        """Every grade knows its minimum slope."""
        assert [g.min_slope for g in GRADE_ORDER] == [45.0, 36.0, 26.0, 19.0]
        assert Grade.UNCLASSIFIED.min_slope == 0.0

    def test_string_value(self):
        """Grades compare equal to their labels."""
        assert Grade.S == 'S'
        assert Grade('B') is Grade.B
