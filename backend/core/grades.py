"""
Slope grade classification.

Grades are an ordinal steepness label derived purely from a slope
percentage:

    S  >= 45 %
    A  >= 36 %
    B  >= 26 %
    C  >= 19 %
    —  below 19 % (unclassified)
"""

from enum import Enum
from typing import List

from core.constants import GRADE_MIN_SLOPES, UNCLASSIFIED_GRADE_LABEL


class Grade(str, Enum):
    """Steepness grade, steepest first."""
    S = 'S'
    A = 'A'
    B = 'B'
    C = 'C'
    UNCLASSIFIED = UNCLASSIFIED_GRADE_LABEL

    @property
    def is_classified(self) -> bool:
        return self is not Grade.UNCLASSIFIED

    @property
    def min_slope(self) -> float:
        """Minimum slope percent for this grade (0 for unclassified)."""
        return dict(GRADE_MIN_SLOPES).get(self.value, 0.0)


# Classified grades in table order (steepest first)
GRADE_ORDER: List[Grade] = [Grade(label) for label, _ in GRADE_MIN_SLOPES]


def classify_slope(slope_percent: float) -> Grade:
    """
    Map a slope percentage to its grade.

    Thresholds are evaluated steepest first and the first minimum that the
    slope reaches wins, so a slope exactly on a boundary belongs to the
    grade whose minimum it equals.

    Args:
        slope_percent: Slope in percent

    Returns:
        The matching Grade, or Grade.UNCLASSIFIED below the lowest minimum
    """
    for label, min_slope in GRADE_MIN_SLOPES:
        if slope_percent >= min_slope:
            return Grade(label)
    return Grade.UNCLASSIFIED
