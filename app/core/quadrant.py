"""Impact/effort quadrant classification."""

from enum import Enum

from app.core.score_formatting import is_score_above_or_equal

DEFAULT_QUADRANT_THRESHOLD = 3.0


class Quadrant(str, Enum):
    """The four cells of the impact x effort grid."""

    QUICK_WIN = "Quick Win"  # high impact, low effort
    MAJOR_PROJECT = "Major Project"  # high impact, high effort
    FILL_IN = "Fill In"  # low impact, low effort
    EXPERIMENTAL = "Experimental"  # low impact, high effort


QUADRANT_LABELS = tuple(q.value for q in Quadrant)


def scale_midpoint(scale_min: float, scale_max: float) -> float:
    """Default classification threshold for a bounded score scale."""
    return (scale_min + scale_max) / 2


def classify_quadrant(
    impact: float,
    effort: float,
    threshold: float = DEFAULT_QUADRANT_THRESHOLD,
) -> Quadrant:
    """
    Map an (impact, effort) pair to its quadrant.

    Each axis is "high" when its rounded score is at or above the rounded
    threshold, so a score exactly on the threshold lands on the high side.

    Args:
        impact: Impact score on the assessment scale
        effort: Effort score on the same scale
        threshold: Midpoint separating low from high

    Returns:
        The quadrant label
    """
    high_impact = is_score_above_or_equal(impact, threshold)
    high_effort = is_score_above_or_equal(effort, threshold)

    if high_impact:
        return Quadrant.MAJOR_PROJECT if high_effort else Quadrant.QUICK_WIN
    return Quadrant.EXPERIMENTAL if high_effort else Quadrant.FILL_IN


def parse_quadrant(label: str | None) -> Quadrant | None:
    """Resolve a stored label to a Quadrant, or None if it is not one of the four."""
    if not label:
        return None
    try:
        return Quadrant(label)
    except ValueError:
        return None
