"""Score rounding and threshold comparison.

The same rounding is used for display and for every threshold decision, so a
score shown as "4.0" can never fall on the other side of a 4.0 threshold
because its stored value was 3.96. Classification, gap analysis, eligibility
and recommendation acceptance all compare through the two comparators below;
strict comparisons are written as their negations.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

SCORE_PRECISION = 1

_QUANTUM = Decimal(1).scaleb(-SCORE_PRECISION)

# Enough digits to quantize any finite double (up to ~1.8e308)
_ROUNDING_DIGITS = 400


def round_score(score: float) -> float:
    """
    Round a score half away from zero at SCORE_PRECISION decimal places.

    Rounds the float's shortest decimal repr, so 2.25 becomes 2.3 (and -2.25
    becomes -2.3) even though the binary double sits just below 2.25.

    Raises:
        ValueError: If the score is infinite or NaN
    """
    score = float(score)
    if not math.isfinite(score):
        raise ValueError(f"Score must be a finite number, got {score}")

    with localcontext() as ctx:
        ctx.prec = _ROUNDING_DIGITS
        rounded = Decimal(repr(score)).quantize(_QUANTUM, rounding=ROUND_HALF_UP)
    # + 0.0 folds -0.0 into 0.0 so "-0.0" is never displayed
    return float(rounded) + 0.0


def format_score(score: float) -> str:
    """Round a score and render it with exactly SCORE_PRECISION decimals."""
    return f"{round_score(score):.{SCORE_PRECISION}f}"


def is_score_above_or_equal(score: float, threshold: float) -> bool:
    """score >= threshold, after rounding both."""
    return round_score(score) >= round_score(threshold)


def is_score_below_or_equal(score: float, threshold: float) -> bool:
    """score <= threshold, after rounding both."""
    return round_score(score) <= round_score(threshold)
