"""Impact/effort scoring for catalog use cases.

Impact and effort are weighted sums of five 1-5 levers each. Weights are
percentages; the defaults weight every lever equally (20%). Manual overrides
on a use case always win over the calculated values.
"""

from app.core.quadrant import (
    DEFAULT_QUADRANT_THRESHOLD,
    Quadrant,
    classify_quadrant,
    parse_quadrant,
)
from app.core.schemas_recommendations import UseCase

IMPACT_LEVERS = (
    "revenue_impact",
    "cost_savings",
    "risk_reduction",
    "broker_partner_experience",
    "strategic_fit",
)

EFFORT_LEVERS = (
    "data_readiness",
    "technical_complexity",
    "change_impact",
    "model_risk",
    "adoption_readiness",
)

DEFAULT_LEVER_WEIGHT = 20.0

MAX_LEVER_SCORE = 5.0


def _weighted_score(
    levers: dict[str, float],
    names: tuple[str, ...],
    weights: dict[str, float] | None,
) -> float:
    total = 0.0
    for name in names:
        value = levers.get(name) or 0.0
        weight = (weights or {}).get(name, DEFAULT_LEVER_WEIGHT)
        total += value * weight / 100
    # Clamp only; full precision is kept for later rounding
    return max(0.0, min(MAX_LEVER_SCORE, total))


def calculate_impact_score(
    levers: dict[str, float], weights: dict[str, float] | None = None
) -> float:
    """Weighted impact score (0-5) from the impact levers."""
    return _weighted_score(levers, IMPACT_LEVERS, weights)


def calculate_effort_score(
    levers: dict[str, float], weights: dict[str, float] | None = None
) -> float:
    """Weighted effort score (0-5) from the effort levers."""
    return _weighted_score(levers, EFFORT_LEVERS, weights)


def get_effective_impact_score(use_case: UseCase) -> float:
    if use_case.manual_impact_score is not None:
        return use_case.manual_impact_score
    if use_case.impact_levers:
        return calculate_impact_score(use_case.impact_levers)
    return use_case.impact_score


def get_effective_effort_score(use_case: UseCase) -> float:
    if use_case.manual_effort_score is not None:
        return use_case.manual_effort_score
    if use_case.effort_levers:
        return calculate_effort_score(use_case.effort_levers)
    return use_case.effort_score


def get_effective_quadrant(
    use_case: UseCase, threshold: float = DEFAULT_QUADRANT_THRESHOLD
) -> Quadrant:
    """
    Manual quadrant override when it names a valid quadrant, otherwise the
    quadrant of the current effective scores (never the stale stored label).
    """
    manual = parse_quadrant(use_case.manual_quadrant)
    if manual is not None:
        return manual
    return classify_quadrant(
        get_effective_impact_score(use_case),
        get_effective_effort_score(use_case),
        threshold,
    )


def has_manual_overrides(use_case: UseCase) -> bool:
    return (
        use_case.manual_impact_score is not None
        or use_case.manual_effort_score is not None
        or bool(use_case.manual_quadrant)
    )
