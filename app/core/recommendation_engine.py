"""Use case recommendation matching.

Matches pillar maturity scores against the use case catalog. Every catalog
entry gets a fit score (0-1) from three weighted factors:

- Maturity gaps (40%): how many of the pillars it improves are gaps, and how
  severe they are.
- Strategic alignment (30%): effective impact, with a bonus for quick wins.
- Implementation readiness (30%): inverse effective effort, with a bonus when
  overall maturity is above the midpoint.

Entries whose fit exceeds the acceptance threshold are recommended, best fit
first. Pure computation: persisting the result is the orchestrator's job
(see ``app.services.recommendation_service``).
"""

from uuid import UUID

from app.core.maturity import DEFAULT_GAP_THRESHOLD, analyze_maturity_gaps
from app.core.quadrant import DEFAULT_QUADRANT_THRESHOLD, Quadrant
from app.core.schemas_recommendations import (
    CriteriaWeights,
    GapSeverity,
    MaturityAnalysis,
    MaturityScores,
    RecommendationPriority,
    RecommendationResult,
    RecommendedUseCase,
    UseCase,
)
from app.core.score_formatting import (
    is_score_above_or_equal,
    is_score_below_or_equal,
    round_score,
)
from app.core.use_case_scoring import (
    MAX_LEVER_SCORE,
    get_effective_effort_score,
    get_effective_impact_score,
    get_effective_quadrant,
    has_manual_overrides,
)

DEFAULT_ACCEPTANCE_THRESHOLD = 0.6
DEFAULT_RECOMMENDATION_LIMIT = 10

HIGH_PRIORITY_ABOVE = 0.8
MEDIUM_PRIORITY_ABOVE = 0.7
STRONG_FACTOR_ABOVE = 0.7

# Gap alignment when the assessment shows no gaps at all
NO_GAP_ALIGNMENT = 0.5

GAP_SEVERITY_WEIGHTS = {
    GapSeverity.CRITICAL: 0.3,
    GapSeverity.MAJOR: 0.2,
    GapSeverity.MINOR: 0.1,
}

QUICK_WIN_BONUS = 0.2
MATURITY_READINESS_BONUS = 0.2


def _exceeds(score: float, threshold: float) -> bool:
    return not is_score_below_or_equal(score, threshold)


def is_eligible(use_case: UseCase, scores: MaturityScores) -> bool:
    """Whether every required pillar level is met. Missing pillar scores fail."""
    for pillar, level in use_case.required_pillar_levels.items():
        score = scores.get(pillar)
        if score is None or not is_score_above_or_equal(score, level):
            return False
    return True


def gap_alignment(use_case: UseCase, analysis: MaturityAnalysis) -> tuple[float, list[str]]:
    """Score how well a use case targets the assessment's maturity gaps."""
    if not analysis.gaps:
        return NO_GAP_ALIGNMENT, []

    relevant = [
        g for g in analysis.gaps
        if not use_case.pillars or g.pillar in use_case.pillars
    ]
    alignment = sum(GAP_SEVERITY_WEIGHTS[g.severity] for g in relevant)
    addressed = [g.pillar for g in relevant] if use_case.pillars else []
    return min(alignment, 1.0), addressed


def strategic_alignment(use_case: UseCase, quadrant: Quadrant) -> float:
    impact = min(get_effective_impact_score(use_case) / MAX_LEVER_SCORE, 1.0)
    bonus = QUICK_WIN_BONUS if quadrant == Quadrant.QUICK_WIN else 0.0
    return min(impact + bonus, 1.0)


def implementation_readiness(
    use_case: UseCase, analysis: MaturityAnalysis, midpoint: float
) -> float:
    readiness = 1.0 - min(get_effective_effort_score(use_case) / MAX_LEVER_SCORE, 1.0)
    if _exceeds(analysis.overall_average, midpoint):
        readiness += MATURITY_READINESS_BONUS
    return max(0.0, min(readiness, 1.0))


def priority_for(fit_score: float) -> RecommendationPriority:
    if _exceeds(fit_score, HIGH_PRIORITY_ABOVE):
        return RecommendationPriority.HIGH
    if _exceeds(fit_score, MEDIUM_PRIORITY_ABOVE):
        return RecommendationPriority.MEDIUM
    return RecommendationPriority.LOW


def evaluate_use_case(
    use_case: UseCase,
    analysis: MaturityAnalysis,
    weights: CriteriaWeights,
    quadrant_threshold: float = DEFAULT_QUADRANT_THRESHOLD,
) -> tuple[float, Quadrant, list[str]]:
    """
    Compute the raw fit score of one catalog entry.

    Returns:
        (fit score, effective quadrant, reasoning lines)
    """
    quadrant = get_effective_quadrant(use_case, quadrant_threshold)
    reasoning: list[str] = []

    gaps_score, addressed = gap_alignment(use_case, analysis)
    strategic_score = strategic_alignment(use_case, quadrant)
    readiness_score = implementation_readiness(use_case, analysis, quadrant_threshold)

    if _exceeds(gaps_score, STRONG_FACTOR_ABOVE):
        reasoning.append("Addresses identified maturity gaps")
    if addressed:
        reasoning.append(f"Targets gaps in: {', '.join(addressed)}")
    if _exceeds(strategic_score, STRONG_FACTOR_ABOVE):
        reasoning.append("High strategic value and business impact")
    if quadrant == Quadrant.QUICK_WIN:
        reasoning.append("Quick win: high impact with low implementation effort")
    if _exceeds(readiness_score, STRONG_FACTOR_ABOVE):
        reasoning.append("High implementation feasibility")
    if has_manual_overrides(use_case):
        reasoning.append("Scores include manual overrides")

    fit = (
        gaps_score * weights.maturity_gaps
        + strategic_score * weights.strategic_alignment
        + readiness_score * weights.implementation_readiness
    )
    return fit, quadrant, reasoning


def generate_recommendations(
    assessment_id: UUID,
    scores: MaturityScores,
    catalog: list[UseCase],
    criteria_weights: CriteriaWeights | None = None,
    acceptance_threshold: float = DEFAULT_ACCEPTANCE_THRESHOLD,
    limit: int = DEFAULT_RECOMMENDATION_LIMIT,
    quadrant_threshold: float = DEFAULT_QUADRANT_THRESHOLD,
    gap_threshold: float = DEFAULT_GAP_THRESHOLD,
    active_only: bool = False,
) -> RecommendationResult:
    """
    Match maturity scores against the catalog.

    Args:
        assessment_id: Assessment the result belongs to
        scores: Pillar id -> maturity score (may be empty)
        catalog: Candidate use cases, in catalog order (may be empty)
        criteria_weights: Fit factor weights (defaults 0.4 / 0.3 / 0.3)
        acceptance_threshold: Fit score an entry must exceed
        limit: Maximum number of recommendations
        quadrant_threshold: Impact/effort midpoint
        gap_threshold: Pillar scores below this are gaps
        active_only: Skip catalog entries not flagged active

    Returns:
        RecommendationResult ordered by descending fit; ties keep catalog order
    """
    weights = criteria_weights or CriteriaWeights()
    analysis = analyze_maturity_gaps(scores, gap_threshold)

    candidates: list[RecommendedUseCase] = []
    for use_case in catalog:
        if active_only and not use_case.is_active:
            continue
        if not is_eligible(use_case, scores):
            continue

        fit, quadrant, reasoning = evaluate_use_case(
            use_case, analysis, weights, quadrant_threshold
        )
        if not _exceeds(fit, acceptance_threshold):
            continue

        candidates.append(
            RecommendedUseCase(
                use_case_id=use_case.id,
                title=use_case.title,
                fit_score=round_score(fit),
                priority=priority_for(fit),
                quadrant=quadrant.value,
                reasoning=reasoning,
            )
        )

    # sorted() is stable: equal (rounded) fits keep catalog order
    ranked = sorted(candidates, key=lambda r: -r.fit_score)

    return RecommendationResult(
        assessment_id=assessment_id,
        recommended_use_cases=ranked[: max(limit, 0)],
        focus_areas=[g.pillar for g in analysis.gaps],
    )
