"""Pillar maturity scores and gap analysis.

Pillar scores are the mean score contribution of the answered questions
tagged with that pillar. Gaps are pillars scoring below the gap threshold,
banded by how far below they are.
"""

import math
from typing import Any

from app.core.answer_validation import is_answered
from app.core.schemas_questions import Answers, Question, Section
from app.core.schemas_recommendations import (
    GapSeverity,
    MaturityAnalysis,
    MaturityGap,
    MaturityScores,
)
from app.core.score_formatting import is_score_above_or_equal

DEFAULT_GAP_THRESHOLD = 3.0

CRITICAL_GAP_BELOW = 2.0
MAJOR_GAP_BELOW = 2.5

_NUMERIC_TYPES = {"number", "score", "scale"}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _option_score(question: Question, choice: Any) -> float | None:
    for option in question.options:
        if choice == option.id or (option.value is not None and choice == option.value):
            return option.score
    return None


def answer_score(question: Question, value: Any) -> float | None:
    """
    Score contribution of one answer, or None if it does not score.

    Option-backed answers use the selected options' score weights (mean for
    multi answers), numeric types use the value, smart ratings their value.
    """
    if not is_answered(value):
        return None

    if question.options:
        choices = value if isinstance(value, list) else [value]
        scores = [s for s in (_option_score(question, c) for c in choices) if s is not None]
        return sum(scores) / len(scores) if scores else None

    if question.question_type in _NUMERIC_TYPES and _is_number(value):
        return float(value)

    if question.question_type == "smart_rating" and isinstance(value, dict):
        rating = value.get("value")
        return float(rating) if _is_number(rating) else None

    return None


def compute_pillar_scores(sections: list[Section], answers: Answers) -> MaturityScores:
    """Average answer scores per pillar; pillars with nothing scorable are omitted."""
    contributions: dict[str, list[float]] = {}
    for section in sections:
        for question in section.questions:
            if not question.pillar:
                continue
            score = answer_score(question, answers.get(question.id))
            # Non-finite answers (JSON Infinity/NaN) never score
            if score is not None and math.isfinite(score):
                contributions.setdefault(question.pillar, []).append(score)

    return {pillar: sum(values) / len(values) for pillar, values in contributions.items()}


def _severity(score: float) -> GapSeverity:
    if not is_score_above_or_equal(score, CRITICAL_GAP_BELOW):
        return GapSeverity.CRITICAL
    if not is_score_above_or_equal(score, MAJOR_GAP_BELOW):
        return GapSeverity.MAJOR
    return GapSeverity.MINOR


def analyze_maturity_gaps(
    scores: MaturityScores, gap_threshold: float = DEFAULT_GAP_THRESHOLD
) -> MaturityAnalysis:
    """
    Summarise pillar scores into an overall average and severity-banded gaps.

    Empty scores give a neutral analysis (average 0.0, no gaps).
    """
    gaps = [
        MaturityGap(pillar=pillar, score=score, severity=_severity(score))
        for pillar, score in scores.items()
        if not is_score_above_or_equal(score, gap_threshold)
    ]
    overall = sum(scores.values()) / len(scores) if scores else 0.0

    return MaturityAnalysis(
        overall_average=overall,
        pillar_scores=dict(scores),
        gaps=gaps,
        gap_count=len(gaps),
    )
