"""Behavioral tests for the recommendation workflow against an in-memory DB."""

from unittest.mock import patch
from uuid import uuid4

import pytest

from app.core.config import get_settings
from app.core.errors import ConflictError, NotFoundError
from app.core.schemas_recommendations import RecommendationState, UseCase
from app.core.view_invalidation import RECOMMENDATIONS_VIEW, USE_CASES_VIEW, subscribe
from app.services.recommendation_service import (
    apply_recommendations,
    clear_recommendations,
    fetch_recommendations,
    generate_and_apply,
    generate_recommendations_for_assessment,
    get_recommendation_state,
    load_catalog,
)
from tests.fakes.fake_db import fake_db

SCORES = {"data": 4.0, "tech": 4.0}

CATALOG_ROWS = [
    {"id": "fast-win", "title": "Fast Win", "impact_score": 5, "effort_score": 1, "is_active": True},
    {"id": "steady-gain", "title": "Steady Gain", "impact_score": 4, "effort_score": 2},
    {"id": "big-build", "title": "Big Build", "impact_score": 5, "effort_score": 5, "is_active": True},
]


@pytest.fixture(autouse=True)
def reset_fake_db():
    """Reset fake DB before each test."""
    fake_db.reset()
    fake_db.use_cases = [dict(row) for row in CATALOG_ROWS]
    yield
    fake_db.reset()


@pytest.fixture(autouse=True)
def mock_db_helpers():
    """Route the db modules to the fake DB."""
    with (
        patch("app.db.assessments.get_assessment", side_effect=fake_db.get_assessment),
        patch(
            "app.db.assessments.claim_recommendation_version",
            side_effect=fake_db.claim_recommendation_version,
        ),
        patch("app.db.recommendations.get_recommendation_set", side_effect=fake_db.get_recommendation_set),
        patch(
            "app.db.recommendations.insert_recommendation_set",
            side_effect=fake_db.insert_recommendation_set,
        ),
        patch(
            "app.db.recommendations.replace_recommendation_set",
            side_effect=fake_db.replace_recommendation_set,
        ),
        patch(
            "app.db.recommendations.delete_recommendation_set",
            side_effect=fake_db.delete_recommendation_set,
        ),
        patch("app.db.use_cases.list_use_cases", side_effect=fake_db.list_use_cases),
        patch("app.db.use_cases.list_use_cases_by_ids", side_effect=fake_db.list_use_cases_by_ids),
    ):
        yield


@pytest.fixture
def assessment_id():
    assessment_id = uuid4()
    fake_db.add_assessment(assessment_id)
    return assessment_id


@pytest.fixture
def invalidations():
    calls = []
    unsubscribe = subscribe(lambda key, assessment_id: calls.append((key, assessment_id)))
    yield calls
    unsubscribe()


def _catalog() -> list[UseCase]:
    return [UseCase.model_validate(row) for row in CATALOG_ROWS]


class TestGenerateAndApply:
    def test_persists_ranked_set(self, assessment_id):
        result = generate_and_apply(assessment_id, SCORES)

        assert result.use_case_ids == ["fast-win", "steady-gain"]
        stored = fake_db.get_recommendation_set(assessment_id)
        assert stored["use_case_ids"] == ["fast-win", "steady-gain"]
        assert stored["version"] == 1
        assert get_recommendation_state(assessment_id) == RecommendationState.APPLIED

    def test_fetch_returns_catalog_rows_in_fit_order(self, assessment_id):
        generate_and_apply(assessment_id, SCORES)

        response = fetch_recommendations(assessment_id)

        assert [uc.id for uc in response.recommended_use_cases] == ["fast-win", "steady-gain"]
        assert response.count == 2

    def test_regenerating_same_inputs_writes_nothing(self, assessment_id):
        generate_and_apply(assessment_id, SCORES)
        writes_after_first = list(fake_db.writes)

        generate_and_apply(assessment_id, SCORES)

        assert fake_db.writes == writes_after_first == ["claim", "insert"]

    def test_regenerating_replaces_previous_set(self, assessment_id):
        generate_and_apply(assessment_id, SCORES)

        result = generate_and_apply(assessment_id, SCORES, use_cases=_catalog()[1:])

        stored = fake_db.get_recommendation_set(assessment_id)
        assert result.use_case_ids == ["steady-gain"]
        assert stored["use_case_ids"] == ["steady-gain"]
        assert stored["version"] == 2
        assert len(fake_db.recommendation_sets) == 1
        assert fake_db.writes == ["claim", "insert", "claim", "replace"]

    def test_empty_catalog_applies_empty_set(self, assessment_id):
        result = generate_and_apply(assessment_id, SCORES, use_cases=[])

        assert result.count == 0
        assert fetch_recommendations(assessment_id).count == 0

    def test_unknown_assessment(self):
        with pytest.raises(NotFoundError):
            generate_and_apply(uuid4(), SCORES)
        assert fake_db.writes == []

    def test_active_only_catalog(self, assessment_id, monkeypatch):
        monkeypatch.setenv("RECOMMENDATIONS_ACTIVE_ONLY", "true")
        get_settings.cache_clear()

        assert [uc.id for uc in load_catalog()] == ["fast-win", "big-build"]
        result = generate_and_apply(assessment_id, SCORES)
        assert result.use_case_ids == ["fast-win"]


class TestApply:
    def test_result_for_other_assessment_is_rejected(self, assessment_id):
        result = generate_recommendations_for_assessment(uuid4(), SCORES, _catalog())

        with pytest.raises(ValueError, match="belongs to assessment"):
            apply_recommendations(assessment_id, result)
        assert fake_db.writes == []

    def test_invalidates_use_case_view(self, assessment_id, invalidations):
        result = generate_recommendations_for_assessment(assessment_id, SCORES, _catalog())

        apply_recommendations(assessment_id, result)

        assert invalidations == [(USE_CASES_VIEW, assessment_id)]

    def test_lost_claim_raises_conflict(self, assessment_id):
        generate_and_apply(assessment_id, SCORES)
        stale = {"id": str(assessment_id), "status": "completed", "recommendation_version": 0}
        result = generate_recommendations_for_assessment(assessment_id, SCORES, _catalog()[1:])

        with patch("app.db.assessments.get_assessment", return_value=stale):
            with pytest.raises(ConflictError):
                apply_recommendations(assessment_id, result)

        assert fake_db.get_recommendation_set(assessment_id)["use_case_ids"] == [
            "fast-win",
            "steady-gain",
        ]

    def test_write_failure_leaves_previous_set(self, assessment_id, invalidations):
        generate_and_apply(assessment_id, SCORES)
        invalidations.clear()
        result = generate_recommendations_for_assessment(assessment_id, SCORES, _catalog()[1:])

        with patch(
            "app.db.recommendations.replace_recommendation_set",
            side_effect=RuntimeError("Supabase error updating assessment_recommendations"),
        ):
            with pytest.raises(RuntimeError):
                apply_recommendations(assessment_id, result)

        assert fake_db.get_recommendation_set(assessment_id)["use_case_ids"] == [
            "fast-win",
            "steady-gain",
        ]
        assert invalidations == []

    def test_clear_during_write_makes_apply_conflict(self, assessment_id, invalidations):
        generate_and_apply(assessment_id, SCORES)
        invalidations.clear()
        result = generate_recommendations_for_assessment(assessment_id, SCORES, _catalog()[1:])

        def clear_first(*args, **kwargs):
            clear_recommendations(assessment_id)
            return fake_db.replace_recommendation_set(*args, **kwargs)

        with patch("app.db.recommendations.replace_recommendation_set", side_effect=clear_first):
            with pytest.raises(ConflictError):
                apply_recommendations(assessment_id, result)

        assert fake_db.get_recommendation_set(assessment_id) is None
        assert get_recommendation_state(assessment_id) == RecommendationState.NO_RECOMMENDATION
        assert fake_db.writes == ["claim", "insert", "claim", "claim", "delete"]
        # Only the clear that went through invalidated
        assert invalidations == [
            (USE_CASES_VIEW, assessment_id),
            (RECOMMENDATIONS_VIEW, assessment_id),
        ]

    def test_second_insert_conflicts(self, assessment_id):
        result = generate_recommendations_for_assessment(assessment_id, SCORES, _catalog())
        other = generate_recommendations_for_assessment(assessment_id, SCORES, _catalog()[1:])

        nested = []

        def apply_other_first(*args, **kwargs):
            if not nested:
                nested.append(other)
                apply_recommendations(assessment_id, other)
            return fake_db.insert_recommendation_set(*args, **kwargs)

        with patch("app.db.recommendations.insert_recommendation_set", side_effect=apply_other_first):
            with pytest.raises(ConflictError):
                apply_recommendations(assessment_id, result)

        assert fake_db.get_recommendation_set(assessment_id)["use_case_ids"] == ["steady-gain"]


class TestClear:
    def test_clear_applied_set(self, assessment_id, invalidations):
        generate_and_apply(assessment_id, SCORES)
        invalidations.clear()

        clear_recommendations(assessment_id)

        assert fake_db.get_recommendation_set(assessment_id) is None
        assert get_recommendation_state(assessment_id) == RecommendationState.NO_RECOMMENDATION
        assert fetch_recommendations(assessment_id).recommended_use_cases == []
        assert invalidations == [
            (USE_CASES_VIEW, assessment_id),
            (RECOMMENDATIONS_VIEW, assessment_id),
        ]

    def test_clear_with_nothing_applied_is_noop(self, assessment_id, invalidations):
        clear_recommendations(assessment_id)
        clear_recommendations(assessment_id)

        assert fake_db.writes == []
        assert len(invalidations) == 4

    def test_clear_unknown_assessment(self):
        with pytest.raises(NotFoundError, match="Assessment not found"):
            clear_recommendations(uuid4())

    def test_lost_claim_raises_conflict(self, assessment_id):
        generate_and_apply(assessment_id, SCORES)
        stale = {"id": str(assessment_id), "status": "completed", "recommendation_version": 0}

        with patch("app.db.assessments.get_assessment", return_value=stale):
            with pytest.raises(ConflictError):
                clear_recommendations(assessment_id)

        assert fake_db.get_recommendation_set(assessment_id)["use_case_ids"] == [
            "fast-win",
            "steady-gain",
        ]

    def test_apply_during_delete_makes_clear_conflict(self, assessment_id, invalidations):
        generate_and_apply(assessment_id, SCORES)
        invalidations.clear()
        result = generate_recommendations_for_assessment(assessment_id, SCORES, _catalog()[1:])

        def apply_first(*args, **kwargs):
            apply_recommendations(assessment_id, result)
            return fake_db.delete_recommendation_set(*args, **kwargs)

        with patch("app.db.recommendations.delete_recommendation_set", side_effect=apply_first):
            with pytest.raises(ConflictError):
                clear_recommendations(assessment_id)

        stored = fake_db.get_recommendation_set(assessment_id)
        assert stored["use_case_ids"] == ["steady-gain"]
        assert stored["version"] == 3
        assert invalidations == [(USE_CASES_VIEW, assessment_id)]

    def test_fetch_unknown_assessment(self):
        with pytest.raises(NotFoundError):
            fetch_recommendations(uuid4())


class TestState:
    def test_generated_until_applied(self, assessment_id):
        result = generate_recommendations_for_assessment(assessment_id, SCORES, _catalog())

        assert get_recommendation_state(assessment_id) == RecommendationState.NO_RECOMMENDATION
        assert get_recommendation_state(assessment_id, result) == RecommendationState.GENERATED

        apply_recommendations(assessment_id, result)

        assert get_recommendation_state(assessment_id, result) == RecommendationState.APPLIED

    def test_new_result_over_applied_set_is_generated(self, assessment_id):
        generate_and_apply(assessment_id, SCORES)
        other = generate_recommendations_for_assessment(assessment_id, SCORES, _catalog()[1:])

        assert get_recommendation_state(assessment_id) == RecommendationState.APPLIED
        assert get_recommendation_state(assessment_id, other) == RecommendationState.GENERATED

    def test_unknown_assessment(self):
        with pytest.raises(NotFoundError):
            get_recommendation_state(uuid4())
