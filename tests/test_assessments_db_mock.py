"""Tests for assessment database operations with mocked Supabase."""

from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest

from app.db.assessments import claim_recommendation_version, get_assessment


@pytest.fixture
def mock_supabase():
    """Mock Supabase client."""
    with patch("app.db.assessments.get_supabase") as mock:
        yield mock.return_value


class TestGetAssessment:
    def test_found(self, mock_supabase):
        assessment_id = uuid4()
        row = {"id": str(assessment_id), "status": "completed", "recommendation_version": 2}
        mock_response = MagicMock()
        mock_response.data = [row]
        mock_supabase.table.return_value.select.return_value.eq.return_value.execute.return_value = (
            mock_response
        )

        result = get_assessment(assessment_id)

        assert result == row
        mock_supabase.table.assert_called_once_with("assessments")
        mock_supabase.table.return_value.select.return_value.eq.assert_called_once_with(
            "id", str(assessment_id)
        )

    def test_not_found(self, mock_supabase):
        mock_response = MagicMock()
        mock_response.data = []
        mock_supabase.table.return_value.select.return_value.eq.return_value.execute.return_value = (
            mock_response
        )

        assert get_assessment(uuid4()) is None

    def test_supabase_error(self, mock_supabase):
        mock_supabase.table.side_effect = Exception("connection reset")

        with pytest.raises(RuntimeError, match="Supabase error reading assessments"):
            get_assessment(uuid4())


class TestClaimRecommendationVersion:
    def test_claim_won(self, mock_supabase):
        assessment_id = uuid4()
        mock_response = MagicMock()
        mock_response.data = [{"id": str(assessment_id), "recommendation_version": 4}]
        update = mock_supabase.table.return_value.update
        update.return_value.eq.return_value.eq.return_value.execute.return_value = mock_response

        assert claim_recommendation_version(assessment_id, 3) is True

        update.assert_called_once_with({"recommendation_version": 4, "updated_at": "now()"})
        update.return_value.eq.assert_called_once_with("id", str(assessment_id))
        update.return_value.eq.return_value.eq.assert_called_once_with(
            "recommendation_version", 3
        )

    def test_claim_lost(self, mock_supabase):
        mock_response = MagicMock()
        mock_response.data = []
        update = mock_supabase.table.return_value.update
        update.return_value.eq.return_value.eq.return_value.execute.return_value = mock_response

        assert claim_recommendation_version(uuid4(), 3) is False

    def test_supabase_error(self, mock_supabase):
        mock_supabase.table.return_value.update.side_effect = Exception("timeout")

        with pytest.raises(RuntimeError, match="Supabase error updating assessments"):
            claim_recommendation_version(uuid4(), 0)
