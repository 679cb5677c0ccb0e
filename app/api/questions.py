"""API endpoints for question types, answer validation and section progress."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from app.core.answer_validation import validate_answers
from app.core.logging import get_logger
from app.core.question_types import get_question_type_metadata, list_question_types
from app.core.schemas_questions import (
    AnswerValidationRequest,
    AnswerValidationResponse,
    Answers,
    QuestionTypeMetadata,
    Section,
    SectionProgress,
)
from app.core.section_navigator import (
    SectionStatus,
    can_navigate_to,
    compute_progress_map,
    create_navigator,
    get_section_status,
    go_to,
    is_complete,
    overall_progress_percent,
)

logger = get_logger(__name__)

router = APIRouter()


class SectionProgressRequest(BaseModel):
    sections: list[Section]
    answers: Answers = Field(default_factory=dict)
    current_section_id: str | None = None
    enforce_order: bool = True


class SectionProgressItem(BaseModel):
    section_id: str
    progress: SectionProgress
    status: SectionStatus
    reachable: bool


class SectionProgressResponse(BaseModel):
    current_section_id: str | None
    sections: list[SectionProgressItem]
    overall_percent: int
    complete: bool


@router.get("/question-types", response_model=list[QuestionTypeMetadata])
async def get_question_types() -> list[QuestionTypeMetadata]:
    """List every registered question type."""
    return list_question_types()


@router.get("/question-types/{question_type}", response_model=QuestionTypeMetadata)
async def get_question_type(question_type: str) -> QuestionTypeMetadata:
    """Get metadata for one question type."""
    metadata = get_question_type_metadata(question_type)
    if metadata is None:
        raise HTTPException(status_code=404, detail=f"Unknown question type: {question_type}")
    return metadata


@router.post("/answers/validate", response_model=AnswerValidationResponse)
async def validate_answer_batch(request: AnswerValidationRequest) -> AnswerValidationResponse:
    """
    Check answers against their questions' type formats and rules.

    Always 200; per-question problems are returned in ``errors``.
    """
    errors = validate_answers(request.questions, request.answers)
    if errors:
        logger.info(f"Answer validation found {len(errors)} invalid answers")
    return AnswerValidationResponse(valid=not errors, errors=errors)


@router.post("/sections/progress", response_model=SectionProgressResponse)
async def get_section_progress(request: SectionProgressRequest) -> SectionProgressResponse:
    """Per-section progress, status and reachability computed from stored answers."""
    state = create_navigator(
        request.sections,
        enforce_order=request.enforce_order,
        progress=compute_progress_map(request.sections, request.answers),
    )
    if request.current_section_id is not None:
        state = go_to(state, request.current_section_id)

    items = [
        SectionProgressItem(
            section_id=section.id,
            progress=state.progress[section.id],
            status=get_section_status(state, section.id),
            reachable=can_navigate_to(state, section.id),
        )
        for section in state.sections
    ]
    current = state.sections[state.current_section_index].id if state.sections else None

    return SectionProgressResponse(
        current_section_id=current,
        sections=items,
        overall_percent=overall_progress_percent(state),
        complete=is_complete(state),
    )
