"""Pydantic schemas for questions, sections and answer progress."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DataFormat(str, Enum):
    """Runtime shape an answer must have for a question type."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"
    ARRAY = "array"


class ValidationRules(BaseModel):
    """Per-type validation payload. Every rule is optional."""

    model_config = ConfigDict(frozen=True)

    min_length: int | None = None
    max_length: int | None = None
    min_value: float | None = None
    max_value: float | None = None
    pattern: str | None = None
    allowed_values: tuple[str, ...] | None = None


class QuestionTypeMetadata(BaseModel):
    """Static description of one supported question type."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Question type identifier")
    label: str = Field(..., description="Display name")
    description: str = Field(default="", description="What the type renders as")
    requires_options: bool = Field(..., description="Whether questions of this type need options")
    allows_multiple_answers: bool = Field(..., description="Whether answers are arrays of choices")
    data_format: DataFormat = Field(..., description="Expected answer data format")
    validation_rules: ValidationRules | None = None


class QuestionOption(BaseModel):
    id: str
    label: str
    value: str | float | int | None = None
    score: float | None = Field(None, description="Score weight contributed when selected")
    order_index: int = 0


class Question(BaseModel):
    id: str
    question_text: str = ""
    question_type: str = Field(..., description="Must resolve in the question type registry")
    order_index: int = 0
    is_required: bool = False
    min_value: float | None = None
    max_value: float | None = None
    left_label: str | None = None
    right_label: str | None = None
    options: list[QuestionOption] = Field(default_factory=list)
    pillar: str | None = Field(None, description="Maturity pillar this question scores into")

    @model_validator(mode="after")
    def _sort_options(self) -> "Question":
        self.options.sort(key=lambda o: o.order_index)
        return self


class Section(BaseModel):
    id: str
    title: str
    order_index: int
    estimated_minutes: int = 0
    questions: list[Question] = Field(default_factory=list)

    @model_validator(mode="after")
    def _sort_questions(self) -> "Section":
        self.questions.sort(key=lambda q: q.order_index)
        return self


class SectionProgress(BaseModel):
    """Answered/total counter for one section."""

    model_config = ConfigDict(frozen=True)

    answered: int = Field(0, ge=0)
    total: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _answered_within_total(self) -> "SectionProgress":
        if self.answered > self.total:
            raise ValueError(
                f"answered ({self.answered}) cannot exceed total ({self.total})"
            )
        return self

    @property
    def is_complete(self) -> bool:
        return self.answered == self.total

    @property
    def percent(self) -> int:
        if self.total == 0:
            return 0
        return round(self.answered / self.total * 100)


# Already-deserialized answers keyed by question id
Answers = dict[str, Any]


class AnswerValidationRequest(BaseModel):
    questions: list[Question]
    answers: Answers = Field(default_factory=dict)


class AnswerValidationResponse(BaseModel):
    valid: bool
    errors: dict[str, str] = Field(default_factory=dict)
