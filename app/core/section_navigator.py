"""Sequential section navigation.

A navigator is an immutable value (``NavigatorState``) plus pure transition
functions that return a new state. The caller owns the authoritative state
and persists it however it likes; nothing here is process-wide.

With ``enforce_order`` the sections form a strict chain: a section opens only
once every earlier section is completed. Without it, every section is
reachable from every other.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.core.answer_validation import is_answered
from app.core.errors import NotFoundError
from app.core.schemas_questions import Answers, Section, SectionProgress


class SectionStatus(str, Enum):
    COMPLETED = "completed"
    ACTIVE = "active"
    AVAILABLE = "available"
    LOCKED = "locked"


class NavigatorState(BaseModel):
    """Navigation state over an ordered list of sections."""

    model_config = ConfigDict(frozen=True)

    sections: tuple[Section, ...] = Field(..., description="Sections in ordering-index order")
    current_section_index: int = 0
    completed_sections: frozenset[str] = frozenset()
    enforce_order: bool = True
    disabled: bool = False
    progress: dict[str, SectionProgress] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_index(self) -> "NavigatorState":
        if self.sections and not 0 <= self.current_section_index < len(self.sections):
            raise ValueError(
                f"current_section_index {self.current_section_index} out of range"
            )
        return self


# =============================================================================
# Progress
# =============================================================================


def compute_section_progress(section: Section, answers: Answers) -> SectionProgress:
    """Count the section's questions with a non-empty answer."""
    answered = sum(1 for q in section.questions if is_answered(answers.get(q.id)))
    return SectionProgress(answered=answered, total=len(section.questions))


def compute_progress_map(sections: list[Section], answers: Answers) -> dict[str, SectionProgress]:
    return {s.id: compute_section_progress(s, answers) for s in sections}


# =============================================================================
# Construction and queries
# =============================================================================


def create_navigator(
    sections: list[Section],
    enforce_order: bool = True,
    disabled: bool = False,
    progress: dict[str, SectionProgress] | None = None,
) -> NavigatorState:
    """
    Build a navigator positioned on the first section.

    Sections whose supplied progress is already complete start completed.
    """
    ordered = tuple(sorted(sections, key=lambda s: s.order_index))
    progress = dict(progress or {})
    known = {s.id for s in ordered}
    completed = frozenset(
        section_id for section_id, p in progress.items()
        if section_id in known and p.is_complete
    )
    return NavigatorState(
        sections=ordered,
        completed_sections=completed,
        enforce_order=enforce_order,
        disabled=disabled,
        progress=progress,
    )


def _index_of(state: NavigatorState, section_id: str) -> int | None:
    for i, section in enumerate(state.sections):
        if section.id == section_id:
            return i
    return None


def current_section(state: NavigatorState) -> Section | None:
    if not state.sections:
        return None
    return state.sections[state.current_section_index]


def can_navigate_to(state: NavigatorState, section_id: str) -> bool:
    """Whether the section can be opened from the current state."""
    if state.disabled:
        return False
    index = _index_of(state, section_id)
    if index is None:
        return False
    if not state.enforce_order:
        return True
    if index == state.current_section_index:
        return True

    target_order = state.sections[index].order_index
    return all(
        s.id in state.completed_sections
        for s in state.sections
        if s.order_index < target_order
    )


def is_complete(state: NavigatorState) -> bool:
    """Every section has been completed."""
    return all(s.id in state.completed_sections for s in state.sections)


def get_section_status(state: NavigatorState, section_id: str) -> SectionStatus:
    """Display status of a section (unknown sections read as locked)."""
    if section_id in state.completed_sections:
        return SectionStatus.COMPLETED
    current = current_section(state)
    if current is not None and current.id == section_id:
        return SectionStatus.ACTIVE
    if can_navigate_to(state, section_id):
        return SectionStatus.AVAILABLE
    return SectionStatus.LOCKED


def get_section_progress(state: NavigatorState, section_id: str) -> SectionProgress:
    """Stored progress, or 0/question-count when none has been reported."""
    if section_id in state.progress:
        return state.progress[section_id]
    index = _index_of(state, section_id)
    total = len(state.sections[index].questions) if index is not None else 0
    return SectionProgress(answered=0, total=total)


def overall_progress_percent(state: NavigatorState) -> int:
    answered = 0
    total = 0
    for section in state.sections:
        p = get_section_progress(state, section.id)
        answered += p.answered
        total += p.total
    if total == 0:
        return 0
    return round(answered / total * 100)


# =============================================================================
# Transitions
# =============================================================================


def go_to(state: NavigatorState, section_id: str) -> NavigatorState:
    """Open a section. Returns the state unchanged if it is not reachable."""
    if not can_navigate_to(state, section_id):
        return state
    return state.model_copy(update={"current_section_index": _index_of(state, section_id)})


def mark_progress(
    state: NavigatorState,
    section_id: str,
    progress: SectionProgress,
    auto_advance: bool = True,
) -> NavigatorState:
    """
    Record progress for a section.

    A fully answered section joins ``completed_sections`` (once). Completion is
    not revoked by later, lower progress. With ``enforce_order`` and
    ``auto_advance``, completing the current section moves on to the next one.

    Raises:
        NotFoundError: If the section is not part of this navigator
    """
    index = _index_of(state, section_id)
    if index is None:
        raise NotFoundError("Section", section_id)

    new_progress = {**state.progress, section_id: progress}
    completed = state.completed_sections
    update: dict = {"progress": new_progress}

    just_completed = progress.is_complete and section_id not in completed
    if just_completed:
        update["completed_sections"] = completed | {section_id}

    if (
        just_completed
        and state.enforce_order
        and auto_advance
        and index == state.current_section_index
        and index + 1 < len(state.sections)
    ):
        update["current_section_index"] = index + 1

    return state.model_copy(update=update)
