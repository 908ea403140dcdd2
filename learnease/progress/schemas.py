"""Pydantic schemas for enrollment and progress.

Request and response models for:
- Course enrollment
- Module completion
- Quiz submission
- Progress queries
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from learnease.courses.schemas import ModuleResponse

from .engine import ModuleSelection, SelectionState
from .models import Enrollment, EnrollmentStatus


# ==============================================================================
# Requests
# ==============================================================================


class EnrollRequest(BaseModel):
    """Request to enroll in a course."""

    course_id: UUID = Field(..., description="Course UUID to enroll in")


class CompleteModuleRequest(BaseModel):
    """Mark a video or text module as completed."""

    course_id: UUID
    module_id: str = Field(..., min_length=1, max_length=64)


class SubmitQuizRequest(BaseModel):
    """Answers to the quiz hosted by a quiz module.

    ``answers`` maps question id to the chosen option index; missing
    questions count as wrong.
    """

    course_id: UUID
    module_id: str = Field(..., min_length=1, max_length=64)
    answers: dict[str, int] = Field(default_factory=dict)


# ==============================================================================
# Responses
# ==============================================================================


class EnrollmentResponse(BaseModel):
    """Enrollment response."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    course_id: UUID
    status: EnrollmentStatus
    progress: int = Field(description="0-100 percentage")
    completed_modules: list[str]
    quiz_scores: dict[str, int]
    enrolled_at: datetime
    updated_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def from_entity(cls, entity: Enrollment) -> "EnrollmentResponse":
        return cls.model_validate(entity.to_dict())


class EnrollmentListResponse(BaseModel):
    """List of enrollments."""

    items: list[EnrollmentResponse]
    total: int


class ModuleSelectionResponse(BaseModel):
    """Module to show next, or the terminal state of the course."""

    state: SelectionState
    module: ModuleResponse | None = None

    @classmethod
    def from_selection(cls, selection: ModuleSelection) -> "ModuleSelectionResponse":
        module = None
        if selection.module is not None:
            module = ModuleResponse.model_validate(selection.module.to_dict())
        return cls(state=selection.state, module=module)


class CourseProgressResponse(BaseModel):
    """Learner's view of a course: enrollment plus the active module."""

    course_id: UUID
    course_title: str
    total_modules: int
    enrollment: EnrollmentResponse
    active: ModuleSelectionResponse


class ModuleCompletionResponse(BaseModel):
    enrollment: EnrollmentResponse
    next: ModuleSelectionResponse


class QuizSubmissionResponse(BaseModel):
    """Graded attempt. ``next`` is null when the attempt failed."""

    module_id: str
    quiz_id: str
    score: int
    passed: bool
    correct_count: int
    total_questions: int
    per_question: dict[str, bool]
    enrollment: EnrollmentResponse
    next: ModuleSelectionResponse | None = None
