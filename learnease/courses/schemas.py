"""Pydantic schemas for course authoring and course views.

Course authoring goes through ``CourseDraft``: a draft that passes validation
is structurally sound (unique ids, quiz modules pointing at quizzes of the same
draft, answerable questions) and only then becomes a stored ``Course``.
"""

from datetime import datetime
from typing import Self
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from learnease.courses.models import CourseMode, ModuleType


def _duplicates(ids: list[str]) -> list[str]:
    seen: set[str] = set()
    dupes: list[str] = []
    for item in ids:
        if item in seen and item not in dupes:
            dupes.append(item)
        seen.add(item)
    return dupes


# ==============================================================================
# Draft Schemas (authoring input)
# ==============================================================================


class QuestionDraft(BaseModel):
    """A question with its answer key."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1, max_length=64)
    question: str = Field(..., min_length=1, max_length=2000)
    options: list[str] = Field(..., min_length=1, description="Ordered options")
    correct_index: int = Field(..., ge=0, description="Zero-based correct option")

    @model_validator(mode="after")
    def validate_correct_index(self) -> Self:
        if self.correct_index >= len(self.options):
            msg = (
                f"correct_index {self.correct_index} is out of range for "
                f"{len(self.options)} options"
            )
            raise ValueError(msg)
        return self


class QuizDraft(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1, max_length=64)
    title: str = Field("", max_length=200)
    questions: list[QuestionDraft] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_questions(self) -> Self:
        dupes = _duplicates([q.id for q in self.questions])
        if dupes:
            msg = f"Duplicate question ids in quiz {self.id}: {', '.join(dupes)}"
            raise ValueError(msg)
        return self


class ModuleDraft(BaseModel):
    """A module; for quiz modules ``content`` is the quiz id."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1, max_length=64)
    title: str = Field(..., min_length=1, max_length=200)
    type: ModuleType
    content: str = Field("", max_length=20000)
    duration: str | None = Field(None, max_length=50)


class CourseDraft(BaseModel):
    """Course creation/replacement request.

    Validation rules:
    - title and description are non-empty
    - module ids and quiz ids are unique within the course
    - every quiz module references a quiz defined in the same draft
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200, description="Course title")
    description: str = Field(
        ..., min_length=1, max_length=5000, description="Course description"
    )
    category: str = Field("General", max_length=100)
    mode: CourseMode = CourseMode.SELF_PACED
    thumbnail_url: str | None = Field(
        None, max_length=500, description="Thumbnail image URL"
    )
    modules: list[ModuleDraft] = Field(default_factory=list)
    quizzes: list[QuizDraft] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_structure(self) -> Self:
        dupes = _duplicates([m.id for m in self.modules])
        if dupes:
            msg = f"Duplicate module ids: {', '.join(dupes)}"
            raise ValueError(msg)

        dupes = _duplicates([q.id for q in self.quizzes])
        if dupes:
            msg = f"Duplicate quiz ids: {', '.join(dupes)}"
            raise ValueError(msg)

        quiz_ids = {q.id for q in self.quizzes}
        for module in self.modules:
            if module.type == ModuleType.QUIZ and module.content not in quiz_ids:
                msg = (
                    f"Quiz module {module.id} references unknown quiz "
                    f"'{module.content}'"
                )
                raise ValueError(msg)
        return self


# ==============================================================================
# Response Schemas
# ==============================================================================


class QuestionResponse(BaseModel):
    """Question; ``correct_index`` is null unless the viewer manages the course."""

    id: str
    question: str
    options: list[str]
    correct_index: int | None = None


class QuizResponse(BaseModel):
    id: str
    title: str
    questions: list[QuestionResponse]


class ModuleResponse(BaseModel):
    id: str
    title: str
    type: ModuleType
    content: str
    duration: str | None = None


class CourseSummaryResponse(BaseModel):
    """Catalogue entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str
    category: str
    mode: CourseMode
    thumbnail_url: str | None = None
    instructor_id: UUID | None = None
    instructor_name: str = ""
    module_count: int = 0
    created_at: datetime
    updated_at: datetime | None = None


class CourseResponse(CourseSummaryResponse):
    """Full course with ordered modules and quizzes."""

    modules: list[ModuleResponse] = []
    quizzes: list[QuizResponse] = []


class CourseListResponse(BaseModel):
    """Course list response."""

    items: list[CourseSummaryResponse]
    total: int
    has_more: bool
