"""Database models for course definitions.

Cassandra table definitions for:
- Courses: Main course table, modules and quizzes stored as JSON documents
- Lookup tables: courses by instructor, courses by category

A course is read and written as a whole: its ordered modules and its quizzes
change together when an instructor edits it, so they live in the course row
instead of junction tables.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

import orjson


class ModuleType(str, Enum):
    """Module content type."""

    VIDEO = "video"
    TEXT = "text"
    QUIZ = "quiz"


class CourseMode(str, Enum):
    """How a course is delivered."""

    SELF_PACED = "SELF_PACED"
    INSTRUCTOR_LED = "INSTRUCTOR_LED"


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

COURSE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.courses (
    id UUID PRIMARY KEY,
    title TEXT,
    description TEXT,
    category TEXT,
    mode TEXT,
    thumbnail_url TEXT,
    instructor_id UUID,
    instructor_name TEXT,
    modules TEXT,
    quizzes TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

COURSES_BY_INSTRUCTOR_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.courses_by_instructor (
    instructor_id UUID,
    created_at TIMESTAMP,
    course_id UUID,
    title TEXT,
    PRIMARY KEY (instructor_id, created_at, course_id)
) WITH CLUSTERING ORDER BY (created_at DESC, course_id ASC)
"""

COURSES_BY_CATEGORY_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.courses_by_category (
    category TEXT,
    created_at TIMESTAMP,
    course_id UUID,
    title TEXT,
    PRIMARY KEY (category, created_at, course_id)
) WITH CLUSTERING ORDER BY (created_at DESC, course_id ASC)
"""

COURSES_TABLES_CQL = [
    COURSE_TABLE_CQL,
    COURSES_BY_INSTRUCTOR_TABLE_CQL,
    COURSES_BY_CATEGORY_TABLE_CQL,
]


# ==============================================================================
# Helper Functions
# ==============================================================================


def ensure_utc_aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is UTC-aware (Cassandra returns naive datetimes)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


# ==============================================================================
# Entity Classes
# ==============================================================================


class Question:
    """A multiple choice question with exactly one correct option."""

    def __init__(
        self,
        id: str,
        question: str,
        options: list[str],
        correct_index: int,
    ):
        self.id = id
        self.question = question
        self.options = list(options)
        self.correct_index = correct_index

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Question":
        return cls(
            id=data["id"],
            question=data["question"],
            options=data["options"],
            correct_index=data["correct_index"],
        )

    def to_dict(self, include_answer: bool = True) -> dict[str, Any]:
        """Convert to dictionary.

        Learners get the question without ``correct_index``.
        """
        data: dict[str, Any] = {
            "id": self.id,
            "question": self.question,
            "options": self.options,
        }
        if include_answer:
            data["correct_index"] = self.correct_index
        return data

    def __repr__(self) -> str:
        return f"<Question {self.id} ({len(self.options)} options)>"


class Quiz:
    """Ordered list of questions attached to a course."""

    def __init__(self, id: str, title: str = "", questions: list[Question] | None = None):
        self.id = id
        self.title = title
        self.questions = list(questions or [])

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Quiz":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            questions=[Question.from_dict(q) for q in data.get("questions", [])],
        )

    def to_dict(self, include_answers: bool = True) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "questions": [q.to_dict(include_answers) for q in self.questions],
        }

    def __repr__(self) -> str:
        return f"<Quiz {self.id} ({len(self.questions)} questions)>"


class Module:
    """A unit of course content.

    Attributes:
        id: Identifier, unique within the course
        title: Module title
        type: video, text or quiz
        content: Video URL, text body, or the quiz id for quiz modules
        duration: Optional display label ("12 min")
    """

    def __init__(
        self,
        id: str,
        title: str = "",
        type: str = ModuleType.TEXT.value,
        content: str = "",
        duration: str | None = None,
    ):
        self.id = id
        self.title = title
        self.type = ModuleType(type).value
        self.content = content
        self.duration = duration

    @property
    def is_quiz(self) -> bool:
        return self.type == ModuleType.QUIZ.value

    @property
    def quiz_id(self) -> str | None:
        """Quiz referenced by a quiz module."""
        return self.content if self.is_quiz else None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Module":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            type=data.get("type", ModuleType.TEXT.value),
            content=data.get("content", ""),
            duration=data.get("duration"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "content": self.content,
            "duration": self.duration,
        }

    def __repr__(self) -> str:
        return f"<Module {self.id} ({self.type})>"


class Course:
    """Course entity: ordered modules plus the quizzes they reference.

    Module order is traversal order. A quiz module is expected to reference a
    quiz of the same course, but stored data may carry a dangling reference;
    readers must not assume the quiz exists.

    Attributes:
        id: Unique identifier (UUID)
        title: Course title
        description: Course description
        category: Free-form catalogue category
        mode: SELF_PACED or INSTRUCTOR_LED
        thumbnail_url: Cover image URL
        instructor_id: Owning instructor
        instructor_name: Owning instructor display name
        modules: Ordered modules
        quizzes: Quizzes referenced by quiz modules
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    def __init__(
        self,
        id: UUID | None = None,
        title: str = "",
        description: str = "",
        category: str = "",
        mode: str = CourseMode.SELF_PACED.value,
        thumbnail_url: str | None = None,
        instructor_id: UUID | None = None,
        instructor_name: str = "",
        modules: list[Module] | None = None,
        quizzes: list[Quiz] | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self.id = id or uuid4()
        self.title = title.strip()
        self.description = description
        self.category = category
        self.mode = CourseMode(mode).value
        self.thumbnail_url = thumbnail_url
        self.instructor_id = instructor_id
        self.instructor_name = instructor_name
        self.modules = list(modules or [])
        self.quizzes = list(quizzes or [])
        self.created_at = ensure_utc_aware(created_at) or datetime.now(UTC)
        self.updated_at = ensure_utc_aware(updated_at)

    @property
    def module_ids(self) -> list[str]:
        return [m.id for m in self.modules]

    @property
    def quiz_ids(self) -> set[str]:
        return {q.id for q in self.quizzes}

    def find_module(self, module_id: str) -> Module | None:
        return next((m for m in self.modules if m.id == module_id), None)

    def find_quiz(self, quiz_id: str | None) -> Quiz | None:
        return next((q for q in self.quizzes if q.id == quiz_id), None)

    @classmethod
    def from_row(cls, row: Any) -> "Course":
        """Create Course instance from Cassandra row."""
        return cls(
            id=row.id,
            title=row.title or "",
            description=row.description or "",
            category=row.category or "",
            mode=row.mode or CourseMode.SELF_PACED.value,
            thumbnail_url=row.thumbnail_url,
            instructor_id=row.instructor_id,
            instructor_name=row.instructor_name or "",
            modules=[Module.from_dict(m) for m in orjson.loads(row.modules or "[]")],
            quizzes=[Quiz.from_dict(q) for q in orjson.loads(row.quizzes or "[]")],
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Course":
        """Rebuild a course from ``to_dict()`` output (cache payloads)."""
        return cls(
            id=UUID(str(data["id"])),
            title=data["title"],
            description=data.get("description", ""),
            category=data.get("category", ""),
            mode=data.get("mode", CourseMode.SELF_PACED.value),
            thumbnail_url=data.get("thumbnail_url"),
            instructor_id=UUID(str(data["instructor_id"]))
            if data.get("instructor_id")
            else None,
            instructor_name=data.get("instructor_name", ""),
            modules=[Module.from_dict(m) for m in data.get("modules", [])],
            quizzes=[Quiz.from_dict(q) for q in data.get("quizzes", [])],
            created_at=datetime.fromisoformat(data["created_at"])
            if data.get("created_at")
            else None,
            updated_at=datetime.fromisoformat(data["updated_at"])
            if data.get("updated_at")
            else None,
        )

    def modules_json(self) -> str:
        return orjson.dumps([m.to_dict() for m in self.modules]).decode()

    def quizzes_json(self) -> str:
        return orjson.dumps([q.to_dict() for q in self.quizzes]).decode()

    def to_dict(self, include_answers: bool = True) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "mode": self.mode,
            "thumbnail_url": self.thumbnail_url,
            "instructor_id": self.instructor_id,
            "instructor_name": self.instructor_name,
            "modules": [m.to_dict() for m in self.modules],
            "quizzes": [q.to_dict(include_answers) for q in self.quizzes],
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def __repr__(self) -> str:
        return f"<Course {self.title} ({len(self.modules)} modules)>"
