"""Database models for learner progress.

Cassandra table definitions for:
- Enrollments: one record per (course, learner), partitioned by course
- Enrollments by user: full copy of each record, partitioned by learner

Architecture: Dual-write pattern so both "who is enrolled in this course"
and "which courses is this learner taking" are single-partition reads.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID


class EnrollmentStatus(str, Enum):
    """Where a learner stands in a course (derived from progress)."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


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
# CQL Table Definitions
# ==============================================================================

# Inserted with IF NOT EXISTS: at most one enrollment per pair
ENROLLMENTS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.enrollments (
    course_id UUID,
    user_id UUID,
    status TEXT,
    progress INT,
    completed_modules SET<TEXT>,
    quiz_scores MAP<TEXT, INT>,
    enrolled_at TIMESTAMP,
    updated_at TIMESTAMP,
    completed_at TIMESTAMP,
    PRIMARY KEY (course_id, user_id)
)
"""

ENROLLMENTS_BY_USER_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.enrollments_by_user (
    user_id UUID,
    course_id UUID,
    status TEXT,
    progress INT,
    completed_modules SET<TEXT>,
    quiz_scores MAP<TEXT, INT>,
    enrolled_at TIMESTAMP,
    updated_at TIMESTAMP,
    completed_at TIMESTAMP,
    PRIMARY KEY (user_id, course_id)
)
"""

PROGRESS_TABLES_CQL = [
    ENROLLMENTS_TABLE_CQL,
    ENROLLMENTS_BY_USER_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


class Enrollment:
    """A learner's standing in one course.

    Instances are treated as values: engine operations return a new
    enrollment instead of mutating the one they were given.

    Attributes:
        user_id: Learner UUID
        course_id: Course UUID
        progress: Completion percentage (0-100), derived from completed_modules
        completed_modules: Ids of completed modules (set semantics)
        quiz_scores: Quiz id -> last achieved score (0-100)
        status: Derived from progress
        enrolled_at: Enrollment timestamp
        updated_at: Last progress change
        completed_at: First time progress reached 100
    """

    def __init__(
        self,
        user_id: UUID,
        course_id: UUID,
        progress: int = 0,
        completed_modules: set[str] | frozenset[str] | None = None,
        quiz_scores: dict[str, int] | None = None,
        status: str = EnrollmentStatus.NOT_STARTED.value,
        enrolled_at: datetime | None = None,
        updated_at: datetime | None = None,
        completed_at: datetime | None = None,
    ):
        self.user_id = user_id
        self.course_id = course_id
        self.progress = progress
        self.completed_modules = frozenset(completed_modules or ())
        self.quiz_scores = dict(quiz_scores or {})
        self.status = status
        self.enrolled_at = ensure_utc_aware(enrolled_at) or datetime.now(UTC)
        self.updated_at = ensure_utc_aware(updated_at)
        self.completed_at = ensure_utc_aware(completed_at)

    def replace(self, **changes: Any) -> "Enrollment":
        """Copy with the given attributes changed."""
        values = {
            "user_id": self.user_id,
            "course_id": self.course_id,
            "progress": self.progress,
            "completed_modules": self.completed_modules,
            "quiz_scores": self.quiz_scores,
            "status": self.status,
            "enrolled_at": self.enrolled_at,
            "updated_at": self.updated_at,
            "completed_at": self.completed_at,
        }
        values.update(changes)
        return Enrollment(**values)

    @classmethod
    def from_row(cls, row: Any) -> "Enrollment":
        """Create Enrollment instance from a row of either table.

        Cassandra returns empty collections as None.
        """
        return cls(
            user_id=row.user_id,
            course_id=row.course_id,
            progress=row.progress or 0,
            completed_modules=set(row.completed_modules or ()),
            quiz_scores=dict(row.quiz_scores or {}),
            status=row.status or EnrollmentStatus.NOT_STARTED.value,
            enrolled_at=row.enrolled_at,
            updated_at=row.updated_at,
            completed_at=row.completed_at,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "user_id": self.user_id,
            "course_id": self.course_id,
            "progress": self.progress,
            "completed_modules": sorted(self.completed_modules),
            "quiz_scores": dict(self.quiz_scores),
            "status": self.status,
            "enrolled_at": self.enrolled_at,
            "updated_at": self.updated_at,
            "completed_at": self.completed_at,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Enrollment):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"<Enrollment user={self.user_id} course={self.course_id} "
            f"{self.status} {self.progress}%>"
        )
