"""Course progress state machine.

Pure synchronous logic over a ``Course`` and an ``Enrollment``:
- which module a learner works on next
- completion percentage and status
- quiz-gated completion

Nothing here touches storage. Operations that change an enrollment return a
new ``Enrollment``; the caller persists it.

Progress only moves forward: the completed set never shrinks and the
percentage never decreases while the course definition is unchanged.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from learnease.courses.models import Course, Module
from learnease.progress.exceptions import (
    ModuleNotFoundError,
    NotAQuizModuleError,
    QuizNotFoundError,
    QuizRequiredError,
)
from learnease.progress.models import Enrollment, EnrollmentStatus
from learnease.progress.scoring import QuizResult, percentage, score_quiz


class SelectionState(str, Enum):
    ACTIVE = "active"
    COURSE_COMPLETE = "course_complete"
    EMPTY_COURSE = "empty_course"


@dataclass(frozen=True)
class ModuleSelection:
    """The module to show, or the terminal state when there is none."""

    state: SelectionState
    module: Module | None = None

    @classmethod
    def active(cls, module: Module) -> "ModuleSelection":
        return cls(SelectionState.ACTIVE, module)

    @property
    def is_terminal(self) -> bool:
        return self.state != SelectionState.ACTIVE


COURSE_COMPLETE = ModuleSelection(SelectionState.COURSE_COMPLETE)
EMPTY_COURSE = ModuleSelection(SelectionState.EMPTY_COURSE)


@dataclass(frozen=True)
class QuizSubmission:
    """Outcome of grading a quiz module.

    ``next_selection`` is None when the attempt failed (no advancement).
    """

    module_id: str
    quiz_id: str
    result: QuizResult
    enrollment: Enrollment
    next_selection: ModuleSelection | None


# ==============================================================================
# Derived values
# ==============================================================================


def compute_progress(course: Course, completed: Iterable[str]) -> int:
    """Percentage of the course's current modules that are completed.

    Completed ids that no longer belong to the course are ignored.
    """
    module_ids = set(course.module_ids)
    return percentage(len(module_ids.intersection(completed)), len(module_ids))


def derive_status(progress: int) -> EnrollmentStatus:
    if progress >= 100:
        return EnrollmentStatus.COMPLETED
    if progress > 0:
        return EnrollmentStatus.IN_PROGRESS
    return EnrollmentStatus.NOT_STARTED


def _require_module(course: Course, module_id: str) -> Module:
    module = course.find_module(module_id)
    if module is None:
        raise ModuleNotFoundError(
            f"Module '{module_id}' does not belong to course {course.id}"
        )
    return module


# ==============================================================================
# Selection
# ==============================================================================


def select_active_module(course: Course, enrollment: Enrollment) -> ModuleSelection:
    """First module, in course order, that the learner has not completed.

    A course without modules is ``EMPTY_COURSE``; a course whose modules are
    all completed is ``COURSE_COMPLETE``. The stored progress is not consulted.
    """
    if not course.modules:
        return EMPTY_COURSE

    for module in course.modules:
        if module.id not in enrollment.completed_modules:
            return ModuleSelection.active(module)

    return COURSE_COMPLETE


def next_module_after(course: Course, module_id: str) -> ModuleSelection:
    """Module that follows ``module_id`` in course order.

    Finishing the last module reports ``COURSE_COMPLETE`` even when earlier
    modules were skipped; ``select_active_module`` is what finds those.
    """
    ids = course.module_ids
    if module_id not in ids:
        raise ModuleNotFoundError(
            f"Module '{module_id}' does not belong to course {course.id}"
        )

    position = ids.index(module_id)
    if position + 1 < len(ids):
        return ModuleSelection.active(course.modules[position + 1])
    return COURSE_COMPLETE


# ==============================================================================
# Transitions
# ==============================================================================


def ensure_manually_completable(course: Course, module_id: str) -> Module:
    """Module that may be marked complete without a quiz attempt."""
    module = _require_module(course, module_id)
    if module.is_quiz:
        raise QuizRequiredError
    return module


def complete_module(
    course: Course,
    enrollment: Enrollment,
    module_id: str,
    now: datetime | None = None,
) -> Enrollment:
    """Add ``module_id`` to the completed set and recompute progress.

    Completing an already completed module returns an equal enrollment.
    """
    _require_module(course, module_id)

    completed = enrollment.completed_modules | {module_id}

    progress = compute_progress(course, completed)
    if completed == enrollment.completed_modules and progress == enrollment.progress:
        return enrollment

    now = now or datetime.now(UTC)
    status = derive_status(progress)
    completed_at = enrollment.completed_at
    if status == EnrollmentStatus.COMPLETED and completed_at is None:
        completed_at = now

    return enrollment.replace(
        completed_modules=completed,
        progress=progress,
        status=status.value,
        updated_at=now,
        completed_at=completed_at,
    )


def record_quiz_score(
    course: Course,
    enrollment: Enrollment,
    quiz_id: str,
    score: int,
    now: datetime | None = None,
) -> Enrollment:
    """Store ``score`` as the last achieved score of a course quiz."""
    if quiz_id not in course.quiz_ids:
        raise QuizNotFoundError(f"Quiz '{quiz_id}' is not defined by course {course.id}")

    return enrollment.replace(
        quiz_scores={**enrollment.quiz_scores, quiz_id: score},
        updated_at=now or datetime.now(UTC),
    )


def submit_quiz(
    course: Course,
    enrollment: Enrollment,
    module_id: str,
    answers: dict[str, int],
    now: datetime | None = None,
) -> QuizSubmission:
    """Grade a quiz module attempt.

    Every attempt is scored from scratch and replaces the stored score. A pass
    completes the hosting module and reports the next module; a fail leaves
    the completed set and progress as they were.
    """
    module = _require_module(course, module_id)
    if not module.is_quiz:
        raise NotAQuizModuleError(f"Module '{module_id}' is a {module.type} module")

    quiz = course.find_quiz(module.quiz_id)
    if quiz is None:
        raise QuizNotFoundError

    now = now or datetime.now(UTC)
    result = score_quiz(quiz, answers)
    updated = record_quiz_score(course, enrollment, quiz.id, result.score, now)

    next_selection = None
    if result.passed:
        updated = complete_module(course, updated, module_id, now)
        next_selection = next_module_after(course, module_id)

    return QuizSubmission(
        module_id=module_id,
        quiz_id=quiz.id,
        result=result,
        enrollment=updated,
        next_selection=next_selection,
    )
