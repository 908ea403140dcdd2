"""Learner progress service layer.

Business logic for:
- Course enrollment
- Manual completion of video and text modules
- Quiz submission with quiz-gated completion
- Progress queries for learners and course owners

Every operation takes the calling ``SessionUser`` explicitly. The service
loads the course and the enrollment, asks the engine for the new state and
writes it back with a single enrollment update.
"""

from uuid import UUID

import structlog

from learnease.auth.schemas import SessionUser
from learnease.courses.models import Course
from learnease.courses.exceptions import CourseNotFoundError
from learnease.courses.service import CourseService

from . import engine
from .exceptions import (
    ForbiddenError,
    ModuleNotFoundError,
    NotEnrolledError,
    QuizNotFoundError,
)
from .models import Enrollment
from .schemas import (
    CourseProgressResponse,
    EnrollmentResponse,
    ModuleCompletionResponse,
    ModuleSelectionResponse,
    QuizSubmissionResponse,
)
from .store import EnrollmentStore


logger = structlog.get_logger(__name__)


class ProgressService:
    """Service for enrollments and course progress."""

    def __init__(self, store: EnrollmentStore, course_service: CourseService):
        self.store = store
        self.course_service = course_service

    async def _get_course(self, course_id: UUID) -> Course:
        course = await self.course_service.get_course(course_id)
        if course is None:
            raise CourseNotFoundError
        return course

    async def _load(self, user: SessionUser, course_id: UUID) -> tuple[Course, Enrollment]:
        course = await self._get_course(course_id)
        enrollment = await self.store.get(user.id, course_id)
        if enrollment is None:
            raise NotEnrolledError
        return course, enrollment

    # ==========================================================================
    # Enrollment Operations
    # ==========================================================================

    async def enroll(self, user: SessionUser, course_id: UUID) -> Enrollment:
        """Enroll the caller in a course.

        Raises:
            CourseNotFoundError: If the course does not exist
            AlreadyEnrolledError: If the caller is already enrolled
        """
        await self._get_course(course_id)
        enrollment = await self.store.create(user.id, course_id)

        logger.info("user_enrolled", user_id=str(user.id), course_id=str(course_id))
        return enrollment

    async def get_enrollment(self, user: SessionUser, course_id: UUID) -> Enrollment:
        enrollment = await self.store.get(user.id, course_id)
        if enrollment is None:
            raise NotEnrolledError
        return enrollment

    async def list_my_enrollments(self, user: SessionUser) -> list[Enrollment]:
        return await self.store.list_by_user(user.id)

    async def list_course_enrollments(
        self, user: SessionUser, course_id: UUID
    ) -> list[Enrollment]:
        """Enrollments of a course, for its instructor or an admin."""
        course = await self._get_course(course_id)
        if not user.can_manage(course.instructor_id):
            raise ForbiddenError
        return await self.store.list_by_course(course_id)

    # ==========================================================================
    # Progress Operations
    # ==========================================================================

    async def get_course_progress(
        self, user: SessionUser, course_id: UUID
    ) -> CourseProgressResponse:
        """Enrollment plus the module the learner should work on."""
        course, enrollment = await self._load(user, course_id)
        selection = engine.select_active_module(course, enrollment)

        return CourseProgressResponse(
            course_id=course.id,
            course_title=course.title,
            total_modules=len(course.modules),
            enrollment=EnrollmentResponse.from_entity(enrollment),
            active=ModuleSelectionResponse.from_selection(selection),
        )

    async def complete_module(
        self, user: SessionUser, course_id: UUID, module_id: str
    ) -> ModuleCompletionResponse:
        """Mark a video or text module as completed.

        Raises:
            NotEnrolledError: If the caller is not enrolled
            ModuleNotFoundError: If the module is not part of the course
            QuizRequiredError: If the module is a quiz module
        """
        course, enrollment = await self._load(user, course_id)

        try:
            engine.ensure_manually_completable(course, module_id)
        except ModuleNotFoundError:
            logger.warning(
                "module_not_found",
                user_id=str(user.id),
                course_id=str(course_id),
                module_id=module_id,
            )
            raise

        updated = engine.complete_module(course, enrollment, module_id)
        if updated is not enrollment:
            await self.store.update(updated)

        logger.info(
            "module_completed",
            user_id=str(user.id),
            course_id=str(course_id),
            module_id=module_id,
            progress=updated.progress,
        )

        return ModuleCompletionResponse(
            enrollment=EnrollmentResponse.from_entity(updated),
            next=ModuleSelectionResponse.from_selection(
                engine.next_module_after(course, module_id)
            ),
        )

    async def submit_quiz(
        self,
        user: SessionUser,
        course_id: UUID,
        module_id: str,
        answers: dict[str, int],
    ) -> QuizSubmissionResponse:
        """Grade a quiz attempt and persist the score (and completion on pass).

        Raises:
            NotEnrolledError: If the caller is not enrolled
            ModuleNotFoundError: If the module is not part of the course
            NotAQuizModuleError: If the module is not a quiz module
            QuizNotFoundError: If the module's quiz is missing from the course
        """
        course, enrollment = await self._load(user, course_id)

        try:
            submission = engine.submit_quiz(course, enrollment, module_id, answers)
        except QuizNotFoundError:
            module = course.find_module(module_id)
            logger.warning(
                "quiz_unavailable",
                course_id=str(course_id),
                module_id=module_id,
                quiz_id=module.quiz_id if module else None,
            )
            raise
        except ModuleNotFoundError:
            logger.warning(
                "module_not_found",
                user_id=str(user.id),
                course_id=str(course_id),
                module_id=module_id,
            )
            raise

        await self.store.update(submission.enrollment)

        result = submission.result
        logger.info(
            "quiz_submitted",
            user_id=str(user.id),
            course_id=str(course_id),
            quiz_id=submission.quiz_id,
            score=result.score,
            passed=result.passed,
            progress=submission.enrollment.progress,
        )

        next_selection = None
        if submission.next_selection is not None:
            next_selection = ModuleSelectionResponse.from_selection(
                submission.next_selection
            )

        return QuizSubmissionResponse(
            module_id=submission.module_id,
            quiz_id=submission.quiz_id,
            score=result.score,
            passed=result.passed,
            correct_count=result.correct_count,
            total_questions=result.total_questions,
            per_question=result.per_question,
            enrollment=EnrollmentResponse.from_entity(submission.enrollment),
            next=next_selection,
        )
