"""Enrollment and progress API endpoints.

Provides routes for:
- Course enrollment and enrollment queries
- Course progress (active module)
- Manual module completion
- Quiz submission
"""

from uuid import UUID

from fastapi import APIRouter, status

from learnease.auth.dependencies import CurrentUser
from learnease.core.context import set_course_id
from learnease.courses.exceptions import CourseError

from .dependencies import ProgressServiceDep, handle_progress_error
from .exceptions import ProgressError
from .schemas import (
    CompleteModuleRequest,
    CourseProgressResponse,
    EnrollmentListResponse,
    EnrollmentResponse,
    EnrollRequest,
    ModuleCompletionResponse,
    QuizSubmissionResponse,
    SubmitQuizRequest,
)


router = APIRouter(prefix="/v1/progress", tags=["progress"])
enrollments_router = APIRouter(prefix="/v1/enrollments", tags=["enrollments"])


# ==============================================================================
# Progress Endpoints
# ==============================================================================


@router.get(
    "/course/{course_id}",
    response_model=CourseProgressResponse,
    summary="Get course progress",
)
async def get_course_progress(
    course_id: UUID,
    progress_service: ProgressServiceDep,
    user: CurrentUser,
) -> CourseProgressResponse:
    """Enrollment state and the module to work on next."""
    set_course_id(course_id)
    try:
        return await progress_service.get_course_progress(user, course_id)
    except (ProgressError, CourseError) as e:
        raise handle_progress_error(e) from e


@router.post(
    "/modules/complete",
    response_model=ModuleCompletionResponse,
    status_code=status.HTTP_200_OK,
    summary="Mark module as complete",
)
async def complete_module(
    data: CompleteModuleRequest,
    progress_service: ProgressServiceDep,
    user: CurrentUser,
) -> ModuleCompletionResponse:
    """Mark a video or text module as complete.

    Quiz modules are completed by passing their quiz.
    """
    set_course_id(data.course_id)
    try:
        return await progress_service.complete_module(
            user, data.course_id, data.module_id
        )
    except (ProgressError, CourseError) as e:
        raise handle_progress_error(e) from e


@router.post(
    "/quizzes/submit",
    response_model=QuizSubmissionResponse,
    status_code=status.HTTP_200_OK,
    summary="Submit quiz answers",
)
async def submit_quiz(
    data: SubmitQuizRequest,
    progress_service: ProgressServiceDep,
    user: CurrentUser,
) -> QuizSubmissionResponse:
    """Grade a quiz attempt; passing completes the quiz module."""
    set_course_id(data.course_id)
    try:
        return await progress_service.submit_quiz(
            user, data.course_id, data.module_id, data.answers
        )
    except (ProgressError, CourseError) as e:
        raise handle_progress_error(e) from e


# ==============================================================================
# Enrollment Endpoints
# ==============================================================================


@enrollments_router.post(
    "",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll in course",
)
async def enroll_in_course(
    data: EnrollRequest,
    progress_service: ProgressServiceDep,
    user: CurrentUser,
) -> EnrollmentResponse:
    """Enroll current user in a course."""
    set_course_id(data.course_id)
    try:
        enrollment = await progress_service.enroll(user, data.course_id)
    except (ProgressError, CourseError) as e:
        raise handle_progress_error(e) from e
    return EnrollmentResponse.from_entity(enrollment)


@enrollments_router.get(
    "/my",
    response_model=EnrollmentListResponse,
    summary="Get my enrollments",
)
async def get_my_enrollments(
    progress_service: ProgressServiceDep,
    user: CurrentUser,
) -> EnrollmentListResponse:
    """Get all course enrollments for current user."""
    enrollments = await progress_service.list_my_enrollments(user)
    return EnrollmentListResponse(
        items=[EnrollmentResponse.from_entity(e) for e in enrollments],
        total=len(enrollments),
    )


@enrollments_router.get(
    "/course/{course_id}",
    response_model=EnrollmentListResponse,
    summary="List course enrollments",
)
async def list_course_enrollments(
    course_id: UUID,
    progress_service: ProgressServiceDep,
    user: CurrentUser,
) -> EnrollmentListResponse:
    """Enrollments of a course (course instructor or ADMIN only)."""
    set_course_id(course_id)
    try:
        enrollments = await progress_service.list_course_enrollments(user, course_id)
    except (ProgressError, CourseError) as e:
        raise handle_progress_error(e) from e
    return EnrollmentListResponse(
        items=[EnrollmentResponse.from_entity(e) for e in enrollments],
        total=len(enrollments),
    )


@enrollments_router.get(
    "/{course_id}",
    response_model=EnrollmentResponse,
    summary="Get enrollment for course",
)
async def get_enrollment(
    course_id: UUID,
    progress_service: ProgressServiceDep,
    user: CurrentUser,
) -> EnrollmentResponse:
    """Get enrollment status for a specific course."""
    set_course_id(course_id)
    try:
        enrollment = await progress_service.get_enrollment(user, course_id)
    except ProgressError as e:
        raise handle_progress_error(e) from e
    return EnrollmentResponse.from_entity(enrollment)
