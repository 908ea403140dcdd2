"""Course management API endpoints.

Provides routes for:
- Course catalogue listing (optionally by category)
- Course detail (answer keys for owner/admin only)
- Course authoring from validated drafts (instructor or admin)
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from learnease.auth.dependencies import CurrentUser, InstructorUser
from learnease.core.context import set_course_id
from learnease.courses.dependencies import CourseServiceDep, handle_course_error
from learnease.courses.schemas import CourseDraft, CourseListResponse, CourseResponse
from learnease.courses.exceptions import CourseError


router = APIRouter(prefix="/v1/courses", tags=["courses"])


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Course not found",
    )


@router.post(
    "",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new course",
)
async def create_course(
    data: CourseDraft,
    course_service: CourseServiceDep,
    user: InstructorUser,
) -> CourseResponse:
    """Create a course owned by the caller (INSTRUCTOR or ADMIN only)."""
    course = await course_service.create_course(data, user)
    return course_service.to_response(course, user)


@router.get(
    "",
    response_model=CourseListResponse,
    summary="List courses",
)
async def list_courses(
    course_service: CourseServiceDep,
    _user: CurrentUser,
    category: str | None = Query(None, max_length=100),
    limit: int = Query(50, ge=1, le=200),
) -> CourseListResponse:
    """List the course catalogue."""
    courses = await course_service.list_courses(limit=limit, category=category)
    items = [course_service.to_summary(c) for c in courses]
    return CourseListResponse(
        items=items,
        total=len(items),
        has_more=len(items) >= limit,
    )


@router.get(
    "/my",
    response_model=CourseListResponse,
    summary="List my courses",
)
async def list_my_courses(
    course_service: CourseServiceDep,
    user: InstructorUser,
    limit: int = Query(50, ge=1, le=200),
) -> CourseListResponse:
    """List courses owned by the caller."""
    courses = await course_service.list_courses_by_instructor(user.id, limit)
    items = [course_service.to_summary(c) for c in courses]
    return CourseListResponse(
        items=items,
        total=len(items),
        has_more=len(items) >= limit,
    )


@router.get(
    "/{course_id}",
    response_model=CourseResponse,
    summary="Get course details",
)
async def get_course(
    course_id: UUID,
    course_service: CourseServiceDep,
    user: CurrentUser,
) -> CourseResponse:
    """Get course with ordered modules and quizzes."""
    set_course_id(course_id)
    course = await course_service.get_course(course_id)
    if not course:
        raise _not_found()
    return course_service.to_response(course, user)


@router.put(
    "/{course_id}",
    response_model=CourseResponse,
    summary="Replace course definition",
)
async def update_course(
    course_id: UUID,
    data: CourseDraft,
    course_service: CourseServiceDep,
    user: InstructorUser,
) -> CourseResponse:
    """Replace course definition (owner or ADMIN only)."""
    set_course_id(course_id)
    course = await course_service.get_course(course_id)
    if not course:
        raise _not_found()

    try:
        course_service.ensure_can_manage(course, user)
        updated = await course_service.update_course(course_id, data)
    except CourseError as e:
        raise handle_course_error(e) from e
    return course_service.to_response(updated, user)


@router.delete(
    "/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete course",
)
async def delete_course(
    course_id: UUID,
    course_service: CourseServiceDep,
    user: InstructorUser,
) -> None:
    """Delete course (owner or ADMIN only). Enrollments are kept."""
    set_course_id(course_id)
    course = await course_service.get_course(course_id)
    if not course:
        raise _not_found()

    try:
        course_service.ensure_can_manage(course, user)
        await course_service.delete_course(course_id)
    except CourseError as e:
        raise handle_course_error(e) from e
