"""FastAPI dependencies for course management.

Provides dependency injection for:
- Service instances
- Error handlers
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from learnease.courses.exceptions import CourseError
from learnease.courses.service import CourseService


async def get_course_service(request: Request) -> CourseService:
    """Get course service from app state."""
    course_service = getattr(request.app.state, "course_service", None)
    if not course_service:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Course service unavailable",
        )
    return course_service


CourseServiceDep = Annotated[CourseService, Depends(get_course_service)]


# ==============================================================================
# Error Handlers
# ==============================================================================


def handle_course_error(error: CourseError) -> HTTPException:
    """Convert course errors to HTTPException."""
    status_map = {
        "course_not_found": status.HTTP_404_NOT_FOUND,
        "forbidden": status.HTTP_403_FORBIDDEN,
    }

    return HTTPException(
        status_code=status_map.get(error.code, status.HTTP_400_BAD_REQUEST),
        detail=error.message,
    )
