"""Course catalogue errors.

``handle_course_error`` (and ``handle_progress_error`` for progress routes)
maps the ``code`` of each error to an HTTP status.
"""


class CourseError(Exception):
    """Base course error."""

    def __init__(self, message: str, code: str = "course_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class CourseNotFoundError(CourseError):
    def __init__(self, message: str = "Course not found"):
        super().__init__(message, "course_not_found")


class CourseAccessDeniedError(CourseError):
    """Caller is neither the course owner nor an admin."""

    def __init__(self, message: str = "Not allowed to manage this course"):
        super().__init__(message, "forbidden")
