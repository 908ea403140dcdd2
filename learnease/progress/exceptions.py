"""Progress and enrollment errors.

Each error carries a human readable ``message`` and a machine ``code``;
``handle_progress_error`` maps codes to HTTP statuses.
"""


class ProgressError(Exception):
    """Base progress error."""

    def __init__(self, message: str, code: str = "progress_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotEnrolledError(ProgressError):
    """Learner has no enrollment for the course."""

    def __init__(self, message: str = "You must enroll in this course first"):
        super().__init__(message, "not_enrolled")


class AlreadyEnrolledError(ProgressError):
    """An enrollment already exists for the (learner, course) pair."""

    def __init__(self, message: str = "Already enrolled in this course"):
        super().__init__(message, "already_enrolled")


class EnrollmentNotFoundError(ProgressError):
    """Update of an enrollment that was never created."""

    def __init__(self, message: str = "Enrollment not found"):
        super().__init__(message, "enrollment_not_found")


class ModuleNotFoundError(ProgressError):  # noqa: A001
    """Module id does not belong to the course."""

    def __init__(self, message: str = "Module not found in this course"):
        super().__init__(message, "module_not_found")


class QuizNotFoundError(ProgressError):
    """Quiz module references a quiz the course does not define."""

    def __init__(self, message: str = "Quiz unavailable"):
        super().__init__(message, "quiz_not_found")


class QuizRequiredError(ProgressError):
    """Quiz modules are completed by passing the quiz, not manually."""

    def __init__(self, message: str = "This module is completed by passing its quiz"):
        super().__init__(message, "quiz_required")


class NotAQuizModuleError(ProgressError):
    def __init__(self, message: str = "Module is not a quiz"):
        super().__init__(message, "not_a_quiz_module")


class ForbiddenError(ProgressError):
    def __init__(self, message: str = "Not allowed to view these enrollments"):
        super().__init__(message, "forbidden")
