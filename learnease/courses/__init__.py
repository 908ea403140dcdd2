"""Course definitions: ordered modules and the quizzes they reference."""

from .models import (
    COURSES_TABLES_CQL,
    Course,
    CourseMode,
    Module,
    ModuleType,
    Question,
    Quiz,
)


__all__ = [
    "COURSES_TABLES_CQL",
    "Course",
    "CourseMode",
    "Module",
    "ModuleType",
    "Question",
    "Quiz",
]
