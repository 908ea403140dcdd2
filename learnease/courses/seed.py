"""Demo catalogue.

Three courses by the demo instructor and one learner enrollment in the web
development bootcamp (first module done). Ids are fixed so that seeding is
repeatable: courses that already exist and an existing enrollment are skipped.
"""

from uuid import NAMESPACE_URL, UUID, uuid5

from learnease.auth.permissions import UserRole
from learnease.auth.schemas import SessionUser
from learnease.core.context import RequestContext
from learnease.core.logging import get_logger
from learnease.courses.schemas import CourseDraft
from learnease.courses.service import CourseService
from learnease.progress import engine
from learnease.progress.exceptions import AlreadyEnrolledError
from learnease.progress.models import Enrollment
from learnease.progress.store import EnrollmentStore


logger = get_logger(__name__)


def _demo_id(name: str) -> UUID:
    return uuid5(NAMESPACE_URL, f"https://learnease.dev/demo/{name}")


DEMO_INSTRUCTOR = SessionUser(
    id=_demo_id("users/instructor"),
    role=UserRole.INSTRUCTOR,
    name="Jane Instructor",
    email="instructor@learnease.com",
)

DEMO_LEARNER = SessionUser(
    id=_demo_id("users/learner"),
    role=UserRole.LEARNER,
    name="John Student",
    email="student@learnease.com",
)

WEB_DEV_COURSE_ID = _demo_id("courses/web-dev-bootcamp")
REACT_COURSE_ID = _demo_id("courses/advanced-react")
PYTHON_COURSE_ID = _demo_id("courses/python-data-science")

WEB_DEV_COURSE = CourseDraft.model_validate({
    "title": "Complete Web Development Bootcamp",
    "description": (
        "Learn HTML, CSS, JavaScript, React, and Node.js from scratch. This "
        "comprehensive course takes you from absolute beginner to full-stack "
        "developer."
    ),
    "category": "Development",
    "mode": "SELF_PACED",
    "thumbnail_url": "https://picsum.photos/id/1/400/225",
    "modules": [
        {
            "id": "m1",
            "title": "Introduction to HTML",
            "type": "text",
            "content": (
                "HTML (HyperText Markup Language) is the most basic building "
                "block of the Web. It defines the meaning and structure of web "
                "content."
            ),
        },
        {
            "id": "m2",
            "title": "HTML Structure",
            "type": "video",
            "content": "https://www.youtube.com/embed/k7I429DD-qY",
        },
        {
            "id": "m3",
            "title": "CSS Basics",
            "type": "text",
            "content": (
                "CSS is the language we use to style an HTML document. CSS "
                "describes how HTML elements should be displayed."
            ),
        },
        {
            "id": "m4",
            "title": "JavaScript Fundamentals",
            "type": "video",
            "content": "https://www.youtube.com/embed/W6NZfCO5SIk",
        },
        {"id": "m5", "title": "Web Dev Quiz", "type": "quiz", "content": "q1"},
    ],
    "quizzes": [
        {
            "id": "q1",
            "title": "HTML & CSS Basics",
            "questions": [
                {
                    "id": "qq1",
                    "question": "What does HTML stand for?",
                    "options": [
                        "Hyper Text Markup Language",
                        "Home Tool Markup Language",
                        "Hyperlinks and Text Markup Language",
                    ],
                    "correct_index": 0,
                },
                {
                    "id": "qq2",
                    "question": "Which character is used to indicate an end tag?",
                    "options": ["<", "/", "*", "^"],
                    "correct_index": 1,
                },
            ],
        }
    ],
})

REACT_COURSE = CourseDraft.model_validate({
    "title": "Advanced React Patterns",
    "description": (
        "Master higher-order components, hooks, custom hooks, and the Context "
        "API to build scalable React applications."
    ),
    "category": "Development",
    "mode": "INSTRUCTOR_LED",
    "thumbnail_url": "https://picsum.photos/id/20/400/225",
    "modules": [
        {
            "id": "r1",
            "title": "Understanding Hooks",
            "type": "text",
            "content": (
                'Hooks are functions that let you "hook into" React state and '
                "lifecycle features from function components."
            ),
        },
        {
            "id": "r2",
            "title": "useEffect Deep Dive",
            "type": "video",
            "content": "https://www.youtube.com/embed/dH6i3GurZV8",
        },
        {
            "id": "r3",
            "title": "Custom Hooks",
            "type": "text",
            "content": (
                "Building your own Hooks lets you extract component logic into "
                "reusable functions."
            ),
        },
        {"id": "r4", "title": "React Quiz", "type": "quiz", "content": "q2"},
    ],
    "quizzes": [
        {
            "id": "q2",
            "title": "React Hooks Assessment",
            "questions": [
                {
                    "id": "rq1",
                    "question": "Which hook is used for side effects?",
                    "options": ["useState", "useEffect", "useContext"],
                    "correct_index": 1,
                },
                {
                    "id": "rq2",
                    "question": "Rules of Hooks: Only call Hooks at the...",
                    "options": ["Top Level", "Inside Loops", "Inside Nested Functions"],
                    "correct_index": 0,
                },
            ],
        }
    ],
})

PYTHON_COURSE = CourseDraft.model_validate({
    "title": "Python for Data Science",
    "description": (
        "An introduction to Python programming with a focus on data analysis "
        "libraries like Pandas and NumPy."
    ),
    "category": "Data Science",
    "mode": "SELF_PACED",
    "thumbnail_url": "https://picsum.photos/id/2/400/225",
    "modules": [
        {
            "id": "p1",
            "title": "Why Python?",
            "type": "text",
            "content": (
                "Python is a high-level, general-purpose programming language. "
                "Its design philosophy emphasizes code readability."
            ),
        },
        {
            "id": "p2",
            "title": "Installing Anaconda",
            "type": "video",
            "content": "https://www.youtube.com/embed/5mDYijMfG_s",
        },
        {
            "id": "p3",
            "title": "Pandas DataFrames",
            "type": "text",
            "content": (
                "A DataFrame is a 2-dimensional labeled data structure with "
                "columns of potentially different types."
            ),
        },
    ],
})

DEMO_COURSES: list[tuple[UUID, CourseDraft]] = [
    (WEB_DEV_COURSE_ID, WEB_DEV_COURSE),
    (REACT_COURSE_ID, REACT_COURSE),
    (PYTHON_COURSE_ID, PYTHON_COURSE),
]

# Learner enrollment in the bootcamp: first module already done.
DEMO_COMPLETED_MODULES = ("m1",)


async def seed_demo(
    course_service: CourseService, store: EnrollmentStore
) -> dict[str, int]:
    """Load the demo catalogue and enrollment.

    Returns counts of created and skipped records.
    """
    counts = {"courses_created": 0, "courses_skipped": 0, "enrollments_created": 0}

    web_dev = None
    for course_id, draft in DEMO_COURSES:
        existing = await course_service.get_course(course_id)
        if existing is not None:
            counts["courses_skipped"] += 1
            course = existing
        else:
            course = await course_service.create_course(
                draft, DEMO_INSTRUCTOR, course_id=course_id
            )
            counts["courses_created"] += 1
        if course_id == WEB_DEV_COURSE_ID:
            web_dev = course

    enrollment = Enrollment(user_id=DEMO_LEARNER.id, course_id=WEB_DEV_COURSE_ID)
    for module_id in DEMO_COMPLETED_MODULES:
        enrollment = engine.complete_module(web_dev, enrollment, module_id)

    with RequestContext(user_id=DEMO_LEARNER.id, course_id=WEB_DEV_COURSE_ID):
        try:
            await store.create(DEMO_LEARNER.id, WEB_DEV_COURSE_ID, enrollment)
            counts["enrollments_created"] += 1
        except AlreadyEnrolledError:
            logger.info("demo_enrollment_exists")

    logger.info("demo_seeded", **counts)
    return counts
