"""Test helpers: users, tokens, sample courses and an in-memory enrollment store."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from learnease.auth.permissions import UserRole
from learnease.auth.schemas import SessionUser
from learnease.auth.security import create_access_token
from learnease.courses.models import Course, Module, Question, Quiz
from learnease.progress.exceptions import (
    AlreadyEnrolledError,
    EnrollmentNotFoundError,
)
from learnease.progress.models import Enrollment, EnrollmentStatus


class InMemoryEnrollmentStore:
    """Dict-backed stand-in for ``EnrollmentStore`` with the same LWT rules."""

    def __init__(self) -> None:
        self.records: dict[tuple[UUID, UUID], Enrollment] = {}
        self.update_calls = 0

    async def create(
        self, user_id: UUID, course_id: UUID, enrollment: Enrollment | None = None
    ) -> Enrollment:
        key = (user_id, course_id)
        if key in self.records:
            raise AlreadyEnrolledError
        now = datetime.now(UTC)
        enrollment = enrollment or Enrollment(
            user_id=user_id,
            course_id=course_id,
            status=EnrollmentStatus.NOT_STARTED.value,
            enrolled_at=now,
            updated_at=now,
        )
        self.records[key] = enrollment
        return enrollment

    async def get(self, user_id: UUID, course_id: UUID) -> Enrollment | None:
        return self.records.get((user_id, course_id))

    async def update(self, enrollment: Enrollment) -> Enrollment:
        key = (enrollment.user_id, enrollment.course_id)
        if key not in self.records:
            raise EnrollmentNotFoundError
        self.update_calls += 1
        self.records[key] = enrollment
        return enrollment

    async def list_by_user(self, user_id: UUID) -> list[Enrollment]:
        return [e for (uid, _), e in self.records.items() if uid == user_id]

    async def list_by_course(self, course_id: UUID) -> list[Enrollment]:
        return [e for (_, cid), e in self.records.items() if cid == course_id]


def make_user(role: UserRole = UserRole.LEARNER, name: str = "Test User") -> SessionUser:
    return SessionUser(id=uuid4(), role=role, name=name, email=f"{uuid4().hex[:8]}@test.dev")


def auth_headers(user: SessionUser) -> dict[str, str]:
    token = create_access_token(
        {
            "sub": str(user.id),
            "role": user.role.value,
            "name": user.name,
            "email": user.email,
        }
    )
    return {"Authorization": f"Bearer {token}"}


def build_web_course(instructor_id: UUID | None = None) -> Course:
    """Five modules; the last one hosts a two-question quiz."""
    return Course(
        title="Complete Web Development Bootcamp",
        description="From HTML to full stack",
        category="Development",
        instructor_id=instructor_id or uuid4(),
        instructor_name="Jane Instructor",
        modules=[
            Module(id="m1", title="Introduction to HTML", type="text", content="HTML"),
            Module(id="m2", title="HTML Structure", type="video", content="https://v/1"),
            Module(id="m3", title="CSS Basics", type="text", content="CSS"),
            Module(id="m4", title="JavaScript", type="video", content="https://v/2"),
            Module(id="m5", title="Web Dev Quiz", type="quiz", content="q1"),
        ],
        quizzes=[
            Quiz(
                id="q1",
                title="HTML & CSS Basics",
                questions=[
                    Question(
                        id="qq1",
                        question="What does HTML stand for?",
                        options=["Hyper Text Markup Language", "Home Tool", "Links"],
                        correct_index=0,
                    ),
                    Question(
                        id="qq2",
                        question="Which character indicates an end tag?",
                        options=["<", "/", "*", "^"],
                        correct_index=1,
                    ),
                ],
            )
        ],
    )


def build_short_course() -> Course:
    """Text, video, then a one-question quiz."""
    return Course(
        title="Short Course",
        description="Three modules",
        instructor_id=uuid4(),
        modules=[
            Module(id="m1", title="Read", type="text", content="Intro"),
            Module(id="m2", title="Watch", type="video", content="https://v/3"),
            Module(id="m3", title="Check", type="quiz", content="q1"),
        ],
        quizzes=[
            Quiz(
                id="q1",
                questions=[
                    Question(id="a", question="2 + 2?", options=["3", "4"], correct_index=1),
                ],
            )
        ],
    )

