"""Tests for the demo catalogue."""

from unittest.mock import AsyncMock, Mock

import pytest

from learnease.courses.seed import (
    DEMO_COURSES,
    DEMO_LEARNER,
    PYTHON_COURSE,
    REACT_COURSE,
    WEB_DEV_COURSE,
    WEB_DEV_COURSE_ID,
    seed_demo,
)
from learnease.courses.service import build_course
from tests.helpers import InMemoryEnrollmentStore


@pytest.fixture
def course_service() -> Mock:
    courses = {}

    async def create_course(draft, instructor, course_id=None):
        course = build_course(draft, id=course_id, instructor_id=instructor.id)
        courses[course.id] = course
        return course

    service = Mock()
    service.get_course = AsyncMock(side_effect=courses.get)
    service.create_course = AsyncMock(side_effect=create_course)
    return service


def test_catalogue_shape() -> None:
    assert [m.id for m in WEB_DEV_COURSE.modules] == ["m1", "m2", "m3", "m4", "m5"]
    assert [q.id for q in WEB_DEV_COURSE.quizzes[0].questions] == ["qq1", "qq2"]
    assert [m.id for m in REACT_COURSE.modules] == ["r1", "r2", "r3", "r4"]
    assert [m.id for m in PYTHON_COURSE.modules] == ["p1", "p2", "p3"]
    assert len({course_id for course_id, _ in DEMO_COURSES}) == 3


@pytest.mark.asyncio
async def test_seed_demo(course_service: Mock) -> None:
    store = InMemoryEnrollmentStore()

    counts = await seed_demo(course_service, store)

    assert counts == {"courses_created": 3, "courses_skipped": 0, "enrollments_created": 1}
    enrollment = await store.get(DEMO_LEARNER.id, WEB_DEV_COURSE_ID)
    assert enrollment.completed_modules == {"m1"}
    assert enrollment.progress == 20
    assert enrollment.status == "in_progress"


@pytest.mark.asyncio
async def test_seed_is_repeatable(course_service: Mock) -> None:
    store = InMemoryEnrollmentStore()
    await seed_demo(course_service, store)

    counts = await seed_demo(course_service, store)

    assert counts == {"courses_created": 0, "courses_skipped": 3, "enrollments_created": 0}
