"""Shared test fixtures."""

import os

import pytest
from fastapi.testclient import TestClient


os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from learnease.auth.permissions import UserRole  # noqa: E402
from learnease.auth.schemas import SessionUser  # noqa: E402
from learnease.courses.models import Course  # noqa: E402
from learnease.main import create_app  # noqa: E402
from tests.helpers import build_web_course, make_user  # noqa: E402


@pytest.fixture
def learner() -> SessionUser:
    return make_user(UserRole.LEARNER, "John Student")


@pytest.fixture
def instructor() -> SessionUser:
    return make_user(UserRole.INSTRUCTOR, "Jane Instructor")


@pytest.fixture
def admin() -> SessionUser:
    return make_user(UserRole.ADMIN, "Admin User")


@pytest.fixture
def web_course(instructor: SessionUser) -> Course:
    return build_web_course(instructor.id)


@pytest.fixture
def app():
    """Fresh application; the lifespan (database bootstrap) is not run."""
    return create_app()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
