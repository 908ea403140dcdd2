"""HTTP tests for enrollment and progress endpoints."""

from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from learnease.auth.permissions import UserRole
from learnease.auth.schemas import SessionUser
from learnease.courses.models import Course, Module
from learnease.progress.service import ProgressService
from tests.helpers import InMemoryEnrollmentStore, auth_headers, make_user


@pytest.fixture
def courses(web_course: Course) -> dict:
    return {web_course.id: web_course}


@pytest.fixture
def api(app, courses) -> TestClient:
    course_service = Mock()
    course_service.get_course = AsyncMock(side_effect=courses.get)
    app.state.course_service = course_service
    app.state.progress_service = ProgressService(
        store=InMemoryEnrollmentStore(), course_service=course_service
    )
    return TestClient(app)


def _enroll(api: TestClient, user: SessionUser, course: Course):
    return api.post(
        "/v1/enrollments",
        json={"course_id": str(course.id)},
        headers=auth_headers(user),
    )


class TestEnrollments:
    def test_enroll(self, api: TestClient, learner: SessionUser, web_course: Course):
        response = _enroll(api, learner, web_course)

        assert response.status_code == 201
        data = response.json()
        assert data["course_id"] == str(web_course.id)
        assert data["user_id"] == str(learner.id)
        assert data["progress"] == 0
        assert data["status"] == "not_started"
        assert data["completed_modules"] == []

    def test_enroll_twice_conflicts(
        self, api: TestClient, learner: SessionUser, web_course: Course
    ):
        _enroll(api, learner, web_course)
        response = _enroll(api, learner, web_course)
        assert response.status_code == 409

    def test_enroll_unknown_course(self, api: TestClient, learner: SessionUser):
        response = api.post(
            "/v1/enrollments",
            json={"course_id": str(uuid4())},
            headers=auth_headers(learner),
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Course not found"

    def test_enroll_invalid_body(self, api: TestClient, learner: SessionUser):
        response = api.post(
            "/v1/enrollments",
            json={"course_id": "not-a-uuid"},
            headers=auth_headers(learner),
        )
        assert response.status_code == 422
        data = response.json()
        assert data["message"] == "Validation error"
        assert data["details"][0]["field"] == "body.course_id"
        assert "request_id" in data

    def test_my_enrollments(
        self, api: TestClient, learner: SessionUser, web_course: Course
    ):
        _enroll(api, learner, web_course)
        response = api.get("/v1/enrollments/my", headers=auth_headers(learner))

        assert response.status_code == 200
        assert response.json()["total"] == 1

    def test_get_enrollment_not_enrolled(
        self, api: TestClient, learner: SessionUser, web_course: Course
    ):
        response = api.get(
            f"/v1/enrollments/{web_course.id}", headers=auth_headers(learner)
        )
        assert response.status_code == 404

    def test_course_enrollments_for_owner(
        self,
        api: TestClient,
        learner: SessionUser,
        instructor: SessionUser,
        web_course: Course,
    ):
        _enroll(api, learner, web_course)
        response = api.get(
            f"/v1/enrollments/course/{web_course.id}",
            headers=auth_headers(instructor),
        )
        assert response.status_code == 200
        assert response.json()["items"][0]["user_id"] == str(learner.id)

    def test_course_enrollments_forbidden_for_learner(
        self, api: TestClient, learner: SessionUser, web_course: Course
    ):
        response = api.get(
            f"/v1/enrollments/course/{web_course.id}",
            headers=auth_headers(learner),
        )
        assert response.status_code == 403

    def test_course_enrollments_forbidden_for_other_instructor(
        self, api: TestClient, web_course: Course
    ):
        response = api.get(
            f"/v1/enrollments/course/{web_course.id}",
            headers=auth_headers(make_user(UserRole.INSTRUCTOR)),
        )
        assert response.status_code == 403


class TestProgress:
    def test_course_progress(
        self, api: TestClient, learner: SessionUser, web_course: Course
    ):
        _enroll(api, learner, web_course)
        response = api.get(
            f"/v1/progress/course/{web_course.id}", headers=auth_headers(learner)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_modules"] == 5
        assert data["active"]["state"] == "active"
        assert data["active"]["module"]["id"] == "m1"

    def test_course_progress_not_enrolled(
        self, api: TestClient, learner: SessionUser, web_course: Course
    ):
        response = api.get(
            f"/v1/progress/course/{web_course.id}", headers=auth_headers(learner)
        )
        assert response.status_code == 404

    def test_complete_module(
        self, api: TestClient, learner: SessionUser, web_course: Course
    ):
        _enroll(api, learner, web_course)
        response = api.post(
            "/v1/progress/modules/complete",
            json={"course_id": str(web_course.id), "module_id": "m1"},
            headers=auth_headers(learner),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["enrollment"]["progress"] == 20
        assert data["enrollment"]["status"] == "in_progress"
        assert data["next"]["module"]["id"] == "m2"

    def test_complete_quiz_module_conflicts(
        self, api: TestClient, learner: SessionUser, web_course: Course
    ):
        _enroll(api, learner, web_course)
        response = api.post(
            "/v1/progress/modules/complete",
            json={"course_id": str(web_course.id), "module_id": "m5"},
            headers=auth_headers(learner),
        )
        assert response.status_code == 409

    def test_complete_unknown_module(
        self, api: TestClient, learner: SessionUser, web_course: Course
    ):
        _enroll(api, learner, web_course)
        response = api.post(
            "/v1/progress/modules/complete",
            json={"course_id": str(web_course.id), "module_id": "nope"},
            headers=auth_headers(learner),
        )
        assert response.status_code == 404

    def test_submit_quiz_pass(
        self, api: TestClient, learner: SessionUser, web_course: Course
    ):
        _enroll(api, learner, web_course)
        response = api.post(
            "/v1/progress/quizzes/submit",
            json={
                "course_id": str(web_course.id),
                "module_id": "m5",
                "answers": {"qq1": 0, "qq2": 1},
            },
            headers=auth_headers(learner),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 100
        assert data["passed"] is True
        assert data["quiz_id"] == "q1"
        assert data["next"]["state"] == "course_complete"
        assert data["enrollment"]["quiz_scores"] == {"q1": 100}

    def test_submit_quiz_fail(
        self, api: TestClient, learner: SessionUser, web_course: Course
    ):
        _enroll(api, learner, web_course)
        response = api.post(
            "/v1/progress/quizzes/submit",
            json={"course_id": str(web_course.id), "module_id": "m5", "answers": {}},
            headers=auth_headers(learner),
        )

        data = response.json()
        assert data["passed"] is False
        assert data["next"] is None
        assert data["enrollment"]["completed_modules"] == []

    def test_submit_on_text_module(
        self, api: TestClient, learner: SessionUser, web_course: Course
    ):
        _enroll(api, learner, web_course)
        response = api.post(
            "/v1/progress/quizzes/submit",
            json={"course_id": str(web_course.id), "module_id": "m1", "answers": {}},
            headers=auth_headers(learner),
        )
        assert response.status_code == 400

    def test_submit_dangling_quiz(
        self, api: TestClient, courses: dict, learner: SessionUser
    ):
        broken = Course(
            title="Broken",
            modules=[Module(id="x", title="Quiz", type="quiz", content="gone")],
        )
        courses[broken.id] = broken
        _enroll(api, learner, broken)

        response = api.post(
            "/v1/progress/quizzes/submit",
            json={"course_id": str(broken.id), "module_id": "x", "answers": {}},
            headers=auth_headers(learner),
        )
        assert response.status_code == 409
        assert response.json()["message"] == "Quiz unavailable"

    def test_requires_authentication(self, api: TestClient, web_course: Course):
        response = api.get(f"/v1/progress/course/{web_course.id}")
        assert response.status_code == 401
