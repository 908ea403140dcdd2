"""Tests for bearer token extraction and role checks."""

from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from learnease.auth.dependencies import require_permission
from learnease.auth.permissions import UserRole
from learnease.auth.security import create_access_token
from tests.helpers import auth_headers, make_user


@pytest.fixture
def wired_app(app):
    """App with stub services so that only authentication decides the outcome."""
    progress_service = Mock()
    progress_service.list_my_enrollments = AsyncMock(return_value=[])
    app.state.progress_service = progress_service
    app.state.course_service = Mock()
    return app


@pytest.fixture
def wired_client(wired_app) -> TestClient:
    return TestClient(wired_app)


class TestCurrentUser:
    def test_missing_token(self, wired_client: TestClient) -> None:
        response = wired_client.get("/v1/enrollments/my")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["message"] == "Access token not provided"

    def test_non_bearer_scheme(self, wired_client: TestClient) -> None:
        response = wired_client.get(
            "/v1/enrollments/my", headers={"Authorization": "Basic abc"}
        )
        assert response.status_code == 401

    def test_invalid_token(self, wired_client: TestClient) -> None:
        response = wired_client.get(
            "/v1/enrollments/my", headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    def test_subject_must_be_uuid(self, wired_client: TestClient) -> None:
        token = create_access_token({"sub": "user-1", "role": "learner"})
        response = wired_client.get(
            "/v1/enrollments/my", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401

    def test_unknown_role(self, wired_client: TestClient) -> None:
        token = create_access_token({"sub": str(uuid4()), "role": "superuser"})
        response = wired_client.get(
            "/v1/enrollments/my", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401

    def test_valid_token(self, wired_client: TestClient) -> None:
        response = wired_client.get(
            "/v1/enrollments/my", headers=auth_headers(make_user())
        )
        assert response.status_code == 200
        assert response.json() == {"items": [], "total": 0}


class TestRequirePermission:
    def test_learner_cannot_author(self, wired_client: TestClient) -> None:
        response = wired_client.post(
            "/v1/courses",
            json={"title": "T", "description": "D"},
            headers=auth_headers(make_user(UserRole.LEARNER)),
        )
        assert response.status_code == 403
        assert response.json()["message"] == "Insufficient permission"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [UserRole.INSTRUCTOR, UserRole.ADMIN])
    async def test_instructor_check_admits_higher_roles(self, role: UserRole) -> None:
        checker = require_permission(UserRole.INSTRUCTOR)
        user = make_user(role)
        assert await checker(user=user) is user

    @pytest.mark.asyncio
    async def test_instructor_check_rejects_learner(self) -> None:
        checker = require_permission(UserRole.INSTRUCTOR)
        with pytest.raises(HTTPException) as exc_info:
            await checker(user=make_user(UserRole.LEARNER))
        assert exc_info.value.status_code == 403
