"""Tests for auth permissions."""

import pytest

from learnease.auth.permissions import (
    ROLE_HIERARCHY,
    UserRole,
    get_role_level,
    has_permission,
    is_admin,
)


class TestUserRole:
    """Tests for UserRole enum."""

    def test_role_values(self) -> None:
        assert UserRole.LEARNER.value == "learner"
        assert UserRole.INSTRUCTOR.value == "instructor"
        assert UserRole.ADMIN.value == "admin"

    def test_role_hierarchy(self) -> None:
        assert ROLE_HIERARCHY[UserRole.LEARNER] == 0
        assert ROLE_HIERARCHY[UserRole.INSTRUCTOR] == 1
        assert ROLE_HIERARCHY[UserRole.ADMIN] == 2

    def test_all_roles_have_levels(self) -> None:
        for role in UserRole:
            assert role in ROLE_HIERARCHY


class TestGetRoleLevel:
    """Tests for get_role_level function."""

    @pytest.mark.parametrize(
        "role,expected_level",
        [
            (UserRole.LEARNER, 0),
            (UserRole.INSTRUCTOR, 1),
            (UserRole.ADMIN, 2),
            ("learner", 0),
            ("instructor", 1),
            ("admin", 2),
        ],
    )
    def test_levels(self, role: UserRole | str, expected_level: int) -> None:
        assert get_role_level(role) == expected_level

    def test_invalid_role_returns_zero(self) -> None:
        """Invalid roles should return level 0."""
        assert get_role_level("invalid") == 0
        assert get_role_level("superadmin") == 0


class TestHasPermission:
    """Tests for has_permission function."""

    def test_admin_has_all_permissions(self) -> None:
        for role in UserRole:
            assert has_permission(UserRole.ADMIN, role) is True

    def test_instructor_permissions(self) -> None:
        assert has_permission(UserRole.INSTRUCTOR, UserRole.LEARNER) is True
        assert has_permission(UserRole.INSTRUCTOR, UserRole.INSTRUCTOR) is True
        assert has_permission(UserRole.INSTRUCTOR, UserRole.ADMIN) is False

    def test_learner_permissions(self) -> None:
        assert has_permission(UserRole.LEARNER, UserRole.LEARNER) is True
        assert has_permission("learner", "instructor") is False


class TestRoleHelpers:
    def test_is_admin(self) -> None:
        assert is_admin(UserRole.ADMIN) is True
        assert is_admin("admin") is True
        assert is_admin(UserRole.INSTRUCTOR) is False
