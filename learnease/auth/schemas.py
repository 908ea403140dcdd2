"""Pydantic schemas for the authenticated session."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from learnease.auth.permissions import UserRole, is_admin


class SessionUser(BaseModel):
    """The authenticated caller, decoded from the bearer token.

    Passed explicitly into every service operation.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    role: UserRole
    name: str = ""
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return is_admin(self.role)

    def can_manage(self, owner_id: UUID | None) -> bool:
        """Owner of a resource, or an admin."""
        return self.is_admin or (owner_id is not None and self.id == owner_id)
