"""Request/response schemas for moderator role management."""

from pydantic import BaseModel, Field, field_validator

from app.schemas.auth import RoleItem

# Kept in sync with app.models.role.RoleId; schemas do not import ORM models.
KNOWN_ROLE_IDS = frozenset(range(1, 8))


class UpdateRoleRequest(BaseModel):
    """Roles to grant to, or revoke from, one user."""

    user_id: str = Field(..., min_length=1, max_length=36)
    role_id: list[int] = Field(..., min_length=1, max_length=len(KNOWN_ROLE_IDS))

    @field_validator("role_id")
    @classmethod
    def known_unique_roles(cls, v: list[int]) -> list[int]:
        unknown = [role_id for role_id in v if role_id not in KNOWN_ROLE_IDS]
        if unknown:
            raise ValueError(f"unknown role id(s): {', '.join(str(r) for r in unknown)}")
        return list(dict.fromkeys(v))


class UserRoles(BaseModel):
    id: str
    roles: list[RoleItem]


class UpdatePermissionData(BaseModel):
    user: UserRoles
