"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthData,
    CurrentUser,
    LoginRequest,
    RegistrationRequest,
    RoleItem,
    StoredUser,
    UserPublic,
)
from app.schemas.health import HealthData
from app.schemas.moderator import UpdatePermissionData, UpdateRoleRequest, UserRoles
from app.schemas.post import (
    LikeData,
    LikeItem,
    PostCreateRequest,
    PostData,
    PostItem,
    TakeDownData,
)
from app.schemas.response import ApiResponse, ErrorBody
from app.schemas.subforum import (
    MediaFile,
    SubforumCreateRequest,
    SubforumData,
    SubforumItem,
    SubforumListData,
)

__all__ = [
    "ApiResponse",
    "AuthData",
    "CurrentUser",
    "ErrorBody",
    "HealthData",
    "LikeData",
    "LikeItem",
    "LoginRequest",
    "MediaFile",
    "PostCreateRequest",
    "PostData",
    "PostItem",
    "RegistrationRequest",
    "RoleItem",
    "StoredUser",
    "SubforumCreateRequest",
    "SubforumData",
    "SubforumItem",
    "SubforumListData",
    "TakeDownData",
    "UpdatePermissionData",
    "UpdateRoleRequest",
    "UserPublic",
    "UserRoles",
]
