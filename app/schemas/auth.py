"""Request/response schemas for registration, login and token refresh."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator


class RegistrationRequest(BaseModel):
    """Sign-up payload."""

    fullname: str = Field(..., min_length=1, max_length=255, description="Full name")
    email: EmailStr = Field(..., description="Email address (unique)")
    password: str = Field(..., min_length=1, max_length=128, description="Password")
    password_confirmation: str = Field(..., min_length=1, max_length=128)

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        if password is not None and v != password:
            raise ValueError("password confirmation must match password")
        return v


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Email address, normalised the same way as at sign-up")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class RoleItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class UserPublic(BaseModel):
    """User fields that may be returned to clients and embedded in access tokens."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    fullname: str
    roles: list[RoleItem] = Field(default_factory=list)


class StoredUser(UserPublic):
    """UserPublic plus the stored password hash; never serialised to clients."""

    password_hash: str = Field(..., exclude=True)


class AuthData(BaseModel):
    """Payload of a successful sign-up, sign-in or refresh."""

    user: UserPublic
    access_token: str = Field(..., description="Short-lived signed access token")
    refresh_token: str = Field(..., description="Long-lived opaque refresh token")


class CurrentUser(BaseModel):
    """Identity carried by a verified access token."""

    id: str
    email: str
    fullname: str
    roles: list[RoleItem] = Field(default_factory=list)

    def has_roles(self, *role_ids: int) -> bool:
        held = {role.id for role in self.roles}
        return all(role_id in held for role_id in role_ids)
