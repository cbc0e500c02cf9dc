"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 100


def _strip_username(value: object) -> object:
    return value.strip() if isinstance(value, str) else value


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LEN, description="Username")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password",
    )

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, value: object) -> object:
        return _strip_username(value)


class RegisterRequest(BaseModel):
    """New account data; confirmPassword must repeat password."""

    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        description="Username",
    )
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password",
    )
    confirm_password: str = Field(
        ...,
        alias="confirmPassword",
        description="Must equal password",
    )

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, value: object) -> object:
        return _strip_username(value)

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserInfo(BaseModel):
    """Minimal public profile returned with a token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str


class AuthResponse(BaseModel):
    """JWT access token plus expiry and user profile, returned by login and register."""

    token: str = Field(..., description="JWT access token; send as Authorization: Bearer <token>")
    expires_at: datetime = Field(
        ..., serialization_alias="expiresAt", description="Token expiry (UTC)"
    )
    user: UserInfo


class CurrentUser(BaseModel):
    """Authenticated user (id, username) for dependency injection."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
