"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserInfo,
)
from app.schemas.common import ErrorResponse
from app.schemas.product import (
    MessageResponse,
    ProductRequest,
    ProductResponse,
    ProductStatisticsResponse,
)

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "ErrorResponse",
    "LoginRequest",
    "MessageResponse",
    "ProductRequest",
    "ProductResponse",
    "ProductStatisticsResponse",
    "RegisterRequest",
    "UserInfo",
]
