"""Request-scoped dependencies: services, token service and the bearer-token gate."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import TokenService, parse_user_id
from app.repositories.users import UserRepository
from app.schemas.auth import CurrentUser
from app.services.auth import AuthService
from app.services.products import ProductService

security = HTTPBearer(auto_error=False)


@lru_cache
def get_token_service() -> TokenService:
    """TokenService built once from settings; override in tests via dependency_overrides."""
    return TokenService(get_settings().jwt_settings())


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    return AuthService(db, tokens)


def get_product_service(db: Annotated[Session, Depends(get_db)]) -> ProductService:
    return ProductService(db)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> CurrentUser:
    """Dependency: require valid Bearer JWT for an active user. Raises 401 otherwise."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    payload = tokens.decode(credentials.credentials)
    if payload is None:
        raise _unauthorized("Invalid or expired token")
    user_id = parse_user_id(payload.get("sub"))
    if user_id is None:
        raise _unauthorized("Invalid token payload")
    user = UserRepository(db).get_by_id(user_id)
    if user is None:
        raise _unauthorized("User not found or inactive")
    return CurrentUser(id=user.id, username=user.username)
