"""Auth flow: login (verify credentials, issue token) and registration (hash, persist, issue token)."""

import logging
from functools import lru_cache

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ErrorKind, ServiceError
from app.core.security import TokenService, hash_password, verify_password
from app.models.user import User
from app.repositories.users import UserRepository
from app.schemas.auth import AuthResponse, UserInfo

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
USERNAME_TAKEN = "Username already exists"


@lru_cache
def _dummy_hash() -> str:
    # Verified against when the username is unknown so both failure paths cost one bcrypt check.
    return hash_password("not-a-real-password")


class AuthService:
    def __init__(self, db: Session, token_service: TokenService):
        self.users = UserRepository(db)
        self.tokens = token_service

    def login(self, username: str, password: str) -> AuthResponse:
        """
        Authenticate an active user and issue a token.

        Every rejection reason raises the same UNAUTHORIZED error; only the
        server log tells them apart. Inactive users are invisible to the lookup.
        """
        logger.info("Login attempt for username=%s", username)
        user = self.users.get_by_username(username)
        if user is None:
            verify_password(password, _dummy_hash())
            logger.warning("Login rejected: unknown or inactive username=%s", username)
            raise ServiceError(ErrorKind.UNAUTHORIZED, INVALID_CREDENTIALS)
        if not verify_password(password, user.password_hash):
            logger.warning("Login rejected: wrong password for username=%s", username)
            raise ServiceError(ErrorKind.UNAUTHORIZED, INVALID_CREDENTIALS)

        logger.info("Login succeeded for user_id=%s", user.id)
        return self._auth_response(user)

    def register(self, username: str, password: str) -> AuthResponse:
        """
        Create an active user and issue a token.

        The password confirmation is checked by RegisterRequest before this runs.
        Raises CONFLICT when an active user already has the username, including
        when a concurrent registration wins the unique index.
        """
        logger.info("Registration attempt for username=%s", username)
        if self.users.exists_by_username(username):
            logger.warning("Registration rejected: username=%s already exists", username)
            raise ServiceError(ErrorKind.CONFLICT, USERNAME_TAKEN)

        try:
            user = self.users.create(username=username, password_hash=hash_password(password))
        except IntegrityError:
            logger.warning("Registration lost race for username=%s", username)
            raise ServiceError(ErrorKind.CONFLICT, USERNAME_TAKEN) from None

        logger.info("Registered user_id=%s username=%s", user.id, username)
        return self._auth_response(user)

    def _auth_response(self, user: User) -> AuthResponse:
        issued = self.tokens.issue(user.id, user.username)
        return AuthResponse(
            token=issued.token,
            expires_at=issued.expires_at,
            user=UserInfo(id=user.id, username=user.username),
        )
