"""Password hashing and JWT issuance/validation for authentication."""

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

logger = logging.getLogger(__name__)

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of the input.
BCRYPT_MAX_BYTES = 72

# Claims every token must carry; decode rejects tokens missing any of them.
REQUIRED_CLAIMS = ["sub", "exp", "iat", "nbf", "jti", "iss", "aud"]


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash (salt is read from the hash)."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@dataclass(frozen=True)
class JwtSettings:
    """Signing and validation parameters for TokenService."""

    secret_key: str
    issuer: str
    audience: str
    expire_minutes: int = 60
    algorithm: str = "HS256"


@dataclass(frozen=True)
class IssuedToken:
    """A signed token together with its expiry instant (UTC)."""

    token: str
    expires_at: datetime


class TokenService:
    """Creates and validates HMAC-signed, time-bound bearer tokens."""

    def __init__(self, jwt_settings: JwtSettings) -> None:
        self._settings = jwt_settings

    @property
    def expire_minutes(self) -> int:
        return self._settings.expire_minutes

    def issue(self, user_id: int, username: str, now: datetime | None = None) -> IssuedToken:
        """
        Create a token for the given user.

        Claims: sub (user id), username, iat, nbf, exp, jti, iss, aud.
        `now` defaults to the current UTC time; pass a value to simulate the clock.
        """
        issued_at = now or datetime.now(UTC)
        expires_at = issued_at + timedelta(minutes=self._settings.expire_minutes)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "username": username,
            "iat": issued_at,
            "nbf": issued_at,
            "exp": expires_at,
            "jti": uuid.uuid4().hex,
            "iss": self._settings.issuer,
            "aud": self._settings.audience,
        }
        token = jwt.encode(
            payload,
            self._settings.secret_key,
            algorithm=self._settings.algorithm,
        )
        logger.debug("Issued token for user_id=%s", user_id)
        return IssuedToken(token=token, expires_at=expires_at)

    def decode(self, token: str) -> dict[str, Any] | None:
        """
        Verify signature, issuer, audience and lifetime (no leeway); return claims.

        Returns None for any invalid, expired or malformed token.
        """
        try:
            return jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
                audience=self._settings.audience,
                issuer=self._settings.issuer,
                leeway=0,
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.PyJWTError as e:
            logger.debug("Token rejected: %s", type(e).__name__)
            return None

    def validate(self, token: str) -> bool:
        """True if the token is authentic and currently within its validity window."""
        return self.decode(token) is not None

    def extract_user_id(self, token: str) -> int | None:
        """
        Read the user id from `sub` WITHOUT verifying the signature.

        Best-effort only; never use the result as an authorization decision.
        """
        try:
            payload = jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError:
            return None
        return parse_user_id(payload.get("sub"))


def parse_user_id(sub: Any) -> int | None:
    """Parse a `sub` claim into a positive int user id, or None."""
    if sub is None or isinstance(sub, bool):
        return None
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        return None
    return user_id if user_id > 0 else None
