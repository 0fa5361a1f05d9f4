"""Password hashing, identifier generation and access-token issuing/verification."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt
from uuid6 import uuid7

from app.schemas.auth import UserPublic

if TYPE_CHECKING:
    from app.core.config import Settings

# Bcrypt cost (rounds). Fixed; existing hashes carry their own cost so this only affects new ones.
BCRYPT_ROUNDS = 10

# bcrypt ignores everything past 72 bytes.
BCRYPT_MAX_BYTES = 72


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash (constant-time comparison)."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def new_id() -> str:
    """Return a new globally unique, time-ordered identifier (UUIDv7)."""
    return str(uuid7())


class TokenIssuer:
    """Mints and verifies signed access tokens carrying identity and role claims."""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 5) -> None:
        if not secret:
            raise ValueError("token secret must be non-empty")
        self._secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenIssuer":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )

    def issue(self, user: UserPublic, now: datetime | None = None) -> str:
        """Create a token for user; iat and nbf are now, exp is now + expire_minutes."""
        now = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "id": user.id,
            "email": user.email,
            "fullname": user.fullname,
            "roles": [role.model_dump() for role in user.roles],
            "exp": now + timedelta(minutes=self.expire_minutes),
            "iat": now,
            "nbf": now,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """
        Decode and validate a token; return its claims.
        Raises jwt.PyJWTError on a bad signature, a malformed token, or an expired token.
        """
        return jwt.decode(
            token,
            self._secret,
            algorithms=[self.algorithm],
            options={"require": ["exp", "iat", "nbf"]},
        )
