"""Password hashing, verification codes, and session JWT creation/validation."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from tuneshare.schemas.auth import SessionIdentity

if TYPE_CHECKING:
    from tuneshare.core.config import Settings

logger = logging.getLogger(__name__)

# Bcrypt cost used when no setting is supplied.
DEFAULT_BCRYPT_ROUNDS = 10

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 64
PASSWORD_MIN_LEN = 5
PASSWORD_MAX_LEN = 128

VERIFICATION_CODE_MIN = 100000
VERIFICATION_CODE_MAX = 999999


@dataclass(frozen=True)
class VerificationCode:
    code: str
    expires_at: datetime


def hash_password(plain_password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Never raises on mismatch."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def issue_verification_code(
    ttl_hours: int = 24, now: datetime | None = None
) -> VerificationCode:
    """Draw a 6-digit code from the OS CSPRNG; it expires ttl_hours after issuance."""
    now = now or datetime.now(UTC)
    span = VERIFICATION_CODE_MAX - VERIFICATION_CODE_MIN + 1
    code = VERIFICATION_CODE_MIN + secrets.randbelow(span)
    return VerificationCode(code=str(code), expires_at=now + timedelta(hours=ttl_hours))


def create_session_token(
    user_id: int, username: str, settings: Settings, now: datetime | None = None
) -> str:
    """Create a signed session JWT with sub (user id), username, iat and exp."""
    now = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "iat": now,
        "exp": now + timedelta(hours=settings.SESSION_TTL_HOURS),
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def resolve_session_token(token: str | None, settings: Settings) -> SessionIdentity | None:
    """
    Validate signature, expiry and claims; return the identity or None.

    None means anonymous. Failure reasons are only logged, callers never branch on them.
    """
    if not token:
        return None
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Session token expired; treating request as anonymous")
        return None
    except jwt.PyJWTError as e:
        logger.debug("Rejected malformed session token: %s", e)
        return None
    username = payload.get("username")
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        logger.debug("Session token has a non-integer subject")
        return None
    if not isinstance(username, str) or not username:
        logger.debug("Session token is missing the username claim")
        return None
    return SessionIdentity(id=user_id, username=username)
