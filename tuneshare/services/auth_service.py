"""Signup, login and email verification (Unregistered -> PendingVerification -> Verified)."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tuneshare.core.errors import (
    AuthenticationError,
    ConflictError,
    DependencyError,
    NotFoundError,
    VerificationError,
)
from tuneshare.core.security import hash_password, issue_verification_code, verify_password
from tuneshare.models import User
from tuneshare.schemas.auth import LoginRequest, SignupRequest

if TYPE_CHECKING:
    from tuneshare.core.config import Settings
    from tuneshare.services.mailer import Mailer

logger = logging.getLogger(__name__)


@dataclass
class SignupResult:
    user: User
    email_sent: bool


def _conflict_for(existing: User, username: str, email: str) -> ConflictError:
    if existing.username == username:
        return ConflictError("Username is already in use")
    return ConflictError("Email is already in use")


def signup(
    session: Session,
    payload: SignupRequest,
    settings: Settings,
    mailer: Mailer,
) -> SignupResult:
    """
    Create an unverified account and send its verification code.

    The combined username/email lookup is not atomic with the insert, so a
    unique violation on insert is mapped to the same ConflictError. A failed
    email does not undo the account; it is reported as email_sent=False.
    """
    username = payload.username
    email = str(payload.email).lower()

    existing = (
        session.query(User)
        .filter(or_(User.username == username, User.email == email))
        .first()
    )
    if existing is not None:
        raise _conflict_for(existing, username, email)

    verification = issue_verification_code(settings.VERIFICATION_CODE_TTL_HOURS)
    user = User(
        username=username,
        full_name=payload.full_name,
        email=email,
        password_hash=hash_password(payload.password, settings.BCRYPT_ROUNDS),
        is_verified=False,
        verification_token=verification.code,
        verification_token_expires_at=verification.expires_at,
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        winner = (
            session.query(User)
            .filter(or_(User.username == username, User.email == email))
            .first()
        )
        if winner is None:
            raise
        raise _conflict_for(winner, username, email) from None
    session.refresh(user)
    logger.info("User signed up", extra={"user_id": user.id})

    try:
        mailer.send_verification_email(user.email, verification.code)
    except DependencyError as e:
        logger.error(
            "Verification email failed; account kept",
            extra={"user_id": user.id, "reason": e.message[:200]},
        )
        return SignupResult(user=user, email_sent=False)
    return SignupResult(user=user, email_sent=True)


def login(session: Session, payload: LoginRequest) -> User:
    """Authenticate by username or email. Unverified accounts may log in."""
    identifier = payload.username_or_email.strip()
    user = (
        session.query(User)
        .filter(or_(User.username == identifier, User.email == identifier.lower()))
        .first()
    )
    if user is None or not verify_password(payload.password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    return user


def verify_email(
    session: Session, user_id: int, code: str, now: datetime | None = None
) -> User:
    """Mark the account verified when code matches and has not expired; clear the code."""
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User does not exist")
    if user.is_verified:
        return user
    # Compare bytes: compare_digest rejects non-ASCII str arguments with TypeError.
    if not user.verification_token or not secrets.compare_digest(
        user.verification_token.encode("utf-8"), code.encode("utf-8")
    ):
        raise VerificationError("Invalid verification code")

    now = now or datetime.now(UTC)
    expires_at = user.verification_token_expires_at
    if expires_at is not None and expires_at.tzinfo is None:
        # SQLite drops tzinfo; stored values are always UTC.
        expires_at = expires_at.replace(tzinfo=UTC)
    if expires_at is None or now > expires_at:
        raise VerificationError("Verification code has expired")

    user.is_verified = True
    user.verification_token = None
    user.verification_token_expires_at = None
    session.commit()
    session.refresh(user)
    logger.info("Email verified", extra={"user_id": user.id})
    return user
