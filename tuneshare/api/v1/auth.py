"""Signup, login, logout, email verification and current-user routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from tuneshare.api.deps import get_app_settings, get_mailer, require_identity
from tuneshare.core.config import Settings
from tuneshare.core.database import get_db
from tuneshare.core.errors import NotFoundError
from tuneshare.core.security import create_session_token
from tuneshare.models import User
from tuneshare.schemas.auth import (
    LoginRequest,
    SessionIdentity,
    SignupRequest,
    SignupResponse,
    UserResponse,
    VerifyEmailRequest,
)
from tuneshare.services import auth_service
from tuneshare.services.mailer import Mailer

router = APIRouter()


def set_session_cookie(response: Response, user: User, settings: Settings) -> None:
    token = create_session_token(user.id, user.username, settings)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        max_age=settings.SESSION_TTL_HOURS * 3600,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
        path="/",
    )


@router.post("/signup", response_model=SignupResponse, status_code=201)
def signup(
    body: SignupRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
) -> SignupResponse:
    """
    Create an unverified account, email a 6-digit code and start a session.

    email_sent=false means the account exists but the code could not be delivered.
    """
    result = auth_service.signup(db, body, settings, mailer)
    set_session_cookie(response, result.user, settings)
    return SignupResponse(
        user=UserResponse.model_validate(result.user),
        email_sent=result.email_sent,
    )


@router.post("/login", response_model=UserResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UserResponse:
    """Authenticate with username or email and password; sets the session cookie."""
    user = auth_service.login(db, body)
    set_session_cookie(response, user, settings)
    return UserResponse.model_validate(user)


@router.post("/logout", status_code=204)
def logout(
    response: Response,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> None:
    """Drop the session cookie. Tokens are stateless; nothing is revoked server-side."""
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")


@router.post("/verify-email", response_model=UserResponse)
def verify_email(
    body: VerifyEmailRequest,
    db: Annotated[Session, Depends(get_db)],
    identity: Annotated[SessionIdentity, Depends(require_identity)],
) -> UserResponse:
    user = auth_service.verify_email(db, identity.id, body.code)
    return UserResponse.model_validate(user)


@router.get("/me", response_model=UserResponse)
def me(
    db: Annotated[Session, Depends(get_db)],
    identity: Annotated[SessionIdentity, Depends(require_identity)],
) -> UserResponse:
    user = db.get(User, identity.id)
    if user is None:
        raise NotFoundError("User does not exist")
    return UserResponse.model_validate(user)
