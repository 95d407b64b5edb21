"""Per-request dependencies: settings, collaborators, and the bound session identity."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from tuneshare.core.config import Settings
from tuneshare.core.errors import AuthenticationError
from tuneshare.core.security import resolve_session_token
from tuneshare.schemas.auth import SessionIdentity
from tuneshare.services.mailer import Mailer
from tuneshare.services.media import MediaUploader


@dataclass(frozen=True)
class RequestContext:
    """Identity resolved from the session cookie; None means anonymous."""

    identity: SessionIdentity | None

    @property
    def user_id(self) -> int | None:
        return self.identity.id if self.identity else None


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


def get_uploader(request: Request) -> MediaUploader:
    return request.app.state.uploader


def get_request_context(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> RequestContext:
    """Resolve the session cookie once per request. Handlers read only the bound identity."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    return RequestContext(identity=resolve_session_token(token, settings))


def require_identity(
    ctx: Annotated[RequestContext, Depends(get_request_context)],
) -> SessionIdentity:
    """Dependency: the caller must hold a valid session. Raises AuthenticationError otherwise."""
    if ctx.identity is None:
        raise AuthenticationError("Please Login/Signup first!")
    return ctx.identity
