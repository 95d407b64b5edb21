"""Health check endpoint with database connectivity check."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tuneshare import __version__
from tuneshare.api.deps import get_app_settings
from tuneshare.core.config import Settings
from tuneshare.core.database import check_db_connected, get_db
from tuneshare.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HealthResponse:
    """Service status, store reachability and whether verification mail is delivered."""
    return HealthResponse(
        status="ok",
        version=__version__,
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
        mail_configured=settings.SMTP_HOST is not None,
    )
