"""FastAPI application entrypoint. No business logic; only wiring, lifespan and error rendering."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from tuneshare import __version__
from tuneshare.api.v1 import router as v1_router
from tuneshare.core.config import Settings, get_settings
from tuneshare.core.database import build_engine, build_session_factory
from tuneshare.core.errors import InternalError, TuneshareError
from tuneshare.core.logging_config import setup_logging
from tuneshare.models import Base
from tuneshare.services.mailer import Mailer, build_mailer
from tuneshare.services.media import CloudinaryUploader, MediaUploader

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    mailer: Mailer | None = None,
    uploader: MediaUploader | None = None,
    create_tables: bool = False,
) -> FastAPI:
    """
    Build the application. Settings, engine and collaborators are created once
    in the lifespan and shared through app.state; the engine is disposed on shutdown.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
        if create_tables:
            Base.metadata.create_all(bind=engine)
        app.state.settings = settings
        app.state.engine = engine
        app.state.session_factory = build_session_factory(engine)
        app.state.mailer = mailer or build_mailer(settings)
        app.state.uploader = uploader or CloudinaryUploader(settings)
        logger.info("Startup complete", extra={"environment": settings.APP_ENV})
        try:
            yield
        finally:
            engine.dispose()

    app = FastAPI(
        title="Tuneshare API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TuneshareError)
    async def handle_service_error(request: Request, exc: TuneshareError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Request failed",
                extra={"path": request.url.path, "reason": exc.message[:500]},
            )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(SQLAlchemyError)
    async def handle_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Unhandled database error on %s", request.url.path)
        error = InternalError("An internal error occurred. Please try again.")
        return JSONResponse(status_code=error.status_code, content={"detail": error.message})

    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Tuneshare API"}

    return app


def build_default_app() -> FastAPI:
    """Factory for uvicorn (`--factory`); settings are read from the environment and .env."""
    load_dotenv()
    return create_app()
