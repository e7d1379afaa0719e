from __future__ import annotations

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from hostel_lifecycle import __version__
from hostel_lifecycle.api.exception_handlers import register_exception_handlers
from hostel_lifecycle.api.v1.router import router as api_v1_router
from hostel_lifecycle.config.database import get_db_session, init_db
from hostel_lifecycle.config.logging import get_logger, setup_logging
from hostel_lifecycle.config.settings import settings

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures title, version, debug mode from Settings.
    - Registers CORS and the error envelope handlers.
    - Includes the versioned API router under /api/v1.
    """
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    @app.get("/health", tags=["Health"])
    def health_check(db: Session = Depends(get_db_session)):
        db.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "app_name": settings.APP_NAME,
            "version": __version__,
            "environment": settings.ENVIRONMENT,
        }

    # Schema creation outside production; production uses migrations
    @app.on_event("startup")
    async def on_startup() -> None:
        if not settings.is_production():
            init_db()
        logger.info(f"{settings.APP_NAME} {__version__} started ({settings.ENVIRONMENT})")

    return app


app = create_app()
