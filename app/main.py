from __future__ import annotations

import logging

from fastapi import FastAPI

from app.config import get_app_settings, load_env_files
from app.schemas.crm_import import HealthResponse


def _configure_logging(log_level: str) -> None:
    """
    Configure root logging once for the API process.
    """

    logging.basicConfig(
        level=getattr(logging, log_level.strip().upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    load_env_files()
    settings = get_app_settings()
    _configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.title,
        version="1.0.0",
    )

    from app.api.routers import crm_import_router

    application.include_router(crm_import_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck() -> HealthResponse:
        return HealthResponse(status="ok", service=settings.title)

    logging.getLogger(__name__).info("%s initialized", settings.title)
    return application


app = create_app()
