from __future__ import annotations

import logging
import os

from fastapi import FastAPI

from app.config import get_llm_settings, load_env_files


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_env() -> None:
    """
    Warn about configuration that disables optional features.

    Uploads, filtering and export work without an LLM key; only insight
    generation is affected, and it reports the problem per request.
    """

    settings = get_llm_settings()
    if settings.adapter != "mock" and not settings.api_key:
        logging.getLogger(__name__).warning(
            "LLM API key is not set. Provide LLM_API_KEY or OPENAI_API_KEY to enable insights."
        )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    load_env_files()
    _configure_logging()
    _check_env()

    application = FastAPI(
        title="Sales Analytics Dashboard API",
        version="1.0.0",
    )

    from app.api.routers import (
        analytics_router,
        dataset_router,
        export_router,
        insight_router,
    )

    application.include_router(dataset_router)
    application.include_router(analytics_router)
    application.include_router(insight_router)
    application.include_router(export_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
