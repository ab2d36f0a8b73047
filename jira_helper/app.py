"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jira_helper.api.dependencies import get_check_registry
from jira_helper.api.routers import api_router
from jira_helper.config.settings import Settings, get_settings
from jira_helper.infrastructure.jira.errors import JiraAPIError
from jira_helper.infrastructure.logging.logger import setup_logging

settings = get_settings()

setup_logging(
    level=settings.log_level,
    json_output=not settings.debug,
    silence_noisy_loggers=True,
)

logger = logging.getLogger(__name__)


def _validate_startup_config(settings: Settings) -> None:
    """Validate configuration at startup."""
    Path(settings.config_dir).mkdir(parents=True, exist_ok=True)

    if not Path(settings.checks_dir).is_dir():
        logger.warning("checks_dir %s does not exist; no verification checks available", settings.checks_dir)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup and shutdown lifecycle."""
    logger.info("Starting %s", settings.app_name)
    _validate_startup_config(settings)

    registry = get_check_registry()
    checks = registry.list_available()
    logger.info("Loaded %s verification checks (%s failed)", len(checks), len(registry.load_errors))

    yield
    logger.info("Shutting down %s", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Search, create and verify Jira issues",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials="*" not in settings.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(JiraAPIError)
async def jira_api_error_handler(request: Request, exc: JiraAPIError) -> JSONResponse:
    """Tracker failures surface as 502 with the tracker's own message."""
    logger.error("Jira API error on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=502, content={"detail": f"Jira API error: {exc.message}"})


app.include_router(api_router, prefix="/api")
