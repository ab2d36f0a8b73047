"""Health endpoint."""

from fastapi import APIRouter, Depends

from jira_helper.api.dependencies import get_settings_dependency
from jira_helper.api.models import HealthResponse
from jira_helper.config.settings import Settings

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=settings.app_version)
