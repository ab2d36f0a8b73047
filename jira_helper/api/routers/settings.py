"""Settings, metadata and template endpoints."""

import asyncio
import logging
from typing import Any
from urllib.parse import urlparse

from fastapi import APIRouter, Depends, HTTPException

from jira_helper.api.dependencies import get_config_store, get_jira_client
from jira_helper.api.models import (
    OperationResponse,
    SaveSettingsRequest,
    SaveTemplatesRequest,
    SettingsResponse,
)
from jira_helper.config.store import ConfigStore, JiraCredentials
from jira_helper.infrastructure.jira.client import JiraClient

logger = logging.getLogger(__name__)

router = APIRouter()


def _is_valid_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


@router.get("/", response_model=SettingsResponse)
async def get_settings(
    store: ConfigStore = Depends(get_config_store),  # noqa: B008
) -> SettingsResponse:
    """Current connection settings. The API token itself is never returned."""
    credentials = store.load_credentials()
    return SettingsResponse(
        jira_url=credentials.jira_url,
        username=credentials.username,
        configured=credentials.configured,
        has_api_token=bool(credentials.api_token),
    )


@router.post("/", response_model=OperationResponse)
async def save_settings(
    request: SaveSettingsRequest,
    store: ConfigStore = Depends(get_config_store),  # noqa: B008
) -> OperationResponse:
    """Save the Jira URL, username and API token (encrypted at rest)."""
    if not _is_valid_url(request.jira_url):
        raise HTTPException(status_code=400, detail="Invalid Jira URL format")

    try:
        store.save_credentials(
            JiraCredentials(
                jira_url=request.jira_url.rstrip("/"),
                username=request.username,
                api_token=request.api_token,
                configured=True,
            )
        )
    except OSError as e:
        logger.error("Error saving settings: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save settings") from e

    return OperationResponse(message="Settings saved successfully")


@router.post("/test")
async def test_connection(
    client: JiraClient = Depends(get_jira_client),  # noqa: B008
) -> dict[str, Any]:
    """Check the stored credentials against the Jira server."""
    result = await client.test_connection()
    if not result["success"]:
        raise HTTPException(status_code=400, detail=result["error"])

    user = result["user"] or {}
    return {
        "success": True,
        "message": "Connection successful",
        "user": {
            "displayName": user.get("displayName"),
            "emailAddress": user.get("emailAddress"),
            "accountId": user.get("accountId"),
        },
    }


@router.get("/metadata")
async def get_metadata(
    store: ConfigStore = Depends(get_config_store),  # noqa: B008
) -> dict[str, Any]:
    """Cached projects, issue types and custom fields."""
    return store.load_metadata()


@router.post("/metadata/refresh")
async def refresh_metadata(
    client: JiraClient = Depends(get_jira_client),  # noqa: B008
    store: ConfigStore = Depends(get_config_store),  # noqa: B008
) -> dict[str, Any]:
    """Fetch projects, issue types and custom fields from Jira and cache them."""
    projects, issue_types, fields = await asyncio.gather(
        client.get_projects(),
        client.get_issue_types(),
        client.get_fields(),
    )

    metadata = {
        "projects": [
            {
                "id": p.get("id"),
                "key": p.get("key"),
                "name": p.get("name"),
                "projectTypeKey": p.get("projectTypeKey"),
            }
            for p in projects or []
        ],
        "issueTypes": [
            {
                "id": it.get("id"),
                "name": it.get("name"),
                "description": it.get("description"),
                "iconUrl": it.get("iconUrl"),
                "subtask": it.get("subtask"),
            }
            for it in issue_types or []
        ],
        "fields": [
            {"id": f.get("id"), "name": f.get("name"), "schema": f.get("schema")}
            for f in fields or []
            if f.get("custom")
        ],
    }

    try:
        saved = store.save_metadata(metadata)
    except OSError as e:
        logger.error("Error saving metadata: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save metadata") from e

    return {"success": True, "message": "Metadata refreshed successfully", "metadata": saved}


@router.get("/templates")
async def get_templates(
    store: ConfigStore = Depends(get_config_store),  # noqa: B008
) -> list[dict[str, Any]]:
    return store.load_templates()


@router.post("/templates", response_model=OperationResponse)
async def save_templates(
    request: SaveTemplatesRequest,
    store: ConfigStore = Depends(get_config_store),  # noqa: B008
) -> OperationResponse:
    """Replace the stored templates. Each template needs an id and a name."""
    try:
        store.save_templates([t.model_dump() for t in request.templates])
    except OSError as e:
        logger.error("Error saving templates: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save templates") from e

    return OperationResponse(message="Templates saved successfully")
