"""Issue creation endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from jira_helper.api.dependencies import get_config_store, get_jira_client, get_settings_dependency
from jira_helper.api.models import CreateIssueRequest, CreateIssueResponse, FromTemplateRequest
from jira_helper.config.settings import Settings
from jira_helper.config.store import ConfigStore
from jira_helper.infrastructure.jira.client import JiraClient
from jira_helper.services.create import IssueCreationService
from jira_helper.services.create.csv_parser import generate_sample_csv

router = APIRouter()


def _service(client: JiraClient, store: ConfigStore, settings: Settings) -> IssueCreationService:
    return IssueCreationService(client, store, delay=settings.bulk_create_delay)


@router.post("/single", response_model=CreateIssueResponse)
async def create_single(
    request: CreateIssueRequest,
    client: JiraClient = Depends(get_jira_client),  # noqa: B008
    store: ConfigStore = Depends(get_config_store),  # noqa: B008
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
) -> CreateIssueResponse:
    """Create one issue."""
    issue = await _service(client, store, settings).create_single(request.to_issue_data())
    return CreateIssueResponse(message="Issue created successfully", issue=issue)


@router.post("/from-template", response_model=CreateIssueResponse)
async def create_from_template(
    request: FromTemplateRequest,
    client: JiraClient = Depends(get_jira_client),  # noqa: B008
    store: ConfigStore = Depends(get_config_store),  # noqa: B008
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
) -> CreateIssueResponse:
    """Create one issue from a stored template."""
    issue = await _service(client, store, settings).create_from_template(
        request.template_id, request.overrides
    )
    return CreateIssueResponse(message="Issue created from template successfully", issue=issue)


@router.post("/bulk")
async def create_bulk(
    csv_file: UploadFile = File(..., alias="csvFile"),  # noqa: B008
    template_id: str | None = Form(None, alias="templateId"),
    client: JiraClient = Depends(get_jira_client),  # noqa: B008
    store: ConfigStore = Depends(get_config_store),  # noqa: B008
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
) -> dict[str, Any]:
    """Create one issue per row of an uploaded CSV file."""
    filename = csv_file.filename or ""
    if csv_file.content_type != "text/csv" and not filename.endswith(".csv"):
        raise HTTPException(status_code=400, detail="Only CSV files are allowed")

    content = await csv_file.read(settings.max_csv_bytes + 1)
    if len(content) > settings.max_csv_bytes:
        raise HTTPException(status_code=413, detail="CSV file is too large")

    return await _service(client, store, settings).create_bulk(content, template_id or None)


@router.get("/csv-template")
async def csv_template() -> Response:
    """Download an example CSV for bulk creation."""
    return Response(
        content=generate_sample_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="jira-issues-template.csv"'},
    )


@router.get("/metadata")
@router.get("/metadata/{project_key}")
async def create_metadata(
    project_key: str | None = None,
    client: JiraClient = Depends(get_jira_client),  # noqa: B008
) -> dict[str, Any]:
    """Jira create-issue metadata, optionally for a single project."""
    return await client.get_create_metadata(project_key)
