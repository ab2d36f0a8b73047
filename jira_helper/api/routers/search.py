"""Issue search endpoints."""

from typing import Any

from fastapi import APIRouter, Depends

from jira_helper.api.dependencies import get_jira_client
from jira_helper.api.models import (
    CommentRequest,
    DescriptionRequest,
    OperationResponse,
    SearchRequest,
    SummaryRequest,
)
from jira_helper.infrastructure.jira.client import JiraClient
from jira_helper.services.search import SearchService

router = APIRouter()


@router.post("/")
async def search_issues(
    request: SearchRequest,
    client: JiraClient = Depends(get_jira_client),  # noqa: B008
) -> dict[str, Any]:
    """Search issues with JQL."""
    svc = SearchService(client)
    return await svc.search(request.jql, request.start_at, request.max_results)


@router.get("/issue/{issue_key}")
async def get_issue(
    issue_key: str,
    client: JiraClient = Depends(get_jira_client),  # noqa: B008
) -> dict[str, Any]:
    svc = SearchService(client)
    return await svc.get_issue(issue_key)


@router.post("/issue/{issue_key}/comment")
async def add_comment(
    issue_key: str,
    request: CommentRequest,
    client: JiraClient = Depends(get_jira_client),  # noqa: B008
) -> dict[str, Any]:
    svc = SearchService(client)
    comment = await svc.add_comment(issue_key, request.comment)
    return {"success": True, "message": "Comment added successfully", "comment": comment}


@router.put("/issue/{issue_key}/summary", response_model=OperationResponse)
async def update_summary(
    issue_key: str,
    request: SummaryRequest,
    client: JiraClient = Depends(get_jira_client),  # noqa: B008
) -> OperationResponse:
    svc = SearchService(client)
    await svc.update_summary(issue_key, request.summary)
    return OperationResponse(message="Issue summary updated successfully")


@router.put("/issue/{issue_key}/description", response_model=OperationResponse)
async def update_description(
    issue_key: str,
    request: DescriptionRequest,
    client: JiraClient = Depends(get_jira_client),  # noqa: B008
) -> OperationResponse:
    svc = SearchService(client)
    await svc.update_description(issue_key, request.description)
    return OperationResponse(message="Issue description updated successfully")


@router.get("/issue/{issue_key}/comments")
async def list_comments(
    issue_key: str,
    client: JiraClient = Depends(get_jira_client),  # noqa: B008
) -> dict[str, Any]:
    """Every comment on the issue."""
    svc = SearchService(client)
    return await svc.list_comments(issue_key)
