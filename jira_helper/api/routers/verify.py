"""Verification endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from jira_helper.api.dependencies import (
    get_check_registry,
    get_settings_dependency,
    get_verification_service,
)
from jira_helper.api.models import (
    CheckResponse,
    HistoryComment,
    RunVerificationRequest,
    VerificationHistoryResponse,
    VerificationRunResponse,
)
from jira_helper.config.settings import Settings
from jira_helper.infrastructure.jira.errors import JiraAPIError
from jira_helper.verification.errors import CheckNotFoundError, IssueNotFoundError
from jira_helper.verification.registry import CheckRegistry
from jira_helper.verification.service import VerificationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/scripts", response_model=list[CheckResponse])
async def list_checks(
    registry: CheckRegistry = Depends(get_check_registry),  # noqa: B008
) -> list[CheckResponse]:
    """List every verification check that loads cleanly."""
    return [CheckResponse(**d.to_dict()) for d in registry.list_available()]


@router.post("/run", response_model=VerificationRunResponse)
async def run_verification(
    request: RunVerificationRequest,
    service: VerificationService = Depends(get_verification_service),  # noqa: B008
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
) -> VerificationRunResponse:
    """
    Run a check against an issue and apply the result.

    Pass closes the issue when a close-like transition exists, otherwise
    comments. Fail creates or updates the single tagged comment. The
    response always carries the verification result, even when the
    issue could not be updated.
    """
    try:
        result = await service.run_verification(
            request.issue_key,
            request.check_id,
            request.parameters,
            request.comment_tag or settings.default_comment_tag,
        )
    except IssueNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except CheckNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return VerificationRunResponse(**result.to_dict())


@router.get("/history/{issue_key}", response_model=VerificationHistoryResponse)
async def verification_history(
    issue_key: str,
    comment_prefix: str | None = Query(None, alias="commentPrefix", min_length=1),
    service: VerificationService = Depends(get_verification_service),  # noqa: B008
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
) -> VerificationHistoryResponse:
    """Comments on the issue left by previous verification runs."""
    try:
        comments = await service.get_verification_history(
            issue_key, comment_prefix or settings.default_comment_tag
        )
    except JiraAPIError as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail=f"Issue not found: {issue_key}") from e
        raise
    return VerificationHistoryResponse(
        issue_key=issue_key,
        verification_comments=[HistoryComment(**c.to_dict()) for c in comments],
        total=len(comments),
    )
