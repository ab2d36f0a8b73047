"""Verification service -- the surface the API layer calls."""

import logging
from typing import Any

from jira_helper.config.constants import DEFAULT_COMMENT_TAG
from jira_helper.infrastructure.jira.models import Comment
from jira_helper.verification.locks import IssueLocks
from jira_helper.verification.models import CheckDefinition, ResolutionResult, VerificationRequest
from jira_helper.verification.registry import CheckRegistry
from jira_helper.verification.resolution import ResolutionEngine, filter_tagged_comments
from jira_helper.verification.runner import VerificationRunner
from jira_helper.verification.tracker import IssueTracker

logger = logging.getLogger(__name__)


class VerificationService:
    """Lists checks, runs them against issues and reads back their history."""

    def __init__(
        self,
        tracker: IssueTracker,
        registry: CheckRegistry,
        locks: IssueLocks | None = None,
    ) -> None:
        self.tracker = tracker
        self.registry = registry
        self.locks = locks or IssueLocks()
        self.runner = VerificationRunner(tracker, registry)
        self.engine = ResolutionEngine(tracker)

    def list_checks(self) -> list[CheckDefinition]:
        """Every check that loads cleanly. Broken checks are skipped."""
        return self.registry.list_available()

    async def run_verification(
        self,
        issue_key: str,
        check_id: str,
        parameters: dict[str, Any] | None = None,
        comment_tag: str = DEFAULT_COMMENT_TAG,
    ) -> ResolutionResult:
        """
        Run one check against one issue and apply the result to the issue.

        Runs on the same issue key are serialized; the whole run and its
        resolution happen under that issue's lock.

        Raises:
            IssueNotFoundError: The issue does not exist.
            CheckNotFoundError: The check does not exist or cannot be loaded.
        """
        request = VerificationRequest(
            issue_key=issue_key,
            check_id=check_id,
            parameters=dict(parameters or {}),
            comment_tag=comment_tag,
        )
        async with self.locks.hold(request.issue_key):
            outcome = await self.runner.run(request.issue_key, request.check_id, request.parameters)
            result = await self.engine.resolve(request.issue_key, outcome, request.comment_tag)

        logger.info(
            "Verification %s on %s: passed=%s action=%s",
            request.check_id,
            request.issue_key,
            result.passed,
            result.action.value,
        )
        return result

    async def get_verification_history(
        self,
        issue_key: str,
        comment_tag: str = DEFAULT_COMMENT_TAG,
    ) -> list[Comment]:
        """Comments on the issue that carry the verification tag."""
        return filter_tagged_comments(await self.tracker.list_comments(issue_key), comment_tag)
