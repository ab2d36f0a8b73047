"""Verification runner -- executes one check against one issue."""

import asyncio
import inspect
import logging
import time
from typing import Any

from jira_helper.config.constants import SCRIPT_ERROR_PREFIX
from jira_helper.infrastructure.logging.logger import StructuredLogger
from jira_helper.verification.errors import IssueNotFoundError
from jira_helper.verification.models import Fail, VerificationOutcome, classify_result
from jira_helper.verification.registry import CheckRegistry
from jira_helper.verification.tracker import IssueTracker

logger = logging.getLogger(__name__)
structured = StructuredLogger(__name__)


class VerificationRunner:
    """Runs a check and always returns an outcome.

    Only a missing issue or a missing check raise. Anything the check
    itself raises, sys.exit included, becomes a Fail.
    """

    def __init__(self, tracker: IssueTracker, registry: CheckRegistry) -> None:
        self.tracker = tracker
        self.registry = registry

    async def run(
        self,
        issue_key: str,
        check_id: str,
        parameters: dict[str, Any] | None = None,
    ) -> VerificationOutcome:
        if not await self.tracker.issue_exists(issue_key):
            raise IssueNotFoundError(issue_key)

        check = self.registry.resolve(check_id)

        start = time.perf_counter()
        try:
            if inspect.iscoroutinefunction(check.verify):
                raw = await check.verify(issue_key, dict(parameters or {}))
            else:
                # Plain functions run in a worker thread
                raw = await asyncio.to_thread(check.verify, issue_key, dict(parameters or {}))
                if inspect.isawaitable(raw):
                    raw = await raw
        except (Exception, SystemExit) as e:
            structured.log_error("verification_check", e, {"issue_key": issue_key, "check_id": check_id})
            return Fail(f"{SCRIPT_ERROR_PREFIX}{e}")

        outcome = classify_result(raw)
        structured.log_step(
            "verification_check",
            {"issue_key": issue_key, "check_id": check_id, "passed": outcome.passed},
            duration_ms=(time.perf_counter() - start) * 1000,
        )
        return outcome
