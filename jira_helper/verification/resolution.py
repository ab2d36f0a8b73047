"""Resolution engine -- turns a verification outcome into one change on the issue.

Pass: close the issue through the first close-like transition, or comment
if there is none. Fail: create or edit the single tagged comment.
Remote errors are reported in the result, never raised.
"""

import logging
from collections.abc import Iterable

from jira_helper.config.constants import (
    CLOSE_TRANSITION_KEYWORDS,
    CLOSED_COMMENT,
    NO_TRANSITION_COMMENT,
    ResolutionAction,
)
from jira_helper.infrastructure.jira.models import Comment, Transition
from jira_helper.verification.models import Fail, Pass, ResolutionResult, VerificationOutcome
from jira_helper.verification.tracker import IssueTracker

logger = logging.getLogger(__name__)


def find_close_transition(transitions: Iterable[Transition]) -> Transition | None:
    """First transition, in tracker order, whose name mentions a close keyword."""
    for transition in transitions:
        name = transition.name.lower()
        if any(keyword in name for keyword in CLOSE_TRANSITION_KEYWORDS):
            return transition
    return None


def filter_tagged_comments(comments: Iterable[Comment], tag: str) -> list[Comment]:
    """Comments whose body starts with the tag (exact, case-sensitive)."""
    return [c for c in comments if c.body.startswith(tag)]


class ResolutionEngine:
    """Applies a verification outcome to the remote issue."""

    def __init__(self, tracker: IssueTracker) -> None:
        self.tracker = tracker

    async def resolve(
        self,
        issue_key: str,
        outcome: VerificationOutcome,
        comment_tag: str,
    ) -> ResolutionResult:
        if isinstance(outcome, Pass):
            return await self._resolve_pass(issue_key, outcome, comment_tag)
        return await self._resolve_fail(issue_key, outcome, comment_tag)

    async def _resolve_pass(self, issue_key: str, outcome: Pass, tag: str) -> ResolutionResult:
        try:
            transition = find_close_transition(await self.tracker.list_transitions(issue_key))

            if transition is not None:
                await self.tracker.apply_transition(issue_key, transition.id, f"{tag} {CLOSED_COMMENT}")
                logger.info("AUDIT TRANSITION issue id=%s transition=%s", issue_key, transition.name)
                return ResolutionResult(
                    action=ResolutionAction.CLOSED,
                    outcome=outcome,
                    message="Verification passed. Issue has been closed.",
                    transition=transition.name,
                )

            await self.tracker.add_comment(issue_key, f"{tag} {NO_TRANSITION_COMMENT}")
            logger.info("AUDIT CREATE comment issue=%s (no close transition)", issue_key)
            return ResolutionResult(
                action=ResolutionAction.COMMENTED_PASS_NO_TRANSITION,
                outcome=outcome,
                message="Verification passed, but issue could not be auto-closed. Comment added.",
            )
        except Exception as e:
            logger.error("Error closing issue %s: %s", issue_key, e, exc_info=True)
            return ResolutionResult(
                action=ResolutionAction.VERIFIED_NO_UPDATE,
                outcome=outcome,
                message=f"Verification passed, but failed to update issue: {e}",
                error=str(e),
            )

    async def _resolve_fail(self, issue_key: str, outcome: Fail, tag: str) -> ResolutionResult:
        body = f"{tag} {outcome.reason}"
        try:
            existing = filter_tagged_comments(await self.tracker.list_comments(issue_key), tag)

            if existing:
                await self.tracker.update_comment(issue_key, existing[0].id, body)
                logger.info("AUDIT UPDATE comment id=%s issue=%s", existing[0].id, issue_key)
                message = "Verification failed. Existing comment updated."
            else:
                created = await self.tracker.add_comment(issue_key, body)
                logger.info("AUDIT CREATE comment id=%s issue=%s", created.id, issue_key)
                message = "Verification failed. Comment added to issue."

            return ResolutionResult(
                action=ResolutionAction.COMMENTED_FAIL,
                outcome=outcome,
                message=message,
            )
        except Exception as e:
            logger.error("Error commenting on issue %s: %s", issue_key, e, exc_info=True)
            return ResolutionResult(
                action=ResolutionAction.UPDATE_FAILED,
                outcome=outcome,
                message=f"Verification failed and could not update issue: {e}",
                error=str(e),
            )
