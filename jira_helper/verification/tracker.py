"""The issue tracker operations the verification engine depends on."""

from typing import Protocol

from jira_helper.infrastructure.jira.models import Comment, Transition


class IssueTracker(Protocol):
    """Satisfied by JiraClient; tests provide an in-memory fake."""

    async def issue_exists(self, issue_key: str) -> bool: ...

    async def list_transitions(self, issue_key: str) -> list[Transition]: ...

    async def apply_transition(
        self, issue_key: str, transition_id: str, comment: str | None = None
    ) -> None: ...

    async def list_comments(self, issue_key: str) -> list[Comment]: ...

    async def add_comment(self, issue_key: str, body: str) -> Comment: ...

    async def update_comment(self, issue_key: str, comment_id: str, body: str) -> Comment: ...
