"""Issue creation."""

from jira_helper.services.create.service import IssueCreationService, build_issue_fields

__all__ = ["IssueCreationService", "build_issue_fields"]
