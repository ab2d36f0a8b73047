"""Jira REST client."""

from jira_helper.infrastructure.jira.client import JiraClient, JiraConfig
from jira_helper.infrastructure.jira.errors import JiraAPIError, JiraNotConfiguredError
from jira_helper.infrastructure.jira.models import Comment, Transition

__all__ = [
    "Comment",
    "JiraAPIError",
    "JiraClient",
    "JiraConfig",
    "JiraNotConfiguredError",
    "Transition",
]
