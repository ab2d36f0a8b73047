"""Issue search."""

from jira_helper.services.search.service import SearchService

__all__ = ["SearchService"]
