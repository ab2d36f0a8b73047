"""Issue search and single-issue operations."""

import logging
from typing import Any

from jira_helper.infrastructure.jira.client import JiraClient

logger = logging.getLogger(__name__)


def _person(data: dict[str, Any] | None) -> dict[str, Any] | None:
    if not data:
        return None
    return {"displayName": data.get("displayName"), "emailAddress": data.get("emailAddress")}


def _named_icon(data: dict[str, Any] | None) -> dict[str, Any] | None:
    if not data:
        return None
    return {"name": data.get("name"), "iconUrl": data.get("iconUrl")}


def format_issue(issue: dict[str, Any]) -> dict[str, Any]:
    """Flatten a Jira issue into the shape the front end consumes."""
    fields = issue.get("fields") or {}
    status = fields.get("status") or {}
    return {
        "key": issue.get("key"),
        "id": issue.get("id"),
        "summary": fields.get("summary"),
        "status": {"name": status.get("name"), "statusCategory": status.get("statusCategory")},
        "issueType": _named_icon(fields.get("issuetype")),
        "priority": _named_icon(fields.get("priority")),
        "assignee": _person(fields.get("assignee")),
        "created": fields.get("created"),
        "updated": fields.get("updated"),
        "description": fields.get("description"),
    }


def format_issue_detail(issue: dict[str, Any]) -> dict[str, Any]:
    fields = issue.get("fields") or {}
    return {
        **format_issue(issue),
        "reporter": _person(fields.get("reporter")),
        "labels": fields.get("labels") or [],
        "components": fields.get("components") or [],
        "fixVersions": fields.get("fixVersions") or [],
    }


class SearchService:
    """Searches issues and reads or edits a single issue."""

    def __init__(self, client: JiraClient) -> None:
        self.client = client

    async def search(self, jql: str, start_at: int, max_results: int) -> dict[str, Any]:
        results = await self.client.search_issues(jql, start_at, max_results)
        return {
            "issues": [format_issue(i) for i in results.get("issues", [])],
            "total": results.get("total", 0),
            "startAt": results.get("startAt", start_at),
            "maxResults": results.get("maxResults", max_results),
        }

    async def get_issue(self, issue_key: str) -> dict[str, Any]:
        return format_issue_detail(await self.client.get_issue(issue_key))

    async def list_comments(self, issue_key: str) -> dict[str, Any]:
        comments = await self.client.list_comments(issue_key)
        return {
            "comments": [
                {
                    "id": c.id,
                    "body": c.body,
                    "author": {"displayName": c.author, "emailAddress": c.author_email},
                    "created": c.created,
                    "updated": c.updated,
                }
                for c in comments
            ],
            "total": len(comments),
        }

    async def add_comment(self, issue_key: str, body: str) -> dict[str, Any]:
        comment = await self.client.add_comment(issue_key, body)
        logger.info("AUDIT CREATE comment id=%s issue=%s", comment.id, issue_key)
        return {
            "id": comment.id,
            "body": comment.body,
            "author": comment.author,
            "created": comment.created,
        }

    async def update_summary(self, issue_key: str, summary: str) -> None:
        await self.client.update_issue(issue_key, {"fields": {"summary": summary}})
        logger.info("AUDIT UPDATE issue id=%s field=summary", issue_key)

    async def update_description(self, issue_key: str, description: str) -> None:
        await self.client.update_issue(issue_key, {"fields": {"description": description}})
        logger.info("AUDIT UPDATE issue id=%s field=description", issue_key)
