"""Async Jira REST client."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from jira_helper.config.constants import SEARCH_FIELDS
from jira_helper.config.settings import Settings
from jira_helper.config.store import JiraCredentials
from jira_helper.infrastructure.jira.errors import JiraAPIError, JiraNotConfiguredError
from jira_helper.infrastructure.jira.models import Comment, Transition
from jira_helper.utils.retry import run_with_retry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JiraConfig:
    """Connection parameters for a single Jira server."""

    base_url: str
    username: str
    api_token: str
    timeout: float = 30.0
    api_version: str = "2"
    max_retries: int = 3
    retry_delay: float = 1.0
    backoff_factor: float = 2.0
    comments_page_size: int = 100

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/rest/api/{self.api_version}"

    @classmethod
    def from_credentials(cls, credentials: JiraCredentials, settings: Settings) -> "JiraConfig":
        """Build a config from stored credentials, raising if they are incomplete."""
        if not credentials.is_complete:
            raise JiraNotConfiguredError()
        return cls(
            base_url=credentials.jira_url.rstrip("/"),
            username=credentials.username,
            api_token=credentials.api_token,
            timeout=settings.jira_timeout,
            api_version=settings.jira_api_version,
            max_retries=settings.jira_max_retries,
            retry_delay=settings.jira_retry_delay,
            backoff_factor=settings.retry_backoff_factor,
            comments_page_size=settings.comments_page_size,
        )


def _extract_error_message(response: httpx.Response) -> str:
    """Pull the most useful message out of a Jira error response."""
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        messages = data.get("errorMessages") or []
        if messages:
            return str(messages[0])
        errors = data.get("errors") or {}
        if isinstance(errors, dict) and errors:
            return "; ".join(f"{field}: {msg}" for field, msg in errors.items())
        if data.get("message"):
            return str(data["message"])

    return f"Jira API request failed with status {response.status_code}"


class JiraClient:
    """
    Thin async wrapper over the Jira REST API v2.

    Usage:
        async with JiraClient(config) as client:
            issue = await client.get_issue("PROJ-1")

    GET requests are retried on transient failures. Writes are sent once.
    Every failure surfaces as JiraAPIError.
    """

    def __init__(
        self,
        config: JiraConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.api_url,
            auth=(config.username, config.api_token),
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            timeout=config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "JiraClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        async def send() -> httpx.Response:
            response = await self._client.request(method, endpoint, json=json, params=params)
            response.raise_for_status()
            return response

        try:
            if method == "GET":
                response = await run_with_retry(
                    send,
                    max_retries=self.config.max_retries,
                    initial_delay=self.config.retry_delay,
                    backoff_factor=self.config.backoff_factor,
                )
            else:
                response = await send()
        except httpx.HTTPStatusError as e:
            message = _extract_error_message(e.response)
            logger.error("Jira API error %s %s: %s", method, endpoint, message)
            raise JiraAPIError(message, status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            message = str(e) or type(e).__name__
            logger.error("Jira request failed %s %s: %s", method, endpoint, message)
            raise JiraAPIError(message) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise JiraAPIError("Invalid JSON response from Jira", status_code=response.status_code) from e

    # ------------------------------------------------------------------
    #  Connection & metadata
    # ------------------------------------------------------------------

    async def get_myself(self) -> dict[str, Any]:
        return await self._request("GET", "/myself")

    async def test_connection(self) -> dict[str, Any]:
        """Return {"success": True, "user": ...} or {"success": False, "error": ...}."""
        try:
            user = await self.get_myself()
            return {"success": True, "user": user}
        except JiraAPIError as e:
            return {"success": False, "error": e.message}

    async def get_projects(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/project")

    async def get_issue_types(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/issuetype")

    async def get_fields(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/field")

    async def get_create_metadata(self, project_key: str | None = None) -> dict[str, Any]:
        params = {"projectKeys": project_key} if project_key else {}
        return await self._request("GET", "/issue/createmeta", params=params)

    # ------------------------------------------------------------------
    #  Issues
    # ------------------------------------------------------------------

    async def search_issues(self, jql: str, start_at: int = 0, max_results: int = 50) -> dict[str, Any]:
        params = {
            "jql": jql,
            "startAt": start_at,
            "maxResults": max_results,
            "fields": SEARCH_FIELDS,
        }
        return await self._request("GET", "/search", params=params)

    async def get_issue(self, issue_key: str) -> dict[str, Any]:
        return await self._request("GET", f"/issue/{issue_key}")

    async def issue_exists(self, issue_key: str) -> bool:
        """True if the issue can be read, False on 404. Other errors propagate."""
        try:
            await self.get_issue(issue_key)
        except JiraAPIError as e:
            if e.status_code == 404:
                return False
            raise
        return True

    async def create_issue(self, issue_data: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/issue", json=issue_data)

    async def update_issue(self, issue_key: str, update_data: dict[str, Any]) -> None:
        await self._request("PUT", f"/issue/{issue_key}", json=update_data)

    # ------------------------------------------------------------------
    #  Comments
    # ------------------------------------------------------------------

    async def add_comment(self, issue_key: str, body: str) -> Comment:
        data = await self._request("POST", f"/issue/{issue_key}/comment", json={"body": body})
        return Comment.from_api(data or {})

    async def update_comment(self, issue_key: str, comment_id: str, body: str) -> Comment:
        data = await self._request(
            "PUT", f"/issue/{issue_key}/comment/{comment_id}", json={"body": body}
        )
        return Comment.from_api(data or {})

    async def list_comments(self, issue_key: str) -> list[Comment]:
        """Return every comment on the issue, following pagination to the end."""
        comments: list[Comment] = []
        start_at = 0
        while True:
            page = await self._request(
                "GET",
                f"/issue/{issue_key}/comment",
                params={"startAt": start_at, "maxResults": self.config.comments_page_size},
            )
            batch = (page or {}).get("comments", [])
            comments.extend(Comment.from_api(c) for c in batch)
            total = (page or {}).get("total", len(comments))
            if not batch or len(comments) >= total:
                return comments
            start_at += len(batch)

    # ------------------------------------------------------------------
    #  Transitions
    # ------------------------------------------------------------------

    async def list_transitions(self, issue_key: str) -> list[Transition]:
        data = await self._request("GET", f"/issue/{issue_key}/transitions")
        return [Transition.from_api(t) for t in (data or {}).get("transitions", [])]

    async def apply_transition(
        self,
        issue_key: str,
        transition_id: str,
        comment: str | None = None,
    ) -> None:
        payload: dict[str, Any] = {"transition": {"id": transition_id}}
        if comment:
            payload["update"] = {"comment": [{"add": {"body": comment}}]}
        await self._request("POST", f"/issue/{issue_key}/transitions", json=payload)
