"""Issue creation service: single, from template, and bulk from CSV."""

import asyncio
import csv
import logging
from typing import Any

from fastapi import HTTPException

from jira_helper.config.constants import DEFAULT_ISSUE_TYPE
from jira_helper.config.store import ConfigStore
from jira_helper.infrastructure.jira.client import JiraClient
from jira_helper.infrastructure.jira.errors import JiraAPIError
from jira_helper.services.create.csv_parser import parse_csv, process_rows, validate_headers

logger = logging.getLogger(__name__)


def build_issue_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Build a Jira create-issue payload from normalized issue data."""
    fields: dict[str, Any] = {
        "project": {"key": data.get("project")},
        "issuetype": {"name": data.get("issueType") or DEFAULT_ISSUE_TYPE},
        "summary": data.get("summary"),
        "description": data.get("description") or "",
    }

    if data.get("assignee"):
        fields["assignee"] = {"name": data["assignee"]}
    if data.get("labels"):
        fields["labels"] = list(data["labels"])
    if data.get("dueDate"):
        fields["duedate"] = data["dueDate"]
    if data.get("priority"):
        fields["priority"] = {"name": data["priority"]}
    if data.get("components"):
        fields["components"] = [{"name": c} for c in data["components"]]

    for key, value in data.items():
        if key.startswith("customfield_"):
            fields[key] = value

    return {"fields": fields}


def _created_issue(result: dict[str, Any]) -> dict[str, Any]:
    return {"key": result.get("key"), "id": result.get("id"), "self": result.get("self")}


class IssueCreationService:
    """Creates issues on the Jira server."""

    def __init__(self, client: JiraClient, store: ConfigStore, delay: float = 0.1) -> None:
        self.client = client
        self.store = store
        self.delay = delay

    def _get_template(self, template_id: str) -> dict[str, Any]:
        template = self.store.get_template(template_id)
        if template is None:
            raise HTTPException(status_code=404, detail="Template not found")
        return template

    async def create_single(self, data: dict[str, Any]) -> dict[str, Any]:
        result = await self.client.create_issue(build_issue_fields(data))
        logger.info("AUDIT CREATE issue id=%s", result.get("key"))
        return _created_issue(result)

    async def create_from_template(
        self,
        template_id: str,
        overrides: dict[str, Any],
    ) -> dict[str, Any]:
        """Create one issue from a stored template, with per-field overrides."""
        template = self._get_template(template_id)
        merged = {
            key: overrides.get(key) or template.get(key)
            for key in (
                "project",
                "issueType",
                "summary",
                "description",
                "assignee",
                "labels",
                "dueDate",
                "priority",
            )
        }
        result = await self.client.create_issue(build_issue_fields(merged))
        logger.info("AUDIT CREATE issue id=%s template=%s", result.get("key"), template_id)
        return _created_issue(result)

    async def create_bulk(self, content: bytes, template_id: str | None = None) -> dict[str, Any]:
        """
        Create one issue per CSV row.

        The whole file is rejected (400) if any row fails validation. Once
        creation starts, a failing row is recorded and the rest continue.
        """
        template = self._get_template(template_id) if template_id else None

        try:
            rows = parse_csv(content)
        except (csv.Error, UnicodeDecodeError) as e:
            raise HTTPException(status_code=400, detail=f"Could not parse CSV file: {e}") from e

        if not rows:
            raise HTTPException(status_code=400, detail="CSV file is empty")

        header_errors = validate_headers(list(rows[0].keys()))
        if header_errors:
            raise HTTPException(
                status_code=400,
                detail={"error": "CSV validation failed", "errors": header_errors},
            )

        processed = process_rows(rows, template)
        if not processed.valid:
            raise HTTPException(
                status_code=400,
                detail={"error": "CSV validation failed", "errors": processed.errors},
            )

        created: list[dict[str, Any]] = []
        errors: list[dict[str, Any]] = []

        for index, row in enumerate(processed.rows):
            if index and self.delay:
                await asyncio.sleep(self.delay)
            try:
                result = await self.client.create_issue(build_issue_fields(row.data))
            except JiraAPIError as e:
                logger.error("Error creating issue for row %s: %s", row.row_number, e)
                errors.append({"row": row.row_number, "error": e.message})
                continue

            logger.info("AUDIT CREATE issue id=%s row=%s", result.get("key"), row.row_number)
            created.append(
                {
                    "row": row.row_number,
                    "success": True,
                    "issue": {
                        "key": result.get("key"),
                        "id": result.get("id"),
                        "summary": row.data.get("summary"),
                    },
                }
            )

        return {
            "success": True,
            "message": (
                f"Bulk creation completed. {len(created)} issues created, {len(errors)} failed."
            ),
            "results": {
                "created": created,
                "errors": errors,
                "total": len(processed.rows),
                "successful": len(created),
                "failed": len(errors),
            },
        }
