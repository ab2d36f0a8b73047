"""CSV parsing and row normalization for bulk issue creation."""

import csv
import io
import re
from dataclasses import dataclass, field
from typing import Any

from jira_helper.config.constants import (
    CUSTOM_FIELD_PREFIX,
    DEFAULT_ISSUE_TYPE,
    DEFAULT_PRIORITY,
    OPTIONAL_CSV_HEADERS,
    REQUIRED_CSV_HEADERS,
    CsvHeader,
)

_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

# Lower-cased CSV column -> normalized field name
_COLUMN_ALIASES: dict[str, str] = {
    "summary": CsvHeader.SUMMARY.value,
    "description": CsvHeader.DESCRIPTION.value,
    "issuetype": CsvHeader.ISSUE_TYPE.value,
    "issue_type": CsvHeader.ISSUE_TYPE.value,
    "project": CsvHeader.PROJECT.value,
    "assignee": CsvHeader.ASSIGNEE.value,
    "labels": CsvHeader.LABELS.value,
    "duedate": CsvHeader.DUE_DATE.value,
    "due_date": CsvHeader.DUE_DATE.value,
    "priority": CsvHeader.PRIORITY.value,
    "components": CsvHeader.COMPONENTS.value,
}

_LIST_FIELDS = {CsvHeader.LABELS.value, CsvHeader.COMPONENTS.value}


@dataclass
class ProcessedRow:
    """One CSV row after normalization."""

    row_number: int
    data: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


@dataclass
class ProcessedCsv:
    rows: list[ProcessedRow]
    errors: list[dict[str, Any]]

    @property
    def valid(self) -> bool:
        return not self.errors


def parse_csv(content: bytes | str) -> list[dict[str, str]]:
    """Parse CSV content with a header row into a list of dicts."""
    if isinstance(content, bytes):
        content = content.decode("utf-8-sig")
    reader = csv.DictReader(io.StringIO(content))
    return [dict(row) for row in reader]


def validate_headers(headers: list[str]) -> list[str]:
    """Return a list of header problems; empty means the headers are usable."""
    valid_headers = [*REQUIRED_CSV_HEADERS, *OPTIONAL_CSV_HEADERS]
    present = {_COLUMN_ALIASES.get(h.lower()) for h in headers}
    errors = [f"Missing required header: {h}" for h in REQUIRED_CSV_HEADERS if h not in present]
    for header in headers:
        if header.lower() not in _COLUMN_ALIASES and not header.startswith(CUSTOM_FIELD_PREFIX):
            errors.append(f"Invalid header: {header}. Valid headers are: {', '.join(valid_headers)}")
    return errors


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _template_defaults(template: dict[str, Any]) -> dict[str, Any]:
    return {
        "issueType": template.get("issueType") or DEFAULT_ISSUE_TYPE,
        "project": template.get("project") or "",
        "description": template.get("description") or "",
        "labels": list(template.get("labels") or []),
        "priority": template.get("priority") or DEFAULT_PRIORITY,
        "assignee": template.get("assignee") or "",
    }


def process_rows(
    rows: list[dict[str, str]],
    template: dict[str, Any] | None = None,
) -> ProcessedCsv:
    """Normalize parsed CSV rows, applying template defaults and collecting errors."""
    processed: list[ProcessedRow] = []
    errors: list[dict[str, Any]] = []

    for index, row in enumerate(rows, start=1):
        result = ProcessedRow(row_number=index)
        if template:
            result.data = _template_defaults(template)

        for key, raw in row.items():
            if key is None:
                continue
            value = (raw or "").strip() if isinstance(raw, str) else ""
            if not value:
                continue

            field_name = _COLUMN_ALIASES.get(key.lower())
            if field_name == CsvHeader.DUE_DATE.value:
                if _DATE_PATTERN.fullmatch(value):
                    result.data[field_name] = value
                else:
                    result.errors.append(
                        f"Invalid date format for dueDate: {value}. Expected YYYY-MM-DD"
                    )
            elif field_name in _LIST_FIELDS:
                result.data[field_name] = _split_list(value)
            elif field_name:
                result.data[field_name] = value
            elif key.startswith(CUSTOM_FIELD_PREFIX):
                result.data[key] = value

        if not result.data.get("summary"):
            result.errors.append("Summary is required")

        processed.append(result)
        if result.errors:
            errors.append({"row": result.row_number, "errors": result.errors})

    return ProcessedCsv(rows=processed, errors=errors)


def generate_sample_csv() -> str:
    """A two-row example CSV covering every supported column."""
    sample = [
        {
            "summary": "Fix login bug on mobile devices",
            "description": "Users cannot log in on mobile browsers",
            "issueType": "Bug",
            "project": "PROJ",
            "assignee": "john.doe",
            "labels": "bug,mobile,login",
            "dueDate": "2024-01-15",
            "priority": "High",
        },
        {
            "summary": "Add dark mode theme",
            "description": "Implement dark mode for better user experience",
            "issueType": "Story",
            "project": "PROJ",
            "assignee": "jane.smith",
            "labels": "feature,ui,theme",
            "dueDate": "2024-02-01",
            "priority": "Medium",
        },
    ]
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(sample[0]), lineterminator="\n")
    writer.writeheader()
    writer.writerows(sample)
    return buffer.getvalue()
