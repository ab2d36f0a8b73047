"""Tests for bulk-create CSV parsing and row normalization."""

from jira_helper.services.create.csv_parser import (
    generate_sample_csv,
    parse_csv,
    process_rows,
    validate_headers,
)
from jira_helper.services.create.service import build_issue_fields

TEMPLATE = {
    "id": "bug-report",
    "name": "Bug Report",
    "project": "PROJ",
    "issueType": "Bug",
    "description": "Template description",
    "labels": ["bug"],
    "priority": "High",
}


# ==========================================
#  parse_csv / validate_headers
# ==========================================


def test_parse_csv_handles_bom_and_quotes():
    content = "\ufeffsummary,labels\n\"Fix, then ship\",\"a,b\"\n".encode("utf-8")
    assert parse_csv(content) == [{"summary": "Fix, then ship", "labels": "a,b"}]


def test_validate_headers_accepts_aliases_and_custom_fields():
    headers = ["Summary", "issue_type", "dueDate", "customfield_10010"]
    assert validate_headers(headers) == []


def test_validate_headers_reports_missing_summary():
    assert validate_headers(["description"]) == ["Missing required header: summary"]


def test_validate_headers_reports_unknown_column():
    errors = validate_headers(["summary", "severity"])
    assert len(errors) == 1
    assert errors[0].startswith("Invalid header: severity.")


# ==========================================
#  process_rows
# ==========================================


def test_process_rows_normalizes_fields():
    rows = [
        {
            "summary": " Fix login ",
            "issueType": "Bug",
            "labels": "bug, mobile,,login",
            "dueDate": "2024-01-15",
            "components": "web,api",
            "customfield_10010": "42",
        }
    ]

    result = process_rows(rows)

    assert result.valid
    assert result.rows[0].data == {
        "summary": "Fix login",
        "issueType": "Bug",
        "labels": ["bug", "mobile", "login"],
        "dueDate": "2024-01-15",
        "components": ["web", "api"],
        "customfield_10010": "42",
    }


def test_process_rows_applies_template_defaults():
    result = process_rows([{"summary": "Crash on save", "priority": "Low"}], TEMPLATE)

    data = result.rows[0].data
    assert data["project"] == "PROJ"
    assert data["issueType"] == "Bug"
    assert data["labels"] == ["bug"]
    assert data["priority"] == "Low"
    assert data["summary"] == "Crash on save"


def test_process_rows_collects_errors_per_row():
    rows = [
        {"summary": "ok row", "dueDate": "2024-01-15"},
        {"summary": "", "dueDate": "15/01/2024"},
    ]

    result = process_rows(rows)

    assert not result.valid
    assert result.errors == [
        {
            "row": 2,
            "errors": [
                "Invalid date format for dueDate: 15/01/2024. Expected YYYY-MM-DD",
                "Summary is required",
            ],
        }
    ]


def test_sample_csv_is_valid_input():
    rows = parse_csv(generate_sample_csv())

    assert validate_headers(list(rows[0])) == []
    result = process_rows(rows)
    assert result.valid
    assert len(result.rows) == 2


# ==========================================
#  build_issue_fields
# ==========================================


def test_build_issue_fields():
    payload = build_issue_fields(
        {
            "project": "PROJ",
            "issueType": "Bug",
            "summary": "Crash",
            "assignee": "jdoe",
            "labels": ["bug"],
            "dueDate": "2024-01-15",
            "priority": "High",
            "components": ["api"],
            "customfield_10010": "42",
        }
    )

    assert payload == {
        "fields": {
            "project": {"key": "PROJ"},
            "issuetype": {"name": "Bug"},
            "summary": "Crash",
            "description": "",
            "assignee": {"name": "jdoe"},
            "labels": ["bug"],
            "duedate": "2024-01-15",
            "priority": {"name": "High"},
            "components": [{"name": "api"}],
            "customfield_10010": "42",
        }
    }


def test_build_issue_fields_defaults_issue_type():
    fields = build_issue_fields({"project": "PROJ", "summary": "Task"})["fields"]
    assert fields["issuetype"] == {"name": "Task"}
    assert "assignee" not in fields
    assert "priority" not in fields
