"""Tests for /api/search endpoints."""

from unittest.mock import AsyncMock

from jira_helper.infrastructure.jira.errors import JiraAPIError
from jira_helper.infrastructure.jira.models import Comment

ISSUE = {
    "key": "PROJ-1",
    "id": "10001",
    "fields": {
        "summary": "Login broken",
        "status": {"name": "Open", "statusCategory": {"key": "new"}},
        "issuetype": {"name": "Bug", "iconUrl": "https://jira.example.com/bug.png"},
        "priority": {"name": "High", "iconUrl": "https://jira.example.com/high.png"},
        "assignee": {"displayName": "Jane", "emailAddress": "jane@example.com", "accountId": "x"},
        "reporter": {"displayName": "Bob", "emailAddress": "bob@example.com"},
        "created": "2024-01-01T10:00:00.000+0000",
        "updated": "2024-01-02T10:00:00.000+0000",
        "description": "Steps...",
        "labels": ["bug"],
    },
}


def test_search_formats_issues(api, jira):
    jira.search_issues = AsyncMock(
        return_value={"issues": [ISSUE], "total": 1, "startAt": 0, "maxResults": 25}
    )

    response = api.post("/api/search/", json={"jql": "project = PROJ", "maxResults": 25})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["maxResults"] == 25
    issue = data["issues"][0]
    assert issue["key"] == "PROJ-1"
    assert issue["status"]["name"] == "Open"
    assert issue["issueType"] == {"name": "Bug", "iconUrl": "https://jira.example.com/bug.png"}
    assert issue["assignee"] == {"displayName": "Jane", "emailAddress": "jane@example.com"}
    jira.search_issues.assert_awaited_once_with("project = PROJ", 0, 25)


def test_search_requires_jql(api, jira):
    response = api.post("/api/search/", json={"jql": "   "})
    assert response.status_code == 422


def test_search_rejects_oversized_page(api, jira):
    response = api.post("/api/search/", json={"jql": "project = PROJ", "maxResults": 5000})
    assert response.status_code == 422


def test_search_jql_error_is_502(api, jira):
    jira.search_issues = AsyncMock(
        side_effect=JiraAPIError("Error in the JQL Query", status_code=400)
    )

    response = api.post("/api/search/", json={"jql": "project = "})

    assert response.status_code == 502
    assert response.json()["detail"] == "Jira API error: Error in the JQL Query"


def test_get_issue_detail(api, jira):
    jira.get_issue = AsyncMock(return_value=ISSUE)

    response = api.get("/api/search/issue/PROJ-1")

    assert response.status_code == 200
    data = response.json()
    assert data["reporter"]["displayName"] == "Bob"
    assert data["labels"] == ["bug"]
    assert data["components"] == []


def test_list_comments(api, jira):
    jira.list_comments = AsyncMock(
        return_value=[
            Comment(id="1", body="first", author="Jane", author_email="jane@example.com"),
            Comment(id="2", body="second", author="Bob"),
        ]
    )

    response = api.get("/api/search/issue/PROJ-1/comments")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["comments"][0]["author"] == {"displayName": "Jane", "emailAddress": "jane@example.com"}


def test_add_comment(api, jira):
    jira.add_comment = AsyncMock(return_value=Comment(id="9", body="Looks good", author="Bot"))

    response = api.post("/api/search/issue/PROJ-1/comment", json={"comment": "Looks good"})

    assert response.status_code == 200
    assert response.json()["comment"]["id"] == "9"
    jira.add_comment.assert_awaited_once_with("PROJ-1", "Looks good")


def test_add_empty_comment_rejected(api, jira):
    response = api.post("/api/search/issue/PROJ-1/comment", json={"comment": ""})
    assert response.status_code == 422


def test_update_summary_and_description(api, jira):
    jira.update_issue = AsyncMock(return_value=None)

    assert api.put("/api/search/issue/PROJ-1/summary", json={"summary": "New title"}).status_code == 200
    assert api.put("/api/search/issue/PROJ-1/description", json={"description": ""}).status_code == 200

    assert jira.update_issue.await_args_list[0].args == ("PROJ-1", {"fields": {"summary": "New title"}})
    assert jira.update_issue.await_args_list[1].args == ("PROJ-1", {"fields": {"description": ""}})
