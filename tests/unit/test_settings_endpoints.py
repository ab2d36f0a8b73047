"""Tests for /api/settings and /api/health endpoints."""

from unittest.mock import AsyncMock

from jira_helper.api.dependencies import get_jira_client
from jira_helper.app import app
from jira_helper.infrastructure.jira.errors import JiraAPIError


# ==========================================
#  HEALTH
# ==========================================


def test_health(api):
    response = api.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


# ==========================================
#  SETTINGS
# ==========================================


def test_get_settings_unconfigured(api):
    response = api.get("/api/settings/")

    assert response.status_code == 200
    assert response.json() == {
        "jiraUrl": "",
        "username": "",
        "configured": False,
        "hasApiToken": False,
    }


def test_save_then_get_settings_hides_token(api, store):
    response = api.post(
        "/api/settings/",
        json={"jiraUrl": "https://jira.example.com/", "username": "bot", "apiToken": "secret"},
    )
    assert response.status_code == 200
    assert response.json()["success"] is True

    data = api.get("/api/settings/").json()
    assert data == {
        "jiraUrl": "https://jira.example.com",
        "username": "bot",
        "configured": True,
        "hasApiToken": True,
    }
    assert "secret" not in str(data)
    assert store.load_credentials().api_token == "secret"


def test_save_settings_rejects_bad_url(api):
    response = api.post(
        "/api/settings/",
        json={"jiraUrl": "jira.example.com", "username": "bot", "apiToken": "secret"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid Jira URL format"


def test_save_settings_requires_all_fields(api):
    response = api.post(
        "/api/settings/",
        json={"jiraUrl": "https://jira.example.com", "username": " ", "apiToken": "secret"},
    )
    assert response.status_code == 422


def test_unconfigured_jira_is_400(api, store):
    # Use the real dependency so it reads the (empty) stored credentials
    app.dependency_overrides.pop(get_jira_client)

    response = api.post("/api/settings/test")

    assert response.status_code == 400
    assert "not configured" in response.json()["detail"]


def test_test_connection_success(api, jira):
    jira.test_connection = AsyncMock(
        return_value={
            "success": True,
            "user": {"displayName": "Bot", "emailAddress": "bot@example.com", "accountId": "abc"},
        }
    )

    response = api.post("/api/settings/test")

    assert response.status_code == 200
    assert response.json()["user"]["displayName"] == "Bot"


def test_test_connection_failure(api, jira):
    jira.test_connection = AsyncMock(return_value={"success": False, "error": "Unauthorized"})

    response = api.post("/api/settings/test")

    assert response.status_code == 400
    assert response.json()["detail"] == "Unauthorized"


# ==========================================
#  METADATA
# ==========================================


def test_refresh_metadata_keeps_custom_fields_only(api, jira, store):
    jira.get_projects = AsyncMock(return_value=[{"id": "1", "key": "PROJ", "name": "Project"}])
    jira.get_issue_types = AsyncMock(return_value=[{"id": "10", "name": "Bug", "subtask": False}])
    jira.get_fields = AsyncMock(
        return_value=[
            {"id": "summary", "name": "Summary", "custom": False},
            {"id": "customfield_10010", "name": "Story Points", "custom": True, "schema": {}},
        ]
    )

    response = api.post("/api/settings/metadata/refresh")

    assert response.status_code == 200
    metadata = response.json()["metadata"]
    assert [p["key"] for p in metadata["projects"]] == ["PROJ"]
    assert [f["id"] for f in metadata["fields"]] == ["customfield_10010"]
    assert metadata["lastUpdated"]
    assert api.get("/api/settings/metadata").json() == store.load_metadata()


def test_jira_error_is_502(api, jira):
    jira.get_projects = AsyncMock(side_effect=JiraAPIError("Service unavailable", status_code=503))
    jira.get_issue_types = AsyncMock(return_value=[])
    jira.get_fields = AsyncMock(return_value=[])

    response = api.post("/api/settings/metadata/refresh")

    assert response.status_code == 502
    assert response.json() == {"detail": "Jira API error: Service unavailable"}


# ==========================================
#  TEMPLATES
# ==========================================


def test_templates_round_trip(api):
    defaults = api.get("/api/settings/templates").json()
    assert {t["id"] for t in defaults} == {"bug-report", "feature-request", "task"}

    response = api.post(
        "/api/settings/templates",
        json={"templates": [{"id": "ops", "name": "Ops", "project": "OPS", "labels": ["ops"]}]},
    )
    assert response.status_code == 200

    assert api.get("/api/settings/templates").json() == [
        {"id": "ops", "name": "Ops", "project": "OPS", "labels": ["ops"]}
    ]


def test_templates_require_id_and_name(api):
    response = api.post("/api/settings/templates", json={"templates": [{"name": "No id"}]})
    assert response.status_code == 422