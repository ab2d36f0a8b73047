"""Tests for the flat-file ConfigStore and Settings validation."""

import json

import pytest
from pydantic import ValidationError

from jira_helper.config.settings import Settings
from jira_helper.config.store import ConfigStore, JiraCredentials, default_templates


def _credentials() -> JiraCredentials:
    return JiraCredentials(
        jira_url="https://jira.example.com",
        username="bot@example.com",
        api_token="super-secret-token",
        configured=True,
    )


# ==========================================
#  Credentials
# ==========================================


def test_unconfigured_by_default(store):
    credentials = store.load_credentials()
    assert credentials == JiraCredentials()
    assert not credentials.is_complete


def test_token_encrypted_at_rest(store):
    store.save_credentials(_credentials())

    raw = json.loads((store.config_dir / "settings.json").read_text())
    assert raw["jiraUrl"] == "https://jira.example.com"
    assert raw["apiToken"] != "super-secret-token"
    assert "super-secret-token" not in json.dumps(raw)

    assert store.load_credentials() == _credentials()


def test_wrong_key_loses_only_the_token(store):
    store.save_credentials(_credentials())

    other = ConfigStore(store.config_dir, "a-different-key")
    credentials = other.load_credentials()

    assert credentials.api_token == ""
    assert credentials.username == "bot@example.com"
    assert not credentials.is_complete


def test_corrupt_settings_file(store):
    store.config_dir.mkdir(parents=True, exist_ok=True)
    (store.config_dir / "settings.json").write_text("{not json")

    assert store.load_credentials() == JiraCredentials()


# ==========================================
#  Metadata & templates
# ==========================================


def test_metadata_defaults_and_stamp(store):
    assert store.load_metadata() == {"projects": [], "issueTypes": [], "fields": [], "lastUpdated": None}

    saved = store.save_metadata({"projects": [{"key": "PROJ"}], "issueTypes": [], "fields": []})

    assert saved["lastUpdated"]
    assert store.load_metadata() == saved


def test_templates_default_until_saved(store):
    assert [t["id"] for t in store.load_templates()] == ["bug-report", "feature-request", "task"]
    assert store.get_template("bug-report")["issueType"] == "Bug"

    store.save_templates([{"id": "custom", "name": "Custom", "project": "OPS"}])

    assert store.get_template("bug-report") is None
    assert store.get_template("custom")["project"] == "OPS"


def test_default_templates_are_fresh_copies():
    first = default_templates()
    first[0]["labels"].append("mutated")
    assert "mutated" not in default_templates()[0]["labels"]


# ==========================================
#  Settings
# ==========================================


def test_settings_normalizes_log_level():
    assert Settings(log_level="debug").log_level == "DEBUG"


def test_settings_rejects_unknown_log_level():
    with pytest.raises(ValidationError):
        Settings(log_level="chatty")


@pytest.mark.parametrize("field", ["jira_timeout", "jira_retry_delay", "retry_backoff_factor"])
def test_settings_rejects_non_positive_timing(field):
    with pytest.raises(ValidationError):
        Settings(**{field: 0})


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("CHECKS_DIR", "/srv/checks")
    monkeypatch.setenv("JIRA_MAX_RETRIES", "5")

    settings = Settings()

    assert settings.checks_dir == "/srv/checks"
    assert settings.jira_max_retries == 5
