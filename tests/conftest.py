"""Pytest configuration and fixtures."""

import textwrap
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from jira_helper.api.dependencies import (
    get_check_registry,
    get_config_store,
    get_issue_locks,
    get_jira_client,
    get_settings_dependency,
)
from jira_helper.app import app
from jira_helper.config.settings import Settings
from jira_helper.config.store import ConfigStore
from jira_helper.infrastructure.jira.models import Transition
from jira_helper.verification.locks import IssueLocks
from jira_helper.verification.registry import CheckRegistry
from tests.fakes import FakeTracker


@pytest.fixture
def settings(tmp_path):
    """Provide settings fixture pointing at temporary directories."""
    return Settings(
        config_dir=str(tmp_path / "config"),
        checks_dir=str(tmp_path / "checks"),
        encryption_key="test-encryption-key",
        bulk_create_delay=0,
        jira_retry_delay=0.01,
    )


@pytest.fixture
def store(settings):
    return ConfigStore(settings.config_dir, settings.encryption_key)


@pytest.fixture
def checks_dir(settings) -> Path:
    path = Path(settings.checks_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture
def write_check(checks_dir):
    """Write a check file into the temporary checks directory."""

    def _write(check_id: str, source: str) -> Path:
        path = checks_dir / f"{check_id}.py"
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def returning_check(write_check):
    """Write a check that returns a fixed value."""

    def _write(check_id: str, value: str) -> Path:
        return write_check(
            check_id,
            f"""
            name = "{check_id}"
            description = "returns a fixed value"

            async def verify(issue_key, parameters):
                return {value!r}
            """,
        )

    return _write


@pytest.fixture
def tracker():
    return FakeTracker(
        issues=("PROJ-1", "PROJ-2"),
        transitions=[Transition(id="11", name="Start Progress"), Transition(id="31", name="Close Issue")],
    )


@pytest.fixture
def api(settings, store, checks_dir, tracker):
    """TestClient with settings, storage and the Jira connection overridden.

    Routes receive the FakeTracker as their Jira client unless a test
    installs its own override for get_jira_client.
    """
    registry = CheckRegistry(checks_dir)
    locks = IssueLocks()

    app.dependency_overrides[get_settings_dependency] = lambda: settings
    app.dependency_overrides[get_config_store] = lambda: store
    app.dependency_overrides[get_check_registry] = lambda: registry
    app.dependency_overrides[get_issue_locks] = lambda: locks
    app.dependency_overrides[get_jira_client] = lambda: tracker

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def jira(api):
    """A MagicMock installed as the request's Jira client; stub methods with AsyncMock."""
    client = MagicMock()
    app.dependency_overrides[get_jira_client] = lambda: client
    return client
