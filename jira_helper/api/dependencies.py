"""FastAPI dependencies."""

import logging
from collections.abc import AsyncIterator
from functools import lru_cache

from fastapi import Depends, HTTPException

from jira_helper.config.settings import Settings, get_settings
from jira_helper.config.store import ConfigStore
from jira_helper.infrastructure.jira.client import JiraClient, JiraConfig
from jira_helper.infrastructure.jira.errors import JiraNotConfiguredError
from jira_helper.verification.locks import IssueLocks
from jira_helper.verification.registry import CheckRegistry
from jira_helper.verification.service import VerificationService

logger = logging.getLogger(__name__)


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings as a FastAPI dependency."""
    return get_settings()


@lru_cache
def get_config_store() -> ConfigStore:
    """Flat-file store rooted at settings.config_dir."""
    settings = get_settings()
    return ConfigStore(settings.config_dir, settings.encryption_key)


@lru_cache
def get_check_registry() -> CheckRegistry:
    return CheckRegistry(get_settings().checks_dir)


@lru_cache
def get_issue_locks() -> IssueLocks:
    """Process-wide per-issue locks shared by every verification request."""
    return IssueLocks()


async def get_jira_client(
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
    store: ConfigStore = Depends(get_config_store),  # noqa: B008
) -> AsyncIterator[JiraClient]:
    """A Jira client built from the stored credentials, closed after the request."""
    try:
        config = JiraConfig.from_credentials(store.load_credentials(), settings)
    except JiraNotConfiguredError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    async with JiraClient(config) as client:
        yield client


def get_verification_service(
    client: JiraClient = Depends(get_jira_client),  # noqa: B008
    registry: CheckRegistry = Depends(get_check_registry),  # noqa: B008
    locks: IssueLocks = Depends(get_issue_locks),  # noqa: B008
) -> VerificationService:
    return VerificationService(client, registry, locks)
