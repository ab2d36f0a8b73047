"""Flat-file configuration store: credentials, Jira metadata and issue templates.

The API token is encrypted at rest with Fernet. Everything else is plain JSON.
"""

import base64
import hashlib
import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"
METADATA_FILE = "metadata.json"
TEMPLATES_FILE = "templates.json"


@dataclass
class JiraCredentials:
    """Stored connection settings for the Jira server."""

    jira_url: str = ""
    username: str = ""
    api_token: str = ""
    configured: bool = False

    @property
    def is_complete(self) -> bool:
        return bool(self.jira_url and self.username and self.api_token)


def _derive_fernet_key(passphrase: str) -> bytes:
    """Turn an arbitrary passphrase into a valid Fernet key."""
    digest = hashlib.sha256(passphrase.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest)


def default_templates() -> list[dict[str, Any]]:
    """Built-in issue templates used until the operator saves their own."""
    return [
        {
            "id": "bug-report",
            "name": "Bug Report",
            "issueType": "Bug",
            "summary": "Bug: [Brief description]",
            "description": (
                "**Bug Description:**\n[Describe the bug clearly and concisely]\n\n"
                "**Steps to Reproduce:**\n1. [First step]\n2. [Second step]\n3. [Third step]\n\n"
                "**Expected Behavior:**\n[What you expected to happen]\n\n"
                "**Actual Behavior:**\n[What actually happened]\n\n"
                "**Environment:**\n- Browser: [e.g., Chrome 91.0]\n- OS: [e.g., Windows 10]\n"
                "- Version: [e.g., 1.0.0]\n\n"
                "**Additional Information:**\n[Any additional information, screenshots, or logs]"
            ),
            "labels": ["bug"],
            "priority": "Medium",
        },
        {
            "id": "feature-request",
            "name": "Feature Request",
            "issueType": "Story",
            "summary": "Feature: [Brief description]",
            "description": (
                "**Feature Description:**\n[Describe the feature you'd like to see]\n\n"
                "**Use Case:**\n[Explain why this feature would be useful]\n\n"
                "**Acceptance Criteria:**\n- [ ] [Criterion 1]\n- [ ] [Criterion 2]\n- [ ] [Criterion 3]\n\n"
                "**Additional Notes:**\n[Any additional information or context]"
            ),
            "labels": ["feature", "enhancement"],
            "priority": "Low",
        },
        {
            "id": "task",
            "name": "General Task",
            "issueType": "Task",
            "summary": "Task: [Brief description]",
            "description": (
                "**Task Description:**\n[Describe what needs to be done]\n\n"
                "**Requirements:**\n- [Requirement 1]\n- [Requirement 2]\n- [Requirement 3]\n\n"
                "**Definition of Done:**\n- [ ] [Done criterion 1]\n- [ ] [Done criterion 2]\n"
                "- [ ] [Done criterion 3]"
            ),
            "labels": ["task"],
            "priority": "Medium",
        },
    ]


class ConfigStore:
    """Reads and writes the JSON files under a single config directory."""

    def __init__(self, config_dir: str | Path, encryption_key: str) -> None:
        self.config_dir = Path(config_dir)
        self._fernet = Fernet(_derive_fernet_key(encryption_key))

    # ------------------------------------------------------------------
    #  Low-level JSON helpers
    # ------------------------------------------------------------------

    def _read_json(self, filename: str) -> Any | None:
        path = self.config_dir / filename
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read %s: %s", path, e)
            return None

    def _write_json(self, filename: str, data: Any) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        path = self.config_dir / filename
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    # ------------------------------------------------------------------
    #  Credentials
    # ------------------------------------------------------------------

    def encrypt(self, text: str) -> str:
        return self._fernet.encrypt(text.encode("utf-8")).decode("ascii")

    def decrypt(self, token: str) -> str:
        return self._fernet.decrypt(token.encode("ascii")).decode("utf-8")

    def load_credentials(self) -> JiraCredentials:
        """Load stored credentials, or unconfigured defaults if none are saved."""
        data = self._read_json(SETTINGS_FILE)
        if not isinstance(data, dict):
            return JiraCredentials()

        api_token = ""
        if data.get("apiToken"):
            try:
                api_token = self.decrypt(data["apiToken"])
            except (InvalidToken, ValueError):
                logger.warning("Stored API token could not be decrypted; was ENCRYPTION_KEY changed?")

        return JiraCredentials(
            jira_url=data.get("jiraUrl", ""),
            username=data.get("username", ""),
            api_token=api_token,
            configured=bool(data.get("configured", False)),
        )

    def save_credentials(self, credentials: JiraCredentials) -> None:
        payload = asdict(credentials)
        self._write_json(
            SETTINGS_FILE,
            {
                "jiraUrl": payload["jira_url"],
                "username": payload["username"],
                "apiToken": self.encrypt(payload["api_token"]) if payload["api_token"] else "",
                "configured": payload["configured"],
            },
        )
        logger.info("AUDIT UPDATE settings id=%s", credentials.username)

    # ------------------------------------------------------------------
    #  Metadata cache
    # ------------------------------------------------------------------

    def load_metadata(self) -> dict[str, Any]:
        data = self._read_json(METADATA_FILE)
        if not isinstance(data, dict):
            return {"projects": [], "issueTypes": [], "fields": [], "lastUpdated": None}
        return data

    def save_metadata(self, metadata: dict[str, Any]) -> dict[str, Any]:
        """Persist metadata with a fresh lastUpdated stamp and return it."""
        stamped = {**metadata, "lastUpdated": datetime.now(timezone.utc).isoformat()}
        self._write_json(METADATA_FILE, stamped)
        return stamped

    # ------------------------------------------------------------------
    #  Templates
    # ------------------------------------------------------------------

    def load_templates(self) -> list[dict[str, Any]]:
        data = self._read_json(TEMPLATES_FILE)
        if not isinstance(data, list):
            return default_templates()
        return data

    def save_templates(self, templates: list[dict[str, Any]]) -> None:
        self._write_json(TEMPLATES_FILE, templates)
        logger.info("AUDIT UPDATE templates count=%s", len(templates))

    def get_template(self, template_id: str) -> dict[str, Any] | None:
        return next((t for t in self.load_templates() if t.get("id") == template_id), None)
