"""Jira client errors."""


class JiraAPIError(Exception):
    """A Jira request failed, either in transport or with an error response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class JiraNotConfiguredError(Exception):
    """No usable Jira connection settings have been saved yet."""

    def __init__(self) -> None:
        super().__init__("Jira connection not configured. Please configure settings first.")
