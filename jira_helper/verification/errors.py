"""Request-level verification errors."""


class VerificationError(Exception):
    """Base class for errors that stop a verification run before it starts."""


class IssueNotFoundError(VerificationError):
    def __init__(self, issue_key: str) -> None:
        super().__init__(f"Issue not found: {issue_key}")
        self.issue_key = issue_key


class CheckNotFoundError(VerificationError):
    def __init__(self, check_id: str, message: str | None = None) -> None:
        super().__init__(message or f"Verification check not found: {check_id}")
        self.check_id = check_id


class InvalidCheckError(CheckNotFoundError):
    """The check file exists but could not be loaded as a check."""

    def __init__(self, check_id: str, reason: str) -> None:
        super().__init__(check_id, f"Invalid verification check '{check_id}': {reason}")
        self.reason = reason
