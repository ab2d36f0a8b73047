"""Verification engine: pluggable checks that close or comment on issues."""

from jira_helper.verification.errors import (
    CheckNotFoundError,
    InvalidCheckError,
    IssueNotFoundError,
    VerificationError,
)
from jira_helper.verification.locks import IssueLocks
from jira_helper.verification.models import (
    CheckDefinition,
    Fail,
    Pass,
    ResolutionResult,
    VerificationOutcome,
    classify_result,
)
from jira_helper.verification.registry import CheckRegistry
from jira_helper.verification.resolution import ResolutionEngine, find_close_transition
from jira_helper.verification.runner import VerificationRunner
from jira_helper.verification.service import VerificationService

__all__ = [
    "CheckDefinition",
    "CheckNotFoundError",
    "CheckRegistry",
    "Fail",
    "InvalidCheckError",
    "IssueLocks",
    "IssueNotFoundError",
    "Pass",
    "ResolutionEngine",
    "ResolutionResult",
    "VerificationError",
    "VerificationOutcome",
    "VerificationRunner",
    "VerificationService",
    "classify_result",
    "find_close_transition",
]
