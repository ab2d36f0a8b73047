"""
Constants, enums, and static values.
"""

from enum import Enum

DEFAULT_COMMENT_TAG = "[Verification]"

# Transition names containing any of these (case-insensitive) can close an issue
CLOSE_TRANSITION_KEYWORDS: tuple[str, ...] = ("close", "resolve", "done", "complete", "finish")

# Raw check return values that count as a pass. Matched exactly.
PASS_VALUES: frozenset[str] = frozenset({"ok", "OK"})

SCRIPT_ERROR_PREFIX = "Script error: "

CLOSED_COMMENT = "Verification passed. Issue auto-closed."
NO_TRANSITION_COMMENT = "Verification passed, but no close transition available."

SEARCH_FIELDS = "summary,status,issuetype,priority,assignee,created,updated,description"

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 1000


class ResolutionAction(str, Enum):
    """What a verification run did to the remote issue."""

    CLOSED = "closed"
    COMMENTED_PASS_NO_TRANSITION = "commented_pass_no_transition"
    COMMENTED_FAIL = "commented_fail"
    VERIFIED_NO_UPDATE = "verified_no_update"
    UPDATE_FAILED = "update_failed"


class CsvHeader(str, Enum):
    """Columns accepted in a bulk-create CSV file."""

    SUMMARY = "summary"
    DESCRIPTION = "description"
    ISSUE_TYPE = "issueType"
    PROJECT = "project"
    ASSIGNEE = "assignee"
    LABELS = "labels"
    DUE_DATE = "dueDate"
    PRIORITY = "priority"
    COMPONENTS = "components"


REQUIRED_CSV_HEADERS: tuple[str, ...] = (CsvHeader.SUMMARY.value,)
OPTIONAL_CSV_HEADERS: tuple[str, ...] = tuple(
    h.value for h in CsvHeader if h.value not in REQUIRED_CSV_HEADERS
)
CUSTOM_FIELD_PREFIX = "customfield_"

DEFAULT_ISSUE_TYPE = "Task"
DEFAULT_PRIORITY = "Medium"
