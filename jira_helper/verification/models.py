"""Verification engine data model."""

from dataclasses import dataclass, field
from typing import Any, Callable, Union

from jira_helper.config.constants import DEFAULT_COMMENT_TAG, PASS_VALUES, ResolutionAction


@dataclass
class ParameterSpec:
    """One parameter a check accepts."""

    name: str
    type: str = "string"
    description: str = ""
    required: bool = False
    default: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ParameterSpec":
        return cls(
            name=str(data["name"]),
            type=str(data.get("type", "string")),
            description=str(data.get("description", "")),
            required=bool(data.get("required", False)),
            default=data.get("default"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "required": self.required,
            "default": self.default,
        }


@dataclass
class CheckDefinition:
    """Metadata describing a check, without its executable part."""

    id: str
    name: str
    description: str = "No description available"
    parameter_spec: list[ParameterSpec] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "parameters": [p.to_dict() for p in self.parameter_spec],
        }


@dataclass
class LoadedCheck:
    """A freshly loaded check: its metadata plus the callable to run."""

    definition: CheckDefinition
    verify: Callable[[str, dict[str, Any]], Any]


@dataclass
class VerificationRequest:
    """One verification invocation."""

    issue_key: str
    check_id: str
    parameters: dict[str, Any] = field(default_factory=dict)
    comment_tag: str = DEFAULT_COMMENT_TAG


@dataclass(frozen=True)
class Pass:
    """The check succeeded. Evidence is the raw value the check returned."""

    evidence: str = ""

    @property
    def passed(self) -> bool:
        return True

    @property
    def raw(self) -> str:
        return self.evidence


@dataclass(frozen=True)
class Fail:
    """The check failed, with a human-readable reason."""

    reason: str

    @property
    def passed(self) -> bool:
        return False

    @property
    def raw(self) -> str:
        return self.reason


VerificationOutcome = Union[Pass, Fail]


def classify_result(value: Any) -> VerificationOutcome:
    """Turn a check's raw return value into an outcome.

    Only the exact strings "ok" and "OK" pass. Any other string is the
    failure reason, untouched. Non-string values fail with their str().
    """
    if isinstance(value, str):
        if value in PASS_VALUES:
            return Pass(value)
        return Fail(value)
    return Fail(str(value))


@dataclass
class ResolutionResult:
    """What happened on the remote issue after a verification run."""

    action: ResolutionAction
    outcome: VerificationOutcome
    message: str
    transition: str | None = None
    error: str | None = None

    @property
    def passed(self) -> bool:
        return self.outcome.passed

    @property
    def success(self) -> bool:
        return self.action is not ResolutionAction.UPDATE_FAILED

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "passed": self.passed,
            "action": self.action.value,
            "message": self.message,
            "verificationResult": self.outcome.raw,
            "transition": self.transition,
            "error": self.error,
        }
