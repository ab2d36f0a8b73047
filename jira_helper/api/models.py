"""Request/Response models for API endpoints."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from jira_helper.config.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


class ApiModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(populate_by_name=True)


def _not_blank(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{field_name} is required")
    return value


class HealthResponse(BaseModel):
    """Response model for health endpoint."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")


class OperationResponse(BaseModel):
    """Generic success response for mutations."""

    success: bool = True
    message: str


# ==========================================
#  SETTINGS
# ==========================================


class SettingsResponse(ApiModel):
    """Stored connection settings, without the API token."""

    jira_url: str = Field("", alias="jiraUrl")
    username: str = ""
    configured: bool = False
    has_api_token: bool = Field(False, alias="hasApiToken")


class SaveSettingsRequest(ApiModel):
    jira_url: str = Field(..., alias="jiraUrl", description="Base URL of the Jira server")
    username: str = Field(..., description="Jira username or e-mail")
    api_token: str = Field(..., alias="apiToken", description="Jira API token")

    @field_validator("jira_url", "username", "api_token")
    @classmethod
    def required(cls, v: str, info) -> str:
        return _not_blank(v, info.field_name)


class IssueTemplate(BaseModel):
    """An issue template. Unknown keys are kept as-is."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str


class SaveTemplatesRequest(BaseModel):
    templates: list[IssueTemplate]


# ==========================================
#  SEARCH
# ==========================================


class SearchRequest(ApiModel):
    jql: str = Field(..., description="JQL query")
    start_at: int = Field(0, alias="startAt", ge=0)
    max_results: int = Field(DEFAULT_PAGE_SIZE, alias="maxResults", ge=1, le=MAX_PAGE_SIZE)

    @field_validator("jql")
    @classmethod
    def jql_required(cls, v: str) -> str:
        return _not_blank(v, "JQL query")


class CommentRequest(BaseModel):
    comment: str

    @field_validator("comment")
    @classmethod
    def comment_required(cls, v: str) -> str:
        return _not_blank(v, "Comment text")


class SummaryRequest(BaseModel):
    summary: str

    @field_validator("summary")
    @classmethod
    def summary_required(cls, v: str) -> str:
        return _not_blank(v, "Summary")


class DescriptionRequest(BaseModel):
    description: str


# ==========================================
#  CREATE
# ==========================================


class CreateIssueRequest(ApiModel):
    project: str
    issue_type: str = Field(..., alias="issueType")
    summary: str
    description: str = ""
    assignee: str | None = None
    labels: list[str] = Field(default_factory=list)
    due_date: str | None = Field(None, alias="dueDate")
    priority: str | None = None
    components: list[str] = Field(default_factory=list)

    @field_validator("project", "issue_type", "summary")
    @classmethod
    def required(cls, v: str, info) -> str:
        return _not_blank(v, info.field_name)

    def to_issue_data(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class FromTemplateRequest(ApiModel):
    template_id: str = Field(..., alias="templateId")
    overrides: dict[str, Any] = Field(default_factory=dict)


class CreateIssueResponse(BaseModel):
    success: bool = True
    message: str
    issue: dict[str, Any]


# ==========================================
#  VERIFY
# ==========================================


class CheckParameter(BaseModel):
    name: str
    type: str = "string"
    description: str = ""
    required: bool = False
    default: Any = None


class CheckResponse(BaseModel):
    id: str
    name: str
    description: str
    parameters: list[CheckParameter] = Field(default_factory=list)


class RunVerificationRequest(ApiModel):
    issue_key: str = Field(..., alias="issueKey", pattern=r"^[A-Za-z][A-Za-z0-9_]*-\d+$")
    check_id: str = Field(
        ...,
        validation_alias=AliasChoices("scriptId", "checkId", "check_id"),
        description="Id of the check to run",
    )
    parameters: dict[str, Any] = Field(default_factory=dict)
    comment_tag: str | None = Field(
        None,
        validation_alias=AliasChoices("commentPrefix", "commentTag", "comment_tag"),
        min_length=1,
        description="Tag prefixing verification comments; defaults to settings.default_comment_tag",
    )


class VerificationRunResponse(ApiModel):
    success: bool
    passed: bool
    action: str
    message: str
    verification_result: str = Field(..., alias="verificationResult")
    transition: str | None = None
    error: str | None = None


class HistoryComment(BaseModel):
    id: str
    body: str
    author: str
    created: str | None = None
    updated: str | None = None


class VerificationHistoryResponse(ApiModel):
    issue_key: str = Field(..., alias="issueKey")
    verification_comments: list[HistoryComment] = Field(..., alias="verificationComments")
    total: int
