"""
Jira API data models and exceptions.

These models mirror the JSON returned by the Jira REST API for story issues.
Wire names (including the tenant-specific custom field identifiers) are kept
as aliases so that decoded values can be encoded back to the same schema.
"""
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JiraModel(BaseModel):
    """Base model: immutable, accepts both wire aliases and field names, ignores unknown keys."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class IssueType(JiraModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None


class Status(JiraModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None


class Priority(JiraModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None


class User(JiraModel):
    account_id: Optional[str] = Field(default=None, alias="accountId")
    display_name: Optional[str] = Field(default=None, alias="displayName")
    email_address: Optional[str] = Field(default=None, alias="emailAddress")


class Component(JiraModel):
    id: Optional[str] = None
    name: Optional[str] = None


class Version(JiraModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None


def flatten_adf(node: Any) -> str:
    """
    Extract plain text from an Atlassian Document Format (ADF) node.

    Text nodes are concatenated; top-level blocks (paragraphs, list items,
    headings) are separated by newlines.
    """
    if isinstance(node, str):
        return node
    if isinstance(node, list):
        return "".join(flatten_adf(child) for child in node)
    if not isinstance(node, dict):
        return ""

    if node.get("type") == "text":
        return node.get("text") or ""
    if node.get("type") == "hardBreak":
        return "\n"

    children = node.get("content") or []
    if node.get("type") in ("doc", "bulletList", "orderedList", "listItem", "blockquote"):
        parts = [flatten_adf(child) for child in children]
        return "\n".join(part for part in parts if part)
    return "".join(flatten_adf(child) for child in children)


def _coerce_text(value: Any) -> Optional[str]:
    """Normalise a rich-text field value to a plain string."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        raise ValueError("expected text, got a boolean")
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, dict):
        return flatten_adf(value)
    raise ValueError(f"expected text or an ADF document, got {type(value).__name__}")


class StoryFields(JiraModel):
    """The `fields` object of a story. Every attribute is optional; None means not present."""
    summary: Optional[str] = None
    description: Optional[str] = None
    issue_type: Optional[IssueType] = Field(default=None, alias="issuetype")
    status: Optional[Status] = None
    priority: Optional[Priority] = None
    assignee: Optional[User] = None  # None means unassigned
    reporter: Optional[User] = None
    created: Optional[str] = None
    updated: Optional[str] = None

    acceptance_criteria: Optional[str] = Field(default=None, alias="customfield_10014")
    acceptance_criteria_alt: Optional[str] = Field(default=None, alias="customfield_10015")
    acceptance_criteria_alt2: Optional[str] = Field(default=None, alias="customfield_10016")
    custom_field_1: Optional[str] = Field(default=None, alias="customfield_10017")
    custom_field_2: Optional[str] = Field(default=None, alias="customfield_10018")

    epic_link: Optional[str] = Field(default=None, alias="customfield_10020")
    story_points: Optional[float] = Field(default=None, alias="customfield_10021")
    sprint: Optional[List[str]] = Field(default=None, alias="customfield_10022")

    labels: Optional[List[str]] = None
    components: Optional[List[Component]] = None
    fix_versions: Optional[List[Version]] = Field(default=None, alias="fixVersions")

    @field_validator(
        "summary", "description", "epic_link",
        "acceptance_criteria", "acceptance_criteria_alt", "acceptance_criteria_alt2",
        "custom_field_1", "custom_field_2",
        mode="before",
    )
    @classmethod
    def _text_field(cls, value: Any) -> Optional[str]:
        return _coerce_text(value)

    @field_validator("story_points", mode="before")
    @classmethod
    def _numeric_only(cls, value: Any) -> Any:
        # Reject strings rather than coercing them, so schema drift upstream is visible
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"story points must be a number, got {type(value).__name__}")
        return value

    @field_validator("sprint", mode="before")
    @classmethod
    def _sprint_names(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [item.get("name") if isinstance(item, dict) else item for item in value]

    def acceptance_criteria_candidates(self) -> Tuple[Optional[str], ...]:
        """Candidate acceptance criteria values in resolution priority order."""
        return (
            self.acceptance_criteria,
            self.acceptance_criteria_alt,
            self.acceptance_criteria_alt2,
            self.custom_field_1,
            self.custom_field_2,
        )


class Story(JiraModel):
    """A Jira story issue."""
    id: str
    key: str
    self_link: Optional[str] = Field(default=None, alias="self")
    fields: Optional[StoryFields] = None


class SearchResult(JiraModel):
    """Response envelope of the search endpoint. Only one page is ever requested."""
    issues: List[Story] = []

    @field_validator("issues", mode="before")
    @classmethod
    def _null_issues(cls, value: Any) -> Any:
        return [] if value is None else value


class ErrorKind(str, Enum):
    """Root-cause classification carried by every Jira error."""
    CONFIGURATION_INVALID = "configuration_invalid"
    INVALID_ARGUMENT = "invalid_argument"
    AUTHENTICATION_FAILED = "authentication_failed"
    ACCESS_FORBIDDEN = "access_forbidden"
    NOT_FOUND = "not_found"
    HTTP_ERROR = "http_error"
    TRANSPORT_FAILURE = "transport_failure"
    DECODE_ERROR = "decode_error"


# Jira-specific exceptions
class JiraServiceError(Exception):
    """Custom exception for Jira service errors."""
    kind: ErrorKind = ErrorKind.HTTP_ERROR


class JiraConfigurationError(JiraServiceError):
    """Exception raised when the connection configuration is invalid."""
    kind = ErrorKind.CONFIGURATION_INVALID


class JiraValidationError(JiraServiceError):
    """Exception raised when a caller supplies a blank or empty argument."""
    kind = ErrorKind.INVALID_ARGUMENT


class JiraAuthenticationError(JiraServiceError):
    """Exception raised on HTTP 401."""
    kind = ErrorKind.AUTHENTICATION_FAILED


class JiraAccessForbiddenError(JiraServiceError):
    """Exception raised on HTTP 403."""
    kind = ErrorKind.ACCESS_FORBIDDEN


class JiraNotFoundError(JiraServiceError):
    """Exception raised on HTTP 404."""
    kind = ErrorKind.NOT_FOUND


class JiraHttpError(JiraServiceError):
    """Exception raised for any other non-200 status."""
    kind = ErrorKind.HTTP_ERROR

    def __init__(self, status_code: int, reason: str):
        super().__init__(f"HTTP error: {status_code} - {reason}")
        self.status_code = status_code
        self.reason = reason


class JiraTransportError(JiraServiceError):
    """Exception raised when the request never produced an HTTP response."""
    kind = ErrorKind.TRANSPORT_FAILURE


class JiraParsingError(JiraServiceError):
    """Exception raised when parsing Jira data fails."""
    kind = ErrorKind.DECODE_ERROR


class StoryRetrievalError(JiraServiceError):
    """
    The single error raised by the story reader service.

    `kind` identifies the root cause and the original exception is chained
    as `__cause__`.
    """

    def __init__(self, message: str, kind: ErrorKind):
        super().__init__(message)
        self.kind = kind
