"""
Jira service package for story retrieval and field resolution.
"""
from story_reader.models.jira import (
    ErrorKind,
    JiraAccessForbiddenError,
    JiraAuthenticationError,
    JiraConfigurationError,
    JiraHttpError,
    JiraNotFoundError,
    JiraParsingError,
    JiraServiceError,
    JiraTransportError,
    JiraValidationError,
    SearchResult,
    Story,
    StoryFields,
    StoryRetrievalError,
)
from story_reader.services.jira.service import StoryReaderService

__all__ = [
    # Models and exceptions
    "ErrorKind",
    "JiraAccessForbiddenError",
    "JiraAuthenticationError",
    "JiraConfigurationError",
    "JiraHttpError",
    "JiraNotFoundError",
    "JiraParsingError",
    "JiraServiceError",
    "JiraTransportError",
    "JiraValidationError",
    "SearchResult",
    "Story",
    "StoryFields",
    "StoryRetrievalError",
    # Services
    "StoryReaderService",
]
