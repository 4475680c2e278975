"""
Single-story retrieval by key.
"""
import logging

from story_reader.models.jira import (
    ErrorKind,
    JiraNotFoundError,
    JiraValidationError,
    Story,
    StoryRetrievalError,
)
from story_reader.services.jira.client import JiraClient
from story_reader.services.jira.parsers import JiraDataParser
from story_reader.utils.result import Result

logger = logging.getLogger(__name__)


def raise_for_result(result: Result, message: str):
    """
    Unwrap a result, converting any error into a StoryRetrievalError.

    Args:
        result: Result from the client or the parser
        message: Human-readable context prefixed to the cause

    Returns:
        The successful value

    Raises:
        StoryRetrievalError: Carrying the cause's kind and chaining the cause
    """
    if result.is_ok():
        return result.value
    error = result.error
    kind = getattr(error, "kind", ErrorKind.HTTP_ERROR)
    raise StoryRetrievalError(f"{message}: {error}", kind) from error


def invalid_argument(message: str) -> StoryRetrievalError:
    """Build the error raised for blank or empty caller input."""
    cause = JiraValidationError(message)
    error = StoryRetrievalError(message, ErrorKind.INVALID_ARGUMENT)
    error.__cause__ = cause
    return error


class JiraIssueOperations:
    """Operations on a single issue."""

    def __init__(self, client: JiraClient, parser: JiraDataParser):
        """Initialize issue operations with client and parser dependencies."""
        self.client = client
        self.parser = parser

    def get_story_by_key(self, story_key: str) -> Story:
        """
        Fetch a single story by its key (e.g., 'PROJ-123').

        Raises:
            StoryRetrievalError: INVALID_ARGUMENT for a blank key, NOT_FOUND
                when the story does not exist, or the transport/decoding cause
        """
        if not story_key or not story_key.strip():
            raise invalid_argument("Story key cannot be empty")

        story_key = story_key.strip()
        logger.info(f"Fetching story: {story_key}")

        response = self.client.execute(f"issue/{story_key}")
        if not response.is_ok() and isinstance(response.error, JiraNotFoundError):
            logger.error(f"Story not found: {story_key}")
            raise StoryRetrievalError(f"Story not found: {story_key}", ErrorKind.NOT_FOUND) from response.error

        if not response.is_ok():
            logger.error(f"Failed to fetch story {story_key}: {response.error}")
        body = raise_for_result(response, f"Failed to fetch story: {story_key}")

        decoded = self.parser.parse_story(body)
        story = raise_for_result(decoded, f"Failed to fetch story: {story_key}")

        summary = story.fields.summary if story.fields is not None else None
        logger.info(f"Successfully fetched story: {story.key} - {summary or 'No summary'}")
        return story
