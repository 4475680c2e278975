"""
Jira data parsing and encoding utilities.
"""
import json
import logging
from typing import Any, Dict

from pydantic import ValidationError

from story_reader.models.jira import JiraParsingError, SearchResult, Story
from story_reader.utils.result import Result

logger = logging.getLogger(__name__)


class JiraDataParser:
    """Decodes raw Jira response bodies into story models."""

    def parse_story(self, raw_body: str) -> Result[Story]:
        """Parse the body of the single-issue endpoint into a Story."""
        data = self._load_object(raw_body, "story")
        if not data.is_ok():
            return data

        try:
            return Result.from_ok(Story.model_validate(data.value))
        except (ValidationError, RecursionError) as e:
            issue_key = data.value.get("key", "Unknown")
            logger.error(f"Error parsing issue {issue_key}: {e}")
            return Result.from_error(JiraParsingError(f"Failed to parse issue {issue_key}: {e}"))

    def parse_search_result(self, raw_body: str) -> Result[SearchResult]:
        """Parse the body of the search endpoint into a SearchResult."""
        data = self._load_object(raw_body, "search result")
        if not data.is_ok():
            return data

        try:
            return Result.from_ok(SearchResult.model_validate(data.value))
        except (ValidationError, RecursionError) as e:
            logger.error(f"Error parsing search result: {e}")
            return Result.from_error(JiraParsingError(f"Failed to parse search result: {e}"))

    def encode_story(self, story: Story) -> str:
        """Encode a Story back to the Jira wire schema, omitting absent fields."""
        return story.model_dump_json(by_alias=True, exclude_none=True)

    def _load_object(self, raw_body: str, what: str) -> Result[Dict[str, Any]]:
        try:
            data = json.loads(raw_body)
        except (TypeError, ValueError, RecursionError) as e:
            logger.error(f"Response body for {what} is not valid JSON: {e}")
            return Result.from_error(JiraParsingError(f"Invalid JSON in {what} response: {e}"))

        if not isinstance(data, dict):
            logger.error(f"Response body for {what} is not a JSON object: {type(data)}")
            return Result.from_error(
                JiraParsingError(f"Expected a JSON object in {what} response, got {type(data).__name__}")
            )
        return Result.from_ok(data)
