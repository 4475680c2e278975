"""
Jira story search operations.
"""
import logging
from typing import List

from story_reader.models.jira import Story
from story_reader.services.jira.client import JiraClient
from story_reader.services.jira.operations.issues import invalid_argument, raise_for_result
from story_reader.services.jira.parsers import JiraDataParser
from story_reader.utils.jql_builder import JQLBuilder

logger = logging.getLogger(__name__)

# Single bounded page; no pagination
MAX_RESULTS = 1000


class JiraSearchOperations:
    """All story search related operations."""

    def __init__(self, client: JiraClient, parser: JiraDataParser):
        """Initialize search operations with client and parser dependencies."""
        self.client = client
        self.parser = parser
        self.jql_builder = JQLBuilder()

    def search_stories(self, jql_query: str) -> List[Story]:
        """
        Search for stories using a JQL query.

        Args:
            jql_query: JQL query string, sent unchanged

        Returns:
            Stories in the order returned by Jira (possibly empty)

        Raises:
            StoryRetrievalError: INVALID_ARGUMENT for a blank query, or the
                transport/decoding cause
        """
        if not jql_query or not jql_query.strip():
            raise invalid_argument("JQL query cannot be empty")

        return self._execute_search(self.jql_builder.build_raw_query(jql_query))

    def get_stories_by_keys(self, story_keys: List[str]) -> List[Story]:
        """
        Fetch multiple stories by key with a single search.

        Blank keys are dropped. Result order follows the search response,
        not the order of `story_keys`.
        """
        keys = [key.strip() for key in (story_keys or []) if key and key.strip()]
        if not keys:
            raise invalid_argument("Story keys cannot be empty")

        logger.info(f"Fetching {len(keys)} stories")
        return self._execute_search(self.jql_builder.build_keys_query(keys))

    def get_stories_by_project(self, project_key: str) -> List[Story]:
        """Get all stories from a specific project."""
        self._require("Project key", project_key)
        return self._execute_search(self.jql_builder.build_project_query(project_key.strip()))

    def get_stories_by_assignee(self, assignee: str) -> List[Story]:
        """Get stories assigned to a specific user."""
        self._require("Assignee", assignee)
        return self._execute_search(self.jql_builder.build_assignee_query(assignee.strip()))

    def get_stories_by_sprint(self, sprint_name: str) -> List[Story]:
        """Get stories in a specific sprint."""
        self._require("Sprint name", sprint_name)
        return self._execute_search(self.jql_builder.build_sprint_query(sprint_name.strip()))

    def get_stories_by_status(self, status: str) -> List[Story]:
        """Get stories with a specific status."""
        self._require("Status", status)
        return self._execute_search(self.jql_builder.build_status_query(status.strip()))

    @staticmethod
    def _require(name: str, value: str) -> None:
        if not value or not value.strip():
            raise invalid_argument(f"{name} cannot be empty")

    def _execute_search(self, jql_query: str) -> List[Story]:
        """Run one search request and decode the issues it returns."""
        logger.info(f"Searching stories with JQL: {jql_query}")

        response = self.client.execute("search", {"jql": jql_query, "maxResults": MAX_RESULTS})
        if not response.is_ok():
            logger.error(f"Failed to search stories with JQL {jql_query}: {response.error}")
        body = raise_for_result(response, "Failed to search stories")

        search_result = raise_for_result(self.parser.parse_search_result(body), "Failed to search stories")

        logger.info(f"Found {len(search_result.issues)} stories")
        return list(search_result.issues)
