"""
Main Jira story reader service that orchestrates all operations.
"""
import logging
from typing import List, Optional

from story_reader.config.settings import ConnectionConfig
from story_reader.models.jira import Story
from story_reader.services.jira.client import JiraClient
from story_reader.services.jira.operations.issues import JiraIssueOperations
from story_reader.services.jira.operations.search import JiraSearchOperations
from story_reader.services.jira.parsers import JiraDataParser
from story_reader.services.jira.resolvers import StoryFieldResolver

logger = logging.getLogger(__name__)


class StoryReaderService:
    """Read-only access to Jira stories and their narrative fields."""

    def __init__(self, config: ConnectionConfig, client: Optional[JiraClient] = None):
        """
        Initialize the service with all operation components.

        Args:
            config: Connection configuration; validated here
            client: Optional transport to use instead of building one from config

        Raises:
            JiraConfigurationError: If the configuration is invalid
        """
        config.validate()
        self.config = config

        # Core components
        self.client = client or JiraClient(config)
        self.parser = JiraDataParser()
        self.resolver = StoryFieldResolver()

        # Operation modules
        self.issues = JiraIssueOperations(self.client, self.parser)
        self.search = JiraSearchOperations(self.client, self.parser)

        logger.info(f"Story reader service initialized for {config.base_url}")

    # Retrieval operations

    def get_story_by_key(self, story_key: str) -> Story:
        """
        Fetch a single story by its key.

        Args:
            story_key: Issue key, e.g. 'PROJ-123'

        Returns:
            The decoded Story

        Raises:
            StoryRetrievalError: If the key is blank or retrieval fails
        """
        return self.issues.get_story_by_key(story_key)

    def get_stories_by_keys(self, story_keys: List[str]) -> List[Story]:
        """
        Fetch multiple stories by their keys.

        Args:
            story_keys: Issue keys; surrounding whitespace is ignored

        Returns:
            Stories in the order Jira returned them
        """
        return self.search.get_stories_by_keys(story_keys)

    def search_stories(self, jql_query: str) -> List[Story]:
        """
        Search for stories using JQL.

        Args:
            jql_query: JQL query string

        Returns:
            Matching stories, at most one page of 1000
        """
        return self.search.search_stories(jql_query)

    def get_stories_by_project(self, project_key: str) -> List[Story]:
        """Get all stories from a specific project."""
        return self.search.get_stories_by_project(project_key)

    def get_stories_by_assignee(self, assignee: str) -> List[Story]:
        """Get stories assigned to a specific user."""
        return self.search.get_stories_by_assignee(assignee)

    def get_stories_by_sprint(self, sprint_name: str) -> List[Story]:
        """Get stories in a specific sprint."""
        return self.search.get_stories_by_sprint(sprint_name)

    def get_stories_by_status(self, status: str) -> List[Story]:
        """Get stories with a specific status."""
        return self.search.get_stories_by_status(status)

    # Field resolution

    def get_acceptance_criteria(self, story: Optional[Story]) -> Optional[str]:
        """Extract acceptance criteria from a story, or None."""
        return self.resolver.resolve_story_acceptance_criteria(story)

    def get_description(self, story: Optional[Story]) -> Optional[str]:
        """Extract the description from a story, or None."""
        description = self.resolver.resolve_description(story)
        if description is None and story is not None:
            logger.warning(f"No description found for story: {story.key}")
        return description

    def get_summary(self, story: Optional[Story]) -> Optional[str]:
        """Get the story summary, or None."""
        return self.resolver.resolve_summary(story)

    def to_json(self, story: Story) -> str:
        """Encode a story using the Jira wire schema."""
        return self.parser.encode_story(story)

    def close(self) -> None:
        """Release pooled HTTP connections."""
        self.client.close()

    def __enter__(self) -> "StoryReaderService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
