"""
JQL query construction utilities for story retrieval.
"""
from typing import Iterable


class JQLBuilder:
    """Utility class for constructing the fixed JQL templates used to find stories."""

    STORY_FILTER = "issuetype = Story"

    @staticmethod
    def build_keys_query(keys: Iterable[str]) -> str:
        """
        Build a query matching a set of issue keys.

        Args:
            keys: Issue keys (e.g., ['PROJ-1', ' PROJ-2 ']); each is trimmed

        Returns:
            JQL query string, e.g. 'key in (PROJ-1, PROJ-2)'
        """
        keys_str = ", ".join(key.strip() for key in keys)
        return f"key in ({keys_str})"

    @staticmethod
    def build_project_query(project_key: str) -> str:
        """
        Build query for all stories in a project.

        Args:
            project_key: Project key (e.g., 'PROJ')

        Returns:
            JQL query string
        """
        return f"project = {project_key} AND {JQLBuilder.STORY_FILTER}"

    @staticmethod
    def build_assignee_query(assignee: str) -> str:
        """
        Build query for stories assigned to a user.

        Args:
            assignee: Account id, username or JQL function such as currentUser()

        Returns:
            JQL query string
        """
        return f"assignee = {assignee} AND {JQLBuilder.STORY_FILTER}"

    @staticmethod
    def build_sprint_query(sprint_name: str) -> str:
        """
        Build query for stories in a sprint.

        The sprint name is quoted but not escaped; embedded quotes are the
        caller's responsibility.

        Args:
            sprint_name: Sprint name (e.g., 'Sprint 1')

        Returns:
            JQL query string
        """
        return f'Sprint = "{sprint_name}" AND {JQLBuilder.STORY_FILTER}'

    @staticmethod
    def build_status_query(status: str) -> str:
        """
        Build query for stories in a workflow status.

        Args:
            status: Status name (e.g., 'In Progress')

        Returns:
            JQL query string
        """
        return f'status = "{status}" AND {JQLBuilder.STORY_FILTER}'

    @staticmethod
    def build_raw_query(jql: str) -> str:
        """Pass a caller-supplied JQL query through unchanged."""
        return jql
