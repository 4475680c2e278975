"""
Unit tests for the story reader service with a mocked transport.
"""
import logging
from unittest.mock import Mock

import httpx
import pytest

from story_reader.config.settings import ConnectionConfig
from story_reader.models.jira import (
    ErrorKind,
    JiraAuthenticationError,
    JiraConfigurationError,
    JiraHttpError,
    JiraNotFoundError,
    JiraTransportError,
    JiraValidationError,
    Story,
    StoryFields,
    StoryRetrievalError,
)
from story_reader.services.jira.client import JiraClient
from story_reader.services.jira.service import StoryReaderService
from story_reader.utils.result import Result


@pytest.fixture
def config():
    return ConnectionConfig(base_url="https://example.atlassian.net", username="dev@example.com", password="pw")


@pytest.fixture
def mock_client():
    """Mock Jira client for testing."""
    client = Mock(spec=JiraClient)
    client.execute = Mock()
    return client


@pytest.fixture
def service(config, mock_client):
    return StoryReaderService(config, client=mock_client)


class TestConstruction:

    def test_invalid_config_rejected_before_any_request(self, mock_client):
        config = ConnectionConfig(base_url="", username="dev@example.com", password="pw")

        with pytest.raises(JiraConfigurationError) as exc_info:
            StoryReaderService(config, client=mock_client)

        assert exc_info.value.kind == ErrorKind.CONFIGURATION_INVALID
        mock_client.execute.assert_not_called()

    def test_context_manager_closes_client(self, service, mock_client):
        with service:
            pass

        mock_client.close.assert_called_once()


class TestGetStoryByKey:

    def test_fetches_issue_endpoint(self, service, mock_client, story_body):
        mock_client.execute.return_value = Result.from_ok(story_body)

        story = service.get_story_by_key("PROJ-1")

        assert story.key == "PROJ-1"
        mock_client.execute.assert_called_once_with("issue/PROJ-1")

    def test_key_is_trimmed(self, service, mock_client, story_body):
        mock_client.execute.return_value = Result.from_ok(story_body)

        service.get_story_by_key("  PROJ-1 ")

        mock_client.execute.assert_called_once_with("issue/PROJ-1")

    @pytest.mark.parametrize("key", ["", "   ", None])
    def test_blank_key_is_invalid_argument_without_request(self, service, mock_client, key):
        with pytest.raises(StoryRetrievalError) as exc_info:
            service.get_story_by_key(key)

        assert exc_info.value.kind == ErrorKind.INVALID_ARGUMENT
        assert isinstance(exc_info.value.__cause__, JiraValidationError)
        assert mock_client.execute.call_count == 0

    def test_not_found_is_story_not_found(self, service, mock_client, caplog):
        cause = JiraNotFoundError("Resource not found. Please check the story key or URL.")
        mock_client.execute.return_value = Result.from_error(cause)

        with caplog.at_level(logging.ERROR):
            with pytest.raises(StoryRetrievalError) as exc_info:
                service.get_story_by_key("PROJ-404")

        assert exc_info.value.kind == ErrorKind.NOT_FOUND
        assert str(exc_info.value) == "Story not found: PROJ-404"
        assert exc_info.value.__cause__ is cause
        assert "Story not found: PROJ-404" in caplog.text

    def test_authentication_failure_is_wrapped(self, service, mock_client):
        cause = JiraAuthenticationError("Authentication failed. Please check your credentials.")
        mock_client.execute.return_value = Result.from_error(cause)

        with pytest.raises(StoryRetrievalError) as exc_info:
            service.get_story_by_key("PROJ-1")

        assert exc_info.value.kind == ErrorKind.AUTHENTICATION_FAILED
        assert "Failed to fetch story: PROJ-1" in str(exc_info.value)
        assert "Authentication failed" in str(exc_info.value)
        assert exc_info.value.__cause__ is cause

    def test_decode_failure_is_wrapped(self, service, mock_client):
        mock_client.execute.return_value = Result.from_ok("<html>login</html>")

        with pytest.raises(StoryRetrievalError) as exc_info:
            service.get_story_by_key("PROJ-1")

        assert exc_info.value.kind == ErrorKind.DECODE_ERROR


class TestSearch:

    def test_search_sends_jql_and_page_size(self, service, mock_client, search_body):
        mock_client.execute.return_value = Result.from_ok(search_body)

        stories = service.search_stories("project = PROJ")

        mock_client.execute.assert_called_once_with("search", {"jql": "project = PROJ", "maxResults": 1000})
        assert [story.key for story in stories] == ["PROJ-2", "PROJ-1"]

    def test_empty_search_returns_empty_list(self, service, mock_client):
        mock_client.execute.return_value = Result.from_ok('{"issues": []}')

        assert service.search_stories("project = NONE") == []

    @pytest.mark.parametrize("jql", ["", "  "])
    def test_blank_query_is_invalid_argument_without_request(self, service, mock_client, jql):
        with pytest.raises(StoryRetrievalError) as exc_info:
            service.search_stories(jql)

        assert exc_info.value.kind == ErrorKind.INVALID_ARGUMENT
        mock_client.execute.assert_not_called()

    def test_http_error_keeps_status(self, service, mock_client):
        cause = JiraHttpError(400, "Bad Request")
        mock_client.execute.return_value = Result.from_error(cause)

        with pytest.raises(StoryRetrievalError) as exc_info:
            service.search_stories("project = = PROJ")

        assert exc_info.value.kind == ErrorKind.HTTP_ERROR
        assert exc_info.value.__cause__.status_code == 400
        assert str(exc_info.value) == "Failed to search stories: HTTP error: 400 - Bad Request"

    def test_transport_failure_is_not_retried(self, service, mock_client):
        mock_client.execute.return_value = Result.from_error(JiraTransportError("Request timeout for GET search"))

        with pytest.raises(StoryRetrievalError) as exc_info:
            service.search_stories("project = PROJ")

        assert exc_info.value.kind == ErrorKind.TRANSPORT_FAILURE
        assert mock_client.execute.call_count == 1


class TestGetStoriesByKeys:

    def test_builds_key_query(self, service, mock_client, search_body):
        mock_client.execute.return_value = Result.from_ok(search_body)

        stories = service.get_stories_by_keys(["A-1"])

        mock_client.execute.assert_called_once_with("search", {"jql": "key in (A-1)", "maxResults": 1000})
        assert [story.key for story in stories] == ["PROJ-2", "PROJ-1"]

    def test_keys_are_trimmed_and_blanks_dropped(self, service, mock_client):
        mock_client.execute.return_value = Result.from_ok('{"issues": []}')

        service.get_stories_by_keys([" A-1 ", "", "A-2"])

        jql = mock_client.execute.call_args.args[1]["jql"]
        assert jql == "key in (A-1, A-2)"

    @pytest.mark.parametrize("keys", [[], ["", "  "], None])
    def test_empty_keys_are_invalid_argument(self, service, mock_client, keys):
        with pytest.raises(StoryRetrievalError) as exc_info:
            service.get_stories_by_keys(keys)

        assert exc_info.value.kind == ErrorKind.INVALID_ARGUMENT
        mock_client.execute.assert_not_called()


class TestFilteredSearches:

    @pytest.mark.parametrize("method, value, expected_jql", [
        ("get_stories_by_project", "PROJ", "project = PROJ AND issuetype = Story"),
        ("get_stories_by_assignee", "jane", "assignee = jane AND issuetype = Story"),
        ("get_stories_by_sprint", "Sprint 1", 'Sprint = "Sprint 1" AND issuetype = Story'),
        ("get_stories_by_status", "To Do", 'status = "To Do" AND issuetype = Story'),
    ])
    def test_filter_builds_query(self, service, mock_client, method, value, expected_jql):
        mock_client.execute.return_value = Result.from_ok('{"issues": []}')

        assert getattr(service, method)(value) == []

        mock_client.execute.assert_called_once_with("search", {"jql": expected_jql, "maxResults": 1000})

    @pytest.mark.parametrize("method", [
        "get_stories_by_project",
        "get_stories_by_assignee",
        "get_stories_by_sprint",
        "get_stories_by_status",
    ])
    def test_blank_filter_is_invalid_argument(self, service, mock_client, method):
        with pytest.raises(StoryRetrievalError) as exc_info:
            getattr(service, method)(" ")

        assert exc_info.value.kind == ErrorKind.INVALID_ARGUMENT
        mock_client.execute.assert_not_called()


class TestFieldHelpers:

    def test_helpers_on_fetched_story(self, service, mock_client, story_body):
        mock_client.execute.return_value = Result.from_ok(story_body)
        story = service.get_story_by_key("PROJ-1")

        assert service.get_summary(story) == "Allow users to reset their password"
        assert service.get_description(story) == "As a user I want to reset my password."
        assert service.get_acceptance_criteria(story).startswith("Given a registered user")

    def test_helpers_on_missing_values(self, service, caplog):
        story = Story(id="1", key="PROJ-1", fields=StoryFields(description="  "))

        with caplog.at_level(logging.WARNING):
            assert service.get_description(story) is None
            assert service.get_acceptance_criteria(story) is None
        assert service.get_summary(None) is None

        assert "No description found for story: PROJ-1" in caplog.text

    def test_to_json_round_trips(self, service, mock_client, story_body):
        mock_client.execute.return_value = Result.from_ok(story_body)
        story = service.get_story_by_key("PROJ-1")

        mock_client.execute.return_value = Result.from_ok(service.to_json(story))

        assert service.get_story_by_key("PROJ-1") == story


class TestUndecodableResponses:
    """Bodies straight off the wire never escape as anything but StoryRetrievalError."""

    @staticmethod
    def service_returning(config, content: bytes) -> StoryReaderService:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=content))
        client = JiraClient(config, http_client=httpx.Client(transport=transport))
        return StoryReaderService(config, client=client)

    def test_invalid_utf8_is_decoded_with_replacement(self, config):
        content = b'{"id": "1", "key": "A-1", "fields": {"summary": "caf\xe9"}}'

        with self.service_returning(config, content) as service:
            story = service.get_story_by_key("A-1")

        assert story.fields.summary == "caf\ufffd"

    def test_deeply_nested_story_is_decode_error(self, config):
        content = b"[" * 100000 + b"]" * 100000

        with self.service_returning(config, content) as service:
            with pytest.raises(StoryRetrievalError) as exc_info:
                service.get_story_by_key("A-1")

        assert exc_info.value.kind == ErrorKind.DECODE_ERROR

    def test_deeply_nested_search_is_decode_error(self, config):
        content = b'{"issues": ' + b"[" * 100000 + b"]" * 100000 + b"}"

        with self.service_returning(config, content) as service:
            with pytest.raises(StoryRetrievalError) as exc_info:
                service.search_stories("project = PROJ")

        assert exc_info.value.kind == ErrorKind.DECODE_ERROR
