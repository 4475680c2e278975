"""
Shared fixtures: Jira story payloads as returned by the REST API.
"""
import copy
import json

import pytest

STORY_PAYLOAD = {
    "id": "10001",
    "key": "PROJ-1",
    "self": "https://example.atlassian.net/rest/api/3/issue/10001",
    "expand": "renderedFields,names",
    "fields": {
        "summary": "Allow users to reset their password",
        "description": "As a user I want to reset my password.",
        "issuetype": {"id": "10002", "name": "Story", "subtask": False},
        "status": {"id": "3", "name": "In Progress", "description": "Being worked on"},
        "priority": {"id": "2", "name": "High"},
        "assignee": {
            "accountId": "5b10a2844c20165700ede21g",
            "displayName": "Jane Smith",
            "emailAddress": "jane.smith@example.com",
            "active": True,
        },
        "reporter": {"accountId": "5b10ac8d82e05b22cc7d4ef5", "displayName": "John Doe"},
        "created": "2024-04-24T16:32:35.307+0100",
        "updated": "2024-04-25T09:00:00.000+0100",
        "customfield_10014": "Given a registered user, when they request a reset, then an email is sent",
        "customfield_10020": "PROJ-100",
        "customfield_10021": 5,
        "customfield_10022": ["Sprint 7"],
        "customfield_99999": {"unknown": "ignored"},
        "labels": ["auth", "security"],
        "components": [{"id": "10100", "name": "Accounts"}],
        "fixVersions": [{"id": "10200", "name": "1.2.0", "released": False}],
    },
}


@pytest.fixture
def story_payload():
    """A fresh copy of a fully populated story payload."""
    return copy.deepcopy(STORY_PAYLOAD)


@pytest.fixture
def story_body(story_payload):
    return json.dumps(story_payload)


@pytest.fixture
def search_body(story_payload):
    second = copy.deepcopy(story_payload)
    second["id"] = "10002"
    second["key"] = "PROJ-2"
    second["fields"]["summary"] = "Lock account after failed logins"
    return json.dumps({"startAt": 0, "maxResults": 1000, "total": 2, "issues": [second, story_payload]})
