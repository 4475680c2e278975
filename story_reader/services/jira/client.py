"""
Jira HTTP client for API requests with authentication and status classification.
"""
import base64
import logging
import time
from typing import Any, Dict, Optional

import httpx

from story_reader.config.settings import ConnectionConfig
from story_reader.models.jira import (
    JiraAccessForbiddenError,
    JiraAuthenticationError,
    JiraHttpError,
    JiraNotFoundError,
    JiraTransportError,
)
from story_reader.utils.result import Result

logger = logging.getLogger(__name__)

# Connection pool ceilings shared by every request made through one client
MAX_CONNECTIONS = 20
MAX_KEEPALIVE_CONNECTIONS = 10


class JiraClient:
    """Pure HTTP client for the Jira REST API v3 using Basic authentication."""

    def __init__(self, config: ConnectionConfig, http_client: Optional[httpx.Client] = None):
        """
        Initialize the Jira client.

        Args:
            config: Validated connection configuration
            http_client: Optional pre-built httpx client (used by tests)
        """
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self._http = http_client or httpx.Client(
            timeout=httpx.Timeout(
                connect=config.connect_timeout,
                read=config.read_timeout,
                write=config.read_timeout,
                pool=config.connect_timeout,
            ),
            limits=httpx.Limits(
                max_connections=MAX_CONNECTIONS,
                max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
            ),
        )

    def _get_auth_headers(self) -> Dict[str, str]:
        """Get authentication headers for Jira API."""
        credentials = f"{self.config.username}:{self.config.secret}"
        encoded_credentials = base64.b64encode(credentials.encode("utf-8")).decode("ascii")

        return {
            "Authorization": f"Basic {encoded_credentials}",
            "Accept": "application/json",
            "Content-Type": "application/json"
        }

    def _build_api_url(self, endpoint: str) -> str:
        """Build full API URL for given endpoint."""
        return f"{self.base_url}/rest/api/3/{endpoint.lstrip('/')}"

    def execute(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Result[str]:
        """
        Make a single authenticated GET request to the Jira API.

        Args:
            endpoint: API endpoint (without base URL), e.g. 'issue/PROJ-1'
            params: Optional query parameters; values are URL-encoded

        Returns:
            Result holding the response body on HTTP 200, otherwise one of
            JiraAuthenticationError, JiraAccessForbiddenError, JiraNotFoundError,
            JiraHttpError or JiraTransportError
        """
        url = self._build_api_url(endpoint)
        headers = self._get_auth_headers()

        start_time = time.time()
        logger.info(f"JIRA API → GET {endpoint}")

        try:
            response = self._http.get(url, params=params, headers=headers)
        except httpx.TimeoutException as e:
            duration = time.time() - start_time
            logger.error(f"JIRA API ← GET {endpoint} - TIMEOUT - {duration:.3f}s")
            return Result.from_error(JiraTransportError(f"Request timeout for GET {endpoint}: {e}"))
        except httpx.RequestError as e:
            duration = time.time() - start_time
            logger.error(f"JIRA API ← GET {endpoint} - ERROR - {duration:.3f}s - {e}")
            return Result.from_error(JiraTransportError(f"Failed to make HTTP request: {e}"))

        duration = time.time() - start_time
        logger.info(f"JIRA API ← GET {endpoint} - {response.status_code} - {duration:.3f}s")
        return self.handle_response(response)

    def handle_response(self, response: httpx.Response) -> Result[str]:
        """
        Classify an HTTP response.

        Args:
            response: HTTP response object

        Returns:
            Result holding the UTF-8 body (invalid bytes replaced) or the classified error
        """
        if response.status_code == 200:
            # Undecodable bytes become U+FFFD rather than failing the whole body
            return Result.from_ok(response.content.decode("utf-8", errors="replace"))
        elif response.status_code == 401:
            return Result.from_error(
                JiraAuthenticationError("Authentication failed. Please check your credentials.")
            )
        elif response.status_code == 403:
            return Result.from_error(
                JiraAccessForbiddenError("Access forbidden. Please check your permissions.")
            )
        elif response.status_code == 404:
            return Result.from_error(
                JiraNotFoundError("Resource not found. Please check the story key or URL.")
            )
        else:
            return Result.from_error(JiraHttpError(response.status_code, response.reason_phrase))

    def close(self) -> None:
        """Release pooled connections."""
        self._http.close()

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
