"""
Connection configuration for the Jira story reader.

Configuration is loaded once at start-up from a properties file, falling back
to environment variables, and handed to the service as an immutable
ConnectionConfig.
"""
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import dotenv_values

from story_reader.models.jira import JiraConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE = "jira-config.properties"
DEFAULT_CONFIG_FILE = os.path.join("config", CONFIG_FILE)

DEFAULT_CONNECT_TIMEOUT_MS = 30000
DEFAULT_READ_TIMEOUT_MS = 60000
DEFAULT_MAX_RETRIES = 3

# properties key -> environment variable
PROPERTY_ENV_VARS = {
    "jira.url": "JIRA_URL",
    "jira.username": "JIRA_USERNAME",
    "jira.password": "JIRA_PASSWORD",
    "jira.api.token": "JIRA_API_TOKEN",
    "jira.use.api.token": "JIRA_USE_API_TOKEN",
    "jira.connection.timeout": "JIRA_CONNECTION_TIMEOUT",
    "jira.read.timeout": "JIRA_READ_TIMEOUT",
    "jira.max.retries": "JIRA_MAX_RETRIES",
}


class AuthMode(str, Enum):
    """How the Basic auth secret is chosen."""
    BASIC_PASSWORD = "basic_password"
    BASIC_API_TOKEN = "basic_api_token"


@dataclass(frozen=True)
class ConnectionConfig:
    """Immutable Jira connection settings. Timeouts are in seconds."""
    base_url: str
    username: str
    password: Optional[str] = None
    api_token: Optional[str] = None
    auth_mode: AuthMode = AuthMode.BASIC_PASSWORD
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_MS / 1000
    read_timeout: float = DEFAULT_READ_TIMEOUT_MS / 1000
    max_retries: int = DEFAULT_MAX_RETRIES

    @property
    def secret(self) -> Optional[str]:
        """The API token in token mode, otherwise the password."""
        if self.auth_mode == AuthMode.BASIC_API_TOKEN:
            return self.api_token
        return self.password

    def validate(self) -> None:
        """
        Validate configuration settings.

        Raises:
            JiraConfigurationError: If any setting is missing or out of range
        """
        if not self.base_url or not self.base_url.strip():
            raise JiraConfigurationError("Jira URL is required")

        if not self.username or not self.username.strip():
            raise JiraConfigurationError("Username is required")

        if self.auth_mode == AuthMode.BASIC_API_TOKEN:
            if not self.api_token or not self.api_token.strip():
                raise JiraConfigurationError("API token is required when using API token authentication")
        elif not self.password or not self.password.strip():
            raise JiraConfigurationError("Password is required when using password authentication")

        if self.connect_timeout <= 0:
            raise JiraConfigurationError("Connection timeout must be positive")

        if self.read_timeout <= 0:
            raise JiraConfigurationError("Read timeout must be positive")

        if self.max_retries < 0:
            raise JiraConfigurationError("Max retries cannot be negative")

    def __repr__(self) -> str:
        return (
            f"ConnectionConfig(base_url={self.base_url!r}, username={self.username!r}, "
            f"auth_mode={self.auth_mode.value}, connect_timeout={self.connect_timeout}, "
            f"read_timeout={self.read_timeout}, max_retries={self.max_retries})"
        )


def _parse_bool(key: str, value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    normalised = value.strip().lower()
    if normalised in ("true", "yes", "1"):
        return True
    if normalised in ("false", "no", "0"):
        return False
    raise JiraConfigurationError(f"{key} must be true or false, got '{value}'")


def _parse_int(key: str, value: Optional[str], default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        raise JiraConfigurationError(f"{key} must be an integer, got '{value}'")


def _find_config_file(config_file: Optional[Union[str, Path]]) -> Optional[Path]:
    if config_file is not None:
        return Path(config_file)
    for candidate in (CONFIG_FILE, DEFAULT_CONFIG_FILE):
        path = Path(candidate)
        if path.exists():
            return path
    return None


def _read_properties(path: Path) -> Optional[Mapping[str, Optional[str]]]:
    try:
        with open(path, encoding="utf-8") as stream:
            return dotenv_values(stream=stream, interpolate=False)
    except OSError as e:
        logger.warning(f"Failed to load configuration file {path}, falling back to environment variables: {e}")
        return None


def load_connection_config(
    config_file: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ConnectionConfig:
    """
    Build a ConnectionConfig from a properties file or environment variables.

    Args:
        config_file: Explicit properties file; when omitted, jira-config.properties
            in the working directory and then config/jira-config.properties are tried
        environ: Environment mapping (defaults to os.environ)

    Returns:
        A ConnectionConfig. It is not validated here; the service validates it
        before first use.

    Raises:
        JiraConfigurationError: If a numeric or boolean setting cannot be parsed
    """
    env = os.environ if environ is None else environ

    properties: Mapping[str, Optional[str]] = {}
    path = _find_config_file(config_file)
    if path is not None:
        loaded = _read_properties(path)
        if loaded is not None:
            properties = loaded
            logger.info(f"Loaded configuration from: {path.resolve()}")
    else:
        logger.info("No configuration file found, using environment variables")

    def setting(key: str) -> Optional[str]:
        value = properties.get(key)
        if value is None:
            value = env.get(PROPERTY_ENV_VARS[key])
        return value

    use_api_token = _parse_bool("jira.use.api.token", setting("jira.use.api.token"), False)
    connect_timeout_ms = _parse_int(
        "jira.connection.timeout", setting("jira.connection.timeout"), DEFAULT_CONNECT_TIMEOUT_MS
    )
    read_timeout_ms = _parse_int("jira.read.timeout", setting("jira.read.timeout"), DEFAULT_READ_TIMEOUT_MS)

    return ConnectionConfig(
        base_url=(setting("jira.url") or "").strip(),
        username=(setting("jira.username") or "").strip(),
        password=setting("jira.password"),
        api_token=setting("jira.api.token"),
        auth_mode=AuthMode.BASIC_API_TOKEN if use_api_token else AuthMode.BASIC_PASSWORD,
        connect_timeout=connect_timeout_ms / 1000,
        read_timeout=read_timeout_ms / 1000,
        max_retries=_parse_int("jira.max.retries", setting("jira.max.retries"), DEFAULT_MAX_RETRIES),
    )
