"""
Store Credentials.

The credential locator is a path to a JSON file describing how to reach
the manager store:

    {
        "uri": "neo4j+s://example.databases.neo4j.io",
        "username": "neo4j",
        "password": "...",
        "database": "neo4j"
    }
"""

import json
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, SecretStr, ValidationError

from org_hierarchy.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)


class StoreCredentials(BaseModel):
    """Connection credentials for the manager store."""

    uri: str = Field(..., description="Store connection URI")
    username: str = Field(default="neo4j", description="Store username")
    password: SecretStr = Field(..., description="Store password")
    database: str = Field(default="neo4j", description="Database name")


def resolve_credentials_path(locator: str | None) -> Path:
    """
    Turn a credential locator into an absolute path.

    Raises:
        ConfigurationError: If no locator was supplied
    """
    if not locator:
        raise ConfigurationError(
            "Set ORG_HIERARCHY_CREDENTIALS or pass the credential file path as the first argument."
        )
    path = Path(locator).expanduser()
    if not path.is_absolute():
        path = Path.cwd() / path
    return path


def load_credentials(locator: str | None) -> StoreCredentials:
    """
    Read and validate the credential file.

    Args:
        locator: Path to the credential file (absolute or relative to cwd)

    Returns:
        Parsed StoreCredentials

    Raises:
        ConfigurationError: If the locator is missing or the file is unusable
    """
    path = resolve_credentials_path(locator)

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to read store credentials from {path}: {e}") from e

    try:
        credentials = StoreCredentials.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid store credentials in {path}: {e}") from e

    logger.debug("Store credentials loaded", path=str(path), uri=credentials.uri)
    return credentials
