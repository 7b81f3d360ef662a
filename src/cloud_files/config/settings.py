"""Configuration settings for the Cloud Files SDK.

This module defines the configuration settings shared by the storage and
CDN interfaces: credentials, the identity endpoint, paging defaults,
HTTP timeouts and logging. Settings are loaded from environment variables
(prefixed ``CLOUD_FILES_``) and ``.env`` files; explicit constructor
arguments on the interfaces take precedence.
"""

from typing import Literal, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables.

    :param username: Account user name sent as ``X-Auth-User``
    :type username: Optional[str]
    :param api_key: Account API key sent as ``X-Auth-Key``
    :type api_key: Optional[str]
    :param auth_url: Identity endpoint used for login
    :type auth_url: str
    :param auth_method: Registered authentication provider to use
    :type auth_method: str
    :param default_page_size: Page size used by incremental listings
    :type default_page_size: int
    :param connect_timeout: Connection timeout in seconds
    :type connect_timeout: float
    :param read_timeout: Read timeout in seconds
    :type read_timeout: float
    :param log_level: Logging level used by ``setup_secure_logging``
    :type log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    """

    model_config = SettingsConfigDict(
        env_prefix="CLOUD_FILES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Credentials
    username: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("CLOUD_FILES_USERNAME", "RACKSPACE_USERNAME"),
        description="Account user name",
    )
    api_key: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("CLOUD_FILES_API_KEY", "RACKSPACE_API_KEY"),
        description="Account API key",
    )

    # Identity endpoint
    auth_url: str = Field(
        "https://auth.api.rackspacecloud.com/v1.0",
        description="Identity endpoint URL",
    )
    auth_method: str = Field("legacy", description="Authentication provider type")

    # Listing
    default_page_size: int = Field(
        10000, gt=0, description="Page size used by incremental listings"
    )

    # HTTP
    connect_timeout: float = Field(5.0, description="Connect timeout (seconds)")
    read_timeout: float = Field(60.0, description="Read timeout (seconds)")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Logging level"
    )

    @field_validator("auth_url")
    @classmethod
    def strip_auth_url(cls, v: str) -> str:
        """Drop trailing slashes so the login path is stable.

        :param v: The configured identity endpoint
        :type v: str
        :return: Identity endpoint without trailing slashes
        :rtype: str
        """
        return v.rstrip("/")

    @field_validator("auth_method")
    @classmethod
    def normalize_auth_method(cls, v: str) -> str:
        return v.strip().lower()
