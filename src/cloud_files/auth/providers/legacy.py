"""Header-based (v1.0) identity provider.

The identity endpoint is called with ``GET`` and the ``X-Auth-User`` /
``X-Auth-Key`` headers. A successful answer carries the session token in
``X-Auth-Token`` (or ``X-Storage-Token``) and one ``X-*-Url`` header per
service, e.g. ``X-Storage-Url`` and ``X-CDN-Management-Url``.
"""

import logging
from typing import Dict, Optional

import httpx

from ...exceptions import AuthenticationError, ConfigurationError
from ...models import AuthCredentials, RequestOptions
from ...utils.header_resolver import extract_response_keys
from ...utils.http import create_login_client
from ...utils.security import sanitize_headers
from ..base import BaseAuthProvider, ProviderConfig
from ..registry import register_provider

logger = logging.getLogger(__name__)

DEFAULT_AUTH_URL = "https://auth.api.rackspacecloud.com/v1.0"


@register_provider("legacy")
class LegacyAuthProvider(BaseAuthProvider):
    """Authenticate with a user name and API key against a v1.0 endpoint."""

    def __init__(self, config: ProviderConfig):
        """Initialize the provider.

        :param config: Provider configuration with username, api_key, auth_url
            and an optional ``http_client`` used for the login request
        :type config: ProviderConfig
        :raises ConfigurationError: If username or api_key is missing
        """
        self.username = config.get("username")
        self.api_key = config.get("api_key")
        if not self.username:
            raise ConfigurationError(
                "Legacy auth requires a username", setting="username"
            )
        if not self.api_key:
            raise ConfigurationError("Legacy auth requires an API key", setting="api_key")

        self.auth_url = (config.get("auth_url") or DEFAULT_AUTH_URL).rstrip("/")
        self._client: Optional[httpx.Client] = config.get("http_client")
        self._owns_client = False

    @property
    def provider_type(self) -> str:
        return "legacy"

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = create_login_client()
            self._owns_client = True
        return self._client

    def close(self) -> None:
        """Close the login client if this provider created it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None
            self._owns_client = False

    def authenticate(self, options: Optional[RequestOptions] = None) -> AuthCredentials:
        """Log in and return a fresh token with the announced service URLs.

        :param options: Optional extra headers/query vars for the login request
        :return: Credentials for the session
        :raises AuthenticationError: On a non-2xx answer or a missing token
        """
        headers: Dict[str, str] = dict(options.headers) if options else {}
        headers["X-Auth-User"] = self.username
        headers["X-Auth-Key"] = self.api_key
        params = dict(options.vars) if options else None

        logger.debug(
            "Authenticating against %s with headers %s",
            self.auth_url,
            sanitize_headers(headers),
        )
        response = self._get_client().get(self.auth_url, headers=headers, params=params)

        if not 200 <= response.status_code < 300:
            raise AuthenticationError(
                f"Identity service rejected the login (HTTP {response.status_code})",
                details={
                    "status_code": response.status_code,
                    "auth_url": self.auth_url,
                },
            )

        token = response.headers.get("x-auth-token") or response.headers.get(
            "x-storage-token"
        )
        if not token:
            raise AuthenticationError(
                "Identity service response carried no auth token",
                details={"auth_url": self.auth_url},
            )

        endpoints = {
            f"x-{name}-url": url
            for name, url in extract_response_keys(response.headers, r"x-(.+)-url").items()
        }
        logger.info(
            "Authenticated as %s; services: %s", self.username, sorted(endpoints)
        )
        return AuthCredentials(auth_token=token, endpoints=endpoints)
